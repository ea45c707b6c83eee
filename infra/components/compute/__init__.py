"""
Compute components for the load balancer and Fargate service.

Components:
- AlbComponent: Internet-facing ALB, target group and HTTP listener
- FargateServiceComponent: ECS cluster, task definition and service
"""

from infra.components.compute.alb import AlbComponent, AlbOutputs
from infra.components.compute.fargate_service import FargateServiceComponent, FargateServiceOutputs

__all__ = [
    "AlbComponent",
    "AlbOutputs",
    "FargateServiceComponent",
    "FargateServiceOutputs",
]
