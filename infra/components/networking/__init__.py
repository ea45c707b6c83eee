"""
Networking components for VPC infrastructure.

Components:
- VpcComponent: VPC with public/private/isolated subnets, NAT, route tables
- SecurityGroupsComponent: Security groups for ALB, Fargate service, database
"""

from infra.components.networking.vpc import VpcComponent, VpcOutputs
from infra.components.networking.security_groups import SecurityGroupsComponent, SecurityGroupOutputs

__all__ = [
    "VpcComponent",
    "VpcOutputs",
    "SecurityGroupsComponent",
    "SecurityGroupOutputs",
]
