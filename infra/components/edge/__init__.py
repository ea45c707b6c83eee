"""
Edge components for API routing.

Components:
- ApiGatewayComponent: REST API proxying to the ALB
"""

from infra.components.edge.api_gateway import ApiGatewayComponent, ApiGatewayOutputs

__all__ = [
    "ApiGatewayComponent",
    "ApiGatewayOutputs",
]
