"""
Configuration module for Pulumi infrastructure.

Provides type-safe configuration loading from Pulumi stack config files.
"""

from infra.configs.base import EnvironmentConfig
from infra.configs.environment import get_config
from infra.configs.constants import (
    VPC_CIDR,
    SUBNET_TIERS,
    DEFAULT_TAGS,
    PORTS,
)

__all__ = [
    "EnvironmentConfig",
    "get_config",
    "VPC_CIDR",
    "SUBNET_TIERS",
    "DEFAULT_TAGS",
    "PORTS",
]
