"""
Infrastructure constants for ecrproj.

Contains CIDR blocks, ports, database and Fargate defaults.
"""

from typing import Final

# VPC Configuration
VPC_CIDR: Final[str] = "10.0.0.0/16"

# Subnet tiers, allocated in this order (public first, isolated last)
SUBNET_TIERS: Final[tuple[str, ...]] = ("public", "private", "isolated")
SUBNET_PREFIX: Final[int] = 24

# Availability zones
MIN_AZS: Final[int] = 2  # ALB requires subnets in two AZs
MAX_AZS: Final[int] = 3

ENVIRONMENTS: Final[tuple[str, ...]] = ("dev", "staging", "prod")

# NAT instance used outside production
NAT_INSTANCE_TYPE: Final[str] = "t3.micro"
NAT_INSTANCE_AMI_PATTERN: Final[str] = "al2023-ami-2023.*-x86_64"

# RDS MySQL configuration
DB_DEFAULTS: Final[dict[str, str | int]] = {
    "engine": "mysql",
    "engine_version": "8.0.32",
    "instance_class": "db.t3.micro",
    "username": "admin",
    "database_name": "MyDatabase",
    "allocated_storage": 20,
    "max_allocated_storage": 100,
}

# Characters RDS rejects in master passwords
PASSWORD_EXCLUDED_CHARACTERS: Final[str] = "/@\"'\\"
PASSWORD_LENGTH: Final[int] = 30

# Fargate task configuration
FARGATE_DEFAULTS: Final[dict[str, int]] = {
    "cpu": 256,
    "memory": 512,
    "desired_count": 1,
}

# Valid Fargate CPU units -> memory (MiB) combinations
FARGATE_CPU_MEMORY: Final[dict[int, tuple[int, ...]]] = {
    256: (512, 1024, 2048),
    512: tuple(range(1024, 4097, 1024)),
    1024: tuple(range(2048, 8193, 1024)),
    2048: tuple(range(4096, 16385, 1024)),
    4096: tuple(range(8192, 30721, 1024)),
}

CONTAINER_NAME: Final[str] = "web"
LOG_STREAM_PREFIX: Final[str] = "ecs-fargate-app"
LOG_RETENTION_DAYS: Final[int] = 7
# Values CloudWatch Logs accepts for retention_in_days
LOG_RETENTION_DAYS_CHOICES: Final[tuple[int, ...]] = (
    1, 3, 5, 7, 14, 30, 60, 90, 120, 150, 180, 365, 400, 545,
    731, 1096, 1827, 2192, 2557, 2922, 3288, 3653,
)

# ALB target group health check
HEALTH_CHECK: Final[dict[str, str | int]] = {
    "path": "/",
    "interval": 30,
    "timeout": 5,
    "matcher": "200-299",
}

API_STAGE_NAME: Final[str] = "prod"

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": "ecrproj",
    "ManagedBy": "pulumi",
}

# Port configurations
PORTS: Final[dict[str, int]] = {
    "http": 80,
    "https": 443,
    "app": 3000,
    "mysql": 3306,
}
