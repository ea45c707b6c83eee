"""
Base configuration dataclass for environment settings.

Provides type-safe configuration structure loaded from Pulumi stack configs.
"""

from dataclasses import dataclass, field

from infra.configs.constants import (
    DB_DEFAULTS,
    ENVIRONMENTS,
    FARGATE_CPU_MEMORY,
    FARGATE_DEFAULTS,
    LOG_RETENTION_DAYS,
    LOG_RETENTION_DAYS_CHOICES,
    MAX_AZS,
    MIN_AZS,
    NAT_INSTANCE_TYPE,
)


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Environment-specific configuration for infrastructure deployment.

    Attributes:
        environment: Deployment environment (dev, staging, prod)
        max_azs: Number of availability zones to spread subnets over
        nat_instance_type: EC2 instance type for NAT instances (non-prod)
        db_instance_class: RDS instance class for MySQL
        db_allocated_storage: Initial RDS storage in GB
        db_max_allocated_storage: Upper bound for RDS storage autoscaling in GB
        db_name: Initial database name
        db_engine_version: MySQL engine version
        task_cpu: Fargate task CPU units
        task_memory: Fargate task memory in MiB
        desired_count: Number of running Fargate tasks
        container_image: Image URI override (defaults to the ECR repo :latest)
        log_retention_days: CloudWatch log retention for container logs
        enable_deletion_protection: Enable deletion protection for databases
        multi_az: Enable multi-AZ deployment for RDS
        availability_zones: Explicit AZ names (looked up from AWS when empty)
    """
    environment: str
    max_azs: int = 3
    nat_instance_type: str = NAT_INSTANCE_TYPE
    db_instance_class: str = str(DB_DEFAULTS["instance_class"])
    db_allocated_storage: int = int(DB_DEFAULTS["allocated_storage"])
    db_max_allocated_storage: int = int(DB_DEFAULTS["max_allocated_storage"])
    db_name: str = str(DB_DEFAULTS["database_name"])
    db_engine_version: str = str(DB_DEFAULTS["engine_version"])
    task_cpu: int = FARGATE_DEFAULTS["cpu"]
    task_memory: int = FARGATE_DEFAULTS["memory"]
    desired_count: int = FARGATE_DEFAULTS["desired_count"]
    container_image: str | None = None
    log_retention_days: int = LOG_RETENTION_DAYS
    enable_deletion_protection: bool = False
    multi_az: bool = False
    availability_zones: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"Unknown environment '{self.environment}', "
                f"expected one of {', '.join(ENVIRONMENTS)}"
            )
        if not MIN_AZS <= self.max_azs <= MAX_AZS:
            raise ValueError(
                f"max_azs must be between {MIN_AZS} and {MAX_AZS}, got {self.max_azs}"
            )
        if self.availability_zones and len(self.availability_zones) < MIN_AZS:
            raise ValueError(
                f"At least {MIN_AZS} availability zones are required, "
                f"got {list(self.availability_zones)}"
            )
        if self.db_max_allocated_storage < self.db_allocated_storage:
            raise ValueError(
                "db_max_allocated_storage "
                f"({self.db_max_allocated_storage}) is below db_allocated_storage "
                f"({self.db_allocated_storage})"
            )
        if self.task_memory not in FARGATE_CPU_MEMORY.get(self.task_cpu, ()):
            raise ValueError(
                f"Fargate does not support {self.task_cpu} CPU units "
                f"with {self.task_memory} MiB memory"
            )
        if self.desired_count < 0:
            raise ValueError(f"desired_count cannot be negative, got {self.desired_count}")
        if self.log_retention_days not in LOG_RETENTION_DAYS_CHOICES:
            raise ValueError(
                f"log_retention_days must be one of {LOG_RETENTION_DAYS_CHOICES}, "
                f"got {self.log_retention_days}"
            )

    @property
    def is_production(self) -> bool:
        """Check if this is a production environment."""
        return self.environment == "prod"

    @property
    def use_nat_gateway(self) -> bool:
        """Managed NAT gateways in production, NAT instances elsewhere."""
        return self.is_production
