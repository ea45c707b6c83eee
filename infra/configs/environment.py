"""
Environment configuration loader.

Loads and validates configuration from Pulumi stack config files.
"""

import pulumi

from infra.configs.base import EnvironmentConfig
from infra.configs.constants import DB_DEFAULTS, FARGATE_DEFAULTS, LOG_RETENTION_DAYS, NAT_INSTANCE_TYPE


def get_config() -> EnvironmentConfig:
    """
    Load environment configuration from Pulumi stack config.

    Returns:
        EnvironmentConfig: Validated configuration object

    Raises:
        pulumi.ConfigMissingError: If required config values are missing
        ValueError: If a value is outside what the topology supports
    """
    config = pulumi.Config()

    return EnvironmentConfig(
        environment=config.require("environment"),
        max_azs=config.get_int("max_azs") or 3,
        nat_instance_type=config.get("nat_instance_type") or NAT_INSTANCE_TYPE,
        db_instance_class=config.get("db_instance_class") or str(DB_DEFAULTS["instance_class"]),
        db_allocated_storage=int(config.get("db_allocated_storage") or DB_DEFAULTS["allocated_storage"]),
        db_max_allocated_storage=int(
            config.get("db_max_allocated_storage") or DB_DEFAULTS["max_allocated_storage"]
        ),
        db_name=config.get("db_name") or str(DB_DEFAULTS["database_name"]),
        db_engine_version=config.get("db_engine_version") or str(DB_DEFAULTS["engine_version"]),
        task_cpu=int(config.get("task_cpu") or FARGATE_DEFAULTS["cpu"]),
        task_memory=int(config.get("task_memory") or FARGATE_DEFAULTS["memory"]),
        desired_count=int(config.get("desired_count") or FARGATE_DEFAULTS["desired_count"]),
        container_image=config.get("container_image"),
        log_retention_days=int(config.get("log_retention_days") or LOG_RETENTION_DAYS),
        enable_deletion_protection=config.get_bool("enable_deletion_protection") or False,
        multi_az=config.get_bool("multi_az") or False,
        availability_zones=tuple(config.get_object("availability_zones") or ()),
    )
