"""
RDS MySQL Component for Relational Database.

Access Control - Who Can Connect:
1. Fargate service (service_sg) -> Port 3306 ✅
2. Anyone else -> DENIED ❌

How the Connection Works:
1. Placement: The DB subnet group spans only the ISOLATED subnets. They have
   no route out of the VPC, so the instance is unreachable from the internet
   even if its security group were misconfigured.
2. Routing: Tasks in the private subnets reach it over the implicit local route.
3. Credentials: The master password comes from SecretsManagerComponent. Once
   the instance exists we write the full connection document (username,
   password, host, port, dbname) into the secret; ECS injects username and
   password into the container from it.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.base import EnvironmentConfig
from infra.configs.constants import DB_DEFAULTS, PORTS
from infra.utils.tags import create_tags


@dataclass
class RdsOutputs:
    """Output values from RDS component."""
    endpoint: pulumi.Output[str]
    address: pulumi.Output[str]
    port: pulumi.Output[int]
    database_name: pulumi.Output[str]
    credentials_version_id: pulumi.Output[str]


class RdsMysqlComponent(pulumi.ComponentResource):
    """
    RDS MySQL database in the isolated subnet tier.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        config: EnvironmentConfig,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        credentials_secret_id: pulumi.Input[str],
        master_username: str,
        master_password: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:RdsMysql", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.db_name = config.db_name

        # DB Subnet Group (isolated tier only)
        self.subnet_group = aws.rds.SubnetGroup(
            f"{name}-subnet-group",
            subnet_ids=subnet_ids,
            description="Isolated subnets for RDS MySQL",
            tags=create_tags(environment, f"{name}-subnet-group"),
            opts=child_opts,
        )

        # RDS Instance
        self.instance = aws.rds.Instance(
            f"{name}-mysql",
            identifier=f"{name}-mysql",
            engine=str(DB_DEFAULTS["engine"]),
            engine_version=config.db_engine_version,
            instance_class=config.db_instance_class,
            allocated_storage=config.db_allocated_storage,
            max_allocated_storage=config.db_max_allocated_storage,  # Storage autoscaling
            storage_type="gp2",
            db_name=config.db_name,
            username=master_username,
            password=master_password,
            port=PORTS["mysql"],
            db_subnet_group_name=self.subnet_group.name,
            vpc_security_group_ids=[security_group_id],
            publicly_accessible=False,
            multi_az=config.multi_az,
            deletion_protection=config.enable_deletion_protection,
            skip_final_snapshot=not config.is_production,
            final_snapshot_identifier=f"{name}-final-snapshot" if config.is_production else None,
            backup_retention_period=7 if config.is_production else 1,
            backup_window="03:00-04:00",
            maintenance_window="Mon:04:00-Mon:05:00",
            tags=create_tags(environment, f"{name}-mysql"),
            opts=child_opts,
        )

        # Connection document, same keys the RDS secret rotation templates expect
        self.credentials_version = aws.secretsmanager.SecretVersion(
            f"{name}-credentials",
            secret_id=credentials_secret_id,
            secret_string=pulumi.Output.json_dumps({
                "username": master_username,
                "password": master_password,
                "engine": DB_DEFAULTS["engine"],
                "host": self.instance.address,
                "port": self.instance.port,
                "dbname": config.db_name,
                "dbInstanceIdentifier": self.instance.identifier,
            }),
            opts=child_opts,
        )

        self.register_outputs({
            "endpoint": self.instance.endpoint,
            "address": self.instance.address,
            "port": self.instance.port,
            "database_name": config.db_name,
        })

    def get_outputs(self) -> RdsOutputs:
        """Get RDS output values."""
        return RdsOutputs(
            endpoint=self.instance.endpoint,
            address=self.instance.address,
            port=self.instance.port,
            database_name=pulumi.Output.from_input(self.db_name),
            credentials_version_id=self.credentials_version.id,
        )
