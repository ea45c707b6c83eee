"""
Fargate Service Component for the containerised web application.

This is the FINAL DESTINATION of an inbound request (API Gateway -> ALB -> Fargate task).

Key Components:
1. Cluster: Logical grouping for the service. No EC2 capacity to manage.
2. Log Group: Container stdout/stderr via the awslogs driver, kept for a week.
3. Task Definition: The "recipe". One container ("web") on port 3000.
   - environment: RDS_ENDPOINT / RDS_PORT / RDS_DATABASE (plain values).
   - secrets: RDS_USERNAME / RDS_PASSWORD. `valueFrom` is
     "<secret arn>:<json key>::", ECS resolves them at task start using the
     EXECUTION role, so the values never appear in the task definition.
4. Service: Keeps desired_count tasks running in the PRIVATE subnets
   (no public IP, outbound through NAT) and registers them with the ALB
   target group.
   - Deployment circuit breaker with rollback: a deployment whose tasks never
     become healthy is rolled back to the last working task definition.
"""

import json
from dataclasses import dataclass
from typing import Any

import pulumi
import pulumi_aws as aws

from infra.configs.base import EnvironmentConfig
from infra.configs.constants import CONTAINER_NAME, LOG_STREAM_PREFIX, PORTS
from infra.utils.tags import create_tags


@dataclass
class FargateServiceOutputs:
    """Output values from Fargate service component."""
    cluster_name: pulumi.Output[str]
    cluster_arn: pulumi.Output[str]
    service_name: pulumi.Output[str]
    task_definition_arn: pulumi.Output[str]
    log_group_name: pulumi.Output[str]


def build_container_definitions(
    image: str,
    log_group_name: str,
    aws_region: str,
    db_secret_arn: str,
    db_endpoint: str,
    db_port: int,
    db_name: str,
) -> list[dict[str, Any]]:
    """
    Build the ECS container definitions for the web container.

    Args:
        image: Image URI
        log_group_name: CloudWatch log group for the awslogs driver
        aws_region: Region of the log group
        db_secret_arn: ARN of the database credentials secret
        db_endpoint: Database hostname
        db_port: Database port
        db_name: Database name

    Returns:
        Container definitions, ready for json.dumps
    """
    return [
        {
            "name": CONTAINER_NAME,
            "image": image,
            "essential": True,
            "portMappings": [
                {"containerPort": PORTS["app"], "protocol": "tcp"},
            ],
            "environment": [
                {"name": "RDS_ENDPOINT", "value": db_endpoint},
                {"name": "RDS_PORT", "value": str(db_port)},
                {"name": "RDS_DATABASE", "value": db_name},
            ],
            "secrets": [
                {"name": "RDS_USERNAME", "valueFrom": f"{db_secret_arn}:username::"},
                {"name": "RDS_PASSWORD", "valueFrom": f"{db_secret_arn}:password::"},
            ],
            "logConfiguration": {
                "logDriver": "awslogs",
                "options": {
                    "awslogs-group": log_group_name,
                    "awslogs-region": aws_region,
                    "awslogs-stream-prefix": LOG_STREAM_PREFIX,
                },
            },
        }
    ]


class FargateServiceComponent(pulumi.ComponentResource):
    """
    ECS Fargate service running the web container behind the ALB.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        config: EnvironmentConfig,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        target_group_arn: pulumi.Input[str],
        execution_role_arn: pulumi.Input[str],
        task_role_arn: pulumi.Input[str],
        image_uri: pulumi.Input[str],
        db_secret_arn: pulumi.Input[str],
        db_endpoint: pulumi.Input[str],
        db_port: pulumi.Input[int],
        aws_region: pulumi.Input[str],
        depends_on: list[pulumi.Resource] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:FargateService", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.cluster = aws.ecs.Cluster(
            f"{name}-cluster",
            name=f"{name}-cluster",
            settings=[
                aws.ecs.ClusterSettingArgs(
                    name="containerInsights",
                    value="enabled" if config.is_production else "disabled",
                ),
            ],
            tags=create_tags(environment, f"{name}-cluster"),
            opts=child_opts,
        )

        self.log_group = aws.cloudwatch.LogGroup(
            f"{name}-logs",
            name=f"/ecs/{name}",
            retention_in_days=config.log_retention_days,
            tags=create_tags(environment, f"{name}-logs"),
            opts=child_opts,
        )

        container_definitions = pulumi.Output.all(
            image_uri,
            self.log_group.name,
            aws_region,
            db_secret_arn,
            db_endpoint,
            db_port,
        ).apply(
            lambda args: json.dumps(
                build_container_definitions(
                    image=args[0],
                    log_group_name=args[1],
                    aws_region=args[2],
                    db_secret_arn=args[3],
                    db_endpoint=args[4],
                    db_port=args[5],
                    db_name=config.db_name,
                )
            )
        )

        self.task_definition = aws.ecs.TaskDefinition(
            f"{name}-task",
            family=f"{name}-web",
            cpu=str(config.task_cpu),
            memory=str(config.task_memory),
            network_mode="awsvpc",
            requires_compatibilities=["FARGATE"],
            execution_role_arn=execution_role_arn,
            task_role_arn=task_role_arn,
            container_definitions=container_definitions,
            tags=create_tags(environment, f"{name}-task"),
            opts=child_opts,
        )

        self.service = aws.ecs.Service(
            f"{name}-service",
            name=f"{name}-service",
            cluster=self.cluster.arn,
            task_definition=self.task_definition.arn,
            desired_count=config.desired_count,
            launch_type="FARGATE",
            network_configuration=aws.ecs.ServiceNetworkConfigurationArgs(
                subnets=subnet_ids,
                security_groups=[security_group_id],
                assign_public_ip=False,
            ),
            load_balancers=[
                aws.ecs.ServiceLoadBalancerArgs(
                    target_group_arn=target_group_arn,
                    container_name=CONTAINER_NAME,
                    container_port=PORTS["app"],
                ),
            ],
            deployment_circuit_breaker=aws.ecs.ServiceDeploymentCircuitBreakerArgs(
                enable=True,
                rollback=True,
            ),
            health_check_grace_period_seconds=60,
            tags=create_tags(environment, f"{name}-service"),
            # The target group must be attached to a listener before the service registers
            opts=pulumi.ResourceOptions(parent=self, depends_on=depends_on or []),
        )

        self.register_outputs({
            "cluster_name": self.cluster.name,
            "cluster_arn": self.cluster.arn,
            "service_name": self.service.name,
            "task_definition_arn": self.task_definition.arn,
            "log_group_name": self.log_group.name,
        })

    def get_outputs(self) -> FargateServiceOutputs:
        """Get Fargate service output values."""
        return FargateServiceOutputs(
            cluster_name=self.cluster.name,
            cluster_arn=self.cluster.arn,
            service_name=self.service.name,
            task_definition_arn=self.task_definition.arn,
            log_group_name=self.log_group.name,
        )
