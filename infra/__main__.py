"""
Pulumi program entry point for ecrproj infrastructure.

Instantiates all component resources in dependency order:
1. Configuration
2. VPC -> Security Groups
3. Secrets Manager -> IAM Roles
4. RDS MySQL, ECR Repository
5. ALB -> Fargate Service
6. API Gateway
"""

import pulumi
import pulumi_aws as aws

from infra.configs.environment import get_config
from infra.utils.naming import ResourceNamer
from infra.utils.outputs import write_outputs_to_env

# Networking
from infra.components.networking.vpc import VpcComponent
from infra.components.networking.security_groups import SecurityGroupsComponent

# Security
from infra.components.security.iam_roles import IamRolesComponent
from infra.components.security.secrets_manager import SecretsManagerComponent

# Storage
from infra.components.storage.rds_mysql import RdsMysqlComponent
from infra.components.storage.ecr_repository import EcrRepositoryComponent

# Compute
from infra.components.compute.alb import AlbComponent
from infra.components.compute.fargate_service import FargateServiceComponent

# Edge
from infra.components.edge.api_gateway import ApiGatewayComponent


def _availability_zones(requested: tuple[str, ...], max_azs: int) -> list[str]:
    """Use the configured AZs, or the first `max_azs` available in the region."""
    if requested:
        return list(requested[:max_azs])
    available = aws.get_availability_zones(state="available")
    return list(available.names[:max_azs])


def main() -> None:
    """Deploy ecrproj infrastructure."""
    # Load configuration
    config = get_config()
    namer = ResourceNamer(project="ecrproj", environment=config.environment)
    base_name = namer.prefix

    aws_region = aws.get_region().name
    azs = _availability_zones(config.availability_zones, config.max_azs)
    pulumi.log.info(
        f"Deploying {base_name} to {aws_region} across {len(azs)} AZs "
        f"({'NAT gateways' if config.use_nat_gateway else 'NAT instances'})"
    )

    # --- Layer 1: Networking Foundation ---
    vpc = VpcComponent(
        name=base_name,
        environment=config.environment,
        availability_zones=azs,
        use_nat_gateway=config.use_nat_gateway,
        nat_instance_type=config.nat_instance_type,
    )
    vpc_outputs = vpc.get_outputs()

    security_groups = SecurityGroupsComponent(
        name=base_name,
        environment=config.environment,
        vpc_id=vpc_outputs.vpc_id,
        vpc_cidr_block=vpc_outputs.vpc_cidr_block,
    )
    sg_outputs = security_groups.get_outputs()

    # --- Layer 2: Secrets, IAM ---
    secrets = SecretsManagerComponent(
        name=base_name,
        environment=config.environment,
        namer=namer,
        is_production=config.is_production,
    )

    iam_roles = IamRolesComponent(
        name=base_name,
        environment=config.environment,
        db_secret_arn=secrets.db_credentials.arn,
    )
    iam_outputs = iam_roles.get_outputs()

    # --- Layer 3: Storage ---
    rds = RdsMysqlComponent(
        name=base_name,
        environment=config.environment,
        config=config,
        subnet_ids=vpc_outputs.isolated_subnet_ids,
        security_group_id=sg_outputs.database_sg_id,
        credentials_secret_id=secrets.db_credentials.id,
        master_username=secrets.username,
        master_password=secrets.db_password.result,
    )
    rds_outputs = rds.get_outputs()

    ecr_repository = EcrRepositoryComponent(
        name=base_name,
        environment=config.environment,
        is_production=config.is_production,
    )
    ecr_outputs = ecr_repository.get_outputs()

    if config.container_image:
        image_uri = pulumi.Output.from_input(config.container_image)
    else:
        pulumi.log.info(
            "No container_image configured, using <ecr repository>:latest. "
            "Run `python -m infra.scripts.ecr_builder build-and-push "
            f"--environment {config.environment}` to publish it and redeploy the service"
        )
        image_uri = pulumi.Output.concat(ecr_outputs.repository_url, ":latest")

    # --- Layer 4: Compute ---
    alb = AlbComponent(
        name=base_name,
        environment=config.environment,
        vpc_id=vpc_outputs.vpc_id,
        subnet_ids=vpc_outputs.public_subnet_ids,
        security_group_id=sg_outputs.alb_sg_id,
        enable_deletion_protection=config.enable_deletion_protection,
    )
    alb_outputs = alb.get_outputs()

    fargate = FargateServiceComponent(
        name=base_name,
        environment=config.environment,
        config=config,
        subnet_ids=vpc_outputs.private_subnet_ids,
        security_group_id=sg_outputs.service_sg_id,
        target_group_arn=alb_outputs.target_group_arn,
        execution_role_arn=iam_outputs.execution_role_arn,
        task_role_arn=iam_outputs.task_role_arn,
        image_uri=image_uri,
        db_secret_arn=secrets.db_credentials.arn,
        db_endpoint=rds_outputs.address,
        db_port=rds_outputs.port,
        aws_region=aws_region,
        depends_on=[alb.listener, rds.credentials_version],
    )
    fargate_outputs = fargate.get_outputs()

    # --- Layer 5: Edge ---
    api_gateway = ApiGatewayComponent(
        name=base_name,
        environment=config.environment,
        alb_dns_name=alb_outputs.alb_dns_name,
    )
    api_outputs = api_gateway.get_outputs()

    # --- Exports ---
    outputs = {
        "LoadBalancerDNS": alb_outputs.alb_dns_name,
        "ApiGatewayURL": api_outputs.api_url,
        "vpc_id": vpc_outputs.vpc_id,
        "rds_endpoint": rds_outputs.endpoint,
        "db_secret_arn": secrets.db_credentials.arn,
        "ecr_repository_url": ecr_outputs.repository_url,
        "ecs_cluster_name": fargate_outputs.cluster_name,
        "ecs_service_name": fargate_outputs.service_name,
        "log_group_name": fargate_outputs.log_group_name,
    }

    # Write outputs to .env file for local development
    write_outputs_to_env(outputs, "infrastructure.env")

    # Export to Pulumi stack
    for key, value in outputs.items():
        pulumi.export(key, value)


# Execute
main()
