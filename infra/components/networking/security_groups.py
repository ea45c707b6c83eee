"""
Security Groups Component for Network Access Control.

Architectural Steps & Flow:
1. Create "Shell" Security Groups:
   - ALB, Service (Fargate tasks) and Database groups are created without
     inline rules so they can reference each other by ID.

2. Define Rules (Micro-Segmentation):
   - Ingress (Inbound): defined by referencing Source SGs (identity-based)
     rather than IPs where possible.
   - Egress (Outbound): open, the tasks pull images and call out through NAT.

3. Specific Access Patterns:
   - ALB: Accepts HTTP/HTTPS from anywhere (internet-facing).
   - Service: Accepts the app port (3000) from the ALB, plus anything from
     inside the VPC.
   - Database: Accepts MySQL (3306) ONLY from the Service group.

4. Stateful Nature:
   - Security Groups are stateful. Allowing an Inbound request AUTOMATICALLY
     allows the Outbound reply.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import PORTS
from infra.utils.tags import create_tags


@dataclass
class SecurityGroupOutputs:
    """Output values from security groups component."""
    alb_sg_id: pulumi.Output[str]
    service_sg_id: pulumi.Output[str]
    database_sg_id: pulumi.Output[str]


class SecurityGroupsComponent(pulumi.ComponentResource):
    """
    Security groups component for network access control.

    Implements least-privilege security group rules:
    - ALB is open to the internet on 80/443
    - Fargate service accepts the app port only from the ALB
    - Database accepts connections only from the service
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        vpc_cidr_block: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:SecurityGroups", name, None, opts)
        self.environment = environment

        child_opts = pulumi.ResourceOptions(parent=self)

        # ALB security group
        self.alb_sg = aws.ec2.SecurityGroup(
            f"{name}-alb-sg",
            description="Security group for ALB",
            vpc_id=vpc_id,
            tags=create_tags(environment, f"{name}-alb-sg"),
            opts=child_opts,
        )

        # Fargate service security group
        self.service_sg = aws.ec2.SecurityGroup(
            f"{name}-service-sg",
            description="Security group for the Fargate service",
            vpc_id=vpc_id,
            tags=create_tags(environment, f"{name}-service-sg"),
            opts=child_opts,
        )

        # Database security group
        self.database_sg = aws.ec2.SecurityGroup(
            f"{name}-database-sg",
            description="Allow ECS tasks to access RDS",
            vpc_id=vpc_id,
            tags=create_tags(environment, f"{name}-database-sg"),
            opts=child_opts,
        )

        self._create_rules(name, vpc_cidr_block, child_opts)

        self.register_outputs({
            "alb_sg_id": self.alb_sg.id,
            "service_sg_id": self.service_sg.id,
            "database_sg_id": self.database_sg.id,
        })

    def _create_rules(
        self,
        name: str,
        vpc_cidr_block: pulumi.Input[str],
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create security group rules."""
        # ALB: HTTP and HTTPS from anywhere
        self.alb_ingress_http = aws.vpc.SecurityGroupIngressRule(
            f"{name}-alb-ingress-http",
            security_group_id=self.alb_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["http"],
            to_port=PORTS["http"],
            cidr_ipv4="0.0.0.0/0",
            description="Allow HTTP Traffic",
            opts=opts,
        )

        self.alb_ingress_https = aws.vpc.SecurityGroupIngressRule(
            f"{name}-alb-ingress-https",
            security_group_id=self.alb_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["https"],
            to_port=PORTS["https"],
            cidr_ipv4="0.0.0.0/0",
            description="Allow HTTPS Traffic",
            opts=opts,
        )

        # Service: app port from ALB only
        self.service_ingress_alb = aws.vpc.SecurityGroupIngressRule(
            f"{name}-service-ingress-alb",
            security_group_id=self.service_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["app"],
            to_port=PORTS["app"],
            referenced_security_group_id=self.alb_sg.id,
            description="Allow traffic from ALB",
            opts=opts,
        )

        # Service: anything from inside the VPC
        self.service_ingress_vpc = aws.vpc.SecurityGroupIngressRule(
            f"{name}-service-ingress-vpc",
            security_group_id=self.service_sg.id,
            ip_protocol="-1",
            cidr_ipv4=vpc_cidr_block,
            description="Allow all traffic within VPC",
            opts=opts,
        )

        # Database: MySQL from the service only
        self.database_ingress_service = aws.vpc.SecurityGroupIngressRule(
            f"{name}-database-ingress-service",
            security_group_id=self.database_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["mysql"],
            to_port=PORTS["mysql"],
            referenced_security_group_id=self.service_sg.id,
            description="Allow traffic from ECS",
            opts=opts,
        )

        # All three groups: all outbound
        for label, group in [
            ("alb", self.alb_sg),
            ("service", self.service_sg),
            ("database", self.database_sg),
        ]:
            aws.vpc.SecurityGroupEgressRule(
                f"{name}-{label}-egress-all",
                security_group_id=group.id,
                ip_protocol="-1",
                cidr_ipv4="0.0.0.0/0",
                description="All outbound traffic",
                opts=opts,
            )

    def get_outputs(self) -> SecurityGroupOutputs:
        """Get security group output values."""
        return SecurityGroupOutputs(
            alb_sg_id=self.alb_sg.id,
            service_sg_id=self.service_sg.id,
            database_sg_id=self.database_sg.id,
        )
