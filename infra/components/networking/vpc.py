"""
VPC Component Resource for Network Infrastructure.

Steps & Architecture:
1. VPC (10.0.0.0/16): Defines the isolated network container.
2. Internet Gateway (IGW): the "door" to the internet for the public tier.
3. Subnets, one per AZ in each tier (/24 blocks, allocated tier by tier):
   - Public (10.0.0-2.0/24): ALB and NAT. Public IPs mapped on launch.
   - Private (10.0.3-5.0/24): Fargate tasks. Outbound only, through NAT.
   - Isolated (10.0.6-8.0/24): RDS MySQL. No route out of the VPC at all.
4. NAT, one per AZ so a zone outage doesn't cut the other zones off:
   - prod: managed NAT Gateway + Elastic IP.
   - dev/staging: t3.micro NAT instance (much cheaper, good enough for pulls
     from ECR and outbound API calls).
5. Route Tables:
   - Public RT: 0.0.0.0/0 -> IGW. Shared by all public subnets.
   - Private RT (per AZ): 0.0.0.0/0 -> NAT in the same AZ.
   - Isolated RT: no default route. Only the implicit "local" route.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import (
    NAT_INSTANCE_AMI_PATTERN,
    SUBNET_PREFIX,
    SUBNET_TIERS,
    VPC_CIDR,
)
from infra.utils.cidr import allocate_subnet_cidrs
from infra.utils.tags import create_tags

# Bootstraps an Amazon Linux 2023 instance as a NAT: enable forwarding and
# masquerade everything leaving the primary interface.
NAT_INSTANCE_USER_DATA = """#!/bin/bash
set -e
yum install -y iptables-services
systemctl enable iptables
systemctl start iptables
echo "net.ipv4.ip_forward=1" > /etc/sysctl.d/custom-ip-forwarding.conf
sysctl -p /etc/sysctl.d/custom-ip-forwarding.conf
iptables -t nat -A POSTROUTING -o $(route | awk '/^default/{print $NF}') -j MASQUERADE
iptables -F FORWARD
service iptables save
"""


@dataclass
class VpcOutputs:
    """Output values from VPC component."""
    vpc_id: pulumi.Output[str]
    vpc_cidr_block: pulumi.Output[str]
    public_subnet_ids: list[pulumi.Output[str]]
    private_subnet_ids: list[pulumi.Output[str]]
    isolated_subnet_ids: list[pulumi.Output[str]]
    private_route_table_ids: list[pulumi.Output[str]]
    isolated_route_table_id: pulumi.Output[str]


class VpcComponent(pulumi.ComponentResource):
    """
    VPC component with public, private and isolated subnet tiers.

    Private subnets reach the internet through a per-AZ NAT (gateway in prod,
    instance elsewhere); isolated subnets never do.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        availability_zones: list[str],
        use_nat_gateway: bool,
        nat_instance_type: str = "t3.micro",
        cidr_block: str = VPC_CIDR,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:Vpc", name, None, opts)
        self.environment = environment
        self.availability_zones = list(availability_zones)
        self.cidr_block = cidr_block

        child_opts = pulumi.ResourceOptions(parent=self)
        cidrs = allocate_subnet_cidrs(
            cidr_block, SUBNET_TIERS, len(self.availability_zones), SUBNET_PREFIX
        )

        # Create VPC
        self.vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=cidr_block,
            enable_dns_hostnames=True,
            enable_dns_support=True,
            tags=create_tags(environment, f"{name}-vpc"),
            opts=child_opts,
        )

        self.igw = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags=create_tags(environment, f"{name}-igw"),
            opts=child_opts,
        )

        self.public_subnets = self._create_subnets(
            name, "public", cidrs["public"], child_opts, map_public_ip=True
        )
        self.private_subnets = self._create_subnets(
            name, "private", cidrs["private"], child_opts
        )
        self.isolated_subnets = self._create_subnets(
            name, "isolated", cidrs["isolated"], child_opts
        )

        self._create_public_routing(name, child_opts)

        self.nat_gateways: list[aws.ec2.NatGateway] = []
        self.nat_instances: list[aws.ec2.Instance] = []
        if use_nat_gateway:
            self.nat_gateways = self._create_nat_gateways(name, child_opts)
            nat_targets = [{"nat_gateway_id": nat.id} for nat in self.nat_gateways]
        else:
            self.nat_instances = self._create_nat_instances(
                name, nat_instance_type, child_opts
            )
            nat_targets = [
                {"network_interface_id": nat.primary_network_interface_id}
                for nat in self.nat_instances
            ]

        self._create_private_routing(name, nat_targets, child_opts)
        self._create_isolated_routing(name, child_opts)

        self.register_outputs({
            "vpc_id": self.vpc.id,
            "vpc_cidr_block": self.vpc.cidr_block,
            "public_subnet_ids": [s.id for s in self.public_subnets],
            "private_subnet_ids": [s.id for s in self.private_subnets],
            "isolated_subnet_ids": [s.id for s in self.isolated_subnets],
            "isolated_route_table_id": self.isolated_rt.id,
        })

    def _create_subnets(
        self,
        name: str,
        tier: str,
        cidr_blocks: list[str],
        opts: pulumi.ResourceOptions,
        map_public_ip: bool = False,
    ) -> list[aws.ec2.Subnet]:
        """Create one subnet of the given tier in each AZ."""
        subnets = []
        for index, (az, cidr) in enumerate(zip(self.availability_zones, cidr_blocks)):
            subnet_name = f"{name}-{tier}-subnet-{index + 1}"
            subnets.append(
                aws.ec2.Subnet(
                    subnet_name,
                    vpc_id=self.vpc.id,
                    cidr_block=cidr,
                    availability_zone=az,
                    map_public_ip_on_launch=map_public_ip,
                    tags=create_tags(self.environment, subnet_name, Tier=tier),
                    opts=opts,
                )
            )
        return subnets

    def _create_public_routing(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Public route table with the default route to the Internet Gateway."""
        self.public_rt = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            tags=create_tags(self.environment, f"{name}-public-rt"),
            opts=opts,
        )

        self.public_default_route = aws.ec2.Route(
            f"{name}-public-default-route",
            route_table_id=self.public_rt.id,
            destination_cidr_block="0.0.0.0/0",
            gateway_id=self.igw.id,
            opts=opts,
        )

        for index, subnet in enumerate(self.public_subnets):
            aws.ec2.RouteTableAssociation(
                f"{name}-public-rt-assoc-{index + 1}",
                subnet_id=subnet.id,
                route_table_id=self.public_rt.id,
                opts=opts,
            )

    def _create_nat_gateways(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> list[aws.ec2.NatGateway]:
        """Managed NAT Gateway (with Elastic IP) in each public subnet."""
        gateways = []
        for index, subnet in enumerate(self.public_subnets):
            eip = aws.ec2.Eip(
                f"{name}-nat-eip-{index + 1}",
                domain="vpc",
                tags=create_tags(self.environment, f"{name}-nat-eip-{index + 1}"),
                opts=opts,
            )
            gateways.append(
                aws.ec2.NatGateway(
                    f"{name}-nat-gw-{index + 1}",
                    allocation_id=eip.id,
                    subnet_id=subnet.id,
                    tags=create_tags(self.environment, f"{name}-nat-gw-{index + 1}"),
                    opts=pulumi.ResourceOptions(parent=self, depends_on=[self.igw]),
                )
            )
        return gateways

    def _create_nat_instances(
        self,
        name: str,
        instance_type: str,
        opts: pulumi.ResourceOptions,
    ) -> list[aws.ec2.Instance]:
        """NAT instance in each public subnet, for non-production stacks."""
        ami = aws.ec2.get_ami(
            most_recent=True,
            owners=["amazon"],
            filters=[
                aws.ec2.GetAmiFilterArgs(
                    name="name",
                    values=[NAT_INSTANCE_AMI_PATTERN],
                ),
                aws.ec2.GetAmiFilterArgs(
                    name="virtualization-type",
                    values=["hvm"],
                ),
            ],
        )

        self.nat_sg = aws.ec2.SecurityGroup(
            f"{name}-nat-sg",
            description="Security group for NAT instances",
            vpc_id=self.vpc.id,
            tags=create_tags(self.environment, f"{name}-nat-sg"),
            opts=opts,
        )

        # Anything inside the VPC may use the NAT
        aws.vpc.SecurityGroupIngressRule(
            f"{name}-nat-ingress-vpc",
            security_group_id=self.nat_sg.id,
            ip_protocol="-1",
            cidr_ipv4=self.cidr_block,
            description="All traffic from within the VPC",
            opts=opts,
        )

        aws.vpc.SecurityGroupEgressRule(
            f"{name}-nat-egress-all",
            security_group_id=self.nat_sg.id,
            ip_protocol="-1",
            cidr_ipv4="0.0.0.0/0",
            description="All outbound traffic",
            opts=opts,
        )

        instances = []
        for index, subnet in enumerate(self.public_subnets):
            instances.append(
                aws.ec2.Instance(
                    f"{name}-nat-instance-{index + 1}",
                    ami=ami.id,
                    instance_type=instance_type,
                    subnet_id=subnet.id,
                    vpc_security_group_ids=[self.nat_sg.id],
                    source_dest_check=False,  # Required to forward traffic
                    user_data=NAT_INSTANCE_USER_DATA,
                    user_data_replace_on_change=True,
                    metadata_options=aws.ec2.InstanceMetadataOptionsArgs(
                        http_tokens="required",  # IMDSv2
                        http_endpoint="enabled",
                    ),
                    tags=create_tags(self.environment, f"{name}-nat-instance-{index + 1}"),
                    opts=pulumi.ResourceOptions(parent=self, depends_on=[self.igw]),
                )
            )
        return instances

    def _create_private_routing(
        self,
        name: str,
        nat_targets: list[dict[str, pulumi.Input[str]]],
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Per-AZ private route tables, default route to that AZ's NAT."""
        self.private_rts: list[aws.ec2.RouteTable] = []
        self.private_default_routes: list[aws.ec2.Route] = []
        for index, (subnet, target) in enumerate(zip(self.private_subnets, nat_targets)):
            route_table = aws.ec2.RouteTable(
                f"{name}-private-rt-{index + 1}",
                vpc_id=self.vpc.id,
                tags=create_tags(self.environment, f"{name}-private-rt-{index + 1}"),
                opts=opts,
            )

            route = aws.ec2.Route(
                f"{name}-private-default-route-{index + 1}",
                route_table_id=route_table.id,
                destination_cidr_block="0.0.0.0/0",
                **target,
                opts=opts,
            )

            aws.ec2.RouteTableAssociation(
                f"{name}-private-rt-assoc-{index + 1}",
                subnet_id=subnet.id,
                route_table_id=route_table.id,
                opts=opts,
            )
            self.private_rts.append(route_table)
            self.private_default_routes.append(route)

    def _create_isolated_routing(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Isolated route table: local route only."""
        self.isolated_rt = aws.ec2.RouteTable(
            f"{name}-isolated-rt",
            vpc_id=self.vpc.id,
            tags=create_tags(self.environment, f"{name}-isolated-rt"),
            opts=opts,
        )

        for index, subnet in enumerate(self.isolated_subnets):
            aws.ec2.RouteTableAssociation(
                f"{name}-isolated-rt-assoc-{index + 1}",
                subnet_id=subnet.id,
                route_table_id=self.isolated_rt.id,
                opts=opts,
            )

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output values."""
        return VpcOutputs(
            vpc_id=self.vpc.id,
            vpc_cidr_block=self.vpc.cidr_block,
            public_subnet_ids=[s.id for s in self.public_subnets],
            private_subnet_ids=[s.id for s in self.private_subnets],
            isolated_subnet_ids=[s.id for s in self.isolated_subnets],
            private_route_table_ids=[rt.id for rt in self.private_rts],
            isolated_route_table_id=self.isolated_rt.id,
        )
