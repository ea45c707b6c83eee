"""
Tests for networking components under Pulumi mocks.

Validates:
1. Subnet tiers and CIDR layout
2. NAT strategy per environment
3. Security group segmentation (ALB -> service -> database)
"""

import pulumi

from infra.components.networking.security_groups import SecurityGroupsComponent
from infra.components.networking.vpc import VpcComponent

AZS = ["us-east-1a", "us-east-1b"]


class TestVpcComponent:
    """Tests for the VPC and its subnet tiers."""

    @pulumi.runtime.test
    def test_creates_one_subnet_per_tier_and_az(self):
        vpc = VpcComponent("net-tiers", "dev", AZS, use_nat_gateway=False)
        subnets = vpc.public_subnets + vpc.private_subnets + vpc.isolated_subnets

        def check(cidrs):
            assert cidrs == [
                "10.0.0.0/24",
                "10.0.1.0/24",
                "10.0.2.0/24",
                "10.0.3.0/24",
                "10.0.4.0/24",
                "10.0.5.0/24",
            ]

        assert len(vpc.public_subnets) == 2
        assert len(vpc.private_subnets) == 2
        assert len(vpc.isolated_subnets) == 2
        return pulumi.Output.all(*[s.cidr_block for s in subnets]).apply(check)

    @pulumi.runtime.test
    def test_only_public_subnets_map_public_ips(self):
        vpc = VpcComponent("net-public-ip", "dev", AZS, use_nat_gateway=False)

        def check(flags):
            assert flags == [True, True, False, False, False, False]

        subnets = vpc.public_subnets + vpc.private_subnets + vpc.isolated_subnets
        return pulumi.Output.all(
            *[s.map_public_ip_on_launch for s in subnets]
        ).apply(check)

    @pulumi.runtime.test
    def test_vpc_cidr(self):
        vpc = VpcComponent("net-cidr", "dev", AZS, use_nat_gateway=False)

        def check(args):
            cidr, dns_hostnames = args
            assert cidr == "10.0.0.0/16"
            assert dns_hostnames is True

        return pulumi.Output.all(
            vpc.vpc.cidr_block, vpc.vpc.enable_dns_hostnames
        ).apply(check)

    @pulumi.runtime.test
    def test_public_default_route_targets_internet_gateway(self):
        vpc = VpcComponent("net-igw-route", "dev", AZS, use_nat_gateway=False)

        def check(args):
            destination, gateway_id, igw_id = args
            assert destination == "0.0.0.0/0"
            assert gateway_id == igw_id

        return pulumi.Output.all(
            vpc.public_default_route.destination_cidr_block,
            vpc.public_default_route.gateway_id,
            vpc.igw.id,
        ).apply(check)

    @pulumi.runtime.test
    def test_non_production_uses_nat_instances(self):
        vpc = VpcComponent("net-nat-instance", "dev", AZS, use_nat_gateway=False)

        assert vpc.nat_gateways == []
        assert len(vpc.nat_instances) == len(AZS)
        assert len(vpc.private_rts) == len(AZS)

        def check(args):
            source_dest_checks, instance_types = args[:2], args[2:]
            assert source_dest_checks == [False, False]
            assert instance_types == ["t3.micro", "t3.micro"]

        return pulumi.Output.all(
            *[nat.source_dest_check for nat in vpc.nat_instances],
            *[nat.instance_type for nat in vpc.nat_instances],
        ).apply(check)

    @pulumi.runtime.test
    def test_production_uses_nat_gateways(self):
        vpc = VpcComponent("net-nat-gateway", "prod", AZS, use_nat_gateway=True)

        assert vpc.nat_instances == []
        assert len(vpc.nat_gateways) == len(AZS)

        def check(subnet_pairs):
            nat_subnets, public_subnets = subnet_pairs[:2], subnet_pairs[2:]
            assert nat_subnets == public_subnets

        return pulumi.Output.all(
            *[nat.subnet_id for nat in vpc.nat_gateways],
            *[s.id for s in vpc.public_subnets],
        ).apply(check)

    @pulumi.runtime.test
    def test_private_routes_use_same_az_nat_instance(self):
        vpc = VpcComponent("net-route-instance", "dev", AZS, use_nat_gateway=False)
        routes = vpc.private_default_routes

        assert len(routes) == len(AZS)

        def check(args):
            n = len(AZS)
            destinations, eni_targets, gateway_targets = args[:n], args[n:2 * n], args[2 * n:3 * n]
            route_tables, private_rts = args[3 * n:4 * n], args[4 * n:5 * n]
            nat_enis = args[5 * n:]
            assert destinations == ["0.0.0.0/0"] * n
            assert eni_targets == nat_enis
            assert gateway_targets == [None] * n
            assert route_tables == private_rts

        return pulumi.Output.all(
            *[r.destination_cidr_block for r in routes],
            *[r.network_interface_id for r in routes],
            *[r.nat_gateway_id for r in routes],
            *[r.route_table_id for r in routes],
            *[rt.id for rt in vpc.private_rts],
            *[nat.primary_network_interface_id for nat in vpc.nat_instances],
        ).apply(check)

    @pulumi.runtime.test
    def test_private_routes_use_same_az_nat_gateway(self):
        vpc = VpcComponent("net-route-gateway", "prod", AZS, use_nat_gateway=True)
        routes = vpc.private_default_routes

        def check(args):
            n = len(AZS)
            gateway_targets, route_tables = args[:n], args[n:2 * n]
            nat_ids, private_rts = args[2 * n:3 * n], args[3 * n:]
            assert gateway_targets == nat_ids
            assert route_tables == private_rts

        return pulumi.Output.all(
            *[r.nat_gateway_id for r in routes],
            *[r.route_table_id for r in routes],
            *[nat.id for nat in vpc.nat_gateways],
            *[rt.id for rt in vpc.private_rts],
        ).apply(check)

    def test_isolated_route_table_has_no_default_route(self, registered_resources):
        @pulumi.runtime.test
        def build():
            vpc = VpcComponent("net-isolated", "dev", AZS, use_nat_gateway=False)

            def check(args):
                isolated_rt_id, vpc_route_tables = args[0], args[1:]
                routes = [
                    r for r in registered_resources
                    if r.typ == "aws:ec2/route:Route" and r.name.startswith("net-isolated-")
                ]
                assert len(routes) == 1 + len(AZS)
                assert all(r.inputs["routeTableId"] in vpc_route_tables for r in routes)
                assert isolated_rt_id not in [r.inputs["routeTableId"] for r in routes]

            return pulumi.Output.all(
                vpc.isolated_rt.id,
                vpc.public_rt.id,
                *[rt.id for rt in vpc.private_rts],
                vpc.public_default_route.id,
                *[r.id for r in vpc.private_default_routes],
            ).apply(check)

        build()

    @pulumi.runtime.test
    def test_outputs_list_every_subnet(self):
        vpc = VpcComponent("net-outputs", "dev", AZS, use_nat_gateway=False)
        outputs = vpc.get_outputs()

        def check(isolated_ids):
            assert isolated_ids == [
                "net-outputs-isolated-subnet-1_id",
                "net-outputs-isolated-subnet-2_id",
            ]

        assert len(outputs.private_route_table_ids) == len(AZS)
        return pulumi.Output.all(*outputs.isolated_subnet_ids).apply(check)


class TestSecurityGroupsComponent:
    """Tests for security group segmentation."""

    @pulumi.runtime.test
    def test_alb_open_to_internet_on_http(self):
        sgs = SecurityGroupsComponent("sg-alb", "dev", "vpc-123", "10.0.0.0/16")

        def check(args):
            from_port, to_port, cidr = args
            assert (from_port, to_port) == (80, 80)
            assert cidr == "0.0.0.0/0"

        return pulumi.Output.all(
            sgs.alb_ingress_http.from_port,
            sgs.alb_ingress_http.to_port,
            sgs.alb_ingress_http.cidr_ipv4,
        ).apply(check)

    @pulumi.runtime.test
    def test_service_accepts_app_port_from_alb_only(self):
        sgs = SecurityGroupsComponent("sg-service", "dev", "vpc-123", "10.0.0.0/16")

        def check(args):
            from_port, group_id, source, alb_sg_id, service_sg_id = args
            assert from_port == 3000
            assert group_id == service_sg_id
            assert source == alb_sg_id

        return pulumi.Output.all(
            sgs.service_ingress_alb.from_port,
            sgs.service_ingress_alb.security_group_id,
            sgs.service_ingress_alb.referenced_security_group_id,
            sgs.alb_sg.id,
            sgs.service_sg.id,
        ).apply(check)

    @pulumi.runtime.test
    def test_database_accepts_mysql_from_service_only(self):
        sgs = SecurityGroupsComponent("sg-database", "dev", "vpc-123", "10.0.0.0/16")

        def check(args):
            from_port, to_port, group_id, source, database_sg_id, service_sg_id = args
            assert (from_port, to_port) == (3306, 3306)
            assert group_id == database_sg_id
            assert source == service_sg_id

        return pulumi.Output.all(
            sgs.database_ingress_service.from_port,
            sgs.database_ingress_service.to_port,
            sgs.database_ingress_service.security_group_id,
            sgs.database_ingress_service.referenced_security_group_id,
            sgs.database_sg.id,
            sgs.service_sg.id,
        ).apply(check)

    @pulumi.runtime.test
    def test_service_accepts_vpc_traffic(self):
        sgs = SecurityGroupsComponent("sg-vpc", "dev", "vpc-123", "10.0.0.0/16")

        def check(args):
            protocol, cidr = args
            assert protocol == "-1"
            assert cidr == "10.0.0.0/16"

        return pulumi.Output.all(
            sgs.service_ingress_vpc.ip_protocol,
            sgs.service_ingress_vpc.cidr_ipv4,
        ).apply(check)
