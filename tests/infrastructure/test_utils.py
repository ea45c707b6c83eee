"""Tests for naming, tagging, CIDR allocation and output helpers."""

import pulumi
import pytest

from infra.utils.cidr import allocate_subnet_cidrs
from infra.utils.naming import ResourceNamer
from infra.utils.outputs import render_env_file, write_outputs_to_env
from infra.utils.tags import create_tags, merge_tags


class TestAllocateSubnetCidrs:
    """Tests for tier-by-tier subnet allocation."""

    def test_three_tiers_three_azs(self):
        cidrs = allocate_subnet_cidrs("10.0.0.0/16", ("public", "private", "isolated"), 3)

        assert cidrs["public"] == ["10.0.0.0/24", "10.0.1.0/24", "10.0.2.0/24"]
        assert cidrs["private"] == ["10.0.3.0/24", "10.0.4.0/24", "10.0.5.0/24"]
        assert cidrs["isolated"] == ["10.0.6.0/24", "10.0.7.0/24", "10.0.8.0/24"]

    def test_custom_prefix(self):
        cidrs = allocate_subnet_cidrs("10.1.0.0/16", ("a", "b"), 2, new_prefix=20)

        assert cidrs == {
            "a": ["10.1.0.0/20", "10.1.16.0/20"],
            "b": ["10.1.32.0/20", "10.1.48.0/20"],
        }

    def test_prefix_must_be_narrower(self):
        with pytest.raises(ValueError, match="narrower"):
            allocate_subnet_cidrs("10.0.0.0/24", ("public",), 1, new_prefix=24)

    def test_not_enough_space(self):
        with pytest.raises(ValueError, match="required"):
            allocate_subnet_cidrs("10.0.0.0/23", ("public", "private"), 2, new_prefix=24)


class TestNamingAndTags:
    """Tests for resource naming and tag factories."""

    def test_resource_namer(self):
        namer = ResourceNamer(project="ecrproj", environment="dev")

        assert namer.prefix == "ecrproj-dev"
        assert namer.secret_name("db-credentials") == "ecrproj/dev/db-credentials"

    def test_create_tags(self):
        tags = create_tags("dev", "ecrproj-dev-vpc", Tier="public")

        assert tags == {
            "Project": "ecrproj",
            "ManagedBy": "pulumi",
            "Environment": "dev",
            "Name": "ecrproj-dev-vpc",
            "Tier": "public",
        }

    def test_extra_tags_override_defaults(self):
        tags = create_tags("dev", "ecrproj-dev-vpc", ManagedBy="manual")

        assert tags["ManagedBy"] == "manual"
        assert tags["Project"] == "ecrproj"

    def test_merge_tags_later_wins(self):
        merged = merge_tags({"a": "1", "b": "1"}, {"b": "2"}, {"c": "3"})

        assert merged == {"a": "1", "b": "2", "c": "3"}

    def test_merge_tags_drops_none_values(self):
        merged = merge_tags({"a": "1", "b": "1"}, {"b": None, "c": None})

        assert merged == {"a": "1"}


class TestOutputs:
    """Tests for writing stack outputs to a dotenv file."""

    def test_render_env_file(self):
        rendered = render_env_file({
            "LoadBalancerDNS": "alb.example.com",
            "vpc_id": "vpc-123",
            "container_image": None,
        })

        assert rendered == "LOADBALANCERDNS=alb.example.com\nVPC_ID=vpc-123\n"

    def test_write_outputs_to_env(self, tmp_path):
        @pulumi.runtime.test
        def write():
            result = write_outputs_to_env(
                {
                    "ApiGatewayURL": pulumi.Output.from_input("https://api.example.com/prod"),
                    "vpc_id": "vpc-123",
                },
                "infrastructure.env",
                directory=tmp_path,
            )

            def check(path):
                assert path == str(tmp_path / "infrastructure.env")

            return result.apply(check)

        write()

        assert (tmp_path / "infrastructure.env").read_text(encoding="utf-8") == (
            "APIGATEWAYURL=https://api.example.com/prod\nVPC_ID=vpc-123\n"
        )
