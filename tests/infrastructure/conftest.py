"""
Pytest fixtures for infrastructure tests.

Installs Pulumi mocks so components can be instantiated without a cloud
provider or engine. Resource outputs echo their inputs, plus the
provider-computed attributes the stack reads back (DNS names, endpoints,
invoke URLs, ...).
"""

from pathlib import Path
from types import SimpleNamespace

import pulumi
import pytest

MOCK_ACCOUNT = "123456789012"
MOCK_REGION = "us-east-1"
MOCK_AZS = ["us-east-1a", "us-east-1b", "us-east-1c"]


class InfraMocks(pulumi.runtime.Mocks):
    """Pulumi mocks for the AWS and random providers."""

    def __init__(self):
        self.registered = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.registered.append(SimpleNamespace(typ=args.typ, name=args.name, inputs=args.inputs))
        outputs = dict(args.inputs)
        outputs.setdefault("name", args.name)
        outputs.setdefault("arn", f"arn:aws:mock:{MOCK_REGION}:{MOCK_ACCOUNT}:{args.name}")

        if args.typ == "aws:lb/loadBalancer:LoadBalancer":
            outputs["dnsName"] = f"{args.name}.{MOCK_REGION}.elb.amazonaws.com"
        elif args.typ == "aws:apigateway/restApi:RestApi":
            outputs["rootResourceId"] = f"{args.name}_root"
        elif args.typ == "aws:apigateway/stage:Stage":
            outputs["invokeUrl"] = (
                f"https://{args.name}.execute-api.{MOCK_REGION}.amazonaws.com/"
                f"{args.inputs.get('stageName')}"
            )
        elif args.typ == "aws:rds/instance:Instance":
            outputs["address"] = f"{args.name}.rds.amazonaws.com"
            outputs["endpoint"] = f"{args.name}.rds.amazonaws.com:3306"
            outputs.setdefault("port", 3306)
        elif args.typ == "aws:ec2/instance:Instance":
            outputs["primaryNetworkInterfaceId"] = f"eni-{args.name}"
        elif args.typ == "aws:ecr/repository:Repository":
            outputs["repositoryUrl"] = (
                f"{MOCK_ACCOUNT}.dkr.ecr.{MOCK_REGION}.amazonaws.com/{args.inputs.get('name')}"
            )
        elif args.typ == "random:index/randomPassword:RandomPassword":
            outputs["result"] = "mock-password-0123456789"

        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:ec2/getAmi:getAmi":
            return {"id": "ami-0123456789abcdef0", "name": "al2023-ami-2023.6-x86_64"}
        if args.token == "aws:index/getAvailabilityZones:getAvailabilityZones":
            return {"names": MOCK_AZS, "zoneIds": ["use1-az1", "use1-az2", "use1-az3"]}
        if args.token == "aws:index/getRegion:getRegion":
            return {"name": MOCK_REGION, "id": MOCK_REGION}
        return {}


MOCKS = InfraMocks()
pulumi.runtime.set_mocks(MOCKS, project="ecrproj", stack="test", preview=False)


@pytest.fixture
def infra_project_root():
    """Return the infra package directory."""
    return Path(__file__).parent.parent.parent / "infra"


@pytest.fixture
def python_files_in_infra(infra_project_root):
    """Return all Python files in the infra package."""
    return [f for f in infra_project_root.rglob("*.py") if "__pycache__" not in str(f)]


@pytest.fixture
def registered_resources():
    """Resources registered with the mocks so far, in registration order."""
    return MOCKS.registered
