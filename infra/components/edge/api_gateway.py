"""
API Gateway Component in front of the ALB.

Concept: A managed public entry point that proxies everything to the
internet-facing ALB over HTTP.

The Resource Chain:
1. RestApi: The API container. Comes with a root ("/") resource.
2. Method + Integration on "/": ANY -> HTTP_PROXY -> http://<alb dns>.
3. Resource "{proxy+}" + Method + Integration: greedy path so that
   /anything/below reaches http://<alb dns>/anything/below unchanged.
4. Deployment: Snapshot of the methods/integrations. Re-created whenever
   they change (see `triggers`), otherwise the stage keeps serving the old
   snapshot.
5. Stage "prod": Publishes the deployment at
   https://<api id>.execute-api.<region>.amazonaws.com/prod/
"""

import hashlib
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import API_STAGE_NAME
from infra.utils.tags import create_tags


@dataclass
class ApiGatewayOutputs:
    """Output values from API Gateway component."""
    api_id: pulumi.Output[str]
    api_url: pulumi.Output[str]
    stage_name: pulumi.Output[str]


def _fingerprint(values: list[str]) -> str:
    return hashlib.sha1("|".join(values).encode("utf-8")).hexdigest()


class ApiGatewayComponent(pulumi.ComponentResource):
    """
    REST API Gateway proxying all requests to the ALB.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        alb_dns_name: pulumi.Input[str],
        stage_name: str = API_STAGE_NAME,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:edge:ApiGateway", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        backend_url = pulumi.Output.concat("http://", alb_dns_name)

        self.api = aws.apigateway.RestApi(
            f"{name}-api",
            name="Service API",
            description="API Gateway on top of ALB",
            tags=create_tags(environment, f"{name}-api"),
            opts=child_opts,
        )

        # Root: ANY / -> http://<alb>
        self.root_method = aws.apigateway.Method(
            f"{name}-root-method",
            rest_api=self.api.id,
            resource_id=self.api.root_resource_id,
            http_method="ANY",
            authorization="NONE",
            opts=child_opts,
        )

        self.root_integration = aws.apigateway.Integration(
            f"{name}-root-integration",
            rest_api=self.api.id,
            resource_id=self.api.root_resource_id,
            http_method=self.root_method.http_method,
            type="HTTP_PROXY",
            integration_http_method="ANY",
            uri=backend_url,
            opts=child_opts,
        )

        # Greedy path: ANY /{proxy+} -> http://<alb>/{proxy}
        self.proxy_resource = aws.apigateway.Resource(
            f"{name}-proxy-resource",
            rest_api=self.api.id,
            parent_id=self.api.root_resource_id,
            path_part="{proxy+}",
            opts=child_opts,
        )

        self.proxy_method = aws.apigateway.Method(
            f"{name}-proxy-method",
            rest_api=self.api.id,
            resource_id=self.proxy_resource.id,
            http_method="ANY",
            authorization="NONE",
            request_parameters={"method.request.path.proxy": True},
            opts=child_opts,
        )

        self.proxy_integration = aws.apigateway.Integration(
            f"{name}-proxy-integration",
            rest_api=self.api.id,
            resource_id=self.proxy_resource.id,
            http_method=self.proxy_method.http_method,
            type="HTTP_PROXY",
            integration_http_method="ANY",
            uri=pulumi.Output.concat(backend_url, "/{proxy}"),
            request_parameters={
                "integration.request.path.proxy": "method.request.path.proxy",
            },
            opts=child_opts,
        )

        integrations = [self.root_integration, self.proxy_integration]
        self.deployment = aws.apigateway.Deployment(
            f"{name}-deployment",
            rest_api=self.api.id,
            triggers={
                "redeployment": pulumi.Output.all(
                    self.root_method.id,
                    self.root_integration.id,
                    self.root_integration.uri,
                    self.proxy_method.id,
                    self.proxy_integration.id,
                    self.proxy_integration.uri,
                ).apply(_fingerprint),
            },
            opts=pulumi.ResourceOptions(parent=self, depends_on=integrations),
        )

        self.stage = aws.apigateway.Stage(
            f"{name}-stage",
            rest_api=self.api.id,
            deployment=self.deployment.id,
            stage_name=stage_name,
            tags=create_tags(environment, f"{name}-stage"),
            opts=child_opts,
        )

        self.register_outputs({
            "api_id": self.api.id,
            "api_url": self.stage.invoke_url,
            "stage_name": self.stage.stage_name,
        })

    def get_outputs(self) -> ApiGatewayOutputs:
        """Get API Gateway output values."""
        return ApiGatewayOutputs(
            api_id=self.api.id,
            api_url=self.stage.invoke_url,
            stage_name=self.stage.stage_name,
        )
