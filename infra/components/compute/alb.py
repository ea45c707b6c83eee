"""
Application Load Balancer Component for the Fargate service.

Core Jobs:
1. Distribute Traffic: Spread requests across the running tasks.
2. Health Check: Ping every task on "/". Unhealthy tasks stop receiving traffic
   (and the ECS circuit breaker rolls back deployments that never get healthy).
3. Stable Endpoint: Tasks come and go, but the ALB DNS stays the same.

The 3-Resource Chain:
1. Load Balancer: Internet-facing, lives in the PUBLIC subnets.
2. Listener: Binds to port 80 and forwards everything to the target group.
   - Without a Listener, the ALB is DEAF. It ignores all traffic.
3. Target Group: target_type="ip" because Fargate tasks (awsvpc networking)
   register by ENI address, on the container port 3000.

Connection to API Gateway:
- API Gateway proxies to http://<alb dns name>.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import HEALTH_CHECK, PORTS
from infra.utils.tags import create_tags


@dataclass
class AlbOutputs:
    """Output values from ALB component."""
    alb_arn: pulumi.Output[str]
    alb_dns_name: pulumi.Output[str]
    listener_arn: pulumi.Output[str]
    target_group_arn: pulumi.Output[str]


class AlbComponent(pulumi.ComponentResource):
    """
    Internet-facing Application Load Balancer in front of the Fargate service.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        enable_deletion_protection: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:Alb", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.alb = aws.lb.LoadBalancer(
            f"{name}-alb",
            name=f"{name}-alb",
            internal=False,
            load_balancer_type="application",
            security_groups=[security_group_id],
            subnets=subnet_ids,
            enable_deletion_protection=enable_deletion_protection,
            tags=create_tags(environment, f"{name}-alb"),
            opts=child_opts,
        )

        # Target Group for Fargate task IPs
        self.target_group = aws.lb.TargetGroup(
            f"{name}-tg",
            name=f"{name}-tg",
            port=PORTS["app"],
            protocol="HTTP",
            vpc_id=vpc_id,
            target_type="ip",
            deregistration_delay=30,
            health_check=aws.lb.TargetGroupHealthCheckArgs(
                enabled=True,
                path=str(HEALTH_CHECK["path"]),
                port="traffic-port",
                protocol="HTTP",
                healthy_threshold=2,
                unhealthy_threshold=3,
                timeout=int(HEALTH_CHECK["timeout"]),
                interval=int(HEALTH_CHECK["interval"]),
                matcher=str(HEALTH_CHECK["matcher"]),
            ),
            tags=create_tags(environment, f"{name}-tg"),
            opts=child_opts,
        )

        # HTTP Listener
        self.listener = aws.lb.Listener(
            f"{name}-listener",
            load_balancer_arn=self.alb.arn,
            port=PORTS["http"],
            protocol="HTTP",
            default_actions=[
                aws.lb.ListenerDefaultActionArgs(
                    type="forward",
                    target_group_arn=self.target_group.arn,
                ),
            ],
            tags=create_tags(environment, f"{name}-listener"),
            opts=child_opts,
        )

        self.register_outputs({
            "alb_arn": self.alb.arn,
            "alb_dns_name": self.alb.dns_name,
            "listener_arn": self.listener.arn,
            "target_group_arn": self.target_group.arn,
        })

    def get_outputs(self) -> AlbOutputs:
        """Get ALB output values."""
        return AlbOutputs(
            alb_arn=self.alb.arn,
            alb_dns_name=self.alb.dns_name,
            listener_arn=self.listener.arn,
            target_group_arn=self.target_group.arn,
        )
