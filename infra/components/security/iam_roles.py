"""
IAM roles component for the Fargate service.

Creates:
- Task execution role: used by the ECS agent to pull the image, write logs
  and resolve the container's secrets
- Task role: assumed by the application code itself
"""

import json
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.utils.tags import create_tags

ECS_TASKS_ASSUME_POLICY = json.dumps({
    "Version": "2012-10-17",
    "Statement": [{
        "Effect": "Allow",
        "Principal": {"Service": "ecs-tasks.amazonaws.com"},
        "Action": "sts:AssumeRole",
    }],
})


@dataclass
class IamRoleOutputs:
    """Output values from IAM roles component."""
    execution_role_arn: pulumi.Output[str]
    task_role_arn: pulumi.Output[str]


class IamRolesComponent(pulumi.ComponentResource):
    """
    IAM roles for the Fargate task definition.

    Follows least-privilege principle: the execution role may read only the
    database credentials secret.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        db_secret_arn: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:IamRoles", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        # Execution Role
        self.execution_role = aws.iam.Role(
            f"{name}-task-execution-role",
            assume_role_policy=ECS_TASKS_ASSUME_POLICY,
            tags=create_tags(environment, f"{name}-task-execution-role"),
            opts=child_opts,
        )

        aws.iam.RolePolicyAttachment(
            f"{name}-task-execution-policy",
            role=self.execution_role.name,
            policy_arn="arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy",
            opts=child_opts,
        )

        # Secrets injected into the container are resolved by the execution role
        self.execution_secrets_policy = aws.iam.RolePolicy(
            f"{name}-task-execution-secrets",
            role=self.execution_role.id,
            policy=pulumi.Output.json_dumps({
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Action": [
                            "secretsmanager:GetSecretValue",
                            "secretsmanager:DescribeSecret",
                        ],
                        "Resource": [db_secret_arn],
                    },
                ],
            }),
            opts=child_opts,
        )

        # Task Role
        self.task_role = aws.iam.Role(
            f"{name}-task-role",
            assume_role_policy=ECS_TASKS_ASSUME_POLICY,
            tags=create_tags(environment, f"{name}-task-role"),
            opts=child_opts,
        )

        self.register_outputs({
            "execution_role_arn": self.execution_role.arn,
            "task_role_arn": self.task_role.arn,
        })

    def get_outputs(self) -> IamRoleOutputs:
        """Get IAM role output values."""
        return IamRoleOutputs(
            execution_role_arn=self.execution_role.arn,
            task_role_arn=self.task_role.arn,
        )
