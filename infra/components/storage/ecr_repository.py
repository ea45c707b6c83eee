"""
ECR Repository Component for the application container image.

Integration Flow:
  1. Developer builds the image: python -m infra.scripts.ecr_builder build --environment dev
  2. Builder reads `ecr_repository_url` from the Pulumi stack outputs
  3. Builder authenticates Docker with ECR and pushes <ECR_URL>:latest
  4. FargateServiceComponent points the task definition at <ECR_URL>:latest
     (unless the stack config sets `container_image`)

Access Control - Who Can Pull:
1. ECS tasks -> via the task execution role (AmazonECSTaskExecutionRolePolicy) ✅
2. Developers (via AWS credentials) -> IAM permissions ✅
3. Public Internet -> DENIED ❌ (Private repository)

Key Features:
- scan_on_push=True: Every image is scanned for CVEs on upload.
- Lifecycle Policy: Keep only the last 5 images.
- Encryption: Images encrypted at rest (AES256).
- Tag mutability: MUTABLE (allows overwriting 'latest' tag on each push).
"""

import json
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.utils.tags import create_tags

LIFECYCLE_POLICY = json.dumps({
    "rules": [{
        "rulePriority": 1,
        "description": "Keep last 5 images",
        "selection": {
            "tagStatus": "any",
            "countType": "imageCountMoreThan",
            "countNumber": 5,
        },
        "action": {
            "type": "expire",
        },
    }],
})


@dataclass
class EcrRepositoryOutputs:
    """Output values from ECR repository component."""
    repository_url: pulumi.Output[str]
    repository_arn: pulumi.Output[str]
    repository_name: pulumi.Output[str]


class EcrRepositoryComponent(pulumi.ComponentResource):
    """
    ECR repository for the web application image.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        is_production: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:EcrRepository", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.repository = aws.ecr.Repository(
            f"{name}-app-repo",
            name=f"{name}-app",
            image_scanning_configuration=aws.ecr.RepositoryImageScanningConfigurationArgs(
                scan_on_push=True,
            ),
            image_tag_mutability="MUTABLE",
            encryption_configurations=[
                aws.ecr.RepositoryEncryptionConfigurationArgs(
                    encryption_type="AES256",
                ),
            ],
            force_delete=not is_production,  # Dev stacks tear down with images inside
            tags=create_tags(environment, f"{name}-app-repo"),
            opts=child_opts,
        )

        aws.ecr.LifecyclePolicy(
            f"{name}-app-lifecycle",
            repository=self.repository.name,
            policy=LIFECYCLE_POLICY,
            opts=child_opts,
        )

        self.register_outputs({
            "repository_url": self.repository.repository_url,
            "repository_arn": self.repository.arn,
            "repository_name": self.repository.name,
        })

    def get_outputs(self) -> EcrRepositoryOutputs:
        """Get ECR repository output values."""
        return EcrRepositoryOutputs(
            repository_url=self.repository.repository_url,
            repository_arn=self.repository.arn,
            repository_name=self.repository.name,
        )
