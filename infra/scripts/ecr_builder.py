"""
ECR image builder for the Fargate web application.

Usage:
    python -m infra.scripts.ecr_builder build --environment dev
    python -m infra.scripts.ecr_builder push --environment dev
    python -m infra.scripts.ecr_builder build-and-push --environment prod

Purpose:
- Build the webapp Docker image locally (linux/amd64, what Fargate runs)
- Authenticate with AWS ECR
- Push image to the ECR repository created by the Pulumi stack
- Force a new ECS deployment so running tasks pick up the new :latest

First deploy order:
    1. pulumi up -s <env>            (creates the ECR repository and the service)
    2. build-and-push --environment <env>
       (pushes :latest, then `aws ecs update-service --force-new-deployment`)

Dependencies: docker, aws and pulumi CLIs
System role: CI/CD helper replacing an in-program Docker image asset
"""

import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

USAGE = (
    "Usage: python -m infra.scripts.ecr_builder COMMAND --environment ENV\n"
    "Commands: build, push, build-and-push"
)


def parse_registry(ecr_url: str) -> tuple[str, str]:
    """
    Split an ECR repository URL into (registry host, region).

    <account>.dkr.ecr.<region>.amazonaws.com/<repo>

    Raises:
        ValueError: If the URL is not an ECR repository URL
    """
    host = ecr_url.split("/", 1)[0]
    parts = host.split(".")
    if len(parts) < 6 or parts[1:3] != ["dkr", "ecr"]:
        raise ValueError(f"Invalid ECR URL format: {ecr_url}")
    return host, parts[3]


class ECRBuilder:
    """Build and push the web application image to ECR."""

    def __init__(self, environment: str, project_root: Path | None = None):
        """
        Initialize builder.

        Args:
            environment: Deployment environment, also the Pulumi stack name
            project_root: Docker build context (defaults to the repository root)
        """
        self.environment = environment

        # Project root is the build context so the Dockerfile can COPY webapp/
        self.project_root = project_root or Path(__file__).resolve().parent.parent.parent
        self.dockerfile = self.project_root / "webapp" / "Dockerfile"

        self.image_name = "ecrproj-web"
        self.image_tag = "latest"
        self.image_local = f"{self.image_name}:{self.image_tag}"

        if not self.dockerfile.exists():
            raise FileNotFoundError(f"Dockerfile not found: {self.dockerfile}")

    def build_image(self) -> bool:
        """
        Build Docker image locally.

        Returns:
            bool: True if successful, False otherwise
        """
        try:
            logger.info(f"Building image: {self.image_local}")
            logger.info(f"Dockerfile: {self.dockerfile}")

            subprocess.run(
                [
                    "docker",
                    "build",
                    "--provenance=false",
                    "--platform=linux/amd64",
                    "-t",
                    self.image_local,
                    "-f",
                    str(self.dockerfile),
                    str(self.project_root),
                ],
                check=True,
                capture_output=True,
                text=True,
            )

            logger.info("Image built successfully")
            return True

        except subprocess.CalledProcessError as e:
            logger.error(f"Build failed: {e.stderr}")
            return False
        except FileNotFoundError:
            logger.error("Docker not found. Install Docker and try again.")
            return False

    def get_stack_outputs(self) -> Optional[dict]:
        """
        Read the Pulumi stack outputs.

        Returns:
            dict: Stack outputs or None if they cannot be read
        """
        try:
            logger.info(f"Reading outputs of stack '{self.environment}'...")

            result = subprocess.run(
                ["pulumi", "stack", "output", "-s", self.environment, "--json"],
                check=True,
                capture_output=True,
                text=True,
                cwd=str(self.project_root),
            )
            return json.loads(result.stdout)

        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to retrieve Pulumi outputs: {e.stderr}")
            return None
        except json.JSONDecodeError:
            logger.error("Failed to parse Pulumi outputs")
            return None
        except FileNotFoundError:
            logger.error("Pulumi CLI not found. Install Pulumi and try again.")
            return None

    def get_ecr_repository_url(self, outputs: Optional[dict] = None) -> Optional[str]:
        """
        Get ECR repository URL from the Pulumi stack outputs.

        Args:
            outputs: Already fetched stack outputs (read from the stack when omitted)

        Returns:
            str: ECR repository URL or None if not found
        """
        if outputs is None:
            outputs = self.get_stack_outputs()
            if outputs is None:
                return None

        ecr_url = outputs.get("ecr_repository_url")
        if not ecr_url:
            logger.error(
                "ECR repository URL not found in Pulumi outputs. "
                "Ensure the stack is deployed."
            )
            return None

        logger.info(f"ECR Repository: {ecr_url}")
        return ecr_url

    def authenticate_with_ecr(self, ecr_url: str) -> bool:
        """
        Authenticate Docker with AWS ECR.

        Args:
            ecr_url: ECR repository URL

        Returns:
            bool: True if successful
        """
        try:
            registry, aws_region = parse_registry(ecr_url)
        except ValueError as e:
            logger.error(str(e))
            return False

        try:
            logger.info("Authenticating with AWS ECR...")

            result = subprocess.run(
                ["aws", "ecr", "get-login-password", "--region", aws_region],
                check=True,
                capture_output=True,
                text=True,
            )

            subprocess.run(
                ["docker", "login", "--username", "AWS", "--password-stdin", registry],
                input=result.stdout.strip(),
                capture_output=True,
                text=True,
                check=True,
            )

            logger.info("ECR authentication successful")
            return True

        except subprocess.CalledProcessError as e:
            logger.error(f"Authentication failed: {e.stderr}")
            return False

    def push_image(self, ecr_url: str) -> str:
        """
        Push image to ECR.

        Args:
            ecr_url: ECR repository URL

        Returns:
            str: Full image URI (with tag) or empty string if failed
        """
        ecr_image_tag = f"{ecr_url}:{self.image_tag}"
        try:
            logger.info(f"Tagging image: {ecr_image_tag}")
            subprocess.run(
                ["docker", "tag", self.image_local, ecr_image_tag],
                check=True,
                capture_output=True,
            )

            logger.info("Pushing image to ECR...")
            subprocess.run(
                ["docker", "push", ecr_image_tag],
                check=True,
                capture_output=True,
            )

            logger.info(f"Image URI: {ecr_image_tag}")
            return ecr_image_tag

        except subprocess.CalledProcessError as e:
            logger.error(f"Push failed: {e.stderr}")
            return ""

    def redeploy_service(self, outputs: dict, aws_region: str) -> bool:
        """
        Force a new deployment of the ECS service.

        The task definition always points at <repository>:latest, so a push
        alone never replaces running (or failing) tasks.

        Args:
            outputs: Stack outputs holding ecs_cluster_name / ecs_service_name
            aws_region: Region of the cluster

        Returns:
            bool: True if the deployment was started
        """
        cluster = outputs.get("ecs_cluster_name")
        service = outputs.get("ecs_service_name")
        if not cluster or not service:
            logger.error("ECS cluster/service not found in Pulumi outputs.")
            return False

        try:
            logger.info(f"Starting new deployment of {service} on {cluster}...")
            subprocess.run(
                [
                    "aws",
                    "ecs",
                    "update-service",
                    "--cluster",
                    cluster,
                    "--service",
                    service,
                    "--force-new-deployment",
                    "--region",
                    aws_region,
                ],
                check=True,
                capture_output=True,
                text=True,
            )

            logger.info("Deployment started")
            return True

        except subprocess.CalledProcessError as e:
            logger.error(f"Redeploy failed: {e.stderr}")
            return False

    def push(self) -> Optional[str]:
        """Authenticate, push an already built image and redeploy the service."""
        outputs = self.get_stack_outputs()
        if outputs is None:
            return None

        ecr_url = self.get_ecr_repository_url(outputs)
        if not ecr_url:
            return None

        if not self.authenticate_with_ecr(ecr_url):
            return None

        image_uri = self.push_image(ecr_url)
        if not image_uri:
            return None

        _, aws_region = parse_registry(ecr_url)
        if not self.redeploy_service(outputs, aws_region):
            return None
        return image_uri

    def build_and_push(self) -> Optional[str]:
        """
        Build and push image in one operation.

        Returns:
            str: Full image URI or None if failed
        """
        if not self.build_image():
            return None
        return self.push()


def parse_args(argv: list[str]) -> tuple[str, str]:
    """
    Parse `COMMAND --environment ENV`.

    Raises:
        ValueError: If the command or environment is missing
    """
    if not argv:
        raise ValueError(USAGE)

    command = argv[0]
    environment = None
    if "--environment" in argv:
        idx = argv.index("--environment")
        if idx + 1 < len(argv):
            environment = argv[idx + 1]

    if not environment:
        raise ValueError("--environment flag is required")
    return command, environment


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        command, environment = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        builder = ECRBuilder(environment)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    if command == "build":
        return 0 if builder.build_image() else 1
    if command == "push":
        return 0 if builder.push() else 1
    if command == "build-and-push":
        return 0 if builder.build_and_push() else 1

    logger.error(f"Unknown command: {command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
