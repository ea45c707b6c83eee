"""
Resource naming conventions for the stack.

Every resource name starts with the {project}-{environment} prefix and each
component appends its own suffix; secrets use {project}/{environment}/{name}.
"""

from dataclasses import dataclass


@dataclass
class ResourceNamer:
    """
    Generates consistent resource names for AWS resources.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, staging, prod)
    """
    project: str
    environment: str

    @property
    def prefix(self) -> str:
        """Base name shared by every resource in the stack."""
        return f"{self.project}-{self.environment}"

    def secret_name(self, name: str) -> str:
        """
        Generate a Secrets Manager secret name.

        Args:
            name: Secret identifier

        Returns:
            Secret name with environment prefix
        """
        return f"{self.project}/{self.environment}/{name}"
