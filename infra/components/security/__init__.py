"""
Security components for IAM and secrets management.

Components:
- IamRolesComponent: Task execution and task roles for Fargate
- SecretsManagerComponent: Database credentials secret and generated password
"""

from infra.components.security.iam_roles import IamRolesComponent, IamRoleOutputs
from infra.components.security.secrets_manager import SecretsManagerComponent

__all__ = [
    "IamRolesComponent",
    "IamRoleOutputs",
    "SecretsManagerComponent",
]
