"""
Secrets Manager component for database credentials.

Creates:
- A generated master password (pulumi_random, RDS-safe character set)
- The secret that will hold the full connection document

The secret's value is written by RdsMysqlComponent once the instance
exists, so host/port land next to username/password in one JSON document.
"""

import pulumi
import pulumi_aws as aws
import pulumi_random as random

from infra.configs.constants import (
    DB_DEFAULTS,
    PASSWORD_EXCLUDED_CHARACTERS,
    PASSWORD_LENGTH,
)
from infra.utils.naming import ResourceNamer
from infra.utils.tags import create_tags

# Punctuation random.RandomPassword draws from by default
_DEFAULT_SPECIAL = "!@#$%&*()-_=+[]{}<>:?"


def allowed_special_characters(excluded: str = PASSWORD_EXCLUDED_CHARACTERS) -> str:
    """Special characters usable in a password once `excluded` is removed."""
    return "".join(c for c in _DEFAULT_SPECIAL if c not in excluded)


class SecretsManagerComponent(pulumi.ComponentResource):
    """
    Secrets Manager component for the database credentials.

    Production secrets keep the 30 day recovery window; elsewhere they are
    deleted immediately so stacks can be torn down and recreated.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        namer: ResourceNamer,
        is_production: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:SecretsManager", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.username = str(DB_DEFAULTS["username"])

        self.db_password = random.RandomPassword(
            f"{name}-db-password",
            length=PASSWORD_LENGTH,
            special=True,
            override_special=allowed_special_characters(),
            opts=child_opts,
        )

        self.db_credentials = aws.secretsmanager.Secret(
            f"{name}-db-credentials",
            name=namer.secret_name("db-credentials"),
            description="RDS MySQL credentials",
            recovery_window_in_days=30 if is_production else 0,
            tags=create_tags(environment, f"{name}-db-credentials"),
            opts=child_opts,
        )

        self.register_outputs({
            "db_credentials_arn": self.db_credentials.arn,
        })
