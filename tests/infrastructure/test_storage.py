"""Tests for RDS MySQL and the ECR repository."""

import json

import pulumi

from infra.components.storage.ecr_repository import LIFECYCLE_POLICY, EcrRepositoryComponent
from infra.components.storage.rds_mysql import RdsMysqlComponent
from infra.configs.base import EnvironmentConfig

ISOLATED_SUBNETS = ["subnet-iso-1", "subnet-iso-2"]


def _rds(name: str, environment: str = "dev") -> RdsMysqlComponent:
    return RdsMysqlComponent(
        name,
        environment,
        config=EnvironmentConfig(environment=environment),
        subnet_ids=ISOLATED_SUBNETS,
        security_group_id="sg-database",
        credentials_secret_id="secret-id",
        master_username="admin",
        master_password="s3cret-password",
    )


class TestRdsMysqlComponent:
    """Tests for the MySQL instance and its placement."""

    @pulumi.runtime.test
    def test_subnet_group_is_isolated_tier(self):
        rds = _rds("rds-subnets")

        def check(subnet_ids):
            assert subnet_ids == ISOLATED_SUBNETS

        return rds.subnet_group.subnet_ids.apply(check)

    @pulumi.runtime.test
    def test_instance_is_private_mysql(self):
        rds = _rds("rds-engine")

        def check(args):
            engine, port, public, db_name, sgs = args
            assert engine == "mysql"
            assert port == 3306
            assert public is False
            assert db_name == "MyDatabase"
            assert sgs == ["sg-database"]

        return pulumi.Output.all(
            rds.instance.engine,
            rds.instance.port,
            rds.instance.publicly_accessible,
            rds.instance.db_name,
            rds.instance.vpc_security_group_ids,
        ).apply(check)

    @pulumi.runtime.test
    def test_non_production_skips_final_snapshot(self):
        rds = _rds("rds-dev-snapshot")

        def check(skip):
            assert skip is True

        return rds.instance.skip_final_snapshot.apply(check)

    @pulumi.runtime.test
    def test_production_keeps_final_snapshot(self):
        rds = _rds("rds-prod-snapshot", environment="prod")

        def check(args):
            skip, retention = args
            assert skip is False
            assert retention == 7

        return pulumi.Output.all(
            rds.instance.skip_final_snapshot,
            rds.instance.backup_retention_period,
        ).apply(check)

    @pulumi.runtime.test
    def test_secret_holds_connection_document(self):
        rds = _rds("rds-secret")

        def check(args):
            secret_string, secret_id = args
            document = json.loads(secret_string)
            assert document["username"] == "admin"
            assert document["password"] == "s3cret-password"
            assert document["host"] == "rds-secret-mysql.rds.amazonaws.com"
            assert document["port"] == 3306
            assert document["dbname"] == "MyDatabase"
            assert secret_id == "secret-id"

        return pulumi.Output.all(
            rds.credentials_version.secret_string,
            rds.credentials_version.secret_id,
        ).apply(check)


class TestEcrRepositoryComponent:
    """Tests for the application image repository."""

    def test_lifecycle_policy_keeps_recent_images(self):
        rule = json.loads(LIFECYCLE_POLICY)["rules"][0]

        assert rule["action"]["type"] == "expire"
        assert rule["selection"]["countType"] == "imageCountMoreThan"

    @pulumi.runtime.test
    def test_repository_force_deletable_outside_production(self):
        repo = EcrRepositoryComponent("ecr-dev", "dev")

        def check(args):
            force_delete, url = args
            assert force_delete is True
            assert url.endswith("/ecr-dev-app")

        return pulumi.Output.all(
            repo.repository.force_delete,
            repo.get_outputs().repository_url,
        ).apply(check)

    @pulumi.runtime.test
    def test_repository_protected_in_production(self):
        repo = EcrRepositoryComponent("ecr-prod", "prod", is_production=True)

        def check(force_delete):
            assert force_delete is False

        return repo.repository.force_delete.apply(check)
