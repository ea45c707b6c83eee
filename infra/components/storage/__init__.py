"""
Storage components for RDS and ECR.

Components:
- RdsMysqlComponent: RDS MySQL database in the isolated tier
- EcrRepositoryComponent: Container registry for the web application image
"""

from infra.components.storage.rds_mysql import RdsMysqlComponent, RdsOutputs
from infra.components.storage.ecr_repository import EcrRepositoryComponent, EcrRepositoryOutputs

__all__ = [
    "RdsMysqlComponent",
    "RdsOutputs",
    "EcrRepositoryComponent",
    "EcrRepositoryOutputs",
]
