"""
Database engine for the health endpoints.

Dependencies: sqlalchemy, pymysql
System role: Lazily created, process-wide SQLAlchemy engine
"""

from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from webapp.settings import get_database_settings


@lru_cache
def get_engine() -> Engine:
    """
    Create the SQLAlchemy engine from RDS_* settings.

    No connection is opened until the first query.
    """
    settings = get_database_settings()
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args={"connect_timeout": settings.connect_timeout},
    )


def ping(engine: Engine) -> None:
    """Run SELECT 1. Raises SQLAlchemyError when the database is unreachable."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
