"""
Web application settings.

Database connection values are injected by the ECS task definition:
RDS_ENDPOINT, RDS_PORT and RDS_DATABASE as plain environment variables,
RDS_USERNAME and RDS_PASSWORD from the Secrets Manager credentials secret.

Dependencies: pydantic, pydantic_settings
System role: Container runtime configuration
"""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """MySQL connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RDS_",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str = Field(default="localhost", description="RDS instance address")
    port: int = Field(default=3306, description="MySQL port")
    username: str = Field(default="admin", description="Master username")
    password: str = Field(default="", description="Master password")
    database: str = Field(default="MyDatabase", description="Initial database name")

    connect_timeout: int = Field(default=5, description="Connect timeout in seconds")

    @property
    def database_url(self) -> str:
        """
        Construct MySQL connection URL.

        The generated RDS password may contain URL delimiters, so it is quoted.

        Returns:
            str: SQLAlchemy-compatible database URL
        """
        return (
            f"mysql+pymysql://{self.username}:{quote_plus(self.password)}"
            f"@{self.endpoint}:{self.port}/{self.database}"
        )


class AppSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Container port")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache
def get_app_settings() -> AppSettings:
    return AppSettings()
