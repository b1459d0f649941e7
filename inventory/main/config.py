"""
Application Settings - Main Layer

Configuration comes from environment variables, an optional ``.env`` file
and the defaults below, through Pydantic Settings.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from inventory.shared import DEFAULT_DATABASE_NAME, EnumEnvironment, EnumLogLevel
from inventory.shared.env import load_secret_file_variables  # noqa: F401


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI or bare host:port",
    )
    database_name: str = Field(
        default=DEFAULT_DATABASE_NAME, description="Name of the MongoDB database"
    )
    username: Optional[str] = Field(
        default=None, description="Overrides the credentials of the URI"
    )
    password: Optional[str] = Field(default=None, description="MongoDB password")
    ssl: bool = Field(default=False, description="Connect over TLS")
    ssl_skip_verify: bool = Field(
        default=False, description="Skip certificate and host name verification"
    )
    timeout_ms: Optional[int] = Field(
        default=10000,
        ge=0,
        description="Deadline for every store operation (0 disables it)",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class ServiceSettings(BaseSettings):
    """Service identification settings."""

    title: str = Field(default="Fleet Inventory", description="Service title")
    version: str = Field(default="1.0.0", description="Service version")

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Settings factory.

    Kept as a function so tests can patch it.
    """
    return AppSettings()
