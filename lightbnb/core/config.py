"""
Centralized Configuration for the LightBnB data layer

All configuration is loaded from environment variables (or a .env file)
with sensible defaults. Uses Pydantic Settings for validation and type coercion.

Usage:
    from lightbnb.core.config import settings

    print(settings.database.host)
    print(settings.logging.log_level)
"""

from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# SETTINGS CLASSES
# =============================================================================

class DatabaseSettings(BaseSettings):
    """PostgreSQL connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    database_url: Optional[str] = Field(
        default=None,
        alias="DATABASE_URL",
        description="Full database connection URL (overrides individual settings)"
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="lightbnb", description="Database name")
    user: str = Field(default="vagrant", description="Database user")
    password: str = Field(default="", description="Database password")
    connect_timeout: int = Field(
        default=10,
        ge=1,
        description="Seconds to wait for a connection before giving up"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def blank_url_is_unset(cls, v):
        """Treat an empty DATABASE_URL as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def connect_kwargs(self) -> dict:
        """Keyword arguments for psycopg2.connect()."""
        if self.database_url:
            return {"dsn": self.database_url, "connect_timeout": self.connect_timeout}
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.name,
            "user": self.user,
            "password": self.password,
            "connect_timeout": self.connect_timeout,
        }


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept level names in any case; reject unknown ones."""
        level = str(v).strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def blank_file_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Settings(BaseSettings):
    """
    Main settings class that combines all configuration sections.

    Usage:
        from lightbnb.core.config import settings

        print(settings.database.name)
        print(settings.logging.log_level)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


settings = get_settings()


# =============================================================================
# ENVIRONMENT VARIABLE REFERENCE
# =============================================================================
"""
Environment Variables Reference:

Database Settings:
    DATABASE_URL        - Full connection URL (overrides individual settings)
    DB_HOST             - Database host (default: localhost)
    DB_PORT             - Database port (default: 5432)
    DB_NAME             - Database name (default: lightbnb)
    DB_USER             - Database user (default: vagrant)
    DB_PASSWORD         - Database password (default: "")
    DB_CONNECT_TIMEOUT  - Connection timeout in seconds (default: 10)

Logging Settings:
    LOG_LEVEL           - Log level (default: INFO)
    LOG_FILE            - Optional log file path
"""


__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "DatabaseSettings",
    "LoggingSettings",
]
