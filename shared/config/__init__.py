"""Shared configuration base classes.

Keeps the logging and ClickHouse connection settings in one place so the
service settings only add what is specific to realtime reports.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
    ]
    app_environment: str = "production"


class BaseClickHouseConfig(BaseSettings):
    """ClickHouse connection settings."""

    clickhouse_host: str = "clickhouse"
    clickhouse_port: int = 9000
    clickhouse_db: str = "analytics"
    clickhouse_user: str = "admin"
    clickhouse_password: str = "admin"


class BaseServiceConfig(BaseLoggingConfig, BaseClickHouseConfig):
    """Base configuration combining logging and ClickHouse settings.

    The otel_service_name should be overridden by the service.
    """

    otel_service_name: str = "unknown"


__all__ = ["BaseLoggingConfig", "BaseClickHouseConfig", "BaseServiceConfig"]
