"""Shared utilities and components for the realtime reports service."""

from .config import BaseClickHouseConfig, BaseLoggingConfig, BaseServiceConfig

__all__ = [
    "BaseServiceConfig",
    "BaseLoggingConfig",
    "BaseClickHouseConfig",
]
