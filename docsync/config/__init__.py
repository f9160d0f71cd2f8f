"""Configuration module."""

from docsync.config.configuration import (
    AppConfig,
    CategoryRuleConfig,
    ConfigurationError,
    DatabaseConfig,
    LoggingConfig,
    SyncConfig,
    get_config,
    load_config,
)

__all__ = [
    "AppConfig",
    "CategoryRuleConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LoggingConfig",
    "SyncConfig",
    "get_config",
    "load_config",
]
