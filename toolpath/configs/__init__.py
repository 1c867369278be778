"""Toolpath configuration loading and validation."""

from toolpath.configs.loader import (
    ConfigError,
    LoggingConfig,
    MeanderConfig,
    SessionConfig,
    ToolpathConfig,
    default_config,
    load_config,
)

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "MeanderConfig",
    "SessionConfig",
    "ToolpathConfig",
    "default_config",
    "load_config",
]
