"""Configuration management for What-Eat-Today."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    HttpConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    SearchConfig,
    ServerConfig,
    SortOrder,
)

__all__ = [
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "AppConfig",
    "SearchConfig",
    "HttpConfig",
    "ServerConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "SortOrder",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
