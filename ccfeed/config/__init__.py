"""Configuration management for the CCTray feed service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AdvancedConfig,
    AppConfig,
    ConcourseConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ServerConfig,
)

__all__ = [
    "load_config",
    "load_environment_config",
    "AppConfig",
    "ConcourseConfig",
    "ServerConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
