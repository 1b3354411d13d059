"""Configuration package."""

from .env_expansion import expand_env_vars
from .manager import ConfigurationManager
from .schemas import (
    AppConfig,
    DefaultsConfig,
    LogDestination,
    LoggingConfig,
    LogLevel,
    ProviderConfig,
)

__all__ = [
    "AppConfig",
    "ConfigurationManager",
    "DefaultsConfig",
    "LogDestination",
    "LogLevel",
    "LoggingConfig",
    "ProviderConfig",
    "expand_env_vars",
]
