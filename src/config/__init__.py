"""Configuration module."""

from src.config.configuration import (
    AppConfig,
    ConfigurationError,
    CorsConfig,
    CosmosDBConfig,
    LoggingConfig,
    ServerConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "CorsConfig",
    "CosmosDBConfig",
    "LoggingConfig",
    "ServerConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
