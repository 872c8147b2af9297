"""Configuration module for the product store API.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Cosmos DB credentials are loaded from the environment (.env file).
Fails fast with clear error messages if required configuration is missing.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from src/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable."""
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


def _parse_port(value) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid port value: {value!r}")
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port out of range: {port}")
    return port


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""
    host: str
    port: int


@dataclass(frozen=True)
class CosmosDBConfig:
    """Azure Cosmos DB configuration for the product container."""
    endpoint: str
    key: str
    database_name: str
    container_name: str
    partition_key_path: str
    timeout_seconds: float


@dataclass(frozen=True)
class CorsConfig:
    """Cross-origin policy."""
    allow_origins: tuple


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    server: ServerConfig
    cosmosdb: CosmosDBConfig
    cors: CorsConfig
    logging: LoggingConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from the YAML config file for non-sensitive settings and .env for
    Cosmos DB credentials. Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    # PORT from the environment wins over the YAML value
    server_section = yaml_config.get("server", {})
    server_config = ServerConfig(
        host=server_section.get("host", "0.0.0.0"),
        port=_parse_port(_get_optional_env("PORT", server_section.get("port", 3000))),
    )

    cosmosdb_section = yaml_config.get("cosmosdb", {})
    cosmosdb_config = CosmosDBConfig(
        endpoint=_get_required_env("COSMOSDB_ENDPOINT"),
        key=_get_required_env("COSMOSDB_KEY"),
        database_name=cosmosdb_section.get("database_name", "ProductStore"),
        container_name=cosmosdb_section.get("container_name", "products"),
        partition_key_path=cosmosdb_section.get("partition_key_path", "/id"),
        timeout_seconds=float(cosmosdb_section.get("timeout_seconds", 30)),
    )

    cors_section = yaml_config.get("cors", {})
    cors_config = CorsConfig(
        allow_origins=tuple(cors_section.get("allow_origins", ["*"])),
    )

    logging_section = yaml_config.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_section.get("level", "INFO"),
    )

    return AppConfig(
        server=server_config,
        cosmosdb=cosmosdb_config,
        cors=cors_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
