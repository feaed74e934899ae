"""Configuration loading for scp storage."""

import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from scp_storage.exceptions import ConfigurationError
from scp_storage.models import Config
from scp_storage.scp import ScpStorage


class Settings(BaseSettings):
    """Process settings loaded from SCP_STORAGE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCP_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_path: str = "scp-storage.yaml"
    log_level: str | None = None
    log_format: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_config(config_path: str | Path) -> Config:
    """Load configuration from YAML file with environment variable substitution.

    Args:
        config_path: Path to the configuration YAML file

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config is invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, encoding="utf-8") as f:
        config_str = _substitute_env_vars(f.read())

    try:
        config_data = yaml.safe_load(config_str) or {}
        return Config(**config_data)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


def _substitute_env_vars(text: str) -> str:
    """Substitute ${VAR_NAME} with environment variable values.

    Unset variables are left as written.
    """
    pattern = r"\$\{([^}]+)\}"

    def replace(match: re.Match[str]) -> str:
        value = os.environ.get(match.group(1), "")
        if not value:
            return match.group(0)
        return value

    return re.sub(pattern, replace, text)


def get_default_config() -> dict:
    """Return default configuration as a dictionary.

    This can be used to generate a starting scp-storage.yaml file.
    """
    return {
        "storage": {
            "directory": "/var/lib/scp-storage",
            "ssh_host": None,
            "host": None,
            "prefix": "uploads",
            "options": ["-q"],
            "permissions": "0600",
        },
        "logging": {
            "level": "INFO",
            "format": "json",
        },
    }


def get_storage(config: Config) -> ScpStorage:
    """Build the storage backend described by a configuration.

    Raises:
        ConfigurationError: If scp (or ssh in remote mode) is not found
    """
    return ScpStorage(config.storage)
