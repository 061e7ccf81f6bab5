"""Configuration loading service.

Handles loading config.yaml and applying environment overrides.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.models.config import AppConfig

logger = logging.getLogger(__name__)

# Environment variable -> (section, key); section None means top level
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "PORT": (None, "port"),
    "LOG_STORE_BACKEND": ("log_store", "backend"),
    "LOG_STORE_CAPACITY": ("log_store", "capacity"),
    "LOG_STORE_FILE": ("log_store", "file_path"),
}


class ConfigService:
    """Service for loading and managing application configuration.

    Handles:
    - Loading config from config.yaml
    - Applying environment variable overrides
    - Validating against the Pydantic schema
    - Saving updated config
    """

    def __init__(self, config_path: str | Path = "config.yaml", use_env: bool = True):
        """Initialize the config service.

        Args:
            config_path: Path to the config file.
            use_env: Whether environment variables override file values.
        """
        self.config_path = Path(config_path)
        self.use_env = use_env
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """Load and validate configuration.

        Never raises; falls back to defaults on any problem.

        Returns:
            Validated AppConfig instance.
        """
        raw = self._read_file()
        if self.use_env:
            raw = self._apply_env_overrides(raw)

        try:
            self._config = AppConfig(**raw)
        except Exception as e:
            logger.warning(f"Config validation error: {e}, using defaults")
            self._config = AppConfig()

        return self._config

    def get_config(self) -> AppConfig:
        """Get the current configuration.

        Loads from disk if not already loaded.
        """
        if self._config is None:
            return self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Force reload configuration from disk."""
        self._config = None
        return self.load()

    def save(self, config: AppConfig | None = None) -> bool:
        """Save configuration to disk.

        Args:
            config: Config to save. Uses current config if not provided.

        Returns:
            True if save succeeded.
        """
        config = config or self._config
        if config is None:
            return False

        try:
            with open(self.config_path, "w") as f:
                yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def _read_file(self) -> dict[str, Any]:
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, using defaults")
            return {}

        try:
            with open(self.config_path) as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Error reading config file: {e}, using defaults")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Config file {self.config_path} is not a mapping, using defaults")
            return {}
        return raw

    def _apply_env_overrides(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Overlay environment variables on the file values.

        Values stay strings; Pydantic coerces them.
        """
        merged = dict(raw)
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if not value:
                continue
            if section is None:
                merged[key] = value
            else:
                nested = merged.get(section)
                nested = dict(nested) if isinstance(nested, dict) else {}
                nested[key] = value
                merged[section] = nested
            logger.debug(f"Config {section or ''}.{key} overridden by ${env_name}")
        return merged


# Module-level singleton
_config_service: ConfigService | None = None


def get_config_service(config_path: str | Path = "config.yaml") -> ConfigService:
    """Get the global config service instance.

    Args:
        config_path: Path to config file (only used on first call).

    Returns:
        ConfigService singleton.
    """
    global _config_service
    if _config_service is None:
        _config_service = ConfigService(config_path)
    return _config_service


def reset_config_service() -> None:
    """Reset the global config service (for testing)."""
    global _config_service
    _config_service = None
