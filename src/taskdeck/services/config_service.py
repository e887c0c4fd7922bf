"""Configuration service for the taskdeck CLI.

Loads and saves ``config.json`` under the user config directory, creating a
default configuration on first run.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from taskdeck.models.config_models import AppConfig


class ConfigService:
    """Single source of truth for application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir("taskdeck"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("taskdeck"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def store_path(self) -> Path:
        """Where the key-value store lives (config override or data dir)."""
        if self.config.store_path:
            return Path(self.config.store_path).expanduser()
        return self.data_dir / "store.json"

    def load_config(self) -> AppConfig:
        """Load configuration from disk, writing defaults when missing."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # first run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def set_value(self, dotted_key: str, value: str) -> AppConfig:
        """Set ``section.field`` from a string and persist.

        The value is validated by re-building the whole model.
        """
        section, _, field = dotted_key.partition(".")
        data = self.config.model_dump()
        if section not in data or not isinstance(data[section], dict) or field not in data[section]:
            raise KeyError(dotted_key)
        data[section][field] = value
        self._config = AppConfig.model_validate(data)
        self.save_config()
        return self._config

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        return self._config


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    return ConfigService()
