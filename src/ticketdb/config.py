"""
Configuration management for the ticket database.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .utils.errors import InvalidConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TICKETDB_"


class Config:
    """
    Configuration manager with support for environment variables and config files.

    Values are resolved as defaults, then the JSON config file, then
    ``TICKETDB_*`` environment variables. Environment values are converted to
    the type of the default they replace.
    """

    def __init__(self, config_file: Optional[str] = None):
        """Initialize config manager."""
        self.config_file = config_file
        self._config: Dict[str, Any] = {}
        self._load_defaults()

        if config_file and Path(config_file).exists():
            self.load_from_file(config_file)

        self._load_from_env()

    def _load_defaults(self) -> None:
        """Load default configuration values."""
        self._config = {
            "database_path": "./tickets.yaml",
            "table_name": "CNGC-BB-2024",
            "log_level": "INFO",
        }

    def load_from_file(self, config_file: str) -> None:
        """Load configuration from JSON file; environment variables still win."""
        path = Path(config_file)
        with open(path, "r", encoding="utf-8") as f:
            try:
                file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidConfigError(f"config file {path} is not valid JSON: {e}") from e
        if not isinstance(file_config, dict):
            raise InvalidConfigError(f"config file {path} must hold a JSON object")

        self._config.update(file_config)
        self._load_from_env()
        logger.debug("Loaded config from %s", path)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for key, current in list(self._config.items()):
            value = os.environ.get(ENV_PREFIX + key.upper())
            if value is not None:
                try:
                    self._config[key] = self._coerce(value, current)
                except ValueError as e:
                    raise InvalidConfigError(
                        f"{ENV_PREFIX}{key.upper()}={value!r} is not a valid {type(current).__name__}", key
                    ) from e

    @staticmethod
    def _coerce(value: str, like: Any) -> Any:
        if isinstance(like, bool):
            return value.lower() in ("true", "1", "yes")
        if isinstance(like, int):
            return int(value)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    def save_to_file(self, config_file: Optional[str] = None) -> None:
        """Save configuration to file."""
        file_path = config_file or self.config_file
        if not file_path:
            return

        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._config, f, indent=2)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return self._config.copy()


def configure_logging(config: Config) -> None:
    """Set up root logging at the configured level."""
    level = logging.getLevelName(str(config.get("log_level", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("ticketdb").setLevel(level)
