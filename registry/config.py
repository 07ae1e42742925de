"""Configuration management for the land registry.

Configuration is loaded from TOML files with support for multiple deployment
contexts (serve, run, deploy).

Configuration Resolution Order:
1. Environment variables (highest priority)
2. TOML config file
3. Built-in defaults

Example config.toml:

    [storage]
    database_path = "/var/lib/land-registry/ledger.db"

    [logging]
    level = "info"
    format = "json"
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from .host.environment import get_db_path, resolve_context

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

VALID_LOG_FORMATS = ("json", "text")


def load_toml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config.toml file

    Returns:
        Dictionary with configuration sections

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid TOML
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e


def get_config_path(verb: str = "run", config_override: Optional[Path] = None) -> Path:
    """Get configuration file path based on deployment context.

    Args:
        verb: Deployment verb (serve, run, deploy)
        config_override: Optional explicit config path

    Returns:
        Path to configuration file
    """
    if config_override:
        return config_override
    return resolve_context(verb).get_config_path()


class Settings:
    """Land registry settings with TOML configuration support.

    Attributes:
        database_path: Path to the ledger SQLite file
        log_level: Logging level name (debug, info, warning, error)
        log_format: Log output format (json or text)
    """

    def __init__(
        self,
        database_path: Optional[str | Path] = None,
        config_path: Optional[Path] = None,
        verb: str = "run",
    ):
        """Initialize settings.

        Args:
            database_path: Explicit ledger database path. Takes precedence
                over environment and TOML values when given.
            config_path: Optional explicit path to config.toml
            verb: Deployment verb (serve, run, deploy) for config resolution
        """
        self._config: dict[str, Any] = {}
        self._verb = verb

        if config_path is None:
            config_path = get_config_path(verb)

        if config_path.exists():
            try:
                self._config = load_toml_config(config_path)
            except ValueError as e:
                logger.warning("Failed to load config from %s: %s", config_path, e)

        self._apply_config()

        if database_path is not None:
            self.database_path = Path(database_path)

    def _apply_config(self):
        """Apply configuration in order env var > TOML > default."""
        storage_config = self._config.get("storage", {})
        if "LAND_REGISTRY_DB" in os.environ or "LAND_REGISTRY_DATA_DIR" in os.environ:
            self.database_path = get_db_path()
        elif storage_config.get("database_path"):
            self.database_path = Path(storage_config["database_path"])
        else:
            self.database_path = get_db_path()

        logging_config = self._config.get("logging", {})
        self.log_level = os.environ.get(
            "LAND_REGISTRY_LOG_LEVEL",
            logging_config.get("level", "info"),
        )
        self.log_format = os.environ.get(
            "LAND_REGISTRY_LOG_FORMAT",
            logging_config.get("format", "json"),
        )
        if self.log_format not in VALID_LOG_FORMATS:
            raise ValueError(
                f"Unknown log format: {self.log_format}. "
                f"Available: {list(VALID_LOG_FORMATS)}"
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return getattr(self, key, default)
