"""Environment variable access and path resolution.

Database Path Resolution Order:
1. Explicit database environment variable (LAND_REGISTRY_DB)
2. Shared data directory (LAND_REGISTRY_DATA_DIR/ledger.db)
3. Current directory (./ledger.db)

Context Resolution:
- resolve_context(verb, config_override) - Map verb to resource locations
- RuntimeContext - Paths and log location per verb
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DB_FILENAME = "ledger.db"


@dataclass
class RuntimeContext:
    """Runtime context for a land registry deployment.

    Contexts are determined by command verb, not auto-detection.

    Attributes:
        verb: Command verb (serve, run, deploy)
        data_dir: Data directory for the ledger database
        config_dir: Configuration directory
        log_dir: Log directory (None for container/deploy)
    """
    verb: str
    data_dir: Path
    config_dir: Path
    log_dir: Optional[Path]

    def get_db_path(self) -> Path:
        """Return ledger database file path for this context."""
        return self.data_dir / DB_FILENAME

    def get_config_path(self) -> Path:
        """Return config file path for this context."""
        return self.config_dir / "config.toml"

    @classmethod
    def from_config(cls, config_path: Path, verb: str = "run") -> "RuntimeContext":
        """Create RuntimeContext from explicit config file path.

        Args:
            config_path: Path to config.toml file
            verb: Command verb (defaults to "run")

        Returns:
            RuntimeContext with data paths derived from the verb and the
            config directory taken from the file location
        """
        context = resolve_context(verb)
        context.config_dir = config_path.parent
        return context


def resolve_context(
    verb: str,
    config_override: Optional[Path] = None
) -> RuntimeContext:
    """Map verb to resource locations.

    Args:
        verb: Command verb (serve, run, deploy)
        config_override: Optional explicit config path

    Returns:
        RuntimeContext with paths for the verb

    Raises:
        ValueError: If verb is not one of: serve, run, deploy

    Examples:
        >>> ctx = resolve_context("serve")
        >>> ctx.data_dir
        PosixPath('/var/lib/land-registry')

        >>> ctx = resolve_context("deploy")
        >>> ctx.log_dir is None
        True
    """
    if config_override:
        return RuntimeContext.from_config(config_override, verb)

    if verb == "serve":
        return RuntimeContext(
            verb="serve",
            data_dir=Path("/var/lib/land-registry"),
            config_dir=Path("/etc/land-registry"),
            log_dir=Path("/var/log/land-registry"),
        )

    elif verb == "run":
        return RuntimeContext(
            verb="run",
            data_dir=Path.home() / ".local/share/land-registry",
            config_dir=Path.home() / ".config/land-registry",
            log_dir=Path.home() / ".local/state/land-registry/logs",
        )

    elif verb == "deploy":
        return RuntimeContext(
            verb="deploy",
            data_dir=Path("/data"),
            config_dir=Path("/config"),
            log_dir=None,  # Container logs to stdout only
        )

    else:
        raise ValueError(
            f"Invalid verb: {verb}. Must be one of: serve, run, deploy"
        )


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable.

    Args:
        key: Environment variable name
        default: Default value if not found

    Returns:
        Environment variable value or default
    """
    return os.environ.get(key, default)


def get_db_path() -> Path:
    """Resolve the ledger database path.

    Returns:
        Path to database file

    Examples:
        >>> os.environ['LAND_REGISTRY_DB'] = '/custom/ledger.db'
        >>> get_db_path()
        PosixPath('/custom/ledger.db')
    """
    explicit = get_env("LAND_REGISTRY_DB")
    if explicit:
        return Path(explicit)

    data_dir = get_env("LAND_REGISTRY_DATA_DIR")
    if data_dir:
        return Path(data_dir) / DB_FILENAME

    return Path(f"./{DB_FILENAME}")
