"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.stacktools/config.toml.
Loaded once at the CLI entry point; a missing file means defaults.

Example config.toml:

    eups_command = "/opt/lsst/eups/bin/eups"
    workers = 8
    tag_marker = "tag:"
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from stacktools.core.pruner import DEFAULT_TAG_MARKER
from stacktools.core.resolver import DEFAULT_WORKERS


class ConfigError(ValueError):
    """Raised when the config file exists but cannot be used."""


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    All fields are read-only after construction.
    """

    eups_command: str = "eups"
    workers: int = DEFAULT_WORKERS
    tag_marker: str = DEFAULT_TAG_MARKER


def global_config_path() -> Path:
    """Get the path to the global config file."""
    return Path.home() / ".stacktools" / "config.toml"


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load global config from ~/.stacktools/config.toml.

    Args:
        path: Config file path (defaults to ~/.stacktools/config.toml)

    Returns:
        GlobalConfig with loaded values, or defaults if the file doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    config_path = path if path is not None else global_config_path()

    if not config_path.exists():
        return GlobalConfig()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    eups_command = data.get("eups_command", "eups")
    if not isinstance(eups_command, str) or not eups_command:
        raise ConfigError(f"'eups_command' must be a non-empty string in {config_path}")

    workers = data.get("workers", DEFAULT_WORKERS)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ConfigError(f"'workers' must be a positive integer in {config_path}")

    tag_marker = data.get("tag_marker", DEFAULT_TAG_MARKER)
    if not isinstance(tag_marker, str) or not tag_marker:
        raise ConfigError(f"'tag_marker' must be a non-empty string in {config_path}")

    return GlobalConfig(eups_command=eups_command, workers=workers, tag_marker=tag_marker)
