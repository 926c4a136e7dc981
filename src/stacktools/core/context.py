"""Application context with dependency injection."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from stacktools.core.eups.abc import Eups
from stacktools.core.eups.noop import NoopEups
from stacktools.core.eups.real import RealEups
from stacktools.core.global_config import GlobalConfig, load_global_config


@dataclass(frozen=True)
class StackContext:
    """Immutable context holding all dependencies for stack maintenance commands.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    eups: Eups
    global_config: GlobalConfig
    eups_path: tuple[Path, ...]  # Installation roots from EUPS_PATH
    pkgroot: str | None  # Raw EUPS_PKGROOT value
    dry_run: bool

    @staticmethod
    def for_test(
        eups: Eups | None = None,
        global_config: GlobalConfig | None = None,
        eups_path: tuple[Path, ...] = (),
        pkgroot: str | None = None,
        dry_run: bool = False,
    ) -> "StackContext":
        """Create a context for tests with in-memory defaults.

        Args:
            eups: Registry gateway; defaults to an empty FakeEups
            global_config: Defaults to GlobalConfig()
            eups_path: Installation roots
            pkgroot: EUPS_PKGROOT value
            dry_run: Wrap the gateway in NoopEups when True
        """
        from stacktools.core.eups.fake import FakeEups

        gateway: Eups = eups if eups is not None else FakeEups()
        if dry_run:
            gateway = NoopEups(gateway)
        return StackContext(
            eups=gateway,
            global_config=global_config if global_config is not None else GlobalConfig(),
            eups_path=eups_path,
            pkgroot=pkgroot,
            dry_run=dry_run,
        )


def parse_eups_path(value: str | None) -> tuple[Path, ...]:
    """Split an EUPS_PATH value into installation roots."""
    if not value:
        return ()
    return tuple(Path(entry) for entry in value.split(os.pathsep) if entry)


def create_context(
    *,
    dry_run: bool,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> StackContext:
    """Create production context with real implementations.

    Args:
        dry_run: If True, wrap the registry gateway so that undeclares are
                 printed instead of executed
        environ: Environment to read EUPS_PATH/EUPS_PKGROOT from (defaults to os.environ)
        config_path: Override for the global config location

    Raises:
        ConfigError: If the global config file is malformed
    """
    env = environ if environ is not None else os.environ
    global_config = load_global_config(config_path)

    eups: Eups = RealEups(command=global_config.eups_command)
    if dry_run:
        eups = NoopEups(eups)

    return StackContext(
        eups=eups,
        global_config=global_config,
        eups_path=parse_eups_path(env.get("EUPS_PATH")),
        pkgroot=env.get("EUPS_PKGROOT") or None,
        dry_run=dry_run,
    )
