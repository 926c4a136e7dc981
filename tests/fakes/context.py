"""Factory functions for creating test contexts."""

from pathlib import Path

from stacktools.core.context import StackContext
from stacktools.core.eups.fake import FakeEups
from stacktools.core.global_config import GlobalConfig


def create_test_context(
    eups: FakeEups | None = None,
    eups_path: tuple[Path, ...] = (),
    pkgroot: str | None = None,
    global_config: GlobalConfig | None = None,
    dry_run: bool = False,
) -> StackContext:
    """Create test context with optional pre-configured ops.

    This is a convenience wrapper around StackContext.for_test().

    Args:
        eups: Optional FakeEups with test configuration.
              If None, creates empty FakeEups.
        eups_path: Installation roots. Defaults to none, which most commands
                   reject with an EUPS_PATH error.
        pkgroot: Optional EUPS_PKGROOT value.
        global_config: Optional GlobalConfig for test context.
                      If None, uses defaults.
        dry_run: Whether to wrap the gateway in NoopEups.
    """
    return StackContext.for_test(
        eups=eups,
        global_config=global_config,
        eups_path=eups_path,
        pkgroot=pkgroot,
        dry_run=dry_run,
    )


def make_install_tree(root: Path, flavor: str, layout: dict[str, list[str]]) -> Path:
    """Create ``root/flavor/<product>/<version>/`` directories for a layout.

    Each version directory gets a small marker file so removal is observable.

    Returns:
        The ``root/flavor`` directory
    """
    flavor_dir = root / flavor
    for product, versions in layout.items():
        for version in versions:
            version_dir = flavor_dir / product / version
            version_dir.mkdir(parents=True)
            (version_dir / "README").write_text(f"{product} {version}\n", encoding="utf-8")
    return flavor_dir
