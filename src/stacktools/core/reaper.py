"""Delete on-disk version directories of retained products that are not retained.

Layout of an installation root:

    <root>/<flavor>/<product>/<version>/...

Only products present in the retained set are visited, and within them every
version directory other than the retained one is removed. Unknown products
are never touched.
"""

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from stacktools.core.report import RemovalFailure
from stacktools.core.retained_set import RetainedSet

logger = logging.getLogger(__name__)


@dataclass
class ReapResult:
    removed: list[Path] = field(default_factory=list)
    failed: list[RemovalFailure] = field(default_factory=list)


def _subdirectories(path: Path) -> list[Path]:
    return sorted(entry for entry in path.iterdir() if entry.is_dir() and not entry.is_symlink())


def stale_version_dirs(
    flavor_dir: Path,
    retained: RetainedSet,
    on_error: Callable[[Path, OSError], None] | None = None,
) -> list[Path]:
    """List version directories under ``flavor_dir`` that are not retained.

    A product directory that cannot be listed is logged, reported through
    ``on_error`` and skipped; the other products are still visited.

    Raises:
        OSError: If ``flavor_dir`` itself cannot be listed
    """
    stale: list[Path] = []
    for product_dir in _subdirectories(flavor_dir):
        keep = retained.get(product_dir.name)
        if keep is None:
            continue
        try:
            version_dirs = _subdirectories(product_dir)
        except OSError as e:
            logger.error("Problem reading %s: %s", product_dir, e)
            if on_error is not None:
                on_error(product_dir, e)
            continue
        for version_dir in version_dirs:
            if version_dir.name != keep:
                stale.append(version_dir)
    return stale


def remove_stale_version_dirs(
    install_root: Path,
    flavor: str,
    retained: RetainedSet,
    *,
    dry_run: bool = False,
    on_remove: Callable[[Path], None] | None = None,
) -> ReapResult:
    """Remove stale version directories under ``install_root/flavor``.

    Args:
        install_root: One entry of EUPS_PATH
        flavor: Platform flavor reported by eups
        retained: Frozen retained set
        dry_run: Report what would be removed without deleting anything
        on_remove: Optional callback invoked with each directory before removal
    """
    result = ReapResult()
    flavor_dir = install_root / flavor
    if not flavor_dir.is_dir():
        logger.error("Installation directory %s does not exist, skipping", flavor_dir)
        return result

    def record_unreadable(path: Path, error: OSError) -> None:
        result.failed.append(RemovalFailure(path=path, detail=str(error)))

    try:
        stale = stale_version_dirs(flavor_dir, retained, on_error=record_unreadable)
    except OSError as e:
        logger.error("Problem reading %s, skipping: %s", flavor_dir, e)
        record_unreadable(flavor_dir, e)
        return result

    for version_dir in stale:
        if on_remove is not None:
            on_remove(version_dir)
        if dry_run:
            result.removed.append(version_dir)
            continue
        try:
            shutil.rmtree(version_dir)
        except OSError as e:
            logger.error("Problem removing %s: %s", version_dir, e)
            result.failed.append(RemovalFailure(path=version_dir, detail=str(e)))
            continue
        logger.debug("Removed %s", version_dir)
        result.removed.append(version_dir)
    return result
