"""Cleanup pipeline: seed, resolve, freeze, prune the registry, prune the filesystem.

The phases run strictly in order. Only resolution is concurrent; the pruning
phases read the frozen retained set and touch the registry and the filesystem
one product at a time. Re-running the pipeline after a partial failure
recomputes the closure and prunes whatever is left.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from stacktools.core.eups.abc import Eups
from stacktools.core.pruner import DEFAULT_TAG_MARKER, undeclare_stale_versions
from stacktools.core.reaper import remove_stale_version_dirs
from stacktools.core.report import CleanupReport, QueryFailure
from stacktools.core.resolver import DEFAULT_WORKERS, DependencyResolver
from stacktools.core.retained_set import RetainedSet
from stacktools.core.seed import load_seed

logger = logging.getLogger(__name__)


def _ignore(*_args: object) -> None:
    return None


@dataclass(frozen=True)
class CleanupOptions:
    """Knobs for a cleanup run.

    Attributes:
        workers: Size of the resolver thread pool
        tag_marker: Substring identifying registry tag references
        dry_run: Report filesystem removals without deleting
        strict: Stop before pruning if any dependency query failed
    """

    workers: int = DEFAULT_WORKERS
    tag_marker: str = DEFAULT_TAG_MARKER
    dry_run: bool = False
    strict: bool = False


@dataclass(frozen=True)
class CleanupCallbacks:
    """Progress hooks so the CLI can narrate a run without the core printing."""

    phase: Callable[[str], None] = _ignore
    undeclare: Callable[[str, str], None] = _ignore
    remove: Callable[[Path], None] = _ignore


def run_cleanup(
    eups: Eups,
    tag: str,
    install_roots: list[Path],
    options: CleanupOptions | None = None,
    callbacks: CleanupCallbacks | None = None,
) -> CleanupReport:
    """Keep ``tag`` and its dependency closure, remove everything else.

    Raises:
        SeedQueryError: If the tag listing cannot be fetched; nothing is modified
    """
    opts = options if options is not None else CleanupOptions()
    hooks = callbacks if callbacks is not None else CleanupCallbacks()
    report = CleanupReport(tag=tag)

    retained = RetainedSet()
    load_seed(eups, tag, retained)

    hooks.phase("Checking for extra dependencies")
    resolution = DependencyResolver(eups, workers=opts.workers).resolve(retained)
    retained.freeze()
    report.retained = retained.as_dict()
    report.query_failures.extend(resolution.query_failures)

    if opts.strict and resolution.query_failures:
        logger.error(
            "%d dependency queries failed, stopping before any removal",
            len(resolution.query_failures),
        )
        report.aborted = True
        return report

    hooks.phase("Undeclaring old products")
    pruned = undeclare_stale_versions(
        eups, retained, tag_marker=opts.tag_marker, on_undeclare=hooks.undeclare
    )
    report.undeclared.extend(pruned.undeclared)
    report.undeclare_failures.extend(pruned.failed)
    report.query_failures.extend(pruned.query_failures)

    hooks.phase("Removing old files")
    flavor_result = eups.get_flavor()
    flavor = flavor_result.stdout.strip() if flavor_result.success else ""
    if not flavor:
        detail = flavor_result.stderr.strip() or "empty flavor"
        logger.error("Could not determine eups flavor, skipping file removal: %s", detail)
        report.query_failures.append(
            QueryFailure(operation="get_flavor", subject="flavor", detail=detail)
        )
        return report

    for root in install_roots:
        reaped = remove_stale_version_dirs(
            root, flavor, retained, dry_run=opts.dry_run, on_remove=hooks.remove
        )
        report.removed_dirs.extend(reaped.removed)
        report.removal_failures.extend(reaped.failed)
    return report
