"""Undeclare every registry version that is not in the retained set."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from stacktools.core.eups.abc import Eups
from stacktools.core.listing import parse_version_line
from stacktools.core.report import QueryFailure, Undeclared
from stacktools.core.retained_set import RetainedSet

logger = logging.getLogger(__name__)

DEFAULT_TAG_MARKER = "tag:"


@dataclass
class PruneResult:
    undeclared: list[Undeclared] = field(default_factory=list)
    failed: list[Undeclared] = field(default_factory=list)
    query_failures: list[QueryFailure] = field(default_factory=list)


def stale_versions(listed: list[str], keep: str, tag_marker: str) -> list[str]:
    """Return the versions from an `eups list PRODUCT` listing that may be undeclared.

    A version survives if it equals ``keep`` exactly or contains ``tag_marker``.
    """
    stale: list[str] = []
    for line in listed:
        version = parse_version_line(line)
        if version is None:
            continue
        if version == keep or tag_marker in version:
            continue
        stale.append(version)
    return stale


def undeclare_stale_versions(
    eups: Eups,
    retained: RetainedSet,
    *,
    tag_marker: str = DEFAULT_TAG_MARKER,
    on_undeclare: Callable[[str, str], None] | None = None,
) -> PruneResult:
    """Undeclare every non-retained, non-tag version of every retained product.

    Products are processed one at a time in sorted order. A failed version
    listing is treated as an empty one; a failed undeclare is logged and the
    run continues.

    Args:
        eups: Registry gateway
        retained: Frozen retained set
        tag_marker: Substring identifying symbolic tag references
        on_undeclare: Optional callback(product, version) invoked before each undeclare
    """
    result = PruneResult()
    for product, keep in retained.items():
        listing = eups.list_versions(product)
        if not listing.success:
            detail = listing.stderr.strip()
            logger.warning("Could not list versions of %s, skipping: %s", product, detail)
            result.query_failures.append(
                QueryFailure(operation="list_versions", subject=product, detail=detail)
            )
            continue

        for version in stale_versions(listing.lines(), keep, tag_marker):
            if on_undeclare is not None:
                on_undeclare(product, version)
            outcome = eups.undeclare(product, version)
            if outcome.success:
                logger.debug("Undeclared %s %s", product, version)
                result.undeclared.append(Undeclared(product, version))
            else:
                logger.error(
                    "Problem undeclaring %s %s: %s", product, version, outcome.stderr.strip()
                )
                result.failed.append(Undeclared(product, version))
    return result
