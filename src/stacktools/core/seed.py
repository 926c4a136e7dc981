"""Seed the retained set from the contents of a tag."""

import logging

from stacktools.core.eups.abc import Eups
from stacktools.core.listing import parse_tag_listing
from stacktools.core.retained_set import RetainedSet

logger = logging.getLogger(__name__)


class SeedQueryError(RuntimeError):
    """Raised when the tag listing that seeds a cleanup run cannot be fetched."""

    def __init__(self, tag: str, detail: str) -> None:
        self.tag = tag
        self.detail = detail
        message = f"Error in fetching tag list for tag: {tag}"
        if detail:
            message += f"\n{detail}"
        super().__init__(message)


def load_seed(eups: Eups, tag: str, retained: RetainedSet) -> int:
    """Insert every product carried by ``tag`` into ``retained``.

    Lines that do not look like ``<product> <version> ...`` are skipped. When a
    product appears twice the first line wins.

    Returns:
        Number of products inserted

    Raises:
        SeedQueryError: If the tag listing command fails
    """
    result = eups.list_tag(tag)
    if not result.success:
        raise SeedQueryError(tag, result.stderr.strip())

    inserted = 0
    for entry in parse_tag_listing(result.stdout):
        if retained.insert_if_absent(entry.product, entry.version):
            inserted += 1
    logger.debug("Seeded %d products from tag %s", inserted, tag)
    return inserted
