"""Parsers for the line-oriented output of eups listing commands.

Every parser works on a single line and returns None for lines that do not
match, so callers can skip blank trailing lines and headers without special
cases.
"""

import re
from dataclasses import dataclass

# "<product> <version> <extra...>" from `eups list -t TAG`
_TAG_LINE_RE = re.compile(r"^\s*(\S+)\s+(\S+)\s*(.*)$")

# "<product> <version>" from `eups list -D`, possibly indented with "|" tree markers
_DEPENDENCY_LINE_RE = re.compile(r"([^|\s]\S*)\s+(\S+)")

# First token of each `eups list PRODUCT` line is the version
_VERSION_LINE_RE = re.compile(r"^\s*(\S+)")


@dataclass(frozen=True)
class TagEntry:
    """One product carried by a tag."""

    product: str
    version: str
    remainder: str


@dataclass(frozen=True)
class DependencyEdge:
    """A (product, version) pair reported as a direct dependency."""

    product: str
    version: str


def parse_tag_line(line: str) -> TagEntry | None:
    match = _TAG_LINE_RE.match(line)
    if match is None:
        return None
    product, version, remainder = match.groups()
    return TagEntry(product=product, version=version, remainder=remainder.strip())


def parse_dependency_line(line: str) -> DependencyEdge | None:
    match = _DEPENDENCY_LINE_RE.search(line)
    if match is None:
        return None
    return DependencyEdge(product=match.group(1), version=match.group(2))


def parse_version_line(line: str) -> str | None:
    match = _VERSION_LINE_RE.match(line)
    if match is None:
        return None
    return match.group(1)


def parse_tag_listing(text: str) -> list[TagEntry]:
    """Parse the full output of a tag listing, skipping non-matching lines."""
    entries: list[TagEntry] = []
    for line in text.split("\n"):
        entry = parse_tag_line(line)
        if entry is not None:
            entries.append(entry)
    return entries


def parse_dependency_listing(lines: list[str]) -> list[DependencyEdge]:
    edges: list[DependencyEdge] = []
    for line in lines:
        edge = parse_dependency_line(line)
        if edge is not None:
            edges.append(edge)
    return edges
