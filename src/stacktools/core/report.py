"""Result types collected while running the cleanup pipeline."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class QueryFailure:
    """A best-effort registry query that failed and was treated as empty.

    Attributes:
        operation: Which query failed ("list_dependencies", "list_versions", "get_flavor")
        subject: What was being queried (e.g. "afw 1.0")
        detail: stderr or other diagnostic text from the failed command
    """

    operation: str
    subject: str
    detail: str


@dataclass(frozen=True)
class Undeclared:
    product: str
    version: str


@dataclass(frozen=True)
class RemovalFailure:
    path: Path
    detail: str


@dataclass
class CleanupReport:
    """Everything a cleanup run did, for the summary shown to the operator."""

    tag: str
    retained: dict[str, str] = field(default_factory=dict)
    query_failures: list[QueryFailure] = field(default_factory=list)
    undeclared: list[Undeclared] = field(default_factory=list)
    undeclare_failures: list[Undeclared] = field(default_factory=list)
    removed_dirs: list[Path] = field(default_factory=list)
    removal_failures: list[RemovalFailure] = field(default_factory=list)
    aborted: bool = False

    @property
    def has_failures(self) -> bool:
        return bool(self.undeclare_failures or self.removal_failures)
