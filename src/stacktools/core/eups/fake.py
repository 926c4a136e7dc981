"""In-memory fake implementation of the EUPS interface for testing.

FakeEups keeps a tiny registry in memory and records every call made against
it, so the resolver, pruner and reaper can be tested without an eups install.

Design:
- All state is provided via constructor parameters
- undeclare() removes the version from the in-memory registry, so a second
  cleanup run sees the already-pruned state
- Call tracking is thread-safe; the resolver calls list_dependencies()
  from several worker threads at once
"""

import threading
import time

from stacktools.core.eups.abc import Eups
from stacktools.core.eups.types import CommandResult


def _ok(stdout: str) -> CommandResult:
    return CommandResult(success=True, stdout=stdout, stderr="")


def _fail(stderr: str) -> CommandResult:
    return CommandResult(success=False, stdout="", stderr=stderr)


class FakeEups(Eups):
    """Fake registry with declarative constructor setup.

    Examples:
        >>> eups = FakeEups(
        ...     tags={"w_latest": "pkgA 1.0 w_latest\\n"},
        ...     dependencies={("pkgA", "1.0"): ["pkgB 2.0"]},
        ...     versions={"pkgA": ["1.0", "0.9"], "pkgB": ["2.0", "1.5"]},
        ...     flavor="Linux64",
        ... )
        >>> eups.list_dependencies("pkgA", "1.0").stdout
        'pkgB 2.0\\n'
    """

    def __init__(
        self,
        *,
        tags: dict[str, str] | None = None,
        dependencies: dict[tuple[str, str], list[str]] | None = None,
        versions: dict[str, list[str]] | None = None,
        flavor: str | None = None,
        local_tags: list[str] | None = None,
        failing_dependencies: set[tuple[str, str]] | None = None,
        failing_version_listings: set[str] | None = None,
        failing_undeclares: set[tuple[str, str]] | None = None,
        dependency_delay: float = 0.0,
    ) -> None:
        """Initialize fake registry state.

        Args:
            tags: Tag name -> raw `eups list -t` output. Unknown tags fail.
            dependencies: (product, version) -> dependency lines. Unknown pairs
                have no dependencies.
            versions: Product -> declared versions (tag references included,
                e.g. "tag:w_latest"). Unknown products have no versions.
            flavor: Value reported by get_flavor(); None makes it fail
            local_tags: Lines reported by list_tags(); None makes it fail
            failing_dependencies: (product, version) pairs whose dependency query fails
            failing_version_listings: Products whose version listing fails
            failing_undeclares: (product, version) pairs whose undeclare fails
            dependency_delay: Seconds to sleep in list_dependencies(), to widen
                race windows in concurrency tests
        """
        self._tags = tags or {}
        self._dependencies = dependencies or {}
        self._versions = {product: list(vs) for product, vs in (versions or {}).items()}
        self._flavor = flavor
        self._local_tags = local_tags
        self._failing_dependencies = failing_dependencies or set()
        self._failing_version_listings = failing_version_listings or set()
        self._failing_undeclares = failing_undeclares or set()
        self._dependency_delay = dependency_delay

        self._lock = threading.Lock()
        self._dependency_calls: list[tuple[str, str]] = []
        self._undeclare_calls: list[tuple[str, str]] = []

    @property
    def dependency_calls(self) -> list[tuple[str, str]]:
        """(product, version) of every list_dependencies() call, for test assertions."""
        with self._lock:
            return list(self._dependency_calls)

    @property
    def undeclare_calls(self) -> list[tuple[str, str]]:
        """(product, version) of every undeclare() call, for test assertions."""
        with self._lock:
            return list(self._undeclare_calls)

    def declared_versions(self, product: str) -> list[str]:
        """Versions currently declared for a product, for test assertions."""
        with self._lock:
            return list(self._versions.get(product, []))

    def list_tag(self, tag: str) -> CommandResult:
        if tag not in self._tags:
            return _fail(f"Unknown tag {tag}")
        return _ok(self._tags[tag])

    def list_dependencies(self, product: str, version: str) -> CommandResult:
        with self._lock:
            self._dependency_calls.append((product, version))
        if self._dependency_delay:
            time.sleep(self._dependency_delay)
        if (product, version) in self._failing_dependencies:
            return _fail(f"Unable to find dependencies of {product} {version}")
        lines = self._dependencies.get((product, version), [])
        return _ok("".join(f"{line}\n" for line in lines))

    def list_versions(self, product: str) -> CommandResult:
        if product in self._failing_version_listings:
            return _fail(f"Unable to list {product}")
        with self._lock:
            declared = list(self._versions.get(product, []))
        return _ok("".join(f"   {v}\n" for v in declared))

    def undeclare(self, product: str, version: str) -> CommandResult:
        with self._lock:
            self._undeclare_calls.append((product, version))
            if (product, version) in self._failing_undeclares:
                return _fail(f"Unable to undeclare {product} {version}")
            declared = self._versions.get(product, [])
            if version not in declared:
                return _fail(f"{product} {version} is not declared")
            declared.remove(version)
        return _ok("")

    def get_flavor(self) -> CommandResult:
        if self._flavor is None:
            return _fail("Unable to determine flavor")
        return _ok(f"{self._flavor}\n")

    def list_tags(self) -> CommandResult:
        if self._local_tags is None:
            return _fail("Unable to list tags")
        return _ok("\n".join(self._local_tags) + "\n")
