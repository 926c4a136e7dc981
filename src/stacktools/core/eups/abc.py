"""Abstract interface for the EUPS package manager.

Every call into the external ``eups`` tool goes through this interface so that
the resolver, pruner and reaper can be exercised against an in-memory fake.

Design:
- One method per registry query the maintenance commands need
- Every method returns a CommandResult; callers decide whether a failure is
  fatal (seed listing) or best-effort (dependency and version listings)
- Implementations: RealEups (subprocess), NoopEups (dry-run wrapper)
"""

from abc import ABC, abstractmethod

from stacktools.core.eups.types import CommandResult


class Eups(ABC):
    """EUPS registry operations."""

    @abstractmethod
    def list_tag(self, tag: str) -> CommandResult:
        """List the products and versions carried by a tag.

        Output lines look like ``<product> <version> <extra...>``.

        Args:
            tag: Tag name (e.g. ``w_2018_10``)
        """

    @abstractmethod
    def list_dependencies(self, product: str, version: str) -> CommandResult:
        """List the direct dependencies of one product version.

        Output lines look like ``<product> <version>``, possibly prefixed with
        ``|`` tree markers.

        Args:
            product: Product name
            version: Version identifier of the product
        """

    @abstractmethod
    def list_versions(self, product: str) -> CommandResult:
        """List every version of a product known to the registry.

        The first token of each output line is a version. Symbolic tag
        references carry a marker substring (``tag:``) in that token.

        Args:
            product: Product name
        """

    @abstractmethod
    def undeclare(self, product: str, version: str) -> CommandResult:
        """Remove a product version from the registry without touching files.

        Args:
            product: Product name
            version: Version identifier to undeclare
        """

    @abstractmethod
    def get_flavor(self) -> CommandResult:
        """Report the platform flavor selecting the installation subtree."""

    @abstractmethod
    def list_tags(self) -> CommandResult:
        """List the tags known to the local registry."""
