"""No-op EUPS wrapper for dry-run mode.

This module provides an Eups wrapper that prevents execution of destructive
operations while delegating read-only operations to the wrapped implementation.
"""

from stacktools.cli.output import user_output
from stacktools.core.eups.abc import Eups
from stacktools.core.eups.types import CommandResult


class NoopEups(Eups):
    """No-op wrapper that prints registry changes instead of making them.

    Usage:
        real_ops = RealEups()
        noop_ops = NoopEups(real_ops)

        # Prints "Would undeclare: afw 1.0" and leaves the registry alone
        noop_ops.undeclare("afw", "1.0")
    """

    def __init__(self, wrapped: Eups) -> None:
        """Create a dry-run wrapper around an Eups implementation.

        Args:
            wrapped: The Eups implementation to wrap (usually RealEups)
        """
        self._wrapped = wrapped

    # Read-only operations: delegate to wrapped implementation

    def list_tag(self, tag: str) -> CommandResult:
        return self._wrapped.list_tag(tag)

    def list_dependencies(self, product: str, version: str) -> CommandResult:
        return self._wrapped.list_dependencies(product, version)

    def list_versions(self, product: str) -> CommandResult:
        return self._wrapped.list_versions(product)

    def get_flavor(self) -> CommandResult:
        return self._wrapped.get_flavor()

    def list_tags(self) -> CommandResult:
        return self._wrapped.list_tags()

    # Destructive operations: print dry-run message instead of executing

    def undeclare(self, product: str, version: str) -> CommandResult:
        """Print what would be undeclared without executing."""
        user_output(f"Would undeclare: {product} {version}")
        return CommandResult(success=True, stdout="", stderr="")
