"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from typing import TYPE_CHECKING, NoReturn, TypeVar

import click

from stacktools.cli.output import user_output

if TYPE_CHECKING:
    from stacktools.core.context import StackContext

T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def fail(error_message: str) -> NoReturn:
        """Output styled error and exit with status 1.

        Raises:
            SystemExit: Always (with exit code 1)
        """
        user_output(click.style("Error: ", fg="red") + error_message)
        raise SystemExit(1)

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            Ensure.fail(error_message)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Provides type narrowing: takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            Ensure.fail(error_message)
        return value

    @staticmethod
    def eups_environment(ctx: "StackContext") -> None:
        """Ensure the stack environment has been loaded (EUPS_PATH is set).

        Raises:
            SystemExit: If EUPS_PATH is empty
        """
        if not ctx.eups_path:
            Ensure.fail(
                "EUPS_PATH is not set. Source loadLSST.<shell> before running this command."
            )
