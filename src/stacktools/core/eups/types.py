"""Type definitions for EUPS registry operations."""

from typing import NamedTuple


class CommandResult(NamedTuple):
    """Result from running an eups subcommand.

    Attributes:
        success: True if command exited with code 0, False otherwise
        stdout: Standard output from the command
        stderr: Standard error from the command
    """

    success: bool
    stdout: str
    stderr: str

    def lines(self) -> list[str]:
        """Split stdout into lines, or return no lines if the command failed."""
        if not self.success:
            return []
        return self.stdout.split("\n")
