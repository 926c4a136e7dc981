"""Real subprocess-based implementation of the EUPS interface.

Design:
- Uses check=False to allow LBYL error handling
- A missing executable or undecodable output is reported as a failed CommandResult
  rather than raised
- No timeout: a hung eups process blocks the calling thread
"""

import logging
import subprocess

from stacktools.core.eups.abc import Eups
from stacktools.core.eups.types import CommandResult

logger = logging.getLogger(__name__)


class RealEups(Eups):
    """Production implementation invoking the ``eups`` command line tool."""

    def __init__(self, command: str = "eups") -> None:
        """Create the gateway.

        Args:
            command: Executable name or path of the eups tool
        """
        self._command = command

    def _run(self, *args: str) -> CommandResult:
        cmd = [self._command, *args]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except OSError as e:
            return CommandResult(
                success=False,
                stdout="",
                stderr=f"Command not found or not executable: {self._command} ({e})",
            )
        except UnicodeDecodeError as e:
            logger.debug("Undecodable output from: %s", " ".join(cmd))
            return CommandResult(
                success=False,
                stdout="",
                stderr=f"Output of {' '.join(cmd)} is not valid UTF-8 ({e})",
            )

        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    def list_tag(self, tag: str) -> CommandResult:
        """List tag contents using eups list -t."""
        return self._run("list", "-t", tag)

    def list_dependencies(self, product: str, version: str) -> CommandResult:
        """List direct dependencies using eups list -D."""
        return self._run("list", "-D", product, version)

    def list_versions(self, product: str) -> CommandResult:
        """List declared versions using eups list."""
        return self._run("list", product)

    def undeclare(self, product: str, version: str) -> CommandResult:
        """Undeclare a version using eups undeclare."""
        return self._run("undeclare", product, version)

    def get_flavor(self) -> CommandResult:
        """Report the flavor using eups flavor."""
        return self._run("flavor")

    def list_tags(self) -> CommandResult:
        """List tags using eups tags."""
        return self._run("tags")
