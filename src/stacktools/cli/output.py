"""Output utilities for CLI commands with clear intent.

user_output() is for messages addressed to the operator (progress, errors,
dry-run notices) and goes to stderr. machine_output() is for results that
scripts may consume and goes to stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Emit an operator-facing message on stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Emit a result line on stdout."""
    click.echo(message, nl=nl)
