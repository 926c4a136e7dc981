"""Shared helpers for CLI commands: logging setup and context lookup."""

import dataclasses
import logging
import os

import click

from stacktools.cli.ensure import Ensure
from stacktools.core.context import StackContext, create_context
from stacktools.core.eups.noop import NoopEups
from stacktools.core.global_config import ConfigError

DEBUG_ENV_VAR = "STACKTOOLS_DEBUG"

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def configure_logging() -> None:
    """Enable debug logging if STACKTOOLS_DEBUG environment variable is set."""
    if os.getenv(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


def build_context(*, dry_run: bool) -> StackContext:
    """Create the production context, turning config problems into CLI errors."""
    try:
        return create_context(dry_run=dry_run)
    except ConfigError as e:
        Ensure.fail(str(e))


def get_context(click_ctx: click.Context, *, dry_run: bool = False) -> StackContext:
    """Return the context attached to the click invocation, creating it if needed.

    Tests pass a ready-made context through ``obj``. When ``dry_run`` is
    requested on a context that is not already in dry-run mode, the registry
    gateway is wrapped in NoopEups.
    """
    ctx = click_ctx.find_object(StackContext)
    if ctx is None:
        ctx = build_context(dry_run=dry_run)
        click_ctx.obj = ctx
    if dry_run and not ctx.dry_run:
        ctx = dataclasses.replace(ctx, eups=NoopEups(ctx.eups), dry_run=True)
    return ctx
