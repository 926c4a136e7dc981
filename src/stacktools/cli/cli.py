import click

from stacktools.cli.commands.cleanup import cleanup_cmd
from stacktools.cli.commands.shebang import shebang_cmd
from stacktools.cli.commands.stack_version import stack_version_cmd
from stacktools.cli.core import CONTEXT_SETTINGS, build_context, configure_logging


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="stacktools")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Maintenance commands for an installed EUPS software stack."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = build_context(dry_run=False)


cli.add_command(cleanup_cmd)
cli.add_command(shebang_cmd)
cli.add_command(stack_version_cmd)


def main() -> None:
    """CLI entry point used by the `stacktools` console script."""
    configure_logging()
    cli()
