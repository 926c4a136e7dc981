"""Stack version command: compare the newest local weekly tag with the newest published one."""

import click

from stacktools.cli.core import get_context
from stacktools.cli.ensure import Ensure
from stacktools.cli.output import machine_output, user_output
from stacktools.core.stack_version import StackVersionError, check_stack_version


@click.command("stack-version")
@click.pass_context
def stack_version_cmd(click_ctx: click.Context) -> None:
    """Check for the weekly tag version locally and remotely.

    Must be run after sourcing loadLSST.<shell>.
    """
    ctx = get_context(click_ctx)
    try:
        versions = check_stack_version(ctx.eups, ctx.pkgroot)
    except StackVersionError as e:
        Ensure.fail(str(e))

    machine_output(f"Latest tag installed is {versions.local.name}")
    machine_output(f"Latest tag available is {versions.remote.name}")
    if versions.up_to_date:
        user_output("Stack is up to date")
    else:
        user_output(f"A newer weekly tag is available: {versions.remote.name}")
