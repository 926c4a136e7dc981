"""Shebang command: point python scripts in the stack at a new interpreter."""

import shutil

import click

from stacktools.cli.core import get_context
from stacktools.cli.ensure import Ensure
from stacktools.cli.output import machine_output, user_output
from stacktools.core.shebang import ShebangRewriter, tagged_version_dirs


@click.command("shebang")
@click.option("--list", "list_only", is_flag=True, help="Only display the shebangs found.")
@click.option("-t", "--tag", default=None, help="Restrict to products in the specified tag.")
@click.option(
    "--python",
    "python_path",
    default=None,
    help="Interpreter to point shebangs at (default: python found on PATH).",
)
@click.pass_context
def shebang_cmd(
    click_ctx: click.Context, list_only: bool, tag: str | None, python_path: str | None
) -> None:
    """Rewrite the python path in shebang lines across the stack.

    Must be run after sourcing loadLSST.<shell>.
    """
    ctx = get_context(click_ctx)
    Ensure.eups_environment(ctx)
    install_root = ctx.eups_path[0]

    flavor_result = ctx.eups.get_flavor()
    flavor = flavor_result.stdout.strip() if flavor_result.success else ""
    Ensure.invariant(
        bool(flavor), f"Could not determine eups flavor: {flavor_result.stderr.strip()}"
    )

    python = python_path if python_path is not None else shutil.which("python")
    python = Ensure.not_none(python, "No python interpreter found on PATH; pass --python")

    if tag is None:
        roots = [install_root / flavor]
    else:
        try:
            roots = tagged_version_dirs(install_root, flavor, tag)
        except FileNotFoundError as e:
            Ensure.fail(str(e))

    report = ShebangRewriter(python, list_only=list_only).run(roots)

    if list_only:
        for found in report.matches:
            machine_output(f"File: {found.path} Shebang: {found.shebang}")
        return

    for path in report.rewritten:
        user_output(f"Rewrote: {path}")
    user_output("Shebang successfully updated")
