"""Cleanup command: keep one tag and its dependencies, remove everything else."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from stacktools.cli.core import CONTEXT_SETTINGS, configure_logging, get_context
from stacktools.cli.ensure import Ensure
from stacktools.cli.output import user_output
from stacktools.core.cleanup import CleanupCallbacks, CleanupOptions, run_cleanup
from stacktools.core.report import CleanupReport
from stacktools.core.seed import SeedQueryError


def _render_summary(report: CleanupReport, dry_run: bool) -> Table:
    """Build the end-of-run summary table."""
    table = Table(title=f"Cleanup summary for {report.tag}", show_header=False)
    table.add_column("item")
    table.add_column("count", justify="right")
    table.add_row("Products retained", str(len(report.retained)))
    undeclare_label = "Versions to undeclare" if dry_run else "Versions undeclared"
    table.add_row(undeclare_label, str(len(report.undeclared)))
    remove_label = "Directories to remove" if dry_run else "Directories removed"
    table.add_row(remove_label, str(len(report.removed_dirs)))
    if report.undeclare_failures:
        table.add_row("[red]Failed undeclares[/red]", str(len(report.undeclare_failures)))
    if report.removal_failures:
        table.add_row("[red]Failed removals[/red]", str(len(report.removal_failures)))
    if report.query_failures:
        table.add_row("[yellow]Failed queries[/yellow]", str(len(report.query_failures)))
    return table


def _report_problems(report: CleanupReport) -> None:
    for failure in report.query_failures:
        user_output(
            click.style("Warning: ", fg="yellow")
            + f"{failure.operation} failed for {failure.subject}, treated as empty"
        )
    for item in report.undeclare_failures:
        label = click.style("Problem undeclaring ", fg="red")
        user_output(label + f"{item.product} {item.version}")
    for removal in report.removal_failures:
        user_output(click.style("Problem removing: ", fg="red") + f"{removal.path}")


@click.command("cleanup", context_settings=CONTEXT_SETTINGS)
@click.argument("tags", nargs=-1, metavar="TAG")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show what would be undeclared and removed without changing anything.",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Stop before removing anything if any dependency query failed.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of threads used to resolve dependencies (default from config, 4).",
)
@click.pass_context
def cleanup_cmd(
    click_ctx: click.Context,
    tags: tuple[str, ...],
    dry_run: bool,
    strict: bool,
    workers: int | None,
) -> None:
    """Undeclare and delete all products from the stack except those in TAG
    and their dependencies.

    Must be run after sourcing loadLSST.<shell>.
    """
    if len(tags) != 1:
        user_output("A tag to keep must be specified")
        user_output(click_ctx.get_help())
        raise SystemExit(1)
    tag = tags[0]

    ctx = get_context(click_ctx, dry_run=dry_run)
    Ensure.eups_environment(ctx)

    options = CleanupOptions(
        workers=workers if workers is not None else ctx.global_config.workers,
        tag_marker=ctx.global_config.tag_marker,
        dry_run=ctx.dry_run,
        strict=strict,
    )

    def on_undeclare(product: str, version: str) -> None:
        # NoopEups announces its own "Would undeclare" line
        if not ctx.dry_run:
            user_output(f"Undeclaring: {product} {version}")

    def on_remove(path: Path) -> None:
        if ctx.dry_run:
            user_output(f"Would remove: {path}")
        else:
            user_output(f"Removing dir: {path}")

    callbacks = CleanupCallbacks(phase=user_output, undeclare=on_undeclare, remove=on_remove)

    try:
        report = run_cleanup(ctx.eups, tag, list(ctx.eups_path), options, callbacks)
    except SeedQueryError as e:
        Ensure.fail(str(e))

    _report_problems(report)
    Console(stderr=True).print(_render_summary(report, ctx.dry_run))

    if report.aborted:
        Ensure.fail(
            f"{len(report.query_failures)} dependency queries failed; "
            "nothing was undeclared or removed (--strict)"
        )
    if report.has_failures:
        user_output(
            click.style("Cleanup finished with problems. ", fg="yellow")
            + "Fix them and run again to prune what is left."
        )


def main() -> None:
    """Entry point for the standalone `eups-cleanup` console script."""
    configure_logging()
    cleanup_cmd()
