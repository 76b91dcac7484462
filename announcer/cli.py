"""Command line interface."""

import asyncio

import typer

from announcer.config import Config, config
from announcer.container import build_reconciler
from announcer.exceptions import ConfigurationError
from announcer.models.summary import RunStatus, RunSummary
from announcer.services.reconcile_service import run_reconciliation

app = typer.Typer(
    name="announcer",
    help="Keep a Slack channel in sync with an announcement feed",
)

EXIT_CODES = {
    RunStatus.SUCCESS: 0,
    RunStatus.FAILED: 1,
    RunStatus.PARTIAL: 2,
}


async def _reconcile_once(cfg: Config) -> RunSummary:
    reconciler = build_reconciler(cfg)
    try:
        return await run_reconciliation(reconciler, trigger="cli")
    finally:
        await reconciler.store.close()


@app.command("reconcile")
def reconcile_command(
    dry_run: bool = typer.Option(False, "--dry-run", help="Log actions instead of performing them"),
) -> None:
    """Run a single reconciliation and print the summary."""
    from announcer.main import setup_logging

    cfg = config.model_copy(update={"dry_run": True}) if dry_run else config
    setup_logging(cfg)

    try:
        summary = asyncio.run(_reconcile_once(cfg))
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)  # noqa: B904

    typer.echo(str(summary))
    for outcome in summary.outcomes:
        if outcome.error:
            typer.echo(f"  {outcome.identity}: {outcome.stage}: {outcome.error}")
    if summary.error:
        typer.echo(f"  {summary.error}")

    raise typer.Exit(code=EXIT_CODES[summary.status])


@app.command("serve")
def serve_command() -> None:
    """Serve the HTTP API."""
    from announcer.main import run

    run()


if __name__ == "__main__":
    app()
