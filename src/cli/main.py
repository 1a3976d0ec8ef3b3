"""bgcheck command line.

The CLI is a thin front end: it parses names, delegates every check to
`core.services.background_check` and renders the outcome with Rich.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from adapters.json_exporter import export_outcomes_json
from cli import doctor
from cli.ui_components import build_error_panel, build_verdict_table, print_banner
from core.config import AppSettings
from core.logging_setup import setup_logging
from core.services.background_check import run_background_checks

app = typer.Typer(no_args_is_help=True, help="Background checks for Roblox accounts.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.command()
def check(
    usernames: List[str] = typer.Argument(..., help="One or more usernames to check."),
    json_output: Optional[Path] = typer.Option(
        None,
        "--json-output",
        help="Also write the outcomes to this JSON file.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING...).",
    ),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the welcome banner."),
) -> None:
    """Run a background check on each username (concurrently)."""

    settings = AppSettings()
    try:
        setup_logging(log_level or settings.log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    if not no_banner:
        print_banner(_console)

    outcomes = asyncio.run(run_background_checks(usernames, settings=settings))

    for outcome in outcomes:
        if outcome.result is not None:
            _console.print(build_verdict_table(outcome.result))
        elif outcome.error is not None:
            _console.print(build_error_panel(outcome.name, outcome.error))

    if json_output is not None:
        path = export_outcomes_json(outcomes=outcomes, output_path=json_output)
        _console.print(f"[green]Saved JSON to:[/green] {path}")

    if not all(o.ok for o in outcomes):
        raise typer.Exit(code=1)


def run() -> None:
    app()
