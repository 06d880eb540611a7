# SPDX-License-Identifier: MIT

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console

from lifeline.errors import LifelineError
from lifeline.model.entry import Entry
from lifeline.repository.configuration import CONFIGURATION_REPO
from lifeline.repository.entry import ENTRY_REPO
from lifeline.service.reminder import ReminderScanner
from lifeline.terminal.custom_typer import AliasedTyperGroup
from lifeline.view.views.entry import reminder_line

logger = logging.getLogger(__name__)

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def current_entries() -> list[Entry]:
    """Entries as currently stored, including writes made by other processes."""
    ENTRY_REPO.reload()
    return ENTRY_REPO.get_all_entries()


def _build_scanner(
    threshold: Optional[int], interval: Optional[int]
) -> ReminderScanner:
    config = CONFIGURATION_REPO.get_config()
    return ReminderScanner(
        entries_source=current_entries,
        sink=reminder_line,
        threshold_minutes=threshold or config["reminder_threshold_minutes"],
        interval_seconds=interval or config["reminder_interval_seconds"],
    )


@app.command("check, c")
def check(
    threshold: Annotated[
        Optional[int],
        typer.Option("--threshold", "-t", min=1, help="minutes ahead to remind"),
    ] = None,
) -> None:
    """Run a single reminder scan against the current time."""
    scanner = _build_scanner(threshold, None)
    try:
        events = scanner.tick() or []
    except LifelineError as e:
        console = Console()
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    if len(events) == 0:
        console = Console()
        console.print("[dim]Nothing due soon[/dim]")


@app.command("watch, w")
def watch(
    threshold: Annotated[
        Optional[int],
        typer.Option("--threshold", "-t", min=1, help="minutes ahead to remind"),
    ] = None,
    interval: Annotated[
        Optional[int],
        typer.Option("--interval", "-i", min=1, help="seconds between scans"),
    ] = None,
) -> None:
    """Keep scanning for upcoming reminders until interrupted."""
    scanner = _build_scanner(threshold, interval)

    console = Console()
    console.print(
        f"Watching for reminders every {scanner.interval_seconds}s "
        f"({scanner.threshold_minutes} minutes ahead). Press Ctrl+C to stop."
    )
    try:
        scanner.start(blocking=True)
    except (KeyboardInterrupt, SystemExit):
        logger.debug("Reminder watch interrupted")
    finally:
        scanner.stop()
