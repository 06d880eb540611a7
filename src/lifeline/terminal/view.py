# SPDX-License-Identifier: MIT

from typing import Annotated, NoReturn, Optional

import pendulum
import typer
from rich.console import Console

from lifeline.errors import LifelineError
from lifeline.repository.entry import ENTRY_REPO
from lifeline.service.summary import summarize
from lifeline.service.timeline import occurrence_counts_for_month, project
from lifeline.terminal.custom_typer import AliasedTyperGroup
from lifeline.terminal.parse import parse_date, parse_month
from lifeline.time import today_local
from lifeline.view.views.calendar import calendar_month_view
from lifeline.view.views.summary import summary_view
from lifeline.view.views.timeline import DEFAULT_DAY_COLUMNS, day_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

DEFAULT_SUMMARY_DAYS = 30


def _fail(message: str) -> NoReturn:
    console = Console()
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.command("day, d")
def day(
    date: Annotated[
        Optional[pendulum.Date],
        typer.Argument(
            parser=parse_date,
            help="valid inputs: YYYY-MM-DD, today, yesterday, tomorrow, or day offset like 1, -1",
        ),
    ] = None,
    columns: Annotated[
        list[str],
        typer.Option(
            "--column",
            "-c",
            help="Columns to include (repeatable)",
        ),
    ] = DEFAULT_DAY_COLUMNS,
    no_wrap: Annotated[bool, typer.Option("--no-wrap")] = False,
) -> None:
    """Show the ordered timeline for one day (defaults to today)."""
    target_date = date or today_local()
    try:
        occurrences = project(ENTRY_REPO.get_all_entries(), target_date)
    except LifelineError as e:
        _fail(str(e))
    day_view(target_date, occurrences, columns, no_wrap)


@app.command("calendar, cal")
def calendar(
    month: Annotated[
        Optional[str],
        typer.Argument(help="YYYY-MM (defaults to the current month)"),
    ] = None,
) -> None:
    """Show a month grid with the number of occurrences per day."""
    year, month_number = parse_month(month)
    try:
        counts = occurrence_counts_for_month(
            ENTRY_REPO.get_all_entries(), year, month_number
        )
    except LifelineError as e:
        _fail(str(e))
    calendar_month_view(year, month_number, counts, today_local())


@app.command("summary, s")
def summary(
    start: Annotated[
        Optional[pendulum.Date],
        typer.Option(
            "--start",
            "-s",
            parser=parse_date,
            help=f"defaults to {DEFAULT_SUMMARY_DAYS} days before the end",
        ),
    ] = None,
    end: Annotated[
        Optional[pendulum.Date],
        typer.Option("--end", "-e", parser=parse_date, help="defaults to today"),
    ] = None,
) -> None:
    """Summarize entries and occurrences over a date range."""
    end_date = end or today_local()
    start_date = start or end_date.subtract(days=DEFAULT_SUMMARY_DAYS - 1)
    if start_date > end_date:
        _fail("start must not be after end")

    try:
        result = summarize(ENTRY_REPO.get_all_entries(), start_date, end_date)
    except LifelineError as e:
        _fail(str(e))

    summary_view(result)
