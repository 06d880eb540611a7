# SPDX-License-Identifier: MIT

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from lifeline.color import status_markup, type_markup
from lifeline.model.occurrence import Occurrence
from lifeline.service.recurrence import describe_rule
from lifeline.time import date_to_display_str
from lifeline.view.views.header import header
from lifeline.view.views.util import short_id

DEFAULT_DAY_COLUMNS = ["id", "time", "type", "title", "status", "repeat"]


def day_view(
    date: pendulum.Date,
    occurrences: list[Occurrence],
    columns: list[str] = DEFAULT_DAY_COLUMNS,
    no_wrap: bool = False,
) -> None:
    """Display the ordered occurrences for one day."""
    header("day")

    console = Console()
    console.print(f"\n[bold]{date_to_display_str(date)}[/bold]")

    if len(occurrences) == 0:
        console.print("[dim]No entries for this day[/dim]\n")
        return

    day_table = Table(box=box.SIMPLE)
    for column in columns:
        if no_wrap and column != "id":
            day_table.add_column(column, no_wrap=True, overflow="ellipsis")
        else:
            day_table.add_column(column)

    for occurrence in occurrences:
        entry = occurrence["entry"]
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = short_id(entry["id"])
            elif column == "time":
                column_value = occurrence["time"] or "all day"
            elif column == "type":
                column_value = type_markup(entry["type"])
            elif column == "status":
                column_value = status_markup(occurrence["resolved_status"])
            elif column == "repeat":
                column_value = describe_rule(entry["recurrence"])
            elif entry.get(column) is not None:
                column_value = str(entry[column])  # type: ignore[literal-required]
            row.append(column_value)
        day_table.add_row(*row)

    console.print(day_table)
