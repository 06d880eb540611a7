# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from lifeline.color import status_markup, type_markup
from lifeline.model.entry import Entry
from lifeline.model.occurrence import ReminderEvent
from lifeline.service.entry import PAYLOAD_FIELDS
from lifeline.service.recurrence import describe_rule
from lifeline.time import datetime_to_display_local_datetime_str
from lifeline.view.views.header import header
from lifeline.view.views.util import format_optional


def single_entry_view(entry: Entry) -> None:
    """Display detailed view of a single entry."""
    header("entry")

    entry_table = Table(box=box.SIMPLE)
    entry_table.add_column("property")
    entry_table.add_column("value")

    entry_table.add_row("id", format_optional(entry["id"]))
    entry_table.add_row("type", type_markup(entry["type"]))
    entry_table.add_row("title", entry["title"])
    entry_table.add_row("description", format_optional(entry["description"]))
    entry_table.add_row("date", entry["date"])
    entry_table.add_row("time", format_optional(entry["time"]))
    entry_table.add_row("status", status_markup(entry["status"]))
    entry_table.add_row("repeat", describe_rule(entry["recurrence"]))

    if entry["status_by_date"]:
        statuses = ", ".join(
            f"{date}: {status_markup(status)}"
            for date, status in sorted(entry["status_by_date"].items())
        )
        entry_table.add_row("status by date", statuses)

    for field in PAYLOAD_FIELDS:
        if entry[field] is not None:  # type: ignore[literal-required]
            entry_table.add_row(field, str(entry[field]))  # type: ignore[literal-required]

    entry_table.add_row("created", datetime_to_display_local_datetime_str(entry["created"]))
    entry_table.add_row("updated", datetime_to_display_local_datetime_str(entry["updated"]))

    console = Console()
    console.print(entry_table)


def reminder_line(event: ReminderEvent) -> None:
    console = Console()
    console.print(
        f"[bold yellow]Reminder:[/bold yellow] time for [bold]{event['title']}[/bold] "
        f"in {event['minutes_until']} minutes ({event['time']})"
    )
