# SPDX-License-Identifier: MIT

from rich import box
from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lifeline.color import status_markup, type_markup
from lifeline.service.summary import Summary
from lifeline.view.views.header import header
from lifeline.view.views.util import short_id


def summary_view(summary: Summary) -> None:
    header("summary")

    console = Console()
    console.print(f"\n[bold]{summary['start']} to {summary['end']}[/bold]\n")

    panels = []
    for entry_type, entry_count in summary["entries_by_type"].items():
        lines = [
            f"[bold]{entry_count}[/bold] entries",
            f"{summary['occurrences_by_type'][entry_type]} occurrences",
        ]
        if entry_type == "medication":
            if summary["medications_taken"] > 0:
                lines.append(f"[green]{summary['medications_taken']} taken[/green]")
            if summary["medications_missed"] > 0:
                lines.append(f"[red]{summary['medications_missed']} missed[/red]")
        panels.append(Panel("\n".join(lines), title=type_markup(entry_type)))
    console.print(Columns(panels))

    missed = summary["missed_medications"]
    if len(missed) > 0:
        plural = "s" if len(missed) > 1 else ""
        console.print(
            f"\n[bold red]You have {len(missed)} missed medication{plural}[/bold red]"
        )
        for occurrence in missed:
            console.print(
                f"  [red]- {occurrence['entry']['title']}[/red] "
                f"[dim]({occurrence['occurrence_date']} at {occurrence['time'] or 'all day'})[/dim]"
            )

    recent_table = Table(box=box.SIMPLE, title="Recent activity")
    recent_table.add_column("id")
    recent_table.add_column("title")
    recent_table.add_column("date")
    recent_table.add_column("time")
    recent_table.add_column("status")
    for entry in summary["recent_entries"]:
        recent_table.add_row(
            short_id(entry["id"]),
            entry["title"],
            entry["date"],
            entry["time"] or "",
            # Labs report results, not a taken/missed state
            "" if entry["type"] == "lab" else status_markup(entry["status"]),
        )
    console.print(recent_table)
