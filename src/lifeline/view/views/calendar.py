# SPDX-License-Identifier: MIT

import calendar
from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from lifeline.color import TODAY_COLOR
from lifeline.model.recurrence import WEEKDAY_NAMES
from lifeline.view.views.header import header


def calendar_month_view(
    year: int,
    month: int,
    counts: dict[int, int],
    today: Optional[pendulum.Date] = None,
) -> None:
    """
    Display a month grid (weeks start on Sunday) with the number of
    occurrences on each day.
    """
    header("calendar")

    console = Console()
    title = pendulum.date(year, month, 1).format("MMMM YYYY")

    month_table = Table(box=box.SIMPLE_HEAVY, title=title, show_lines=False)
    for weekday_name in WEEKDAY_NAMES:
        month_table.add_column(weekday_name, justify="center")

    weeks = calendar.Calendar(firstweekday=calendar.SUNDAY).monthdayscalendar(
        year, month
    )
    for week in weeks:
        row = []
        for day in week:
            if day == 0:
                row.append("")
                continue

            cell = f"{day:2d}"
            count = counts.get(day, 0)
            if count > 0:
                cell += f" [cyan]({count})[/cyan]"
            if (
                today is not None
                and today.year == year
                and today.month == month
                and today.day == day
            ):
                cell = f"[{TODAY_COLOR}]{cell}[/{TODAY_COLOR}]"
            row.append(cell)
        month_table.add_row(*row)

    console.print(month_table)
