# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from lifeline.errors import InvalidEntryError, InvalidRuleError
from lifeline.model.recurrence import (
    WEEKDAY_NAMES,
    Daily,
    IntervalDays,
    RecurrenceRule,
    SpecificWeekdays,
    TimesPerDay,
    Weekly,
)
from lifeline.service.recurrence import parse_rule
from lifeline.time import date_from_iso_str, format_display_time, today_local

_WEEKDAY_LOOKUP = {name.lower(): index for index, name in enumerate(WEEKDAY_NAMES)}


def parse_date(date_param: Optional[str | int]) -> Optional[pendulum.Date]:
    if date_param is None:
        return None

    date = str(date_param).strip()

    if re.match(r"^\d{4}-\d{2}-\d{2}$", date):
        try:
            return date_from_iso_str(date)
        except InvalidEntryError as e:
            raise typer.BadParameter(str(e))

    # Numeric input for relative days (e.g., "1", "-1", "365")
    if re.match(r"^-?\d+$", date):
        return today_local().add(days=int(date))

    if date == "today" or date == "t":
        return today_local()
    if date == "yesterday" or date == "y":
        return today_local().subtract(days=1)
    if date == "tomorrow" or date == "o":
        return today_local().add(days=1)
    raise typer.BadParameter("Incorrect date format")


def parse_month(month_param: Optional[str]) -> tuple[int, int]:
    """Parse 'YYYY-MM'; defaults to the current month."""
    if month_param is None:
        today = today_local()
        return today.year, today.month

    month_match = re.match(r"^(\d{4})-(\d{1,2})$", month_param.strip())
    if not month_match:
        raise typer.BadParameter(f"Month must be in YYYY-MM format, got '{month_param}'")
    year = int(month_match.group(1))
    month = int(month_match.group(2))
    if not (1 <= month <= 12):
        raise typer.BadParameter(f"Month must be between 1 and 12, got {month}")
    return year, month


def parse_time(time_param: Optional[str]) -> Optional[str]:
    """Validate a time and return it in the display format ("08:00 AM")."""
    if time_param is None:
        return None
    try:
        return format_display_time(time_param)
    except InvalidEntryError as e:
        raise typer.BadParameter(str(e))


def _parse_weekday(day: str) -> int:
    day = day.strip().lower()
    if day in _WEEKDAY_LOOKUP:
        return _WEEKDAY_LOOKUP[day]
    if re.match(r"^\d$", day):
        return int(day)
    raise InvalidRuleError(f"Unknown weekday '{day}'")


def parse_repeat(repeat_param: Optional[str]) -> Optional[RecurrenceRule]:
    """
    Parse the --repeat option.

    Accepted forms:
        daily, weekly
        every:3        every 3 days
        every:2w       every 2 weeks
        days:mon,wed   specific weekdays (names or 0-6, Sunday is 0)
        times:08:00,20:00
        a raw stored payload such as {"type": "interval", "value": 3}
    """
    if repeat_param is None:
        return None

    repeat = repeat_param.strip()
    try:
        if repeat == "daily":
            return Daily()
        if repeat == "weekly":
            return Weekly()
        if repeat.startswith("{"):
            return parse_rule(repeat)

        kind, _, value = repeat.partition(":")
        if kind == "every":
            every_match = re.match(r"^(\d+)([dw]?)$", value.strip())
            if not every_match:
                raise InvalidRuleError(f"Invalid interval '{value}'")
            days = int(every_match.group(1))
            if every_match.group(2) == "w":
                days *= 7
            return IntervalDays(days)
        if kind == "days":
            return SpecificWeekdays(
                frozenset(_parse_weekday(day) for day in value.split(",") if day.strip())
            )
        if kind == "times":
            return TimesPerDay(
                tuple(time.strip() for time in value.split(",") if time.strip())
            )
    except InvalidRuleError as e:
        raise typer.BadParameter(str(e))

    raise typer.BadParameter(
        f"Unknown repeat '{repeat_param}'. Use daily, weekly, every:N, days:..., or times:..."
    )
