# SPDX-License-Identifier: MIT

import datetime
import re
from typing import Optional, cast

import pendulum

from lifeline.errors import InvalidEntryError

_ISO_DATE_P = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_P = re.compile(r"^(\d{1,2}):(\d{2})(?:\s*([AaPp][Mm]))?$")

MINUTES_PER_DAY = 24 * 60


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def now_local() -> pendulum.DateTime:
    return pendulum.now("local")


def today_local() -> pendulum.Date:
    return pendulum.today("local").date()


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    return cast(pendulum.DateTime, pendulum.parse(datetime))


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM-DD ddd HH:mm")


def date_from_iso_str(date_str: str) -> pendulum.Date:
    """
    Parse a strict 'YYYY-MM-DD' string into a pendulum.Date.

    Raises InvalidEntryError for anything else, including impossible
    calendar dates such as 2024-02-30.
    """
    if not isinstance(date_str, str):
        raise InvalidEntryError(f"Date must be a 'YYYY-MM-DD' string, got {date_str!r}")
    date_match = _ISO_DATE_P.match(date_str)
    if not date_match:
        raise InvalidEntryError(f"Date must be in 'YYYY-MM-DD' format, got '{date_str}'")
    year, month, day = (int(part) for part in date_match.groups())
    try:
        return pendulum.date(year, month, day)
    except ValueError as e:
        raise InvalidEntryError(f"Invalid calendar date '{date_str}': {e}") from e


def date_to_iso_str(date: datetime.date) -> str:
    return date.strftime("%Y-%m-%d")


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("YYYY-MM-DD ddd")


def to_pendulum_date(date: datetime.date) -> pendulum.Date:
    if isinstance(date, pendulum.Date):
        return date
    return pendulum.date(date.year, date.month, date.day)


def weekday_index(date: datetime.date) -> int:
    """Weekday with Sunday as 0 through Saturday as 6."""
    return date.isoweekday() % 7


def time_to_minutes(time_str: str) -> int:
    """
    Canonicalize a wall-clock time to minutes since midnight.

    Accepts the display format ("08:00 AM", "6:30 pm") as well as 24-hour
    "HH:MM" ("18:30").
    """
    if not isinstance(time_str, str):
        raise InvalidEntryError(f"Time must be a string, got {time_str!r}")
    time_match = _TIME_P.match(time_str.strip())
    if not time_match:
        raise InvalidEntryError(
            f"Time must be in 'hh:mm AM/PM' or 'HH:MM' format, got '{time_str}'"
        )

    hour = int(time_match.group(1))
    minute = int(time_match.group(2))
    meridiem = time_match.group(3)

    if minute > 59:
        raise InvalidEntryError(f"Minute must be between 0 and 59, got {minute}")

    if meridiem is None:
        if hour > 23:
            raise InvalidEntryError(f"Hour must be between 0 and 23, got {hour}")
        return hour * 60 + minute

    if hour < 1 or hour > 12:
        raise InvalidEntryError(f"Hour must be between 1 and 12, got {hour}")
    hour = hour % 12
    if meridiem.upper() == "PM":
        hour += 12
    return hour * 60 + minute


def minutes_to_display_time(minutes: int) -> str:
    hour, minute = divmod(minutes, 60)
    meridiem = "PM" if hour >= 12 else "AM"
    return f"{(hour % 12) or 12:02d}:{minute:02d} {meridiem}"


def minutes_to_24h_time(minutes: int) -> str:
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


def format_display_time(time_str: str) -> str:
    return minutes_to_display_time(time_to_minutes(time_str))


def format_display_time_optional(time_str: Optional[str]) -> Optional[str]:
    if time_str is None:
        return None
    return format_display_time(time_str)
