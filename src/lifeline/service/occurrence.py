# SPDX-License-Identifier: MIT

import datetime

import pendulum

from lifeline.model.entry import Entry
from lifeline.model.recurrence import (
    Daily,
    IntervalDays,
    SpecificWeekdays,
    TimesPerDay,
    Weekly,
)
from lifeline.time import date_from_iso_str, to_pendulum_date, weekday_index


def anchor_date(entry: Entry) -> pendulum.Date:
    return date_from_iso_str(entry["date"])


def matches(entry: Entry, candidate_date: datetime.date) -> bool:
    """
    Decide whether an occurrence of the entry falls on candidate_date.

    The rule is always evaluated relative to the entry's own anchor date:
    the anchor itself always matches, nothing before it ever does.

    Raises InvalidEntryError when the entry's anchor date is malformed.
    """
    if isinstance(candidate_date, datetime.datetime) or not isinstance(
        candidate_date, datetime.date
    ):
        raise TypeError(
            f"candidate_date must be a calendar date without a time, got {candidate_date!r}"
        )

    anchor = anchor_date(entry)
    day_offset = candidate_date.toordinal() - anchor.toordinal()

    if day_offset == 0:
        return True
    if day_offset < 0:
        return False

    rule = entry["recurrence"]
    if rule is None:
        return False

    if isinstance(rule, (Daily, TimesPerDay)):
        return True
    elif isinstance(rule, Weekly):
        return day_offset % 7 == 0
    elif isinstance(rule, IntervalDays):
        return day_offset % rule.days == 0
    elif isinstance(rule, SpecificWeekdays):
        return weekday_index(candidate_date) in rule.days

    raise TypeError(f"Unknown recurrence rule: {rule!r}")


def occurrence_dates(
    entry: Entry,
    start: datetime.date,
    end: datetime.date,
) -> list[pendulum.Date]:
    """List the entry's occurrence dates between start and end (inclusive)."""
    first = max(to_pendulum_date(start), anchor_date(entry))
    last = to_pendulum_date(end)

    if entry["recurrence"] is None:
        return [first] if first == anchor_date(entry) and first <= last else []

    dates = []
    current = first
    while current <= last:
        if matches(entry, current):
            dates.append(current)
        current = current.add(days=1)
    return dates
