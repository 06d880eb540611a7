# SPDX-License-Identifier: MIT

import calendar
import datetime
import logging
from typing import Optional

import pendulum

from lifeline.errors import InvalidEntryError
from lifeline.model.entry import Entry
from lifeline.model.occurrence import Occurrence
from lifeline.model.recurrence import TimesPerDay
from lifeline.service.occurrence import matches
from lifeline.service.status import resolve_status
from lifeline.time import (
    date_to_iso_str,
    minutes_to_display_time,
    time_to_minutes,
    to_pendulum_date,
)

logger = logging.getLogger(__name__)


def _occurrence_times(entry: Entry) -> list[tuple[Optional[str], Optional[int]]]:
    rule = entry["recurrence"]
    if isinstance(rule, TimesPerDay):
        times = []
        for time_str in rule.times:
            minutes = time_to_minutes(time_str)
            times.append((minutes_to_display_time(minutes), minutes))
        return times

    if entry["time"] is None:
        return [(None, None)]
    return [(entry["time"], time_to_minutes(entry["time"]))]


def _sort_key(occurrence: Occurrence) -> int:
    # Entries without a time are all-day and lead the day
    minutes = occurrence["minutes"]
    return -1 if minutes is None else minutes


def project(entries: list[Entry], target_date: datetime.date) -> list[Occurrence]:
    """
    Build the ordered list of occurrences for target_date.

    Each matching entry contributes one occurrence (one per listed time for
    times-per-day rules) carrying its resolved status. Occurrences are sorted
    by time of day; equal times keep the input order. An entry with a
    malformed date or time is logged and skipped so that the rest of the day
    still shows.
    """
    occurrence_date = date_to_iso_str(target_date)

    occurrences: list[Occurrence] = []
    for entry in entries:
        try:
            if not matches(entry, target_date):
                continue
            times = _occurrence_times(entry)
        except InvalidEntryError as e:
            logger.warning("Skipping entry %s on %s: %s", entry["id"], occurrence_date, e)
            continue

        resolved_status = resolve_status(entry, target_date)
        for display_time, minutes in times:
            occurrences.append(
                {
                    "entry": entry,
                    "occurrence_date": occurrence_date,
                    "time": display_time,
                    "minutes": minutes,
                    "resolved_status": resolved_status,
                }
            )

    # list.sort is stable, so ties retain input order
    occurrences.sort(key=_sort_key)
    return occurrences


def project_range(
    entries: list[Entry],
    start: datetime.date,
    end: datetime.date,
) -> dict[str, list[Occurrence]]:
    """Project every day from start to end (inclusive), keyed by ISO date."""
    days: dict[str, list[Occurrence]] = {}
    current = to_pendulum_date(start)
    last = to_pendulum_date(end)
    while current <= last:
        days[date_to_iso_str(current)] = project(entries, current)
        current = current.add(days=1)
    return days


def occurrence_counts_for_month(
    entries: list[Entry], year: int, month: int
) -> dict[int, int]:
    """Map each day of the month to the number of occurrences on it."""
    _, days_in_month = calendar.monthrange(year, month)
    return {
        day: len(project(entries, pendulum.date(year, month, day)))
        for day in range(1, days_in_month + 1)
    }
