# SPDX-License-Identifier: MIT

import datetime
from copy import deepcopy

from lifeline.errors import (
    InvalidEntryError,
    InvalidOccurrenceError,
    StatusNotToggleableError,
)
from lifeline.model.entry import (
    DAILY_WORKFLOW_TYPES,
    ENTRY_STATUSES,
    PENDING_STATUS,
    Entry,
    EntryStatus,
)
from lifeline.service.occurrence import matches
from lifeline.time import date_to_iso_str, now_utc

# Status an entry moves to when it is checked off, per entry type
DONE_STATUS: dict[str, EntryStatus] = {
    "medication": "taken",
    "appointment": "completed",
}


def parse_status(value: str) -> EntryStatus:
    if value not in ENTRY_STATUSES:
        raise InvalidEntryError(
            f"Invalid status: {value}. Valid options: {', '.join(ENTRY_STATUSES)}"
        )
    return value  # type: ignore[return-value]


def default_occurrence_status(entry: Entry) -> EntryStatus:
    """
    Status of a recurring occurrence nobody has acted on yet.

    Medications and appointments start every day as pending; labs and
    generic entries have no day-by-day workflow and keep their base status.
    """
    if entry["type"] in DAILY_WORKFLOW_TYPES:
        return PENDING_STATUS
    return entry["status"]


def resolve_status(entry: Entry, occurrence_date: datetime.date) -> EntryStatus:
    """
    Resolve the status of one occurrence.

    For a non-recurring entry occurrence_date is the anchor date (callers
    check with matches() first) and the base status applies.
    """
    if entry["recurrence"] is None:
        return entry["status"]

    status_by_date = entry["status_by_date"] or {}
    override = status_by_date.get(date_to_iso_str(occurrence_date))
    if override is not None:
        return override
    return default_occurrence_status(entry)


def record_status(
    entry: Entry,
    occurrence_date: datetime.date,
    new_status: EntryStatus,
) -> Entry:
    """
    Return a copy of the entry with the status of one occurrence replaced.

    Raises InvalidOccurrenceError, leaving the entry untouched, when
    occurrence_date is not an occurrence of the entry.
    """
    parse_status(new_status)
    if not matches(entry, occurrence_date):
        raise InvalidOccurrenceError(entry["id"], date_to_iso_str(occurrence_date))

    updated_entry = deepcopy(entry)
    updated_entry["updated"] = now_utc()

    if entry["recurrence"] is None:
        updated_entry["status"] = new_status
        return updated_entry

    status_by_date = dict(entry["status_by_date"] or {})
    status_by_date[date_to_iso_str(occurrence_date)] = new_status
    updated_entry["status_by_date"] = status_by_date
    return updated_entry


def toggle_status(entry: Entry, occurrence_date: datetime.date) -> Entry:
    """
    Check an occurrence off, or uncheck it back to pending.

    Only medications and appointments can be toggled.
    """
    done_status = DONE_STATUS.get(entry["type"])
    if done_status is None:
        raise StatusNotToggleableError(
            f"Entries of type '{entry['type']}' have no taken/completed state"
        )

    current = resolve_status(entry, occurrence_date)
    new_status = PENDING_STATUS if current == done_status else done_status
    return record_status(entry, occurrence_date, new_status)
