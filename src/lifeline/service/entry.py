# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Any, Optional

from lifeline.errors import InvalidEntryError, InvalidOccurrenceError
from lifeline.model.entry import (
    ENTRY_TYPES,
    PENDING_STATUS,
    Entry,
    EntryStatus,
    EntryType,
)
from lifeline.model.recurrence import RecurrenceRule
from lifeline.service.occurrence import matches
from lifeline.service.recurrence import parse_rule, parse_rule_record
from lifeline.service.status import parse_status
from lifeline.template.entry import get_entry_template
from lifeline.time import (
    MINUTES_PER_DAY,
    date_from_iso_str,
    date_to_iso_str,
    format_display_time_optional,
    minutes_to_display_time,
    now_utc,
)

PAYLOAD_FIELDS = (
    "provider",
    "location",
    "lab_value",
    "lab_unit",
    "reference_range",
    "follow_up_date",
)


def parse_entry_type(value: str) -> EntryType:
    if value not in ENTRY_TYPES:
        raise InvalidEntryError(
            f"Invalid entry type: {value}. Valid options: {', '.join(ENTRY_TYPES)}"
        )
    return value  # type: ignore[return-value]


def normalize_date(value: str) -> str:
    return date_to_iso_str(date_from_iso_str(value))


def create_entry(
    entry_type: str,
    title: str,
    date: str,
    time: Optional[str] = None,
    description: Optional[str] = None,
    status: EntryStatus = PENDING_STATUS,
    recurrence: Optional[RecurrenceRule] = None,
    **payload: Optional[str],
) -> Entry:
    """
    Build a new, unsaved entry.

    The date must be 'YYYY-MM-DD'; the time is normalized to the display
    format ("08:00 AM"). Extra keyword arguments fill the type specific
    payload fields (provider, location, lab_value, ...).
    """
    if not title or not title.strip():
        raise InvalidEntryError("Entry title must not be empty")

    entry = get_entry_template()
    entry["type"] = parse_entry_type(entry_type)
    entry["title"] = title
    entry["description"] = description
    entry["date"] = normalize_date(date)
    entry["time"] = format_display_time_optional(time)
    entry["status"] = parse_status(status)
    entry["recurrence"] = recurrence

    for key, value in payload.items():
        if key not in PAYLOAD_FIELDS:
            raise InvalidEntryError(f"Unknown entry field: {key}")
        entry[key] = value  # type: ignore[literal-required]
    if entry["follow_up_date"] is not None:
        entry["follow_up_date"] = normalize_date(entry["follow_up_date"])

    return entry


def modify_entry(
    entry: Entry,
    entry_type: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    date: Optional[str] = None,
    time: Optional[str] = None,
    recurrence: Optional[RecurrenceRule] = None,
    remove_description: bool = False,
    remove_time: bool = False,
    remove_recurrence: bool = False,
    **payload: Optional[str],
) -> Entry:
    """
    Return a modified copy of an entry.

    A new recurrence replaces the old one entirely. Recorded per-date statuses
    are kept as they are.
    """
    modified = deepcopy(entry)
    modified["updated"] = now_utc()

    if entry_type is not None:
        modified["type"] = parse_entry_type(entry_type)
    if title is not None:
        if not title.strip():
            raise InvalidEntryError("Entry title must not be empty")
        modified["title"] = title
    if description is not None:
        modified["description"] = description
    if date is not None:
        modified["date"] = normalize_date(date)
    if time is not None:
        modified["time"] = format_display_time_optional(time)
    if recurrence is not None:
        modified["recurrence"] = recurrence

    for key, value in payload.items():
        if key not in PAYLOAD_FIELDS:
            raise InvalidEntryError(f"Unknown entry field: {key}")
        if value is not None:
            modified[key] = value  # type: ignore[literal-required]
    if payload.get("follow_up_date") is not None:
        modified["follow_up_date"] = normalize_date(modified["follow_up_date"] or "")

    if remove_description:
        modified["description"] = None
    if remove_time:
        modified["time"] = None
    if remove_recurrence:
        modified["recurrence"] = None

    return modified


def _parse_raw_recurrence(value: Any) -> Optional[RecurrenceRule]:
    if value is None or value is False:
        return None
    if isinstance(value, dict):
        return parse_rule_record(value)
    return parse_rule(value)


def entry_from_raw(raw: Any) -> Entry:
    """
    Build an entry from an imported mapping.

    Raises InvalidEntryError (or InvalidRuleError for a bad recurrence) on
    the first problem found.
    """
    if not isinstance(raw, dict):
        raise InvalidEntryError(f"Entry must be a mapping, got {type(raw).__name__}")

    for required in ("type", "title", "date"):
        if raw.get(required) is None:
            raise InvalidEntryError(f"Entry is missing '{required}'")

    time = raw.get("time")
    # YAML reads an unquoted 18:30 as the base 60 integer 1110
    if isinstance(time, int) and not isinstance(time, bool):
        if not (0 <= time < MINUTES_PER_DAY):
            raise InvalidEntryError(f"Invalid time: {time}")
        time = minutes_to_display_time(time)

    payload = {
        key: str(raw[key]) for key in PAYLOAD_FIELDS if raw.get(key) is not None
    }
    entry = create_entry(
        entry_type=raw["type"],
        title=str(raw["title"]),
        date=str(raw["date"]),
        time=time,
        description=raw.get("description"),
        status=raw.get("status", PENDING_STATUS),
        recurrence=_parse_raw_recurrence(raw.get("recurrence")),
        **payload,
    )

    raw_status_by_date = raw.get("status_by_date")
    if raw_status_by_date:
        if not isinstance(raw_status_by_date, dict):
            raise InvalidEntryError("status_by_date must map dates to statuses")
        if entry["recurrence"] is None:
            raise InvalidEntryError("status_by_date is only allowed on recurring entries")
        status_by_date: dict[str, EntryStatus] = {}
        for key, value in raw_status_by_date.items():
            occurrence_date = date_from_iso_str(str(key))
            if not matches(entry, occurrence_date):
                raise InvalidOccurrenceError(entry["title"], str(key))
            status_by_date[date_to_iso_str(occurrence_date)] = parse_status(value)
        entry["status_by_date"] = status_by_date

    return entry
