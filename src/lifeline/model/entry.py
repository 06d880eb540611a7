# SPDX-License-Identifier: MIT

import uuid
from typing import Literal, Optional, TypeAlias, TypedDict, get_args

import pendulum

from lifeline.model.recurrence import RecurrenceRule

EntityId: TypeAlias = str

EntryType = Literal["medication", "appointment", "lab", "generic"]
EntryStatus = Literal["upcoming", "taken", "missed", "completed", "returned"]

ENTRY_TYPES: tuple[str, ...] = get_args(EntryType)
ENTRY_STATUSES: tuple[str, ...] = get_args(EntryStatus)

PENDING_STATUS: EntryStatus = "upcoming"

# Entry types that carry a day-by-day taken/completed workflow
DAILY_WORKFLOW_TYPES: frozenset[str] = frozenset({"medication", "appointment"})


class Entry(TypedDict):
    id: Optional[EntityId]
    entity_type: str  # "entry"
    type: EntryType
    title: str
    description: Optional[str]
    date: str  # Anchor date, "YYYY-MM-DD"
    time: Optional[str]  # Display format, e.g. "08:00 AM"
    status: EntryStatus  # Base status
    recurrence: Optional[RecurrenceRule]
    status_by_date: Optional[dict[str, EntryStatus]]  # Only used when recurring

    # Type specific payload, passed through untouched
    provider: Optional[str]
    location: Optional[str]
    lab_value: Optional[str]
    lab_unit: Optional[str]
    reference_range: Optional[str]
    follow_up_date: Optional[str]

    created: pendulum.DateTime
    updated: pendulum.DateTime


def generate_entity_id() -> EntityId:
    return str(uuid.uuid4())
