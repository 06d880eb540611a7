# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

from lifeline.model.entry import EntityId, Entry, EntryStatus


class Occurrence(TypedDict):
    entry: Entry
    occurrence_date: str  # "YYYY-MM-DD"
    time: Optional[str]  # Display format; None for entries without a time
    minutes: Optional[int]  # Minutes since midnight, used for ordering
    resolved_status: EntryStatus


class ReminderEvent(TypedDict):
    entry_id: EntityId
    title: str
    minutes_until: int
    occurrence_date: str
    time: str
