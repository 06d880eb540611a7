# SPDX-License-Identifier: MIT

import datetime
from typing import TypedDict

from lifeline.model.entry import ENTRY_TYPES, Entry
from lifeline.model.occurrence import Occurrence
from lifeline.service.timeline import project_range
from lifeline.time import date_to_iso_str

RECENT_ENTRY_COUNT = 5


class Summary(TypedDict):
    start: str
    end: str
    entries_by_type: dict[str, int]
    occurrences_by_type: dict[str, int]
    medications_taken: int
    medications_missed: int
    missed_medications: list[Occurrence]
    recent_entries: list[Entry]


def summarize(
    entries: list[Entry],
    start: datetime.date,
    end: datetime.date,
    recent_count: int = RECENT_ENTRY_COUNT,
) -> Summary:
    """
    Aggregate the timeline between start and end (inclusive).

    Base entries are counted once per type regardless of recurrence;
    occurrences are counted per projected row, so a twice-daily medication
    contributes two occurrences a day.
    """
    entries_by_type = {entry_type: 0 for entry_type in ENTRY_TYPES}
    for entry in entries:
        entries_by_type[entry["type"]] += 1

    occurrences_by_type = {entry_type: 0 for entry_type in ENTRY_TYPES}
    medications_taken = 0
    missed_medications: list[Occurrence] = []

    for occurrences in project_range(entries, start, end).values():
        for occurrence in occurrences:
            entry_type = occurrence["entry"]["type"]
            occurrences_by_type[entry_type] += 1
            if entry_type != "medication":
                continue
            if occurrence["resolved_status"] == "taken":
                medications_taken += 1
            elif occurrence["resolved_status"] == "missed":
                missed_medications.append(occurrence)

    recent_entries = sorted(entries, key=lambda entry: entry["created"], reverse=True)

    return {
        "start": date_to_iso_str(start),
        "end": date_to_iso_str(end),
        "entries_by_type": entries_by_type,
        "occurrences_by_type": occurrences_by_type,
        "medications_taken": medications_taken,
        "medications_missed": len(missed_medications),
        "missed_medications": missed_medications,
        "recent_entries": recent_entries[:recent_count],
    }
