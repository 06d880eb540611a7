# SPDX-License-Identifier: MIT

from lifeline.model.entry import PENDING_STATUS, Entry
from lifeline.time import date_to_iso_str, now_utc, today_local


def get_entry_template() -> Entry:
    now = now_utc()
    return {
        "id": None,
        "entity_type": "entry",
        "type": "generic",
        "title": "",
        "description": None,
        "date": date_to_iso_str(today_local()),
        "time": None,
        "status": PENDING_STATUS,
        "recurrence": None,
        "status_by_date": None,
        "provider": None,
        "location": None,
        "lab_value": None,
        "lab_unit": None,
        "reference_range": None,
        "follow_up_date": None,
        "created": now,
        "updated": now,
    }
