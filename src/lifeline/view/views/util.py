# SPDX-License-Identifier: MIT

from typing import Optional

SHORT_ID_LENGTH = 8


def short_id(entry_id: Optional[str]) -> str:
    if entry_id is None:
        return ""
    return entry_id[:SHORT_ID_LENGTH]


def format_optional(value: Optional[object]) -> str:
    if value is None:
        return ""
    return str(value)
