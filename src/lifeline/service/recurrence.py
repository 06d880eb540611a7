# SPDX-License-Identifier: MIT

"""
Parse and serialize recurrence rules.

Storage format:
    "daily"                                            -> Daily
    "weekly"                                           -> Weekly
    {"type": "interval", "value": 3, "unit": "days"}   -> IntervalDays(3)
    {"type": "specific_days", "days": [1, 3, 5]}       -> SpecificWeekdays
    {"type": "times_per_day", "times": ["08:00"]}      -> TimesPerDay

Structured rules are stored as a compact JSON string with sorted keys so
that equivalent rules always serialize to the same text.
"""

import json
from typing import Any, Optional

from lifeline.errors import InvalidRuleError
from lifeline.model.recurrence import (
    WEEKDAY_NAMES,
    Daily,
    IntervalDays,
    RecurrenceRule,
    SpecificWeekdays,
    TimesPerDay,
    Weekly,
)
from lifeline.time import format_display_time

INTERVAL_UNITS = {"days": 1, "weeks": 7}


def parse_rule(payload: Optional[str]) -> Optional[RecurrenceRule]:
    """
    Parse a stored recurrence payload.

    None or an empty string means the entry does not recur. Anything that is
    not one of the known shapes raises InvalidRuleError.
    """
    if payload is None:
        return None
    if not isinstance(payload, str):
        raise InvalidRuleError(f"Recurrence payload must be a string, got {payload!r}")

    stripped = payload.strip()
    if stripped == "":
        return None
    if stripped == "daily":
        return Daily()
    if stripped == "weekly":
        return Weekly()

    try:
        record = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise InvalidRuleError(f"Unrecognized recurrence '{payload}': {e.msg}") from e

    if not isinstance(record, dict):
        raise InvalidRuleError(f"Unrecognized recurrence '{payload}'")
    return parse_rule_record(record)


def parse_rule_record(record: dict[str, Any]) -> RecurrenceRule:
    rule_type = record.get("type")

    if rule_type == "daily":
        return Daily()
    elif rule_type == "weekly":
        return Weekly()
    elif rule_type == "interval":
        if "value" not in record:
            raise InvalidRuleError("Interval rule is missing 'value'")
        unit = record.get("unit", "days")
        if unit not in INTERVAL_UNITS:
            raise InvalidRuleError(
                f"Interval unit must be one of {', '.join(INTERVAL_UNITS)}, got {unit!r}"
            )
        value = record["value"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRuleError(f"Interval value must be an integer, got {value!r}")
        return IntervalDays(value * INTERVAL_UNITS[unit])
    elif rule_type == "specific_days":
        if "days" not in record:
            raise InvalidRuleError("Specific weekdays rule is missing 'days'")
        return SpecificWeekdays(record["days"])
    elif rule_type == "times_per_day":
        if "times" not in record:
            raise InvalidRuleError("Times per day rule is missing 'times'")
        return TimesPerDay(record["times"])

    raise InvalidRuleError(f"Unknown recurrence type: {rule_type!r}")


def rule_to_record(rule: RecurrenceRule) -> dict[str, Any]:
    if isinstance(rule, IntervalDays):
        return {"type": "interval", "value": rule.days, "unit": "days"}
    elif isinstance(rule, SpecificWeekdays):
        return {"type": "specific_days", "days": sorted(rule.days)}
    elif isinstance(rule, TimesPerDay):
        return {"type": "times_per_day", "times": list(rule.times)}
    return {"type": rule.kind}


def serialize_rule(rule: RecurrenceRule) -> str:
    if isinstance(rule, (Daily, Weekly)):
        return rule.kind
    return json.dumps(rule_to_record(rule), sort_keys=True, separators=(",", ":"))


def serialize_rule_optional(rule: Optional[RecurrenceRule]) -> Optional[str]:
    if rule is None:
        return None
    return serialize_rule(rule)


def describe_rule(rule: Optional[RecurrenceRule]) -> str:
    """Human readable label used by the views."""
    if rule is None:
        return "once"
    if isinstance(rule, Daily):
        return "daily"
    if isinstance(rule, Weekly):
        return "weekly"
    if isinstance(rule, IntervalDays):
        return "daily" if rule.days == 1 else f"every {rule.days} days"
    if isinstance(rule, SpecificWeekdays):
        return ", ".join(WEEKDAY_NAMES[day] for day in sorted(rule.days))
    return "daily at " + ", ".join(format_display_time(t) for t in rule.times)
