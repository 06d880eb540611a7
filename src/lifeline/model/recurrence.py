# SPDX-License-Identifier: MIT

from dataclasses import dataclass
from typing import Iterable, Literal, TypeAlias, Union

from lifeline.errors import InvalidEntryError, InvalidRuleError
from lifeline.time import minutes_to_24h_time, time_to_minutes

RuleKind = Literal["daily", "weekly", "interval", "specific_days", "times_per_day"]

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class Daily:
    kind: Literal["daily"] = "daily"


@dataclass(frozen=True)
class Weekly:
    kind: Literal["weekly"] = "weekly"


@dataclass(frozen=True)
class IntervalDays:
    days: int
    kind: Literal["interval"] = "interval"

    def __post_init__(self) -> None:
        if isinstance(self.days, bool) or not isinstance(self.days, int):
            raise InvalidRuleError(
                f"Interval must be an integer number of days, got {self.days!r}"
            )
        if self.days < 1:
            raise InvalidRuleError(f"Interval must be at least 1 day, got {self.days}")


@dataclass(frozen=True)
class SpecificWeekdays:
    # 0 = Sunday ... 6 = Saturday
    days: frozenset[int]
    kind: Literal["specific_days"] = "specific_days"

    def __post_init__(self) -> None:
        days = _as_iterable(self.days, "Weekdays")
        normalized: set[int] = set()
        for day in days:
            if isinstance(day, bool) or not isinstance(day, int):
                raise InvalidRuleError(f"Weekday must be an integer 0-6, got {day!r}")
            if not (0 <= day <= 6):
                raise InvalidRuleError(f"Weekday must be between 0 and 6, got {day}")
            normalized.add(day)
        if len(normalized) == 0:
            raise InvalidRuleError("Specific weekdays rule needs at least one day")
        object.__setattr__(self, "days", frozenset(normalized))


@dataclass(frozen=True)
class TimesPerDay:
    # Canonical "HH:MM" 24-hour strings, sorted and unique
    times: tuple[str, ...]
    kind: Literal["times_per_day"] = "times_per_day"

    def __post_init__(self) -> None:
        times = _as_iterable(self.times, "Times")
        minutes: set[int] = set()
        for time_str in times:
            try:
                minutes.add(time_to_minutes(time_str))
            except InvalidEntryError as e:
                raise InvalidRuleError(str(e)) from e
        if len(minutes) == 0:
            raise InvalidRuleError("Times per day rule needs at least one time")
        object.__setattr__(
            self, "times", tuple(minutes_to_24h_time(m) for m in sorted(minutes))
        )


RecurrenceRule: TypeAlias = Union[Daily, Weekly, IntervalDays, SpecificWeekdays, TimesPerDay]


def _as_iterable(value: object, label: str) -> Iterable[object]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidRuleError(f"{label} must be a list, got {value!r}")
    return value
