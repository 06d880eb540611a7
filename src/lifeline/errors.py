# SPDX-License-Identifier: MIT


class LifelineError(Exception):
    """Base class for errors raised by lifeline."""

    pass


class InvalidRuleError(LifelineError, ValueError):
    """Raised when a recurrence payload cannot be turned into a rule."""

    pass


class InvalidEntryError(LifelineError, ValueError):
    """Raised when an entry carries a malformed date, time or field value."""

    pass


class InvalidOccurrenceError(LifelineError):
    """Raised when a status write targets a date that is not an occurrence."""

    def __init__(self, entry_id: object, occurrence_date: object) -> None:
        super().__init__(
            f"{occurrence_date} is not an occurrence of entry {entry_id}; "
            "status was not recorded"
        )
        self.entry_id = entry_id
        self.occurrence_date = occurrence_date


class StatusNotToggleableError(LifelineError):
    """Raised when toggling an entry type that has no day-by-day workflow."""

    pass


class EntryNotFoundError(LifelineError):
    pass
