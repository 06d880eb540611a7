import pendulum
import pytest

from lifeline.errors import InvalidEntryError, InvalidOccurrenceError, StatusNotToggleableError
from lifeline.model.recurrence import Daily, Weekly
from lifeline.service.status import record_status, resolve_status, toggle_status


@pytest.mark.unit
def test_non_recurring_status_is_written_to_the_base_status(make_entry):
    entry = make_entry(date="2024-01-01")
    anchor = pendulum.date(2024, 1, 1)
    assert resolve_status(entry, anchor) == "upcoming"

    updated = record_status(entry, anchor, "taken")

    assert updated["status"] == "taken"
    assert updated["status_by_date"] is None
    assert resolve_status(updated, anchor) == "taken"


@pytest.mark.unit
def test_recurring_status_is_recorded_per_date(make_entry):
    entry = make_entry(date="2024-02-01", recurrence=Daily())

    updated = record_status(entry, pendulum.date(2024, 2, 2), "taken")

    assert updated["status_by_date"] == {"2024-02-02": "taken"}
    assert updated["status"] == "upcoming"
    assert resolve_status(updated, pendulum.date(2024, 2, 2)) == "taken"
    assert resolve_status(updated, pendulum.date(2024, 2, 3)) == "upcoming"


@pytest.mark.unit
def test_recording_one_date_leaves_other_dates_alone(make_entry):
    entry = make_entry(date="2024-02-01", recurrence=Daily())
    entry = record_status(entry, pendulum.date(2024, 2, 2), "taken")
    entry = record_status(entry, pendulum.date(2024, 2, 3), "missed")

    assert entry["status_by_date"] == {"2024-02-02": "taken", "2024-02-03": "missed"}


@pytest.mark.unit
def test_record_status_returns_a_new_entry(make_entry):
    entry = make_entry(date="2024-02-01", recurrence=Daily())
    entry = record_status(entry, pendulum.date(2024, 2, 2), "taken")
    before = entry["status_by_date"]

    updated = record_status(entry, pendulum.date(2024, 2, 3), "missed")

    assert entry["status_by_date"] == {"2024-02-02": "taken"}
    assert entry["status_by_date"] is before
    assert updated["status_by_date"] is not before


@pytest.mark.unit
def test_recording_a_non_occurrence_raises_and_changes_nothing(make_entry):
    entry = make_entry(date="2024-01-01", recurrence=Weekly())

    with pytest.raises(InvalidOccurrenceError) as error:
        record_status(entry, pendulum.date(2024, 1, 3), "taken")

    assert error.value.occurrence_date == "2024-01-03"
    assert entry["status_by_date"] is None


@pytest.mark.unit
def test_recording_before_the_anchor_raises(make_entry):
    entry = make_entry(date="2024-01-10", recurrence=Daily())
    with pytest.raises(InvalidOccurrenceError):
        record_status(entry, pendulum.date(2024, 1, 9), "taken")


@pytest.mark.unit
def test_one_off_entry_rejects_other_dates(make_entry):
    entry = make_entry(date="2024-01-01")
    with pytest.raises(InvalidOccurrenceError):
        record_status(entry, pendulum.date(2024, 1, 2), "taken")


@pytest.mark.unit
def test_unknown_status_raises(make_entry):
    entry = make_entry(date="2024-01-01")
    with pytest.raises(InvalidEntryError):
        record_status(entry, pendulum.date(2024, 1, 1), "done")


@pytest.mark.unit
def test_lab_occurrences_default_to_the_base_status(make_entry):
    entry = make_entry(
        entry_type="lab", date="2024-01-01", recurrence=Weekly(), status="returned"
    )
    assert resolve_status(entry, pendulum.date(2024, 1, 8)) == "returned"


@pytest.mark.unit
def test_toggle_medication(make_entry):
    entry = make_entry(date="2024-01-01", recurrence=Daily())
    day = pendulum.date(2024, 1, 5)

    taken = toggle_status(entry, day)
    assert resolve_status(taken, day) == "taken"

    untaken = toggle_status(taken, day)
    assert resolve_status(untaken, day) == "upcoming"


@pytest.mark.unit
def test_toggle_appointment(make_entry):
    entry = make_entry(entry_type="appointment", title="Dentist", date="2024-01-01")
    toggled = toggle_status(entry, pendulum.date(2024, 1, 1))
    assert toggled["status"] == "completed"


@pytest.mark.unit
@pytest.mark.parametrize("entry_type", ["lab", "generic"])
def test_toggle_is_rejected_without_a_daily_workflow(make_entry, entry_type):
    entry = make_entry(entry_type=entry_type, date="2024-01-01")
    with pytest.raises(StatusNotToggleableError):
        toggle_status(entry, pendulum.date(2024, 1, 1))
