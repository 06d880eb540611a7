import pytest

from lifeline import configuration
from lifeline.errors import EntryNotFoundError
from lifeline.model.recurrence import Daily, IntervalDays, SpecificWeekdays
from lifeline.repository import entry as entry_repository
from lifeline.repository.configuration import CONFIGURATION_REPO, ConfigurationRepository
from lifeline.repository.entry import ENTRY_REPO, EntryRepository
from lifeline.service.status import record_status
from lifeline.time import date_from_iso_str


def test_saved_entries_survive_a_reload(data_dir, make_entry):
    entry = make_entry(
        time="18:30",
        recurrence=SpecificWeekdays(frozenset({1, 3})),
        provider="Dr. Shah",
    )
    entry = record_status(entry, date_from_iso_str("2024-01-03"), "taken")

    id = ENTRY_REPO.save_new_entry(entry)
    assert ENTRY_REPO.flush()

    reloaded = EntryRepository().get_entry(id)
    assert reloaded["recurrence"] == SpecificWeekdays(frozenset({1, 3}))
    assert reloaded["status_by_date"] == {"2024-01-03": "taken"}
    assert reloaded["time"] == "06:30 PM"
    assert reloaded["provider"] == "Dr. Shah"
    assert reloaded["created"] == entry["created"]


def test_recurrence_is_stored_in_canonical_form(data_dir, make_entry):
    id = ENTRY_REPO.save_new_entry(make_entry(recurrence=IntervalDays(3)))
    ENTRY_REPO.flush()

    text = (configuration.DATA_ENTRIES_DIR / f"{id}.yaml").read_text()
    assert '{"type":"interval","unit":"days","value":3}' in text


def test_save_new_entry_assigns_a_fresh_id(data_dir, make_entry):
    entry = make_entry(entry_id="draft")

    id = ENTRY_REPO.save_new_entry(entry)

    assert id != "draft"
    assert entry["id"] == "draft"
    assert ENTRY_REPO.get_entry(id)["title"] == "Metformin"


def test_flush_without_changes_writes_nothing(data_dir):
    assert not ENTRY_REPO.flush()
    assert not configuration.DATA_ENTRIES_DIR.exists()


def test_replace_entry_is_last_write_wins(data_dir, make_entry):
    id = ENTRY_REPO.save_new_entry(make_entry())
    first = ENTRY_REPO.get_entry(id)
    second = ENTRY_REPO.get_entry(id)

    first["title"] = "First"
    second["title"] = "Second"
    ENTRY_REPO.replace_entry(first)
    ENTRY_REPO.replace_entry(second)

    assert ENTRY_REPO.get_entry(id)["title"] == "Second"


def test_replace_unknown_entry_raises(data_dir, make_entry):
    with pytest.raises(EntryNotFoundError):
        ENTRY_REPO.replace_entry(make_entry(entry_id="missing"))


def test_delete_removes_the_file(data_dir, make_entry):
    id = ENTRY_REPO.save_new_entry(make_entry())
    ENTRY_REPO.flush()
    entry_file = configuration.DATA_ENTRIES_DIR / f"{id}.yaml"
    assert entry_file.is_file()

    ENTRY_REPO.delete_entry(id)
    ENTRY_REPO.flush()

    assert not entry_file.exists()
    with pytest.raises(EntryNotFoundError):
        ENTRY_REPO.get_entry(id)


def test_get_all_entries_returns_copies(data_dir, make_entry):
    ENTRY_REPO.save_new_entry(make_entry())
    entries = ENTRY_REPO.get_all_entries()
    entries[0]["title"] = "Changed"

    assert ENTRY_REPO.get_all_entries()[0]["title"] == "Metformin"


def test_find_entry_id_by_prefix(data_dir, make_entry, monkeypatch):
    ids = iter(["abc-111", "abc-222", "xyz-333"])
    monkeypatch.setattr(entry_repository, "generate_entity_id", lambda: next(ids))
    for _ in range(3):
        ENTRY_REPO.save_new_entry(make_entry())

    assert ENTRY_REPO.find_entry_id("xyz") == "xyz-333"
    assert ENTRY_REPO.find_entry_id("abc-2") == "abc-222"
    assert ENTRY_REPO.find_entry_id("abc-111") == "abc-111"
    with pytest.raises(EntryNotFoundError):
        ENTRY_REPO.find_entry_id("abc")
    with pytest.raises(EntryNotFoundError):
        ENTRY_REPO.find_entry_id("nope")


def test_unreadable_entry_file_is_skipped(data_dir, make_entry, caplog):
    good_id = ENTRY_REPO.save_new_entry(make_entry(title="Good"))
    bad_id = ENTRY_REPO.save_new_entry(make_entry(title="Bad"))
    ENTRY_REPO.flush()
    bad_file = configuration.DATA_ENTRIES_DIR / f"{bad_id}.yaml"
    bad_text = bad_file.read_text().replace(
        "recurrence: null", "recurrence: fortnightly"
    )
    bad_file.write_text(bad_text)

    repository = EntryRepository()
    with caplog.at_level("WARNING", logger="lifeline.repository.entry"):
        entries = repository.get_all_entries()

    assert [entry["id"] for entry in entries] == [good_id]
    assert repository.skipped_files == [bad_file]
    assert bad_file.name in caplog.text


@pytest.mark.parametrize(
    "text", ["- just\n- a list\n", "title: [unclosed\n", "title: No timestamps\n"]
)
def test_broken_entry_files_are_skipped(data_dir, text):
    configuration.DATA_ENTRIES_DIR.mkdir(parents=True)
    broken_file = configuration.DATA_ENTRIES_DIR / "broken.yaml"
    broken_file.write_text(text)

    repository = EntryRepository()

    assert repository.get_all_entries() == []
    assert repository.skipped_files == [broken_file]


def test_skipped_file_is_left_untouched_by_flush(data_dir, make_entry):
    bad_id = ENTRY_REPO.save_new_entry(make_entry())
    ENTRY_REPO.flush()
    bad_file = configuration.DATA_ENTRIES_DIR / f"{bad_id}.yaml"
    bad_text = bad_file.read_text().replace(
        "recurrence: null", 'recurrence: \'{"type":"interval","value":0}\''
    )
    bad_file.write_text(bad_text)

    repository = EntryRepository()
    repository.save_new_entry(make_entry(title="Other"))
    repository.flush()

    assert bad_file.read_text() == bad_text


def test_reload_picks_up_writes_from_another_repository(data_dir, make_entry):
    assert ENTRY_REPO.get_all_entries() == []

    other = EntryRepository()
    id = other.save_new_entry(make_entry(recurrence=Daily()))
    other.flush()

    assert ENTRY_REPO.get_all_entries() == []
    ENTRY_REPO.reload()
    assert [entry["id"] for entry in ENTRY_REPO.get_all_entries()] == [id]


def test_reload_keeps_unsaved_changes(data_dir, make_entry):
    id = ENTRY_REPO.save_new_entry(make_entry())

    ENTRY_REPO.reload()

    assert ENTRY_REPO.get_entry(id)["title"] == "Metformin"
    assert ENTRY_REPO.flush()


def test_configuration_defaults_and_updates(data_dir):
    config = CONFIGURATION_REPO.get_config()
    assert config["reminder_threshold_minutes"] == 15
    assert config["reminder_interval_seconds"] == 60

    CONFIGURATION_REPO.update_config(reminder_threshold_minutes=5, log_level="info")
    configuration.CONFIG_PATH.mkdir(parents=True)
    assert CONFIGURATION_REPO.flush()

    reloaded = ConfigurationRepository().get_config()
    assert reloaded["reminder_threshold_minutes"] == 5
    assert reloaded["log_level"] == "INFO"
    assert reloaded["show_header"] is True


@pytest.mark.parametrize(
    "change",
    [
        {"reminder_threshold_minutes": 0},
        {"reminder_interval_seconds": 0},
        {"log_level": "LOUD"},
    ],
)
def test_configuration_rejects_invalid_values(data_dir, change):
    with pytest.raises(ValueError):
        CONFIGURATION_REPO.update_config(**change)
