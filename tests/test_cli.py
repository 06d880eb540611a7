import json

import click
import pytest
from typer.testing import CliRunner

from lifeline import configuration
from lifeline.cleanup import flush
from lifeline.model.recurrence import Daily
from lifeline.repository.configuration import CONFIGURATION_REPO
from lifeline.repository.entry import ENTRY_REPO
from lifeline.terminal.app import app
from lifeline.terminal.custom_typer import AliasedTyperGroup


@pytest.fixture
def runner(data_dir):
    return CliRunner()


def add_daily_pill(runner):
    result = runner.invoke(
        app,
        [
            "entry",
            "add",
            "Metformin",
            "--type",
            "medication",
            "--date",
            "2024-01-01",
            "--time",
            "08:00",
            "--repeat",
            "daily",
        ],
    )
    assert result.exit_code == 0, result.output
    (entry,) = ENTRY_REPO.get_all_entries()
    return entry


def test_help():
    result = CliRunner().invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_add_entry(runner):
    entry = add_daily_pill(runner)

    assert entry["type"] == "medication"
    assert entry["time"] == "08:00 AM"
    assert entry["recurrence"] == Daily()
    assert configuration.APP_CONFIG_PATH.is_file()


def test_command_aliases(runner):
    result = runner.invoke(
        app, ["e", "a", "Dentist", "--type", "appointment", "--date", "2024-01-05"]
    )
    assert result.exit_code == 0, result.output
    assert ENTRY_REPO.get_all_entries()[0]["title"] == "Dentist"


def test_add_rejects_bad_repeat(runner):
    result = runner.invoke(app, ["entry", "add", "X", "--repeat", "hourly"])
    assert result.exit_code != 0
    assert ENTRY_REPO.get_all_entries() == []


def test_add_rejects_unknown_type(runner):
    result = runner.invoke(app, ["entry", "add", "X", "--type", "surgery"])
    assert result.exit_code == 1
    assert "Invalid entry type" in result.output


def test_record_status_on_an_occurrence(runner):
    entry = add_daily_pill(runner)

    result = runner.invoke(
        app, ["entry", "status", entry["id"][:8], "taken", "--date", "2024-01-02"]
    )

    assert result.exit_code == 0, result.output
    assert ENTRY_REPO.get_entry(entry["id"])["status_by_date"] == {"2024-01-02": "taken"}


def test_record_status_rejects_a_non_occurrence(runner):
    runner.invoke(app, ["entry", "add", "Dentist", "--type", "appointment", "--date", "2024-01-05"])
    (entry,) = ENTRY_REPO.get_all_entries()

    result = runner.invoke(
        app, ["entry", "status", entry["id"], "completed", "--date", "2024-01-06"]
    )

    assert result.exit_code == 1
    assert "not an occurrence" in result.output
    assert ENTRY_REPO.get_entry(entry["id"])["status"] == "upcoming"


def test_toggle(runner):
    entry = add_daily_pill(runner)

    result = runner.invoke(app, ["entry", "toggle", entry["id"], "--date", "2024-01-03"])

    assert result.exit_code == 0, result.output
    assert ENTRY_REPO.get_entry(entry["id"])["status_by_date"] == {"2024-01-03": "taken"}


def test_toggle_rejects_labs(runner):
    runner.invoke(app, ["entry", "add", "Lipids", "--type", "lab", "--date", "2024-01-05"])
    (entry,) = ENTRY_REPO.get_all_entries()

    result = runner.invoke(app, ["entry", "toggle", entry["id"]])

    assert result.exit_code == 1


def test_unknown_id(runner):
    result = runner.invoke(app, ["entry", "show", "does-not-exist"])
    assert result.exit_code == 1
    assert "No entry matches" in result.output


def test_delete(runner):
    entry = add_daily_pill(runner)
    flush()

    result = runner.invoke(app, ["entry", "delete", entry["id"]])
    flush()

    assert result.exit_code == 0, result.output
    assert ENTRY_REPO.get_all_entries() == []
    assert not (configuration.DATA_ENTRIES_DIR / f"{entry['id']}.yaml").exists()


def test_import_yaml(runner, tmp_path):
    import_file = tmp_path / "entries.yaml"
    import_file.write_text(
        "entries:\n"
        "  - type: medication\n"
        "    title: Lisinopril\n"
        "    date: 2024-01-01\n"
        "    time: '09:00 AM'\n"
        "    recurrence: daily\n"
        "  - type: lab\n"
        "    title: HbA1c\n"
        "    date: 2024-01-10\n"
        "    lab_value: 6.1\n"
        "    lab_unit: '%'\n"
    )

    result = runner.invoke(app, ["entry", "import", str(import_file)])

    assert result.exit_code == 0, result.output
    assert "Imported 2 entries" in result.output
    titles = sorted(entry["title"] for entry in ENTRY_REPO.get_all_entries())
    assert titles == ["HbA1c", "Lisinopril"]


def test_import_is_all_or_nothing(runner, tmp_path):
    import_file = tmp_path / "entries.json"
    import_file.write_text(
        json.dumps(
            [
                {"type": "medication", "title": "Good", "date": "2024-01-01"},
                {"type": "medication", "title": "Bad", "date": "2024-01-01", "recurrence": "hourly"},
            ]
        )
    )

    result = runner.invoke(app, ["entry", "import", str(import_file)])

    assert result.exit_code == 1
    assert "Entry 2" in result.output
    assert ENTRY_REPO.get_all_entries() == []


def test_view_day(runner):
    add_daily_pill(runner)

    result = runner.invoke(app, ["--no-header", "view", "day", "2024-01-02"])

    assert result.exit_code == 0, result.output
    assert "Metformin" in result.output
    assert "08:00 AM" in result.output


def test_view_day_before_anchor_is_empty(runner):
    add_daily_pill(runner)

    result = runner.invoke(app, ["view", "day", "2023-12-31"])

    assert result.exit_code == 0, result.output
    assert "No entries for this day" in result.output


def test_view_calendar(runner):
    add_daily_pill(runner)

    result = runner.invoke(app, ["view", "calendar", "2024-01"])

    assert result.exit_code == 0, result.output
    assert "January 2024" in result.output


def test_view_summary(runner):
    add_daily_pill(runner)

    result = runner.invoke(
        app, ["view", "summary", "--start", "2024-01-01", "--end", "2024-01-07"]
    )

    assert result.exit_code == 0, result.output
    assert "Metformin" in result.output


def test_remind_check_with_nothing_due(runner):
    result = runner.invoke(app, ["remind", "check"])
    assert result.exit_code == 0, result.output
    assert "Nothing due soon" in result.output


def test_config_set(runner):
    result = runner.invoke(app, ["config", "set", "--reminder-threshold", "10"])

    assert result.exit_code == 0, result.output
    assert CONFIGURATION_REPO.get_config()["reminder_threshold_minutes"] == 10


def test_config_set_rejects_bad_values(runner):
    result = runner.invoke(app, ["config", "set", "--log-level", "LOUD"])
    assert result.exit_code != 0


def test_alias_collisions_are_rejected():
    with pytest.raises(ValueError):
        AliasedTyperGroup(
            name="group",
            commands={
                "add, a": click.Command("add, a"),
                "archive, a": click.Command("archive, a"),
            },
        )


BROKEN_ENTRY_YAML = """\
id: broken
type: medication
title: Broken
date: '2024-01-01'
time: 09:00 AM
recurrence: '{"type":"interval","value":0}'
created: '2024-01-01T00:00:00+00:00'
updated: '2024-01-01T00:00:00+00:00'
"""


def test_views_skip_an_unreadable_entry_file(runner):
    add_daily_pill(runner)
    flush()
    ENTRY_REPO.reload()
    (configuration.DATA_ENTRIES_DIR / "broken.yaml").write_text(BROKEN_ENTRY_YAML)

    day_result = runner.invoke(app, ["--no-header", "view", "day", "2024-01-01"])
    calendar_result = runner.invoke(app, ["view", "calendar", "2024-01"])
    check_result = runner.invoke(app, ["remind", "check"])

    assert day_result.exit_code == 0, day_result.output
    assert "Metformin" in day_result.output
    assert "Broken" not in day_result.output
    assert calendar_result.exit_code == 0, calendar_result.output
    assert check_result.exit_code == 0, check_result.output
    assert (configuration.DATA_ENTRIES_DIR / "broken.yaml").read_text() == BROKEN_ENTRY_YAML


def test_import_rejects_status_by_date_that_is_not_a_mapping(runner, tmp_path):
    import_file = tmp_path / "entries.json"
    import_file.write_text(
        json.dumps(
            [
                {
                    "type": "medication",
                    "title": "Metformin",
                    "date": "2024-01-01",
                    "recurrence": "daily",
                    "status_by_date": ["2024-01-02"],
                }
            ]
        )
    )

    result = runner.invoke(app, ["entry", "import", str(import_file)])

    assert result.exit_code == 1
    assert "Entry 1" in result.output
    assert ENTRY_REPO.get_all_entries() == []
