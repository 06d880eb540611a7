"""
Shared pytest fixtures for lifeline tests.

- Entry factory that builds validated entries with an id
- Temporary config and data directories wired into the repositories
"""

import pytest

from lifeline import configuration
from lifeline.model.entry import generate_entity_id
from lifeline.repository.configuration import CONFIGURATION_REPO
from lifeline.repository.entry import ENTRY_REPO
from lifeline.service.entry import create_entry


@pytest.fixture
def make_entry():
    """
    Returns a function that builds an entry anchored on 2024-01-01 by default.

    Usage:
        def test_something(make_entry):
            entry = make_entry(recurrence=Daily(), time="08:00")
    """

    def _make_entry(
        entry_type="medication",
        title="Metformin",
        date="2024-01-01",
        time=None,
        recurrence=None,
        status="upcoming",
        entry_id=None,
        **payload,
    ):
        entry = create_entry(
            entry_type,
            title,
            date,
            time=time,
            status=status,
            recurrence=recurrence,
            **payload,
        )
        entry["id"] = entry_id or generate_entity_id()
        return entry

    return _make_entry


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """
    Points configuration and entry storage at a temporary directory and
    resets the repository singletons so nothing leaks between tests.
    """
    config_path = tmp_path / "config"
    data_path = tmp_path / "data"

    monkeypatch.setattr(configuration, "CONFIG_PATH", config_path)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_path / "config.yaml")
    monkeypatch.setattr(configuration, "DATA_PATH", data_path)
    monkeypatch.setattr(configuration, "DATA_ENTRIES_DIR", data_path / "entries")

    monkeypatch.setattr(ENTRY_REPO, "_entries", None)
    monkeypatch.setattr(ENTRY_REPO, "is_dirty", False)
    monkeypatch.setattr(ENTRY_REPO, "_dirty_ids", set())
    monkeypatch.setattr(ENTRY_REPO, "_deleted_ids", set())
    monkeypatch.setattr(ENTRY_REPO, "skipped_files", [])
    monkeypatch.setattr(CONFIGURATION_REPO, "_config", None)
    monkeypatch.setattr(CONFIGURATION_REPO, "is_dirty", False)

    yield data_path
