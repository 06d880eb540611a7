# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from lifeline import configuration, time
from lifeline.errors import EntryNotFoundError, InvalidEntryError, LifelineError
from lifeline.model.entry import EntityId, Entry, generate_entity_id
from lifeline.service.recurrence import parse_rule, serialize_rule_optional

logger = logging.getLogger(__name__)


class EntryRepository:
    def __init__(self) -> None:
        self._entries: Optional[list[Entry]] = None
        self.is_dirty = False
        self._dirty_ids: set[str] = set()
        self._deleted_ids: set[str] = set()
        self.skipped_files: list[Path] = []

    @property
    def entries(self) -> list[Entry]:
        if self._entries is None:
            self.__load_data()
        if self._entries is None:
            raise ValueError()
        return self._entries

    def __load_data(self) -> None:
        self._entries = []
        self.skipped_files = []
        if not configuration.DATA_ENTRIES_DIR.is_dir():
            return
        for file_path in sorted(configuration.DATA_ENTRIES_DIR.iterdir()):
            if file_path.suffix != ".yaml" or file_path.name == ".gitkeep":
                continue
            try:
                raw_entry = load(file_path.read_text(), Loader=Loader)
                if raw_entry is None:
                    continue
                if not isinstance(raw_entry, dict):
                    raise InvalidEntryError("entry file must hold a mapping")
                self._entries.append(
                    self.__convert_entry_for_deserialization(raw_entry)
                )
            except (LifelineError, YAMLError, KeyError, ValueError) as e:
                # Not in the snapshot, so flush never rewrites the file
                logger.warning("Skipping unreadable entry file %s: %s", file_path, e)
                self.skipped_files.append(file_path)

    def reload(self) -> None:
        """Drop the cached snapshot so the next read sees other processes' writes."""
        if not self.is_dirty:
            self._entries = None

    def __save_data(self) -> None:
        configuration.DATA_ENTRIES_DIR.mkdir(parents=True, exist_ok=True)

        # Write dirty entities
        for entry in self.entries:
            if entry["id"] in self._dirty_ids:
                serializable_entry = self.__convert_entry_for_serialization(
                    deepcopy(entry)
                )
                file_path = configuration.DATA_ENTRIES_DIR / f"{entry['id']}.yaml"
                file_path.write_text(dump(serializable_entry, Dumper=Dumper))

        # Remove hard-deleted entity files
        for entity_id in self._deleted_ids:
            file_path = configuration.DATA_ENTRIES_DIR / f"{entity_id}.yaml"
            if file_path.exists():
                file_path.unlink()

        # Clear tracking sets
        self._dirty_ids.clear()
        self._deleted_ids.clear()

    def flush(self) -> bool:
        if self._entries is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def __convert_entry_for_serialization(self, entry: Entry) -> dict[str, Any]:
        serializable_entry = cast(dict[str, Any], entry)
        serializable_entry["recurrence"] = serialize_rule_optional(
            serializable_entry["recurrence"]
        )
        serializable_entry["created"] = time.datetime_to_iso_str(
            serializable_entry["created"]
        )
        serializable_entry["updated"] = time.datetime_to_iso_str(
            serializable_entry["updated"]
        )
        return serializable_entry

    def __convert_entry_for_deserialization(self, entry: dict[str, Any]) -> Entry:
        deserializable_entry = entry
        deserializable_entry["recurrence"] = parse_rule(
            deserializable_entry.get("recurrence")
        )
        deserializable_entry["created"] = time.datetime_from_str(
            deserializable_entry["created"]
        )
        deserializable_entry["updated"] = time.datetime_from_str(
            deserializable_entry["updated"]
        )
        return cast(Entry, deserializable_entry)

    def save_new_entry(self, entry: Entry) -> EntityId:
        self.is_dirty = True

        new_entry = deepcopy(entry)
        new_entry["id"] = generate_entity_id()

        self.entries.append(new_entry)
        self._dirty_ids.add(new_entry["id"])

        return new_entry["id"]

    def save_new_entries(self, entries: list[Entry]) -> list[EntityId]:
        return [self.save_new_entry(entry) for entry in entries]

    def replace_entry(self, entry: Entry) -> None:
        """Store a new value for an existing entry; the last write wins."""
        entry_id = entry["id"]
        if entry_id is None:
            raise ValueError("Entry must have an ID")

        for index, existing in enumerate(self.entries):
            if existing["id"] == entry_id:
                self.is_dirty = True
                self._dirty_ids.add(entry_id)
                self.entries[index] = deepcopy(entry)
                return
        raise EntryNotFoundError(f"No entry with id {entry_id}")

    def delete_entry(self, id: EntityId) -> None:
        remaining = [entry for entry in self.entries if entry["id"] != id]
        if len(remaining) == len(self.entries):
            raise EntryNotFoundError(f"No entry with id {id}")

        self.is_dirty = True
        self._entries = remaining
        self._dirty_ids.discard(id)
        self._deleted_ids.add(id)

    def get_all_entries(self) -> list[Entry]:
        return deepcopy(self.entries)

    def get_entry(self, id: EntityId) -> Entry:
        for entry in self.entries:
            if entry["id"] == id:
                return deepcopy(entry)
        raise EntryNotFoundError(f"No entry with id {id}")

    def find_entry_id(self, id_prefix: str) -> EntityId:
        """Resolve a full id or a unique prefix of one."""
        candidates = [
            cast(EntityId, entry["id"])
            for entry in self.entries
            if entry["id"] is not None and entry["id"].startswith(id_prefix)
        ]
        if len(candidates) == 0:
            raise EntryNotFoundError(f"No entry matches id '{id_prefix}'")
        if len(candidates) > 1 and id_prefix not in candidates:
            raise EntryNotFoundError(
                f"Id '{id_prefix}' is ambiguous, it matches {len(candidates)} entries"
            )
        return id_prefix if id_prefix in candidates else candidates[0]


ENTRY_REPO = EntryRepository()
