"""
Unit tests for keyed record directories and persistence backends.
"""

import json

import pytest

from treeshop.cost import Equipment, EquipmentCategory
from treeshop.directory import (
    ChangeAction,
    Directory,
    InMemoryPersistence,
    JsonFilePersistence,
)
from treeshop.loadout import Loadout
from treeshop.errors import (
    DuplicateRecordError,
    ErrorCode,
    PersistenceError,
    UnknownRecordError,
)


def make_directory(persistence=None):
    return Directory("equipment", Equipment.from_dict, lambda e: e.equipment_id, persistence)


class TestDirectoryMutation:
    """Tests for add / update / delete."""

    def test_add_and_get(self, chipper):
        d = make_directory()
        d.add(chipper)
        assert d.get("chipper-1") is chipper
        assert "chipper-1" in d
        assert len(d) == 1

    def test_get_missing_returns_none(self):
        assert make_directory().get("nope") is None

    def test_add_duplicate_raises(self, chipper):
        d = make_directory()
        d.add(chipper)
        with pytest.raises(DuplicateRecordError):
            d.add(chipper)
        assert len(d) == 1

    def test_update_replaces(self, chipper):
        d = make_directory()
        d.add(chipper)
        changed = Equipment.from_dict({**chipper.to_dict(), "name": "Renamed"})
        d.update(changed)
        assert d.get("chipper-1").name == "Renamed"

    def test_update_unknown_raises(self, chipper):
        with pytest.raises(UnknownRecordError) as exc:
            make_directory().update(chipper)
        assert exc.value.code == ErrorCode.LKP_UNKNOWN_RECORD

    def test_delete(self, chipper):
        d = make_directory()
        d.add(chipper)
        removed = d.delete("chipper-1")
        assert removed is chipper
        assert len(d) == 0

    def test_delete_unknown_raises(self):
        with pytest.raises(UnknownRecordError):
            make_directory().delete("nope")

    def test_insertion_order(self):
        d = make_directory()
        for i in range(3):
            d.add(Equipment.from_defaults(f"Saw {i}", EquipmentCategory.CHAINSAW, equipment_id=f"s{i}"))
        assert d.ids() == ["s0", "s1", "s2"]
        assert [e.name for e in d] == ["Saw 0", "Saw 1", "Saw 2"]


class TestDirectoryPersistence:
    """Tests for save/load and rollback."""

    def test_autosave_on_add(self, chipper):
        backend = InMemoryPersistence()
        d = make_directory(backend)
        d.add(chipper)
        assert backend.load_all("equipment")[0]["equipment_id"] == "chipper-1"

    def test_load_replaces_contents(self, chipper):
        backend = InMemoryPersistence()
        make_directory(backend).add(chipper)

        fresh = make_directory(backend)
        assert fresh.load() == 1
        assert fresh.get("chipper-1") == chipper

    def test_failed_save_rolls_back_add(self, chipper):
        backend = InMemoryPersistence()
        d = make_directory(backend)
        backend.fail_saves = True

        with pytest.raises(PersistenceError):
            d.add(chipper)
        assert len(d) == 0

    def test_failed_save_rolls_back_delete(self, chipper):
        backend = InMemoryPersistence()
        d = make_directory(backend)
        d.add(chipper)
        backend.fail_saves = True

        with pytest.raises(PersistenceError):
            d.delete("chipper-1")
        assert d.get("chipper-1") is chipper

    def test_failed_update_discards_in_place_edit(self, chipper):
        backend = InMemoryPersistence()
        d = make_directory(backend)
        d.add(chipper)

        chipper.name = "Renamed"
        chipper.purchase_price = 99000.0
        backend.fail_saves = True
        with pytest.raises(PersistenceError):
            d.update(chipper)

        stored = d.get("chipper-1")
        assert stored.name == "Bandit Chipper #1"
        assert stored.purchase_price == 50000.0
        assert stored.hourly_rate == pytest.approx(28.25)

    def test_rollback_keeps_untouched_records(self, chipper):
        backend = InMemoryPersistence()
        d = make_directory(backend)
        saw = Equipment.from_defaults("Saw", EquipmentCategory.CHAINSAW, equipment_id="saw")
        d.add(saw)
        d.add(chipper)

        chipper.name = "Renamed"
        backend.fail_saves = True
        with pytest.raises(PersistenceError):
            d.update(chipper)

        assert d.get("saw") is saw
        assert d.ids() == ["saw", "chipper-1"]

    def test_failed_update_discards_nested_edit(self, persistence, loadout_dir):
        loadout = Loadout("lo-1", "Chipper Crew")
        loadout_dir.add(loadout)

        loadout.add_equipment("chipper-1", 80.0)
        persistence.fail_saves = True
        with pytest.raises(PersistenceError):
            loadout_dir.update(loadout)

        assert loadout_dir.get("lo-1").equipment == []

    def test_rollback_after_load(self, chipper):
        backend = InMemoryPersistence()
        make_directory(backend).add(chipper)
        d = make_directory(backend)
        d.load()

        d.get("chipper-1").name = "Renamed"
        backend.fail_saves = True
        with pytest.raises(PersistenceError):
            d.delete("chipper-1")

        assert d.get("chipper-1").name == "Bandit Chipper #1"

    def test_failed_save_does_not_notify(self, chipper):
        backend = InMemoryPersistence()
        d = make_directory(backend)
        changes = []
        d.subscribe(changes.append)
        backend.fail_saves = True

        with pytest.raises(PersistenceError):
            d.add(chipper)
        assert changes == []

    def test_corrupt_record_raises(self):
        backend = InMemoryPersistence()
        backend.save_all("equipment", [{"equipment_id": "x", "name": "no price"}])
        with pytest.raises(PersistenceError):
            make_directory(backend).load()

    def test_no_persistence_is_memory_only(self, chipper):
        d = make_directory()
        d.add(chipper)
        assert d.load() == 1


class TestJsonFilePersistence:
    """Tests for the JSON file backend."""

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonFilePersistence(tmp_path).load_all("equipment") == []

    def test_round_trip(self, tmp_path, chipper):
        backend = JsonFilePersistence(tmp_path / "data")
        make_directory(backend).add(chipper)

        assert (tmp_path / "data" / "equipment.json").exists()
        fresh = make_directory(JsonFilePersistence(tmp_path / "data"))
        fresh.load()
        assert fresh.get("chipper-1") == chipper

    def test_no_temp_files_left(self, tmp_path, chipper):
        make_directory(JsonFilePersistence(tmp_path)).add(chipper)
        assert [p.name for p in tmp_path.iterdir()] == ["equipment.json"]

    def test_invalid_json_raises(self, tmp_path):
        (tmp_path / "equipment.json").write_text("{not json")
        with pytest.raises(PersistenceError) as exc:
            JsonFilePersistence(tmp_path).load_all("equipment")
        assert exc.value.code == ErrorCode.PER_LOAD_FAILED

    def test_non_list_raises(self, tmp_path):
        (tmp_path / "equipment.json").write_text(json.dumps({"a": 1}))
        with pytest.raises(PersistenceError) as exc:
            JsonFilePersistence(tmp_path).load_all("equipment")
        assert exc.value.code == ErrorCode.PER_CORRUPT_RECORD


class TestDirectoryListeners:
    """Tests for change notification."""

    def test_listener_receives_changes(self, chipper):
        d = make_directory()
        changes = []
        d.subscribe(changes.append)

        d.add(chipper)
        d.update(chipper)
        d.delete("chipper-1")

        assert [c.action for c in changes] == [ChangeAction.ADD, ChangeAction.UPDATE, ChangeAction.DELETE]
        assert all(c.record_id == "chipper-1" for c in changes)
        assert all(c.entity == "equipment" for c in changes)

    def test_load_notifies(self):
        d = make_directory(InMemoryPersistence())
        changes = []
        d.subscribe(changes.append)
        d.load()
        assert changes[0].action == ChangeAction.LOAD

    def test_unsubscribe(self, chipper):
        d = make_directory()
        changes = []
        d.subscribe(changes.append)
        assert d.unsubscribe(changes.append) is True
        assert d.unsubscribe(changes.append) is False
        d.add(chipper)
        assert changes == []

    def test_failing_listener_does_not_break_mutation(self, chipper):
        d = make_directory()

        def broken(change):
            raise RuntimeError("boom")

        d.subscribe(broken)
        d.add(chipper)
        assert "chipper-1" in d
