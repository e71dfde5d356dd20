"""
SQLite shift store tests.
"""
import os

import pytest

from tiptracker.models import ShiftInput, ShiftRecord
from tiptracker.storage import last_deleted_path, pop_deleted, remember_deleted, restore_shift


class TestShiftStore:
    """Test insert / list / update / delete against a temp database."""

    def test_insert_assigns_unique_ids(self, store, dinner_input):
        a = store.insert(dinner_input)
        b = store.insert(dinner_input)
        assert a and b and a != b
        assert len(store.list()) == 2

    def test_get_by_id_round_trips_fields(self, store, dinner_input):
        shift_id = store.insert(dinner_input)
        record = store.get_by_id(shift_id)
        assert isinstance(record, ShiftRecord)
        assert record.id == shift_id
        assert record.to_input() == ShiftInput(**{**dinner_input.as_dict(), "hours_worked": 6.0})

    def test_get_missing_returns_none(self, store):
        assert store.get_by_id("nope") is None

    def test_list_newest_first(self, seeded_store):
        assert [r.date for r in seeded_store.list()] == ["2025-08-02", "2025-07-27", "2025-07-21"]

    def test_update_changes_only_given_fields(self, store, dinner_input):
        shift_id = store.insert(dinner_input)
        store.update(shift_id, {"cash_tips": 150, "notes": "patio"})
        record = store.get_by_id(shift_id)
        assert record.cash_tips == 150
        assert record.notes == "patio"
        assert record.card_tips == 280

    def test_update_empty_is_noop(self, store, dinner_input):
        shift_id = store.insert(dinner_input)
        store.update(shift_id, {})
        assert store.get_by_id(shift_id).cash_tips == 120

    def test_update_rejects_unknown_fields(self, store, dinner_input):
        shift_id = store.insert(dinner_input)
        with pytest.raises(ValueError):
            store.update(shift_id, {"id": "other"})

    def test_update_and_delete_missing_id_are_noops(self, seeded_store):
        seeded_store.update("missing", {"notes": "x"})
        seeded_store.delete("missing")
        assert len(seeded_store.list()) == 3

    def test_delete(self, seeded_store):
        victim = seeded_store.list()[0]
        seeded_store.delete(victim.id)
        assert seeded_store.get_by_id(victim.id) is None
        assert len(seeded_store.list()) == 2

    def test_delete_all(self, seeded_store):
        seeded_store.delete_all()
        assert seeded_store.list() == []

    def test_seed_returns_ids(self, store):
        ids = store.seed_sample_data()
        assert len(ids) == 3
        assert {r.id for r in store.list()} == set(ids)


class TestUndoDelete:
    """Test re-creating a deleted shift."""

    def test_restore_gets_new_id(self, seeded_store):
        victim = seeded_store.list()[0]
        seeded_store.delete(victim.id)
        new_id = restore_shift(seeded_store, victim)
        assert new_id != victim.id
        restored = seeded_store.get_by_id(new_id)
        assert restored.to_input() == victim.to_input()

    def test_remember_and_pop(self, seeded_store):
        victim = seeded_store.list()[0]
        remember_deleted(seeded_store, victim)
        assert os.path.exists(last_deleted_path(seeded_store))
        assert pop_deleted(seeded_store) == victim
        assert pop_deleted(seeded_store) is None
