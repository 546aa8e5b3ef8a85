"""Tests for encoding and loading the habit collection."""

import json
import logging
from datetime import date

import pytest

from habitdeck.models import Habit, HabitDataError
from habitdeck.persistence import (
    InMemoryRepository,
    KeyValueRepository,
    decode_habits,
    encode_habits,
)


@pytest.fixture
def kv_db(tmp_path, monkeypatch):
    import habitdeck.db as db_module
    monkeypatch.setattr(db_module, "DB_PATH", tmp_path / "test.db")
    db_module.init_db()
    return db_module


def _habits() -> list[Habit]:
    return [
        Habit("1", "Read", dates_completed={date(2026, 10, 20)}),
        Habit("2", "Gym", cadence="weekly", target_weekly=4),
    ]


class TestCodec:
    def test_encode_shape(self):
        records = json.loads(encode_habits(_habits()))
        assert [r["habitId"] for r in records] == ["1", "2"]
        assert records[0]["datesCompleted"] == ["2026-10-20"]
        assert records[1]["trackingType"] == "weekly"
        assert records[1]["targetWeekly"] == 4

    def test_decode_keeps_order(self):
        habits = decode_habits(encode_habits(_habits()))
        assert [h.name for h in habits] == ["Read", "Gym"]

    @pytest.mark.parametrize("blob", ["{not json", '{"habitId": "1"}', "42", "null"])
    def test_decode_rejects_non_list(self, blob):
        with pytest.raises(HabitDataError):
            decode_habits(blob)

    @pytest.mark.parametrize("blob", ["[" * 200000, "[" * 200000 + "]" * 200000])
    def test_decode_rejects_deep_nesting(self, blob):
        with pytest.raises(HabitDataError):
            decode_habits(blob)

    def test_decode_rejects_duplicate_ids(self):
        blob = encode_habits([Habit("1", "A"), Habit("1", "B")])
        with pytest.raises(HabitDataError):
            decode_habits(blob)


class TestInMemoryRepository:
    def test_empty(self):
        assert InMemoryRepository().load() == []

    def test_save_then_load(self):
        repo = InMemoryRepository()
        repo.save(_habits())
        assert repo.saves == 1
        assert [h.habit_id for h in repo.load()] == ["1", "2"]

    def test_malformed_blob_is_empty(self, caplog):
        repo = InMemoryRepository("[{\"habitId\": 5}]")
        with caplog.at_level(logging.WARNING):
            assert repo.load() == []
        assert "malformed" in caplog.text

    def test_deeply_nested_blob_is_empty(self):
        assert InMemoryRepository("[" * 200000).load() == []
        assert InMemoryRepository("[" * 200000 + "]" * 200000).load() == []

    def test_failed_save_raises(self):
        repo = InMemoryRepository()
        repo.fail_saves = True
        with pytest.raises(OSError):
            repo.save(_habits())
        assert repo.blob is None


class TestKeyValueRepository:
    def test_missing_key_is_empty(self, kv_db):
        assert KeyValueRepository("habitsData").load() == []

    def test_round_trip_through_sqlite(self, kv_db):
        repo = KeyValueRepository("habitsData")
        repo.save(_habits())
        stored = json.loads(kv_db.get_value("habitsData"))
        assert len(stored) == 2
        loaded = repo.load()
        assert loaded[0].dates_completed == {date(2026, 10, 20)}

    def test_corrupt_value_is_empty(self, kv_db):
        kv_db.set_value("habitsData", "garbage")
        assert KeyValueRepository("habitsData").load() == []

    def test_read_error_is_logged_not_raised(self, kv_db, monkeypatch, caplog):
        def boom(key):
            raise RuntimeError("disk gone")
        monkeypatch.setattr(kv_db, "get_value", boom)
        with caplog.at_level(logging.ERROR):
            assert KeyValueRepository("habitsData").load() == []
        assert "disk gone" in caplog.text
