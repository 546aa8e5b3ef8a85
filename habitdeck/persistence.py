"""Habit persistence: the whole collection as one JSON blob.

HabitRepository is the capability the store depends on. Subclasses only move
a string in and out of storage; encoding, decoding and the "malformed means
empty" rule live here.

  load()  never raises: missing or unreadable data yields an empty list.
  save()  raises on storage failure; HabitStore logs and carries on.
"""

import json
import logging
from abc import ABC, abstractmethod

from habitdeck import db
from habitdeck.config import STORE_KEY
from habitdeck.models import Habit, HabitDataError

log = logging.getLogger(__name__)


def encode_habits(habits: list[Habit]) -> str:
    return json.dumps([h.to_record() for h in habits], ensure_ascii=False)


def decode_habits(blob: str) -> list[Habit]:
    """Parse a stored blob. Raises HabitDataError on anything malformed."""
    try:
        records = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as e:
        raise HabitDataError(f"Stored habits are not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise HabitDataError(f"Stored habits must be a list, got {type(records).__name__}")

    habits = [Habit.from_record(r) for r in records]
    ids = [h.habit_id for h in habits]
    if len(ids) != len(set(ids)):
        raise HabitDataError("Stored habits contain duplicate ids")
    return habits


class HabitRepository(ABC):
    """Load and save the full habit collection."""

    @abstractmethod
    def read_blob(self) -> str | None:
        """Return the stored blob, or None if nothing was ever saved."""
        ...

    @abstractmethod
    def write_blob(self, blob: str) -> None:
        ...

    def load(self) -> list[Habit]:
        try:
            blob = self.read_blob()
        except Exception as e:
            log.error("Could not read stored habits: %s", e, exc_info=True)
            return []
        if blob is None:
            return []
        try:
            habits = decode_habits(blob)
        except HabitDataError as e:
            log.warning("Ignoring malformed stored habits: %s", e)
            return []
        log.info("Loaded %d habits", len(habits))
        return habits

    def save(self, habits: list[Habit]) -> None:
        self.write_blob(encode_habits(habits))


class KeyValueRepository(HabitRepository):
    """Stores the blob under a fixed key in the SQLite string store."""

    def __init__(self, key: str = STORE_KEY) -> None:
        self.key = key

    def read_blob(self) -> str | None:
        return db.get_value(self.key)

    def write_blob(self, blob: str) -> None:
        db.set_value(self.key, blob)


class InMemoryRepository(HabitRepository):
    """Holds the blob in memory. Used in tests and for throwaway stores."""

    def __init__(self, blob: str | None = None) -> None:
        self.blob = blob
        self.saves = 0
        self.fail_saves = False

    def read_blob(self) -> str | None:
        return self.blob

    def write_blob(self, blob: str) -> None:
        if self.fail_saves:
            raise OSError("in-memory store is read-only")
        self.blob = blob
        self.saves += 1
