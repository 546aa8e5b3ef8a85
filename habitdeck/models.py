"""Habit model, persisted record format, and input validation.

Persisted record (one per habit, camelCase to match the stored blob):
    {"habitId": "1760860800123", "habitName": "Read", "trackingType": "daily",
     "datesCompleted": ["2026-10-18", "2026-10-19"], "streakCurrent": 2,
     "streakMaximum": 2, "targetWeekly": 3}
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime

from habitdeck.config import DEFAULT_WEEKLY_TARGET
from habitdeck.streaks import CADENCES, DAILY, compute_streak

MIN_WEEKLY_TARGET = 1
MAX_WEEKLY_TARGET = 7

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class HabitValidationError(ValueError):
    """Rejected input at a mutation boundary. Prior state is untouched."""


class HabitDataError(ValueError):
    """Persisted data could not be decoded."""


def parse_day(value) -> date:
    """Accept a date, a datetime, or a strict YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _ISO_DAY.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise HabitValidationError(f"Not a calendar date: {value!r}")


def validate_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise HabitValidationError("Habit name must not be empty")
    return name.strip()


def validate_cadence(cadence) -> str:
    if cadence not in CADENCES:
        raise HabitValidationError(
            f"Cadence must be one of {', '.join(CADENCES)}, got {cadence!r}"
        )
    return cadence


def validate_target(target) -> int:
    if isinstance(target, bool) or not isinstance(target, int):
        raise HabitValidationError(f"Weekly target must be an integer, got {target!r}")
    if not MIN_WEEKLY_TARGET <= target <= MAX_WEEKLY_TARGET:
        raise HabitValidationError(
            f"Weekly target must be between {MIN_WEEKLY_TARGET} and "
            f"{MAX_WEEKLY_TARGET}, got {target}"
        )
    return target


def _clamp_target(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_WEEKLY_TARGET
    return min(max(value, MIN_WEEKLY_TARGET), MAX_WEEKLY_TARGET)


@dataclass
class Habit:
    habit_id: str
    name: str
    cadence: str = DAILY  # "daily" | "weekly"
    dates_completed: set[date] = field(default_factory=set)
    # Derived from dates/cadence/target; only recompute() writes these
    streak_current: int = 0
    streak_maximum: int = 0
    target_weekly: int = DEFAULT_WEEKLY_TARGET

    def recompute(self, today: date) -> None:
        streak = compute_streak(self.cadence, self.dates_completed,
                                self.target_weekly, today)
        self.streak_current = streak.current
        self.streak_maximum = streak.maximum

    def is_completed_on(self, day: date) -> bool:
        return day in self.dates_completed

    def copy(self) -> "Habit":
        return Habit(
            habit_id=self.habit_id,
            name=self.name,
            cadence=self.cadence,
            dates_completed=set(self.dates_completed),
            streak_current=self.streak_current,
            streak_maximum=self.streak_maximum,
            target_weekly=self.target_weekly,
        )

    def to_record(self) -> dict:
        return {
            "habitId": self.habit_id,
            "habitName": self.name,
            "trackingType": self.cadence,
            "datesCompleted": [d.isoformat() for d in sorted(self.dates_completed)],
            "streakCurrent": self.streak_current,
            "streakMaximum": self.streak_maximum,
            "targetWeekly": self.target_weekly,
        }

    @classmethod
    def from_record(cls, record) -> "Habit":
        """Decode one persisted record. Streak fields are left for recompute()."""
        if not isinstance(record, dict):
            raise HabitDataError(f"Habit record must be an object, got {type(record).__name__}")

        habit_id = record.get("habitId")
        name = record.get("habitName")
        cadence = record.get("trackingType")
        dates = record.get("datesCompleted", [])

        if not isinstance(habit_id, str) or not habit_id:
            raise HabitDataError(f"Bad habitId: {habit_id!r}")
        if not isinstance(name, str) or not name.strip():
            raise HabitDataError(f"Bad habitName for {habit_id}: {name!r}")
        if cadence not in CADENCES:
            raise HabitDataError(f"Bad trackingType for {habit_id}: {cadence!r}")
        if not isinstance(dates, list) or not all(isinstance(d, str) for d in dates):
            raise HabitDataError(f"Bad datesCompleted for {habit_id}")

        try:
            completed = {parse_day(d) for d in dates}
        except HabitValidationError as e:
            raise HabitDataError(f"Bad date in {habit_id}: {e}") from e

        return cls(
            habit_id=habit_id,
            name=name,
            cadence=cadence,
            dates_completed=completed,
            target_weekly=_clamp_target(record.get("targetWeekly", DEFAULT_WEEKLY_TARGET)),
        )
