"""Habit store: the single owner of the habit collection.

Every mutation funnels through _commit(), which recomputes the touched habit's
streaks and then writes the whole collection through the repository. Writes
are best-effort: a failed save is logged and the in-memory state stays
authoritative until the next successful one.

Unknown habit ids are not errors: mutators return None (or False for delete)
and leave everything as it was.
"""

import builtins
import logging
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone, timedelta
from typing import Callable

from habitdeck.config import DEFAULT_WEEKLY_TARGET, HISTORY_DAYS, TIMEZONE_OFFSET_HOURS
from habitdeck.models import (
    Habit,
    parse_day,
    validate_cadence,
    validate_name,
    validate_target,
)
from habitdeck.persistence import HabitRepository
from habitdeck.streaks import DAILY, week_completions

log = logging.getLogger(__name__)

TZ = timezone(timedelta(hours=TIMEZONE_OFFSET_HOURS))


def local_today() -> date:
    return datetime.now(TZ).date()


@dataclass(frozen=True)
class DayStatus:
    day: date
    completed: bool
    is_today: bool


@dataclass(frozen=True)
class WeekProgress:
    completed: int
    target: int

    @property
    def ratio(self) -> float:
        """Fraction of the target reached, capped at 1.0."""
        return min(self.completed / self.target, 1.0)


class HabitStore:
    """In-memory habit collection backed by a HabitRepository.

    Returned habits are copies; changes go through the mutators only.
    """

    def __init__(self, repository: HabitRepository,
                 today: Callable[[], date] | None = None) -> None:
        self._repo = repository
        self._today = today or local_today
        self._last_id = 0
        self._habits: list[Habit] = repository.load()
        current = self.today()
        for habit in self._habits:
            habit.recompute(current)

    def today(self) -> date:
        return self._today()

    # ── internals ────────────────────────────────────────────────────────

    def _find(self, habit_id: str) -> Habit | None:
        for habit in self._habits:
            if habit.habit_id == habit_id:
                return habit
        return None

    def _new_id(self) -> str:
        """Millisecond timestamp, bumped past anything already issued or stored."""
        candidate = time.time_ns() // 1_000_000
        taken = {h.habit_id for h in self._habits}
        candidate = max(candidate, self._last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def _persist(self) -> bool:
        try:
            self._repo.save(self._habits)
        except Exception as e:
            log.error("Failed to persist %d habits: %s", len(self._habits), e,
                      exc_info=True)
            return False
        return True

    def _commit(self, habit: Habit) -> Habit:
        habit.recompute(self.today())
        self._persist()
        return habit.copy()

    def _update(self, habit_id: str, change: Callable[[Habit], None]) -> Habit | None:
        habit = self._find(habit_id)
        if habit is None:
            log.info("Habit %s not found, ignoring update", habit_id)
            return None
        change(habit)
        return self._commit(habit)

    # ── mutations ────────────────────────────────────────────────────────

    def create(self, name: str, cadence: str = DAILY,
               target: int | None = None) -> Habit:
        name = validate_name(name)
        cadence = validate_cadence(cadence)
        target = validate_target(DEFAULT_WEEKLY_TARGET if target is None else target)

        habit = Habit(habit_id=self._new_id(), name=name, cadence=cadence,
                      target_weekly=target)
        self._habits.append(habit)
        log.info("Created habit %s (%s, %s)", habit.habit_id, name, cadence)
        return self._commit(habit)

    def delete(self, habit_id: str) -> bool:
        habit = self._find(habit_id)
        if habit is None:
            log.info("Habit %s not found, nothing to delete", habit_id)
            return False
        self._habits.remove(habit)
        log.info("Deleted habit %s (%s)", habit_id, habit.name)
        self._persist()
        return True

    def toggle(self, habit_id: str, day=None) -> Habit | None:
        """Flip completion for `day` (default today)."""
        target_day = self.today() if day is None else parse_day(day)

        def change(habit: Habit) -> None:
            if target_day in habit.dates_completed:
                habit.dates_completed.discard(target_day)
            else:
                habit.dates_completed.add(target_day)

        return self._update(habit_id, change)

    def rename(self, habit_id: str, name: str) -> Habit | None:
        name = validate_name(name)

        def change(habit: Habit) -> None:
            habit.name = name

        return self._update(habit_id, change)

    def set_cadence(self, habit_id: str, cadence: str) -> Habit | None:
        cadence = validate_cadence(cadence)

        def change(habit: Habit) -> None:
            habit.cadence = cadence

        return self._update(habit_id, change)

    def set_weekly_target(self, habit_id: str, target: int) -> Habit | None:
        target = validate_target(target)

        def change(habit: Habit) -> None:
            habit.target_weekly = target

        return self._update(habit_id, change)

    def refresh(self) -> None:
        """Recompute all streaks against the current date (e.g. after midnight)."""
        current = self.today()
        for habit in self._habits:
            habit.recompute(current)
        self._persist()

    # ── queries ──────────────────────────────────────────────────────────

    def get(self, habit_id: str) -> Habit | None:
        habit = self._find(habit_id)
        return habit.copy() if habit else None

    def is_completed_on(self, habit_id: str, day) -> bool:
        habit = self._find(habit_id)
        return habit is not None and habit.is_completed_on(parse_day(day))

    def is_done_today(self, habit_id: str) -> bool:
        return self.is_completed_on(habit_id, self.today())

    def history(self, habit_id: str, days: int = HISTORY_DAYS) -> list[DayStatus]:
        """Completion status for the last `days` days, oldest first, ending today."""
        habit = self._find(habit_id)
        if habit is None:
            return []
        today = self.today()
        return [
            DayStatus(day=d, completed=d in habit.dates_completed, is_today=d == today)
            for d in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
        ]

    def weekly_progress(self, habit_id: str) -> WeekProgress | None:
        habit = self._find(habit_id)
        if habit is None:
            return None
        return WeekProgress(
            completed=week_completions(habit.dates_completed, self.today()),
            target=habit.target_weekly,
        )

    def list(self) -> builtins.list[Habit]:
        """All habits in creation order."""
        return [h.copy() for h in self._habits]
