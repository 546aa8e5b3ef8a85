"""Habit overview: a flat summary of today's standing across all habits.

Read-only. Mirrors what a dashboard or notification needs in one dict:
how many habits are done today, which are still due, and the best
running streaks.
"""

import logging

from habitdeck.store import HabitStore
from habitdeck.streaks import DAILY

log = logging.getLogger(__name__)


def habits_overview(store: HabitStore) -> dict:
    habits = store.list()
    if not habits:
        return {}  # No habits defined, nothing to report

    today = store.today()
    active_habits = len(habits)
    logged_today = sum(1 for h in habits if h.is_completed_on(today))

    due_today = []
    for h in habits:
        if h.cadence == DAILY:
            if not h.is_completed_on(today):
                due_today.append(h.name)
        else:
            progress = store.weekly_progress(h.habit_id)
            if progress and progress.completed < progress.target:
                due_today.append(h.name)

    # Top streaks (≥2 periods, sorted descending)
    streaks = sorted(
        [{"name": h.name, "cadence": h.cadence, "streak": h.streak_current}
         for h in habits if h.streak_current >= 2],
        key=lambda x: x["streak"],
        reverse=True,
    )[:3]  # Top 3

    parts = [f"{logged_today}/{active_habits} habits done today"]
    if streaks:
        top = streaks[0]
        unit = "day" if top["cadence"] == DAILY else "week"
        parts.append(f"{top['streak']}-{unit} {top['name']} streak")
    summary = ", ".join(parts)

    result: dict = {
        "active_habits": active_habits,
        "logged_today": logged_today,
        "summary": summary,
    }
    if due_today:
        result["due_today"] = due_today
    if streaks:
        result["streaks"] = streaks

    log.debug("Overview: %s", summary)
    return result
