"""Streak calculation over a set of completion dates.

Pure functions, no I/O. "Today" is always passed in by the caller so results
are reproducible; the store supplies the local date from config.

Daily cadence counts consecutive days. Weekly cadence buckets completions into
Monday-anchored weeks and counts consecutive weeks that reach the target.
Both current streaks allow one period of grace: a streak ending yesterday (or
last week) is still current until that period has fully passed.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

DAILY = "daily"
WEEKLY = "weekly"
CADENCES = (DAILY, WEEKLY)

_ONE_DAY = timedelta(days=1)
_ONE_WEEK = timedelta(days=7)


@dataclass(frozen=True)
class Streak:
    current: int = 0
    maximum: int = 0


def _longest_run(ordered: list[date], step: timedelta) -> int:
    """Length of the longest run where neighbours differ by exactly `step`."""
    if not ordered:
        return 0
    best = run = 1
    for prev, cur in zip(ordered, ordered[1:]):
        run = run + 1 if cur - prev == step else 1
        best = max(best, run)
    return best


def _run_back_from(anchor: date, present: set[date], step: timedelta) -> int:
    count = 0
    while anchor in present:
        count += 1
        anchor -= step
    return count


def daily_streak(dates: Iterable[date], today: date) -> Streak:
    days = set(dates)
    if not days:
        return Streak()

    maximum = _longest_run(sorted(days), _ONE_DAY)

    if today in days:
        current = _run_back_from(today, days, _ONE_DAY)
    elif today - _ONE_DAY in days:
        current = _run_back_from(today - _ONE_DAY, days, _ONE_DAY)
    else:
        current = 0

    return Streak(current=current, maximum=maximum)


def week_start(day: date) -> date:
    """Monday of the week containing `day` (the week bucket key)."""
    return day - timedelta(days=day.weekday())


def week_buckets(dates: Iterable[date]) -> Counter:
    """Count completions per week, keyed by week start."""
    return Counter(week_start(d) for d in set(dates))


def weekly_streak(dates: Iterable[date], target: int, today: date) -> Streak:
    if isinstance(target, bool) or not isinstance(target, int) or target < 1:
        raise ValueError(f"weekly target must be a positive integer, got {target!r}")

    buckets = week_buckets(dates)
    satisfied = {week for week, count in buckets.items() if count >= target}
    if not satisfied:
        return Streak()

    maximum = _longest_run(sorted(satisfied), _ONE_WEEK)

    this_week = week_start(today)
    if this_week in satisfied:
        current = _run_back_from(this_week, satisfied, _ONE_WEEK)
    elif this_week - _ONE_WEEK in satisfied:
        current = _run_back_from(this_week - _ONE_WEEK, satisfied, _ONE_WEEK)
    else:
        current = 0

    return Streak(current=current, maximum=maximum)


def compute_streak(cadence: str, dates: Iterable[date], target: int,
                   today: date) -> Streak:
    """Dispatch to the daily or weekly algorithm."""
    if cadence == DAILY:
        return daily_streak(dates, today)
    if cadence == WEEKLY:
        return weekly_streak(dates, target, today)
    raise ValueError(f"unknown cadence: {cadence!r}")


def week_completions(dates: Iterable[date], today: date) -> int:
    """Number of completions in the week containing `today`."""
    start = week_start(today)
    end = start + _ONE_WEEK
    return sum(1 for d in set(dates) if start <= d < end)
