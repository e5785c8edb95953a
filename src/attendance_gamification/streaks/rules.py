"""Pure streak arithmetic shared by the live tracker and history replay."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import AbstractSet, Optional

from ..common.datetime_utils import js_weekday


@dataclass(frozen=True)
class StreakState:
    current: int = 0
    longest: int = 0
    last_date: Optional[date] = None


def expected_previous_day(day: date, working_days: AbstractSet[int]) -> date:
    """Closest earlier day that is a working day (0 = Sunday convention)."""
    prev = day - timedelta(days=1)
    for _ in range(7):
        if js_weekday(prev) in working_days:
            return prev
        prev -= timedelta(days=1)
    # No working day configured at all: every day counts.
    return day - timedelta(days=1)


def advance_streak(state: StreakState, day: date, working_days: AbstractSet[int]) -> StreakState:
    """Count `day` as a contributing day.

    Returns `state` itself (identity) when `day` was already counted.
    """
    if state.last_date == day:
        return state

    if state.last_date is not None and state.last_date == expected_previous_day(day, working_days):
        current = state.current + 1
    else:
        current = 1
    return StreakState(current=current, longest=max(state.longest, current), last_date=day)


def reset_streak(state: StreakState) -> StreakState:
    """Late arrival: the current run ends, the record stays."""
    return replace(state, current=0)
