from datetime import date

from attendance_gamification.streaks.rules import (
    StreakState,
    advance_streak,
    expected_previous_day,
    reset_streak,
)

MON_TO_FRI = frozenset({1, 2, 3, 4, 5})

FRIDAY = date(2025, 3, 7)
MONDAY = date(2025, 3, 10)


def test_previous_working_day_skips_weekend():
    assert expected_previous_day(MONDAY, MON_TO_FRI) == FRIDAY
    assert expected_previous_day(date(2025, 3, 11), MON_TO_FRI) == MONDAY


def test_friday_to_monday_continues_streak():
    state = StreakState(current=4, longest=4, last_date=FRIDAY)

    new_state = advance_streak(state, MONDAY, MON_TO_FRI)

    assert new_state.current == 5
    assert new_state.longest == 5
    assert new_state.last_date == MONDAY


def test_missing_a_working_day_restarts_at_one():
    state = StreakState(current=3, longest=7, last_date=date(2025, 3, 3))

    new_state = advance_streak(state, date(2025, 3, 5), MON_TO_FRI)

    assert new_state.current == 1
    assert new_state.longest == 7


def test_same_day_is_not_counted_twice():
    state = StreakState(current=2, longest=2, last_date=MONDAY)

    assert advance_streak(state, MONDAY, MON_TO_FRI) is state


def test_first_day_starts_streak():
    new_state = advance_streak(StreakState(), MONDAY, MON_TO_FRI)
    assert new_state == StreakState(current=1, longest=1, last_date=MONDAY)


def test_reset_keeps_longest():
    state = StreakState(current=6, longest=9, last_date=FRIDAY)

    new_state = reset_streak(state)

    assert new_state.current == 0
    assert new_state.longest == 9
    assert new_state.last_date == FRIDAY


def test_weekend_work_counts_when_configured():
    every_day = frozenset(range(7))
    saturday = date(2025, 3, 8)

    new_state = advance_streak(StreakState(current=1, longest=1, last_date=FRIDAY), saturday, every_day)

    assert new_state.current == 2


def test_no_working_days_falls_back_to_calendar_days():
    assert expected_previous_day(MONDAY, frozenset()) == date(2025, 3, 9)
