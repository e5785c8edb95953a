from dataclasses import replace
from datetime import date, datetime, time

import pytest

from attendance_gamification.common.datetime_utils import quarter_window
from attendance_gamification.core.enums import AccountStatus, ActionType, ConditionType
from attendance_gamification.core.exceptions import RecalculationError
from attendance_gamification.history.model import AttendanceLog
from attendance_gamification.recalculation.replay import replay_history
from attendance_gamification.settings.model import GamificationSettings


def _at(d: date, hh: int, mm: int) -> datetime:
    return datetime.combine(d, time(hh, mm))


def _attend(engine, employee_id, d, *, late=False, checkout=True):
    return engine.history.add_attendance(
        employee_id,
        d,
        is_late=late,
        clock_in=_at(d, 9, 20) if late else _at(d, 8, 55),
        clock_out=_at(d, 18, 0) if checkout else None,
    )


def _txn_keys(txns):
    return sorted((t.action_type.value, t.points, t.created_at, t.reference_id) for t in txns)


def test_only_events_inside_the_current_quarter_count_toward_it(engine):
    engine.employees.add(1)
    _attend(engine, 1, date(2024, 12, 30))
    _attend(engine, 1, date(2024, 12, 31), checkout=False)
    _attend(engine, 1, date(2025, 1, 2), checkout=False)
    engine.history.add_overtime(1, date(2025, 1, 2))

    agg = engine.recalculation.recalculate(1, now=datetime(2025, 2, 10, 10, 0))

    assert agg.total_points == 50
    assert agg.quarterly_points == 25
    assert agg.current_quarter == "2025-Q1"
    # Wed 1 Jan had no record, so Thursday restarts the run
    assert agg.current_streak == 1
    assert agg.longest_streak == 2
    assert engine.points.get_aggregate(1) == agg


def test_recalculate_is_idempotent(engine):
    engine.employees.add(1)
    engine.badges.define(1, "first_step", ConditionType.FIRST_CHECKIN.value)
    for d in (date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5)):
        _attend(engine, 1, d)
    _attend(engine, 1, date(2025, 3, 6), late=True)
    engine.history.add_overtime(1, date(2025, 3, 4))
    now = datetime(2025, 3, 20, 10, 0)

    first = engine.recalculation.recalculate(1, now=now)
    first_txns = _txn_keys(engine.points.ledger_for(1))
    second = engine.recalculation.recalculate(1, now=now)

    assert first == second
    assert _txn_keys(engine.points.ledger_for(1)) == first_txns
    assert len(engine.badges.list_earned(1)) == 1


def test_replay_matches_live_processing(engine):
    engine.employees.add(1)
    engine.badges.define(1, "first_step", ConditionType.FIRST_CHECKIN.value)

    for d in (date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5), date(2025, 3, 6), date(2025, 3, 7)):
        log = _attend(engine, 1, d)
        engine.service.process_checkin(
            1, is_late=False, checkin_time=log.clock_in_time, attendance_id=log.attendance_id, now=log.clock_in_time
        )
        engine.service.process_checkout(1, log.attendance_id, now=log.clock_out_time)

    live_agg = engine.points.get_aggregate(1)
    live_txns = _txn_keys(engine.points.ledger_for(1))
    assert live_agg.total_points == 5 * 15 + 25

    rebuilt = engine.recalculation.recalculate(1, now=datetime(2025, 3, 7, 19, 0))

    assert rebuilt.total_points == live_agg.total_points
    assert rebuilt.quarterly_points == live_agg.quarterly_points
    assert rebuilt.level == live_agg.level
    assert rebuilt.rank_tier == live_agg.rank_tier
    assert (rebuilt.current_streak, rebuilt.longest_streak) == (live_agg.current_streak, live_agg.longest_streak)
    assert rebuilt.last_streak_date == live_agg.last_streak_date
    assert _txn_keys(engine.points.ledger_for(1)) == live_txns


def test_penalties_clamp_as_they_happen():
    logs = [
        AttendanceLog(1, 1, date(2025, 3, 3), True, _at(date(2025, 3, 3), 9, 30), None),
        AttendanceLog(2, 1, date(2025, 3, 4), False, _at(date(2025, 3, 4), 8, 55), None),
    ]

    result = replay_history(
        1, logs, [], settings=GamificationSettings(), window=quarter_window(date(2025, 3, 10))
    )

    assert [t.points for t in result.transactions] == [-5, 10]
    assert result.totals.total == 10
    assert result.totals.quarterly == 10


def test_stale_ledger_rows_are_replaced(engine):
    engine.employees.add(1)
    _attend(engine, 1, date(2025, 3, 3), checkout=False)
    engine.ledger.award_points(
        1, ActionType.OT_COMPLETED, 999, "Double-counted", settings=GamificationSettings(), now=datetime(2025, 3, 3, 20, 0)
    )

    agg = engine.recalculation.recalculate(1, now=datetime(2025, 3, 10, 9, 0))

    assert agg.total_points == 10
    assert [t.action_type for t in engine.points.ledger_for(1)] == [ActionType.ON_TIME_CHECKIN]


def test_failed_rebuild_leaves_previous_state(engine):
    engine.employees.add(1)
    _attend(engine, 1, date(2025, 3, 3))
    engine.recalculation.recalculate(1, now=datetime(2025, 3, 10, 9, 0))
    before_agg = engine.points.get_aggregate(1)
    before_txns = list(engine.points.transactions)

    def broken(aggregate, transactions):
        raise RuntimeError("connection lost")

    engine.points.rebuild_employee = broken

    with pytest.raises(RecalculationError) as exc:
        engine.recalculation.recalculate(1, now=datetime(2025, 3, 10, 9, 0))

    assert exc.value.employee_id == 1
    assert engine.points.get_aggregate(1) == before_agg
    assert engine.points.transactions == before_txns


def test_disabled_feature_leaves_data_alone(make_engine):
    engine = make_engine({"gamify_enabled": "false"})
    engine.employees.add(1)
    _attend(engine, 1, date(2025, 3, 3))
    engine.points.create_aggregate(1, quarter="2025-Q1")
    engine.points.aggregates[1] = replace(engine.points.aggregates[1], total_points=42)

    assert engine.recalculation.recalculate(1, now=datetime(2025, 3, 10, 9, 0)) is None
    assert engine.points.get_aggregate(1).total_points == 42


def test_recalculate_all_skips_unrankable_and_reports_failures(engine):
    engine.employees.add(1)
    engine.employees.add(2, account_status=AccountStatus.PENDING)
    engine.employees.add(3)
    _attend(engine, 1, date(2025, 3, 3))
    _attend(engine, 2, date(2025, 3, 3))

    original = engine.history.list_attendance

    def flaky(employee_id):
        if employee_id == 3:
            raise RuntimeError("bad row")
        return original(employee_id)

    engine.history.list_attendance = flaky

    summary = engine.recalculation.recalculate_all(now=datetime(2025, 3, 10, 9, 0))

    assert summary.processed == 1
    assert summary.failed == (3,)
    assert engine.points.get_aggregate(1).total_points == 15
    assert engine.points.get_aggregate(2) is None
