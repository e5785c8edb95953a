"""Deterministic replay of an employee's raw history into ledger + aggregate values.

Uses the same point and streak rules as live event processing; the only
difference is that each delta counts toward the quarterly total when the
event's own date lies inside the quarter window current at replay time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Callable, Sequence

from ..common.datetime_utils import QuarterWindow
from ..history.model import AttendanceLog, OvertimeRequest
from ..points.model import EmployeeAggregate, PointAward, PointTotals, PointTransaction
from ..points.rules import checkin_awards, checkout_award, fold_award, overtime_award, streak_bonus_award
from ..progression.levels import calculate_level, calculate_rank_tier
from ..settings.model import GamificationSettings
from ..streaks.rules import StreakState, advance_streak, reset_streak


@dataclass(frozen=True)
class ReplayResult:
    transactions: tuple[PointTransaction, ...] = field(default_factory=tuple)
    totals: PointTotals = PointTotals()
    streak: StreakState = StreakState()

    def to_aggregate(self, employee_id: int, quarter: str) -> EmployeeAggregate:
        level = calculate_level(self.totals.total)
        return EmployeeAggregate(
            employee_id=employee_id,
            total_points=self.totals.total,
            quarterly_points=self.totals.quarterly,
            current_quarter=quarter,
            level=level.level,
            level_name=level.name,
            rank_tier=calculate_rank_tier(self.totals.quarterly).name,
            current_streak=self.streak.current,
            longest_streak=self.streak.longest,
            last_streak_date=self.streak.last_date,
        )


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min)


class _Replayer:
    def __init__(self, employee_id: int, settings: GamificationSettings, window: QuarterWindow):
        self.employee_id = employee_id
        self.settings = settings
        self.window = window
        self.totals = PointTotals()
        self.streak = StreakState()
        self.transactions: list[PointTransaction] = []

    def add(self, award: PointAward, day: date, at: datetime) -> None:
        self.totals = fold_award(self.totals, award, counts_for_quarter=self.window.contains(day))
        self.transactions.append(PointTransaction.from_award(self.employee_id, award, created_at=at))

    def attendance(self, log: AttendanceLog) -> None:
        checkin_at = log.clock_in_time or _start_of(log.work_date)
        for award in checkin_awards(
            self.settings,
            is_late=log.is_late,
            checkin_time=log.clock_in_time,
            reference_id=log.attendance_id,
        ):
            self.add(award, log.work_date, checkin_at)

        if log.is_late:
            self.streak = reset_streak(self.streak)
        else:
            advanced = advance_streak(self.streak, log.work_date, self.settings.working_days)
            if advanced is not self.streak:
                self.streak = advanced
                bonus = streak_bonus_award(self.settings, advanced.current)
                if bonus:
                    self.add(bonus, log.work_date, checkin_at)

        if log.clock_out_time:
            self.add(checkout_award(self.settings, log.attendance_id), log.work_date, log.clock_out_time)

    def overtime(self, ot: OvertimeRequest) -> None:
        self.add(overtime_award(self.settings, ot.request_id), ot.request_date, _start_of(ot.request_date))


def replay_history(
    employee_id: int,
    attendance: Sequence[AttendanceLog],
    overtime: Sequence[OvertimeRequest],
    *,
    settings: GamificationSettings,
    window: QuarterWindow,
) -> ReplayResult:
    """Fold attendance and completed overtime, in date order, into a ReplayResult.

    On the same day attendance is applied before overtime, matching the order
    in which the live events arrive.
    """
    replayer = _Replayer(employee_id, settings, window)

    events: list[tuple[date, int, int, Callable[[], None]]] = []
    for log in attendance:
        events.append((log.work_date, 0, log.attendance_id, lambda log=log: replayer.attendance(log)))
    for ot in overtime:
        events.append((ot.request_date, 1, ot.request_id, lambda ot=ot: replayer.overtime(ot)))

    for _, _, _, apply in sorted(events, key=lambda e: e[:3]):
        apply()

    return ReplayResult(
        transactions=tuple(replayer.transactions),
        totals=replayer.totals,
        streak=replayer.streak,
    )
