from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Sequence

import pytest

from attendance_gamification.badges.evaluator import BadgeEvaluator
from attendance_gamification.badges.model import BadgeDefinition, EarnedBadge, EarnedBadgeView
from attendance_gamification.core.enums import AccountStatus, ActionType, RequestStatus
from attendance_gamification.employees.model import Employee
from attendance_gamification.gamification.daily_check import DailyCheckService
from attendance_gamification.gamification.service import GamificationService
from attendance_gamification.history.model import AttendanceLog, LeaveRequest, OvertimeRequest
from attendance_gamification.leaderboard.model import Standing
from attendance_gamification.leaderboard.service import LeaderboardService
from attendance_gamification.notifications.notifier import BadgeNotification
from attendance_gamification.points.ledger import PointsLedger
from attendance_gamification.points.model import EmployeeAggregate, PointTransaction
from attendance_gamification.progression.levels import calculate_level, calculate_rank_tier
from attendance_gamification.recalculation.service import RecalculationService
from attendance_gamification.settings.service import SettingsGateway
from attendance_gamification.streaks.rules import StreakState
from attendance_gamification.streaks.tracker import StreakTracker


class InMemorySettings:
    def __init__(self, values: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(values or {})

    def get_many(self, keys: Sequence[str]) -> dict[str, str]:
        return {k: self.values[k] for k in keys if k in self.values}

    def get_by_prefix(self, prefix: str) -> dict[str, str]:
        return {k: v for k, v in self.values.items() if k.startswith(prefix)}

    def upsert(self, key: str, value: str) -> None:
        self.values[key] = value


class InMemoryBadges:
    def __init__(self):
        self.definitions: list[BadgeDefinition] = []
        self.earned: list[EarnedBadge] = []

    def define(self, badge_id: int, code: str, condition_type: str, condition_value: int = 0, **kw) -> BadgeDefinition:
        badge = BadgeDefinition(
            badge_id=badge_id,
            code=code,
            name=kw.pop("name", code.replace("_", " ").title()),
            icon=kw.pop("icon", "🏅"),
            category=kw.pop("category", "attendance"),
            tier=kw.pop("tier", "bronze"),
            condition_type=condition_type,
            condition_value=condition_value,
            **kw,
        )
        self.definitions.append(badge)
        return badge

    def list_active_definitions(self) -> Sequence[BadgeDefinition]:
        return [b for b in self.definitions if b.is_active]

    def list_earned(self, employee_id: int) -> Sequence[EarnedBadge]:
        return [b for b in self.earned if b.employee_id == employee_id]

    def insert_earned(self, employee_id: int, badge_id: int, *, month_context: Optional[str], earned_at: datetime) -> bool:
        if any(b.employee_id == employee_id and b.key == (badge_id, month_context) for b in self.earned):
            return False
        self.earned.append(EarnedBadge(employee_id, badge_id, earned_at, month_context))
        return True

    def list_recent_earned(self, employee_id: int, limit: int) -> Sequence[EarnedBadgeView]:
        by_id = {b.badge_id: b for b in self.definitions}
        mine = sorted(self.list_earned(employee_id), key=lambda b: b.earned_at, reverse=True)[:limit]
        return [EarnedBadgeView(by_id[b.badge_id], b.earned_at, b.month_context) for b in mine]

    def count_by_employee(self, employee_ids: Sequence[int]) -> dict[int, int]:
        counts: dict[int, int] = {}
        for b in self.earned:
            if b.employee_id in employee_ids:
                counts[b.employee_id] = counts.get(b.employee_id, 0) + 1
        return counts


class InMemoryPoints:
    """Same add-and-clamp semantics as the SQL UPDATE in MySQLPointsRepository."""

    def __init__(self, badges: Optional[InMemoryBadges] = None):
        self.transactions: list[PointTransaction] = []
        self.aggregates: dict[int, EmployeeAggregate] = {}
        self._badges = badges
        self._id = 0

    def _append(self, txn: PointTransaction) -> int:
        self._id += 1
        self.transactions.append(replace(txn, transaction_id=self._id))
        return self._id

    def get_aggregate(self, employee_id: int) -> Optional[EmployeeAggregate]:
        return self.aggregates.get(employee_id)

    def create_aggregate(self, employee_id: int, *, quarter: str) -> None:
        self.aggregates.setdefault(employee_id, EmployeeAggregate.empty(employee_id, quarter))

    def roll_quarter(self, employee_id: int, *, quarter: str, rank_tier: str) -> bool:
        agg = self.aggregates.get(employee_id)
        if agg is None or agg.current_quarter == quarter:
            return False
        self.aggregates[employee_id] = replace(agg, quarterly_points=0, current_quarter=quarter, rank_tier=rank_tier)
        return True

    def increment_points(self, txn: PointTransaction, *, quarter: str) -> tuple[int, int]:
        agg = self.aggregates.get(txn.employee_id)
        if agg is None:
            raise LookupError(f"employee_points row for {txn.employee_id} does not exist")
        base = agg.quarterly_points if agg.current_quarter == quarter else 0
        total = max(0, agg.total_points + txn.points)
        quarterly = max(0, base + txn.points)
        level = calculate_level(total)
        self._append(txn)
        self.aggregates[txn.employee_id] = replace(
            agg,
            total_points=total,
            quarterly_points=quarterly,
            current_quarter=quarter,
            level=level.level,
            level_name=level.name,
            rank_tier=calculate_rank_tier(quarterly).name,
        )
        return total, quarterly

    def update_streak(self, employee_id: int, state: StreakState) -> None:
        agg = self.aggregates[employee_id]
        self.aggregates[employee_id] = replace(
            agg,
            current_streak=state.current,
            longest_streak=max(agg.longest_streak, state.longest),
            last_streak_date=state.last_date,
        )

    def reset_current_streak(self, employee_id: int) -> None:
        agg = self.aggregates[employee_id]
        self.aggregates[employee_id] = replace(agg, current_streak=0)

    def count_transactions(self, employee_id: int, action_type: ActionType, *, since: Optional[datetime] = None) -> int:
        return sum(
            1
            for t in self.transactions
            if t.employee_id == employee_id
            and t.action_type == action_type
            and (since is None or t.created_at >= since)
        )

    def count_ahead(self, total_points: int) -> int:
        return sum(1 for a in self.aggregates.values() if a.total_points > total_points)

    def rebuild_employee(self, aggregate: EmployeeAggregate, transactions: Sequence[PointTransaction]) -> None:
        employee_id = aggregate.employee_id
        self.transactions = [t for t in self.transactions if t.employee_id != employee_id]
        if self._badges is not None:
            self._badges.earned = [b for b in self._badges.earned if b.employee_id != employee_id]
        self.aggregates[employee_id] = aggregate
        for t in transactions:
            self._append(t)

    def ledger_for(self, employee_id: int) -> list[PointTransaction]:
        return [t for t in self.transactions if t.employee_id == employee_id]


class InMemoryHistory:
    def __init__(self):
        self.attendance: list[AttendanceLog] = []
        self.overtime: list[OvertimeRequest] = []
        self.leave: list[LeaveRequest] = []

    def add_attendance(
        self,
        employee_id: int,
        work_date: date,
        *,
        is_late: bool = False,
        clock_in: Optional[datetime] = None,
        clock_out: Optional[datetime] = None,
    ) -> AttendanceLog:
        log = AttendanceLog(
            attendance_id=len(self.attendance) + 1,
            employee_id=employee_id,
            work_date=work_date,
            is_late=is_late,
            clock_in_time=clock_in,
            clock_out_time=clock_out,
        )
        self.attendance.append(log)
        return log

    def add_overtime(self, employee_id: int, request_date: date, status: RequestStatus = RequestStatus.COMPLETED):
        ot = OvertimeRequest(len(self.overtime) + 1, employee_id, request_date, status, 2.0)
        self.overtime.append(ot)
        return ot

    def add_leave(self, employee_id: int, start: date, end: date, status: RequestStatus = RequestStatus.APPROVED):
        req = LeaveRequest(len(self.leave) + 1, employee_id, start, end, status)
        self.leave.append(req)
        return req

    def list_attendance(self, employee_id: int) -> Sequence[AttendanceLog]:
        return sorted(
            (a for a in self.attendance if a.employee_id == employee_id),
            key=lambda a: (a.work_date, a.attendance_id),
        )

    def list_completed_overtime(self, employee_id: int) -> Sequence[OvertimeRequest]:
        return sorted(
            (o for o in self.overtime if o.employee_id == employee_id and o.status == RequestStatus.COMPLETED),
            key=lambda o: (o.request_date, o.request_id),
        )

    def list_approved_leave(self, employee_id: int, *, start: date, end: date) -> Sequence[LeaveRequest]:
        return [
            r
            for r in self.leave
            if r.employee_id == employee_id
            and r.status == RequestStatus.APPROVED
            and r.start_date <= end
            and r.end_date >= start
        ]


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee] = field(default_factory=dict)

    def add(self, employee_id: int, name: str = "", **kw) -> Employee:
        kw.setdefault("branch_id", 1)
        kw.setdefault("account_status", AccountStatus.APPROVED)
        emp = Employee(employee_id=employee_id, name=name or f"Employee {employee_id}", **kw)
        self.employees[employee_id] = emp
        return emp

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def list_all(self) -> Sequence[Employee]:
        return list(self.employees.values())


@dataclass
class InMemoryStandings:
    employees: InMemoryEmployees
    points: InMemoryPoints

    def list_standings(self) -> Sequence[Standing]:
        return [
            Standing(self.employees.employees[emp_id], agg)
            for emp_id, agg in self.points.aggregates.items()
            if emp_id in self.employees.employees
        ]


class RecordingNotifier:
    def __init__(self, *, fail: bool = False):
        self.badges: list[BadgeNotification] = []
        self.announcements: list[str] = []
        self._fail = fail

    def notify_badge(self, notification: BadgeNotification) -> None:
        if self._fail:
            raise RuntimeError("notification channel down")
        self.badges.append(notification)

    def announce_ranking(self, message: str) -> bool:
        self.announcements.append(message)
        return True


@dataclass
class Engine:
    settings_repo: InMemorySettings
    badges: InMemoryBadges
    points: InMemoryPoints
    history: InMemoryHistory
    employees: InMemoryEmployees
    notifier: RecordingNotifier
    settings: SettingsGateway
    ledger: PointsLedger
    streaks: StreakTracker
    evaluator: BadgeEvaluator
    leaderboard: LeaderboardService
    service: GamificationService
    recalculation: RecalculationService
    daily_check: DailyCheckService


def build_engine(settings_values: Optional[dict[str, str]] = None) -> Engine:
    settings_repo = InMemorySettings(settings_values)
    badges = InMemoryBadges()
    points = InMemoryPoints(badges)
    history = InMemoryHistory()
    employees = InMemoryEmployees()
    notifier = RecordingNotifier()

    settings = SettingsGateway(settings_repo)
    ledger = PointsLedger(points)
    streaks = StreakTracker(points, ledger)
    evaluator = BadgeEvaluator(badges, points, history, notifier)
    leaderboard = LeaderboardService(InMemoryStandings(employees, points), badges, limit=50)
    service = GamificationService(settings, ledger, streaks, evaluator, points, badges, leaderboard)
    recalculation = RecalculationService(settings, points, history, employees, evaluator)
    daily_check = DailyCheckService(
        settings, employees, history, points, ledger, evaluator, leaderboard, notifier
    )
    return Engine(
        settings_repo=settings_repo,
        badges=badges,
        points=points,
        history=history,
        employees=employees,
        notifier=notifier,
        settings=settings,
        ledger=ledger,
        streaks=streaks,
        evaluator=evaluator,
        leaderboard=leaderboard,
        service=service,
        recalculation=recalculation,
        daily_check=daily_check,
    )


@pytest.fixture
def engine() -> Engine:
    return build_engine()


@pytest.fixture
def make_engine():
    return build_engine
