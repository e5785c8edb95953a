from __future__ import annotations

from ...core.constants import MONTHLY_MIN_ATTENDANCE
from ..model import EmployeeSnapshot
from .base import BadgeCondition


class OnTimeMonthCondition(BadgeCondition):
    """Enough attendance this calendar month and not a single late day."""

    monthly = True

    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        logs = snapshot.attendance_this_month()
        return len(logs) >= MONTHLY_MIN_ATTENDANCE and not any(a.is_late for a in logs)

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        logs = snapshot.attendance_this_month()
        return 0 if any(a.is_late for a in logs) else len(logs)

    def target(self, threshold: int) -> int:
        return MONTHLY_MIN_ATTENDANCE


class NoLeaveMonthCondition(BadgeCondition):
    """No approved leave this month and enough attendance."""

    monthly = True

    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        if snapshot.approved_leave_this_month > 0:
            return False
        return len(snapshot.attendance_this_month()) >= MONTHLY_MIN_ATTENDANCE

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        if snapshot.approved_leave_this_month > 0:
            return 0
        return len(snapshot.attendance_this_month())

    def target(self, threshold: int) -> int:
        return MONTHLY_MIN_ATTENDANCE
