from __future__ import annotations

from ..model import EmployeeSnapshot
from .base import BadgeCondition


class EarlyCountCondition(BadgeCondition):
    """Lifetime early check-in transactions."""

    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        return snapshot.early_checkins >= threshold

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        return snapshot.early_checkins


class OvertimeCountCondition(BadgeCondition):
    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        return snapshot.completed_overtime >= threshold

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        return snapshot.completed_overtime


class StreakDaysCondition(BadgeCondition):
    """Current or longest streak reached N days."""

    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        return max(snapshot.current_streak, snapshot.longest_streak) >= threshold

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        return max(snapshot.current_streak, snapshot.longest_streak)
