from __future__ import annotations

from ..model import EmployeeSnapshot
from .base import BadgeCondition


class FirstCheckinCondition(BadgeCondition):
    """At least one attendance record."""

    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        return len(snapshot.attendance) >= 1

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        return min(len(snapshot.attendance), 1)

    def target(self, threshold: int) -> int:
        return 1


class AttendanceCountCondition(BadgeCondition):
    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        return len(snapshot.attendance) >= threshold

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        return len(snapshot.attendance)


class OnTimeStreakCondition(BadgeCondition):
    """The most recent N attendance records are all on time."""

    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        recent = snapshot.most_recent(threshold)
        return threshold > 0 and len(recent) >= threshold and not any(a.is_late for a in recent)

    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        run = 0
        for a in snapshot.most_recent(threshold):
            if a.is_late:
                break
            run += 1
        return run
