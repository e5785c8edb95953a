from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceLog, LeaveRequest, OvertimeRequest


class HistoryRepository(Protocol):
    """Chronological read access to attendance, overtime and leave data."""

    def list_attendance(self, employee_id: int) -> Sequence[AttendanceLog]:
        """All attendance logs, oldest work date first."""

        raise NotImplementedError

    def list_completed_overtime(self, employee_id: int) -> Sequence[OvertimeRequest]:
        """Completed overtime requests, oldest request date first."""

        raise NotImplementedError

    def list_approved_leave(self, employee_id: int, *, start: date, end: date) -> Sequence[LeaveRequest]:
        """Approved leave requests overlapping [start, end]."""

        raise NotImplementedError
