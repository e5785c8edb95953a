from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class AttendanceLog:
    """Read-only attendance record owned by the check-in/check-out flow."""

    attendance_id: int
    employee_id: int
    work_date: date
    is_late: bool
    clock_in_time: Optional[datetime]
    clock_out_time: Optional[datetime]
    late_minutes: int = 0


@dataclass(frozen=True)
class OvertimeRequest:
    request_id: int
    employee_id: int
    request_date: date
    status: RequestStatus
    actual_hours: Optional[float] = None


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    start_date: date
    end_date: date
    status: RequestStatus
    is_half_day: bool = False
