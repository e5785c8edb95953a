from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datetime_utils import as_date
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceLog, LeaveRequest, OvertimeRequest
from .repository import HistoryRepository


class MySQLHistoryRepository(HistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_attendance(self, employee_id: int) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, work_date, is_late, COALESCE(late_minutes, 0) AS late_minutes,
                       clock_in_time, clock_out_time
                FROM attendance_logs
                WHERE employee_id=%s
                ORDER BY work_date ASC, id ASC
                """,
                (employee_id,),
            )
            return [
                AttendanceLog(
                    attendance_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    work_date=as_date(r["work_date"]),
                    is_late=bool(r["is_late"]),
                    clock_in_time=r.get("clock_in_time"),
                    clock_out_time=r.get("clock_out_time"),
                    late_minutes=int(r["late_minutes"]),
                )
                for r in fetchall(cur)
            ]

    def list_completed_overtime(self, employee_id: int) -> Sequence[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, request_date, status, actual_ot_hours
                FROM ot_requests
                WHERE employee_id=%s AND status=%s
                ORDER BY request_date ASC, id ASC
                """,
                (employee_id, RequestStatus.COMPLETED.value),
            )
            return [
                OvertimeRequest(
                    request_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    request_date=as_date(r["request_date"]),
                    status=RequestStatus(r["status"]),
                    actual_hours=float(r["actual_ot_hours"]) if r.get("actual_ot_hours") is not None else None,
                )
                for r in fetchall(cur)
            ]

    def list_approved_leave(self, employee_id: int, *, start: date, end: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, start_date, end_date, status, is_half_day
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date<=%s AND end_date>=%s
                ORDER BY start_date ASC
                """,
                (employee_id, RequestStatus.APPROVED.value, end, start),
            )
            return [
                LeaveRequest(
                    request_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    start_date=as_date(r["start_date"]),
                    end_date=as_date(r["end_date"]),
                    status=RequestStatus(r["status"]),
                    is_half_day=bool(r.get("is_half_day")),
                )
                for r in fetchall(cur)
            ]
