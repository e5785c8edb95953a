from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import as_date
from ..core.enums import AccountStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..employees.model import Employee
from ..points.model import EmployeeAggregate
from .model import Standing
from .repository import StandingsRepository


class MySQLStandingsRepository(StandingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_standings(self) -> Sequence[Standing]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    ep.employee_id, ep.total_points, ep.quarterly_points, ep.current_quarter,
                    ep.level, ep.level_name, ep.rank_tier,
                    ep.current_streak, ep.longest_streak, ep.last_streak_date,
                    e.name, e.branch_id, e.account_status, e.role, e.is_system_account, e.deleted_at
                FROM employee_points ep
                JOIN employees e ON e.id = ep.employee_id
                """
            )
            rows = fetchall(cur)

            return [
                Standing(
                    employee=Employee(
                        employee_id=int(r["employee_id"]),
                        name=r["name"],
                        branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
                        account_status=AccountStatus(r.get("account_status") or AccountStatus.PENDING.value),
                        role=r.get("role") or "staff",
                        is_system_account=bool(r.get("is_system_account")),
                        deleted_at=r.get("deleted_at"),
                    ),
                    aggregate=EmployeeAggregate(
                        employee_id=int(r["employee_id"]),
                        total_points=int(r["total_points"] or 0),
                        quarterly_points=int(r["quarterly_points"] or 0),
                        current_quarter=r["current_quarter"],
                        level=int(r["level"] or 1),
                        level_name=r["level_name"],
                        rank_tier=r["rank_tier"],
                        current_streak=int(r["current_streak"] or 0),
                        longest_streak=int(r["longest_streak"] or 0),
                        last_streak_date=as_date(r.get("last_streak_date")),
                    ),
                )
                for r in rows
            ]
