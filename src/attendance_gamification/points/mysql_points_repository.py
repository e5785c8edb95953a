from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import as_date
from ..core.constants import TRANSACTION_BATCH_SIZE
from ..core.enums import ActionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..progression.levels import calculate_level, calculate_rank_tier
from ..streaks.rules import StreakState
from .model import EmployeeAggregate, PointTransaction
from .repository import PointsRepository

_AGGREGATE_COLUMNS = """
    employee_id, total_points, quarterly_points, current_quarter, level, level_name,
    rank_tier, current_streak, longest_streak, last_streak_date
"""


def _to_aggregate(r: Dict[str, Any]) -> EmployeeAggregate:
    return EmployeeAggregate(
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
    )


def _txn_params(txn: PointTransaction) -> tuple:
    return (
        txn.employee_id,
        txn.points,
        txn.action_type.value,
        txn.description,
        txn.reference_id,
        txn.reference_type.value if txn.reference_type else None,
        txn.created_at,
    )


_INSERT_TXN = """
    INSERT INTO point_transactions
        (employee_id, points, action_type, description, reference_id, reference_type, created_at)
    VALUES (%s,%s,%s,%s,%s,%s,%s)
"""


class MySQLPointsRepository(PointsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_aggregate(self, employee_id: int) -> Optional[EmployeeAggregate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_AGGREGATE_COLUMNS} FROM employee_points WHERE employee_id=%s",
                (employee_id,),
            )
            r = fetchone(cur)
            return _to_aggregate(r) if r else None

    def create_aggregate(self, employee_id: int, *, quarter: str) -> None:
        empty = EmployeeAggregate.empty(employee_id, quarter)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO employee_points
                    (employee_id, total_points, quarterly_points, current_quarter, level, level_name, rank_tier,
                     current_streak, longest_streak)
                VALUES (%s, 0, 0, %s, %s, %s, %s, 0, 0)
                """,
                (employee_id, quarter, empty.level, empty.level_name, empty.rank_tier),
            )

    def roll_quarter(self, employee_id: int, *, quarter: str, rank_tier: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_points
                SET quarterly_points=0, current_quarter=%s, rank_tier=%s
                WHERE employee_id=%s AND current_quarter<>%s
                """,
                (quarter, rank_tier, employee_id, quarter),
            )
            return cur.rowcount > 0

    def increment_points(self, txn: PointTransaction, *, quarter: str) -> tuple[int, int]:
        employee_id = txn.employee_id
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT_TXN, _txn_params(txn))
            # SET clauses are evaluated left to right: current_quarter must be assigned last.
            cur.execute(
                """
                UPDATE employee_points
                SET total_points = GREATEST(0, total_points + %s),
                    quarterly_points = CASE
                        WHEN current_quarter = %s THEN GREATEST(0, quarterly_points + %s)
                        ELSE GREATEST(0, %s)
                    END,
                    current_quarter = %s
                WHERE employee_id=%s
                """,
                (txn.points, quarter, txn.points, txn.points, quarter, employee_id),
            )
            cur.execute(
                "SELECT total_points, quarterly_points FROM employee_points WHERE employee_id=%s",
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                raise LookupError(f"employee_points row for {employee_id} does not exist")
            total, quarterly = int(r["total_points"]), int(r["quarterly_points"])

            # Row lock from the UPDATE is held until commit.
            level = calculate_level(total)
            cur.execute(
                "UPDATE employee_points SET level=%s, level_name=%s, rank_tier=%s WHERE employee_id=%s",
                (level.level, level.name, calculate_rank_tier(quarterly).name, employee_id),
            )
            return total, quarterly

    def update_streak(self, employee_id: int, state: StreakState) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_points
                SET current_streak=%s, longest_streak=GREATEST(longest_streak, %s), last_streak_date=%s
                WHERE employee_id=%s
                """,
                (state.current, state.longest, state.last_date, employee_id),
            )

    def reset_current_streak(self, employee_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employee_points SET current_streak=0 WHERE employee_id=%s", (employee_id,))

    def count_transactions(
        self, employee_id: int, action_type: ActionType, *, since: Optional[datetime] = None
    ) -> int:
        sql = "SELECT COUNT(*) AS n FROM point_transactions WHERE employee_id=%s AND action_type=%s"
        params: list = [employee_id, action_type.value]
        if since is not None:
            sql += " AND created_at >= %s"
            params.append(since)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_ahead(self, total_points: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employee_points WHERE total_points > %s", (total_points,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def rebuild_employee(self, aggregate: EmployeeAggregate, transactions: Sequence[PointTransaction]) -> None:
        employee_id = aggregate.employee_id
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM point_transactions WHERE employee_id=%s", (employee_id,))
            cur.execute("DELETE FROM employee_badges WHERE employee_id=%s", (employee_id,))
            cur.execute("DELETE FROM employee_points WHERE employee_id=%s", (employee_id,))

            cur.execute(
                """
                INSERT INTO employee_points
                    (employee_id, total_points, quarterly_points, current_quarter, level, level_name, rank_tier,
                     current_streak, longest_streak, last_streak_date)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_id,
                    aggregate.total_points,
                    aggregate.quarterly_points,
                    aggregate.current_quarter,
                    aggregate.level,
                    aggregate.level_name,
                    aggregate.rank_tier,
                    aggregate.current_streak,
                    aggregate.longest_streak,
                    aggregate.last_streak_date,
                ),
            )

            rows = [_txn_params(t) for t in transactions]
            for i in range(0, len(rows), TRANSACTION_BATCH_SIZE):
                cur.executemany(_INSERT_TXN, rows[i : i + TRANSACTION_BATCH_SIZE])
