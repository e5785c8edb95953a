from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import BadgeDefinition, EarnedBadge, EarnedBadgeView
from .repository import BadgeRepository

_DEFINITION_COLUMNS = """
    bd.id, bd.code, bd.name, bd.description, bd.icon, bd.category, bd.tier,
    bd.condition_type, bd.condition_value, bd.points_reward, bd.is_active
"""


def _to_definition(r: Dict[str, Any]) -> BadgeDefinition:
    return BadgeDefinition(
        badge_id=int(r["id"]),
        code=r["code"],
        name=r["name"],
        icon=r.get("icon") or "",
        category=r.get("category") or "",
        tier=r.get("tier") or "",
        condition_type=r["condition_type"],
        condition_value=int(r.get("condition_value") or 0),
        points_reward=int(r.get("points_reward") or 0),
        is_active=bool(r.get("is_active", True)),
        description=r.get("description"),
    )


class MySQLBadgeRepository(BadgeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_definitions(self) -> Sequence[BadgeDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DEFINITION_COLUMNS}
                FROM badge_definitions bd
                WHERE bd.is_active = 1
                ORDER BY bd.tier ASC, bd.id ASC
                """
            )
            return [_to_definition(r) for r in fetchall(cur)]

    def list_earned(self, employee_id: int) -> Sequence[EarnedBadge]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, badge_id, earned_at, month_context
                FROM employee_badges
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            return [
                EarnedBadge(
                    employee_id=int(r["employee_id"]),
                    badge_id=int(r["badge_id"]),
                    earned_at=r["earned_at"],
                    month_context=r.get("month_context"),
                )
                for r in fetchall(cur)
            ]

    def insert_earned(
        self,
        employee_id: int,
        badge_id: int,
        *,
        month_context: Optional[str],
        earned_at: datetime,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employee_badges (employee_id, badge_id, month_context, earned_at)
                    VALUES (%s,%s,%s,%s)
                    """,
                    (employee_id, badge_id, month_context, earned_at),
                )
                return True
        except mysql_errors.IntegrityError:
            # Unique (employee_id, badge_id, month_key): a concurrent call got there first.
            return False

    def list_recent_earned(self, employee_id: int, limit: int) -> Sequence[EarnedBadgeView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DEFINITION_COLUMNS}, eb.earned_at, eb.month_context
                FROM employee_badges eb
                JOIN badge_definitions bd ON bd.id = eb.badge_id
                WHERE eb.employee_id=%s
                ORDER BY eb.earned_at DESC, eb.id DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [
                EarnedBadgeView(badge=_to_definition(r), earned_at=r["earned_at"], month_context=r.get("month_context"))
                for r in fetchall(cur)
            ]

    def count_by_employee(self, employee_ids: Sequence[int]) -> dict[int, int]:
        if not employee_ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, COUNT(*) AS n
                FROM employee_badges
                WHERE employee_id IN ({in_clause(employee_ids)})
                GROUP BY employee_id
                """,
                tuple(employee_ids),
            )
            return {int(r["employee_id"]): int(r["n"]) for r in fetchall(cur)}
