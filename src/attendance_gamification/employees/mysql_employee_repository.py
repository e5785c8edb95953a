from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AccountStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "id, name, branch_id, account_status, role, is_system_account, deleted_at, line_user_id"


def _to_employee(r: Dict[str, Any]) -> Employee:
    status = r.get("account_status") or AccountStatus.PENDING.value
    return Employee(
        employee_id=int(r["id"]),
        name=r["name"],
        branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
        account_status=AccountStatus(status),
        role=r.get("role") or "staff",
        is_system_account=bool(r.get("is_system_account")),
        deleted_at=r.get("deleted_at"),
        line_user_id=r.get("line_user_id"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name ASC")
            return [_to_employee(r) for r in fetchall(cur)]
