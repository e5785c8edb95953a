from datetime import datetime

import pytest

from attendance_gamification.core.enums import ActionType
from attendance_gamification.points.model import PointTransaction
from attendance_gamification.points.mysql_points_repository import MySQLPointsRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = 1
        self.rowcount = 1

    def execute(self, sql, params=None):
        self._conn.statements.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self._conn.row

    def close(self):
        pass


class FakeConnection:
    def __init__(self, row):
        self.row = row
        self.statements = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class FakeFactory:
    def __init__(self, row):
        self.connections = []
        self._row = row

    def connect(self):
        conn = FakeConnection(self._row)
        self.connections.append(conn)
        return conn


def _txn(points):
    return PointTransaction(
        employee_id=7,
        points=points,
        action_type=ActionType.OT_COMPLETED,
        description="Overtime completed",
        created_at=datetime(2025, 3, 3, 0, 0),
    )


def test_award_is_a_single_transaction_including_progression():
    factory = FakeFactory({"total_points": 210, "quarterly_points": 210})

    totals = MySQLPointsRepository(factory).increment_points(_txn(15), quarter="2025-Q1")

    assert totals == (210, 210)
    (conn,) = factory.connections
    assert (conn.commits, conn.rollbacks) == (1, 0)
    sql = [s for s, _ in conn.statements]
    assert sql[0].startswith("INSERT INTO point_transactions")
    assert sql[1].startswith("UPDATE employee_points SET total_points = GREATEST(0, total_points + %s)")
    assert sql[-1].startswith("UPDATE employee_points SET level=%s, level_name=%s, rank_tier=%s")
    assert conn.statements[-1][1] == (2, "Regular", "Silver", 7)


def test_missing_aggregate_rolls_back_the_ledger_row():
    factory = FakeFactory(None)

    with pytest.raises(LookupError):
        MySQLPointsRepository(factory).increment_points(_txn(15), quarter="2025-Q1")

    (conn,) = factory.connections
    assert (conn.commits, conn.rollbacks) == (0, 1)
    assert not any(s.startswith("UPDATE employee_points SET level") for s, _ in conn.statements)
