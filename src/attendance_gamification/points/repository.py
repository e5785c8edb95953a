from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ActionType
from ..streaks.rules import StreakState
from .model import EmployeeAggregate, PointTransaction


class PointsRepository(Protocol):
    """Ledger + aggregate storage.

    `increment_points` must be a single atomic add-and-clamp at the storage
    layer; there is no read-then-write fallback.
    """

    def get_aggregate(self, employee_id: int) -> Optional[EmployeeAggregate]:
        raise NotImplementedError

    def create_aggregate(self, employee_id: int, *, quarter: str) -> None:
        """Insert an empty aggregate unless one already exists."""

        raise NotImplementedError

    def roll_quarter(self, employee_id: int, *, quarter: str, rank_tier: str) -> bool:
        raise NotImplementedError

    def increment_points(self, txn: PointTransaction, *, quarter: str) -> tuple[int, int]:
        """Append `txn`, add its points to both totals (each floored at 0) and store
        the level and rank tier of the new totals, all in one storage transaction.
        Returns (total, quarterly)."""

        raise NotImplementedError

    def update_streak(self, employee_id: int, state: StreakState) -> None:
        raise NotImplementedError

    def reset_current_streak(self, employee_id: int) -> None:
        raise NotImplementedError

    def count_transactions(
        self, employee_id: int, action_type: ActionType, *, since: Optional[datetime] = None
    ) -> int:
        raise NotImplementedError

    def count_ahead(self, total_points: int) -> int:
        """Number of aggregates with strictly more lifetime points."""

        raise NotImplementedError

    def rebuild_employee(self, aggregate: EmployeeAggregate, transactions: Sequence[PointTransaction]) -> None:
        """Delete the employee's ledger, earned badges and aggregate, then write the
        given aggregate and transactions, all in one storage transaction."""

        raise NotImplementedError
