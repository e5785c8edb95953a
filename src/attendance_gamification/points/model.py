from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ActionType, ReferenceType
from ..progression.levels import DEFAULT_LEVEL, DEFAULT_RANK


@dataclass(frozen=True)
class PointAward:
    """A planned ledger entry produced by the point rules, not yet persisted."""

    action_type: ActionType
    points: int
    description: str
    reference_id: Optional[int] = None
    reference_type: Optional[ReferenceType] = None


@dataclass(frozen=True)
class PointTransaction:
    """Immutable ledger row."""

    employee_id: int
    points: int
    action_type: ActionType
    description: str
    created_at: datetime
    reference_id: Optional[int] = None
    reference_type: Optional[ReferenceType] = None
    transaction_id: Optional[int] = None

    @classmethod
    def from_award(cls, employee_id: int, award: PointAward, *, created_at: datetime) -> "PointTransaction":
        return cls(
            employee_id=employee_id,
            points=award.points,
            action_type=award.action_type,
            description=award.description,
            created_at=created_at,
            reference_id=award.reference_id,
            reference_type=award.reference_type,
        )


@dataclass(frozen=True)
class PointTotals:
    total: int = 0
    quarterly: int = 0

    def apply(self, delta: int, *, counts_for_quarter: bool) -> "PointTotals":
        """Add a delta, clamping lifetime and quarterly totals at zero independently."""
        return PointTotals(
            total=max(0, self.total + delta),
            quarterly=max(0, self.quarterly + delta) if counts_for_quarter else self.quarterly,
        )


@dataclass(frozen=True)
class EmployeeAggregate:
    """Per-employee summary row (employee_points)."""

    employee_id: int
    total_points: int
    quarterly_points: int
    current_quarter: str
    level: int = DEFAULT_LEVEL.level
    level_name: str = DEFAULT_LEVEL.name
    rank_tier: str = DEFAULT_RANK.name
    current_streak: int = 0
    longest_streak: int = 0
    last_streak_date: Optional[date] = None

    @classmethod
    def empty(cls, employee_id: int, quarter: str) -> "EmployeeAggregate":
        return cls(employee_id=employee_id, total_points=0, quarterly_points=0, current_quarter=quarter)
