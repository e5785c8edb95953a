from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..employees.model import Employee
from ..points.model import EmployeeAggregate


@dataclass(frozen=True)
class Standing:
    """Aggregate joined with employee identity."""

    employee: Employee
    aggregate: EmployeeAggregate


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    employee_id: int
    employee_name: str
    branch_id: Optional[int]
    total_points: int
    quarterly_points: int
    level: int
    level_name: str
    rank_tier: str
    rank_icon: str
    current_streak: int
    badge_count: int
