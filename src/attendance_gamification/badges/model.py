from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..history.model import AttendanceLog


@dataclass(frozen=True)
class BadgeDefinition:
    """Catalog entry managed by administrators."""

    badge_id: int
    code: str
    name: str
    icon: str
    category: str
    tier: str
    condition_type: str
    condition_value: int
    points_reward: int = 0
    is_active: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class EarnedBadge:
    employee_id: int
    badge_id: int
    earned_at: datetime
    month_context: Optional[str] = None

    @property
    def key(self) -> tuple[int, Optional[str]]:
        return self.badge_id, self.month_context


@dataclass(frozen=True)
class EarnedBadgeView:
    """Earned badge joined with its definition (profile, recent badges)."""

    badge: BadgeDefinition
    earned_at: datetime
    month_context: Optional[str] = None


@dataclass(frozen=True)
class BadgeProgress:
    badge: BadgeDefinition
    earned: bool
    earned_at: Optional[datetime]
    progress: Optional[int]


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Everything the badge conditions look at, loaded once per evaluation."""

    employee_id: int
    as_of: date
    attendance: Sequence[AttendanceLog] = field(default_factory=tuple)
    completed_overtime: int = 0
    early_checkins: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    approved_leave_this_month: int = 0

    def attendance_this_month(self) -> list[AttendanceLog]:
        start, end = month_bounds(self.as_of)
        return [a for a in self.attendance if start <= a.work_date <= end]

    def most_recent(self, n: int) -> list[AttendanceLog]:
        ordered = sorted(self.attendance, key=lambda a: a.work_date, reverse=True)
        return ordered[:n]
