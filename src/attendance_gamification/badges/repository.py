from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import BadgeDefinition, EarnedBadge, EarnedBadgeView


class BadgeRepository(Protocol):
    def list_active_definitions(self) -> Sequence[BadgeDefinition]:
        raise NotImplementedError

    def list_earned(self, employee_id: int) -> Sequence[EarnedBadge]:
        raise NotImplementedError

    def insert_earned(
        self,
        employee_id: int,
        badge_id: int,
        *,
        month_context: Optional[str],
        earned_at: datetime,
    ) -> bool:
        """False when the (employee, badge, month context) row already exists."""

        raise NotImplementedError

    def list_recent_earned(self, employee_id: int, limit: int) -> Sequence[EarnedBadgeView]:
        raise NotImplementedError

    def count_by_employee(self, employee_ids: Sequence[int]) -> dict[int, int]:
        raise NotImplementedError
