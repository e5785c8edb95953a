from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, quarter_tag
from ..core.enums import ActionType, ReferenceType
from ..core.exceptions import ConfigurationError
from ..progression.levels import DEFAULT_RANK
from ..settings.model import GamificationSettings
from .model import EmployeeAggregate, PointAward, PointTransaction
from .repository import PointsRepository

logger = logging.getLogger(__name__)


class PointsLedger:
    """Appends point transactions and keeps the employee aggregate in step."""

    def __init__(self, points: PointsRepository):
        if not callable(getattr(points, "increment_points", None)):
            raise ConfigurationError("Points repository must provide an atomic increment_points()")
        self._points = points

    def ensure_aggregate(self, employee_id: int, *, now: Optional[datetime] = None) -> EmployeeAggregate:
        """Load the aggregate, creating it lazily and rolling a stale quarter over to the current one."""
        now = now or now_local()
        current_q = quarter_tag(now.date())

        agg = self._points.get_aggregate(employee_id)
        if agg is None:
            self._points.create_aggregate(employee_id, quarter=current_q)
            agg = self._points.get_aggregate(employee_id)
            if agg is None:
                raise LookupError(f"employee_points row for {employee_id} could not be created")
            return agg

        if agg.current_quarter != current_q:
            self._points.roll_quarter(employee_id, quarter=current_q, rank_tier=DEFAULT_RANK.name)
            agg = self._points.get_aggregate(employee_id) or agg
        return agg

    def award_points(
        self,
        employee_id: int,
        action_type: ActionType,
        points: int,
        description: str,
        reference_id: Optional[int] = None,
        reference_type: Optional[ReferenceType] = None,
        *,
        settings: GamificationSettings,
        now: Optional[datetime] = None,
    ) -> bool:
        if not settings.enabled:
            return False

        now = now or now_local()
        try:
            self.ensure_aggregate(employee_id, now=now)
            self._points.increment_points(
                PointTransaction(
                    employee_id=employee_id,
                    points=points,
                    action_type=action_type,
                    description=description,
                    created_at=now,
                    reference_id=reference_id,
                    reference_type=reference_type,
                ),
                quarter=quarter_tag(now.date()),
            )
            return True
        except Exception:
            logger.exception("Error awarding %s points (%s) to employee %s", points, action_type.value, employee_id)
            return False

    def award(
        self,
        employee_id: int,
        award: PointAward,
        *,
        settings: GamificationSettings,
        now: Optional[datetime] = None,
    ) -> bool:
        return self.award_points(
            employee_id,
            award.action_type,
            award.points,
            award.description,
            award.reference_id,
            award.reference_type,
            settings=settings,
            now=now,
        )
