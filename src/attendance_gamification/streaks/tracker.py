from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..points.ledger import PointsLedger
from ..points.repository import PointsRepository
from ..points.rules import streak_bonus_award
from ..settings.model import GamificationSettings
from .rules import StreakState, advance_streak

logger = logging.getLogger(__name__)


class StreakTracker:
    def __init__(self, points: PointsRepository, ledger: PointsLedger):
        self._points = points
        self._ledger = ledger

    def update_streak(
        self,
        employee_id: int,
        day: date,
        *,
        settings: GamificationSettings,
        now: Optional[datetime] = None,
    ) -> int:
        """Count an on-time day; returns the new streak length (0 on failure)."""
        now = now or now_local()
        try:
            agg = self._ledger.ensure_aggregate(employee_id, now=now)
            state = StreakState(agg.current_streak, agg.longest_streak, agg.last_streak_date)

            new_state = advance_streak(state, day, settings.working_days)
            if new_state is state:
                return state.current

            self._points.update_streak(employee_id, new_state)

            bonus = streak_bonus_award(settings, new_state.current)
            if bonus:
                self._ledger.award(employee_id, bonus, settings=settings, now=now)
            return new_state.current
        except Exception:
            logger.exception("Error updating streak for employee %s", employee_id)
            return 0

    def reset_streak(self, employee_id: int, *, now: Optional[datetime] = None) -> None:
        now = now or now_local()
        try:
            agg = self._ledger.ensure_aggregate(employee_id, now=now)
            if agg.current_streak == 0:
                return
            self._points.reset_current_streak(employee_id)
        except Exception:
            logger.exception("Error resetting streak for employee %s", employee_id)
