from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import month_bounds, month_context, now_local
from ..core.enums import ActionType
from ..history.repository import HistoryRepository
from ..notifications.notifier import BadgeNotification, BadgeNotifier
from ..points.repository import PointsRepository
from .factory import BadgeConditionFactory
from .model import BadgeDefinition, BadgeProgress, EmployeeSnapshot
from .repository import BadgeRepository

logger = logging.getLogger(__name__)


class BadgeEvaluator:
    """Checks the active badge catalog against an employee's history."""

    def __init__(
        self,
        badges: BadgeRepository,
        points: PointsRepository,
        history: HistoryRepository,
        notifier: BadgeNotifier,
        *,
        factory: Optional[BadgeConditionFactory] = None,
    ):
        self._badges = badges
        self._points = points
        self._history = history
        self._notifier = notifier
        self._factory = factory or BadgeConditionFactory()

    def build_snapshot(self, employee_id: int, *, now: datetime) -> EmployeeSnapshot:
        today = now.date()
        month_start, month_end = month_bounds(today)
        agg = self._points.get_aggregate(employee_id)

        return EmployeeSnapshot(
            employee_id=employee_id,
            as_of=today,
            attendance=tuple(self._history.list_attendance(employee_id)),
            completed_overtime=len(self._history.list_completed_overtime(employee_id)),
            early_checkins=self._points.count_transactions(employee_id, ActionType.EARLY_CHECKIN),
            current_streak=agg.current_streak if agg else 0,
            longest_streak=agg.longest_streak if agg else 0,
            approved_leave_this_month=len(
                self._history.list_approved_leave(employee_id, start=month_start, end=month_end)
            ),
        )

    def _context_for(self, badge: BadgeDefinition, now: datetime) -> Optional[str]:
        return month_context(now.date()) if self._factory.is_monthly(badge.condition_type) else None

    def check_and_award_badges(self, employee_id: int, *, now: Optional[datetime] = None) -> list[str]:
        """Award every newly satisfied badge; returns the names of the new ones."""
        now = now or now_local()
        try:
            definitions = self._badges.list_active_definitions()
            if not definitions:
                return []

            earned = {b.key for b in self._badges.list_earned(employee_id)}
            snapshot: Optional[EmployeeSnapshot] = None
            newly_earned: list[str] = []

            for badge in definitions:
                context = self._context_for(badge, now)
                if (badge.badge_id, context) in earned:
                    continue

                condition = self._factory.for_type(badge.condition_type)
                if condition is None:
                    continue

                if snapshot is None:
                    snapshot = self.build_snapshot(employee_id, now=now)
                if not condition.is_met(snapshot, badge.condition_value):
                    continue

                if not self._badges.insert_earned(employee_id, badge.badge_id, month_context=context, earned_at=now):
                    continue

                earned.add((badge.badge_id, context))
                newly_earned.append(badge.name)
                self._notify(employee_id, badge)

            if newly_earned:
                logger.info("Employee %s earned badges: %s", employee_id, ", ".join(newly_earned))
            return newly_earned
        except Exception:
            logger.exception("Error checking badges for employee %s", employee_id)
            return []

    def _notify(self, employee_id: int, badge: BadgeDefinition) -> None:
        try:
            self._notifier.notify_badge(
                BadgeNotification(
                    employee_id=employee_id,
                    badge_name=badge.name,
                    badge_icon=badge.icon,
                    points_reward=badge.points_reward,
                )
            )
        except Exception:
            logger.exception("Badge notification failed for employee %s", employee_id)

    def badges_with_progress(self, employee_id: int, *, now: Optional[datetime] = None) -> list[BadgeProgress]:
        now = now or now_local()
        definitions = self._badges.list_active_definitions()
        earned_at = {b.key: b.earned_at for b in self._badges.list_earned(employee_id)}
        snapshot = self.build_snapshot(employee_id, now=now)

        result: list[BadgeProgress] = []
        for badge in definitions:
            key = (badge.badge_id, self._context_for(badge, now))
            condition = self._factory.for_type(badge.condition_type)
            result.append(
                BadgeProgress(
                    badge=badge,
                    earned=key in earned_at,
                    earned_at=earned_at.get(key),
                    progress=condition.progress(snapshot, badge.condition_value) if condition else None,
                )
            )
        return result
