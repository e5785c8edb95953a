"""Entry points called by the attendance and overtime flows.

Every `process_*` call is fail-soft: gamification never blocks the business
operation that triggered it, so errors are logged and an empty result is
returned.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..badges.evaluator import BadgeEvaluator
from ..badges.model import BadgeProgress
from ..badges.repository import BadgeRepository
from ..common.datetime_utils import now_local, to_local
from ..common.validators import require_positive_id
from ..core.constants import DEFAULT_RECENT_BADGES
from ..core.enums import LeaderboardWindow
from ..leaderboard.model import LeaderboardEntry
from ..leaderboard.service import LeaderboardService
from ..points.ledger import PointsLedger
from ..points.repository import PointsRepository
from ..points.rules import checkin_awards, checkout_award, overtime_award
from ..progression.levels import level_progress, rank_icon, rank_progress
from ..settings.service import SettingsGateway
from ..streaks.tracker import StreakTracker
from .model import EmployeeProfile, GamificationResult

logger = logging.getLogger(__name__)


class GamificationService:
    def __init__(
        self,
        settings: SettingsGateway,
        ledger: PointsLedger,
        streaks: StreakTracker,
        evaluator: BadgeEvaluator,
        points: PointsRepository,
        badges: BadgeRepository,
        leaderboard: LeaderboardService,
    ):
        self._settings = settings
        self._ledger = ledger
        self._streaks = streaks
        self._evaluator = evaluator
        self._points = points
        self._badges = badges
        self._leaderboard = leaderboard

    # ---------- Events ----------

    def process_checkin(
        self,
        employee_id: int,
        *,
        is_late: bool,
        checkin_time: datetime,
        attendance_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> GamificationResult:
        now = now or now_local()
        try:
            settings = self._settings.load()
            if not settings.enabled:
                return GamificationResult()

            earned = 0
            for award in checkin_awards(
                settings, is_late=is_late, checkin_time=checkin_time, reference_id=attendance_id
            ):
                if self._ledger.award(employee_id, award, settings=settings, now=now):
                    earned += award.points

            if is_late:
                self._streaks.reset_streak(employee_id, now=now)
            else:
                day = to_local(checkin_time, settings.timezone).date()
                self._streaks.update_streak(employee_id, day, settings=settings, now=now)

            badges = self._evaluator.check_and_award_badges(employee_id, now=now)
            return GamificationResult(points_earned=earned, new_badges=tuple(badges))
        except Exception:
            logger.exception("Gamification check-in processing failed for employee %s", employee_id)
            return GamificationResult()

    def process_checkout(
        self,
        employee_id: int,
        attendance_id: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> GamificationResult:
        now = now or now_local()
        try:
            settings = self._settings.load()
            if not settings.enabled:
                return GamificationResult()

            award = checkout_award(settings, attendance_id)
            earned = award.points if self._ledger.award(employee_id, award, settings=settings, now=now) else 0
            badges = self._evaluator.check_and_award_badges(employee_id, now=now)
            return GamificationResult(points_earned=earned, new_badges=tuple(badges))
        except Exception:
            logger.exception("Gamification check-out processing failed for employee %s", employee_id)
            return GamificationResult()

    def process_overtime(
        self,
        employee_id: int,
        overtime_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> GamificationResult:
        now = now or now_local()
        try:
            settings = self._settings.load()
            if not settings.enabled:
                return GamificationResult()

            award = overtime_award(settings, overtime_id)
            earned = award.points if self._ledger.award(employee_id, award, settings=settings, now=now) else 0
            badges = self._evaluator.check_and_award_badges(employee_id, now=now)
            return GamificationResult(points_earned=earned, new_badges=tuple(badges))
        except Exception:
            logger.exception("Gamification overtime processing failed for employee %s", employee_id)
            return GamificationResult()

    # ---------- Queries ----------

    def get_employee_profile(self, employee_id: int, *, now: Optional[datetime] = None) -> EmployeeProfile:
        require_positive_id(employee_id, "employee_id")
        now = now or now_local()

        agg = self._ledger.ensure_aggregate(employee_id, now=now)
        lvl = level_progress(agg.total_points)
        rnk = rank_progress(agg.quarterly_points)

        return EmployeeProfile(
            employee_id=employee_id,
            total_points=agg.total_points,
            quarterly_points=agg.quarterly_points,
            current_quarter=agg.current_quarter,
            level=agg.level,
            level_name=agg.level_name,
            next_level_points=lvl.next_threshold,
            progress_to_next_level=lvl.percent,
            rank_tier=agg.rank_tier,
            rank_icon=rank_icon(agg.rank_tier),
            next_rank_points=rnk.next_threshold,
            progress_to_next_rank=rnk.percent,
            current_streak=agg.current_streak,
            longest_streak=agg.longest_streak,
            recent_badges=tuple(self._badges.list_recent_earned(employee_id, DEFAULT_RECENT_BADGES)),
            leaderboard_rank=self._points.count_ahead(agg.total_points) + 1,
        )

    def get_badges_with_progress(self, employee_id: int, *, now: Optional[datetime] = None) -> list[BadgeProgress]:
        require_positive_id(employee_id, "employee_id")
        return self._evaluator.badges_with_progress(employee_id, now=now)

    def get_leaderboard(
        self,
        window: LeaderboardWindow = LeaderboardWindow.QUARTERLY,
        branch_id: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> list[LeaderboardEntry]:
        return self._leaderboard.get_leaderboard(window, branch_id, now=now)
