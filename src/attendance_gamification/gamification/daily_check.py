from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional

from ..badges.evaluator import BadgeEvaluator
from ..common.datetime_utils import count_in_range, js_weekday, now_local, week_bounds
from ..core.enums import ActionType, LeaderboardWindow
from ..employees.repository import EmployeeRepository
from ..history.repository import HistoryRepository
from ..leaderboard.service import LeaderboardService
from ..notifications.messages import format_weekly_ranking
from ..notifications.notifier import BadgeNotifier
from ..points.ledger import PointsLedger
from ..points.repository import PointsRepository
from ..points.rules import no_leave_week_award
from ..settings.model import GamificationSettings
from ..settings.service import SettingsGateway
from .model import DailyCheckSummary

logger = logging.getLogger(__name__)

SUNDAY = 0


class DailyCheckService:
    """Once-a-day sweep triggered by an external scheduler.

    Re-runs badge evaluation for every rankable employee, pays the weekly
    no-leave bonus on Sundays and posts the weekly ranking on the configured day.
    Safe to run more than once per day.
    """

    def __init__(
        self,
        settings: SettingsGateway,
        employees: EmployeeRepository,
        history: HistoryRepository,
        points: PointsRepository,
        ledger: PointsLedger,
        evaluator: BadgeEvaluator,
        leaderboard: LeaderboardService,
        notifier: BadgeNotifier,
    ):
        self._settings = settings
        self._employees = employees
        self._history = history
        self._points = points
        self._ledger = ledger
        self._evaluator = evaluator
        self._leaderboard = leaderboard
        self._notifier = notifier

    def run_daily_check(self, *, now: Optional[datetime] = None) -> DailyCheckSummary:
        now = now or now_local()
        settings = self._settings.load()
        if not settings.enabled:
            return DailyCheckSummary(enabled=False)

        today = now.date()
        is_sunday = js_weekday(today) == SUNDAY

        processed = badges_awarded = weekly_bonuses = 0
        for employee in self._employees.list_all():
            if not employee.is_rankable:
                continue
            processed += 1
            badges_awarded += len(self._evaluator.check_and_award_badges(employee.employee_id, now=now))

            if is_sunday and self._award_no_leave_week(employee.employee_id, today, settings, now):
                weekly_bonuses += 1

        announced = False
        if settings.weekly_ranking_enabled and js_weekday(today) == settings.weekly_ranking_day:
            announced = self._announce_ranking(today, now)

        logger.info(
            "Daily check: processed=%s badges=%s weekly_bonuses=%s ranking=%s",
            processed,
            badges_awarded,
            weekly_bonuses,
            announced,
        )
        return DailyCheckSummary(
            processed=processed,
            badges_awarded=badges_awarded,
            weekly_bonuses=weekly_bonuses,
            ranking_announced=announced,
        )

    def qualifies_for_no_leave_week(self, employee_id: int, day: date, settings: GamificationSettings) -> bool:
        """No approved leave overlapping the Mon..Sun week and a full week of attendance."""
        week_start, week_end = week_bounds(day)
        if self._history.list_approved_leave(employee_id, start=week_start, end=week_end):
            return False
        days = [log.work_date for log in self._history.list_attendance(employee_id)]
        return count_in_range(days, week_start, week_end) >= len(settings.working_days)

    def _award_no_leave_week(
        self, employee_id: int, day: date, settings: GamificationSettings, now: datetime
    ) -> bool:
        try:
            week_start, _ = week_bounds(day)
            already = self._points.count_transactions(
                employee_id, ActionType.NO_LEAVE_WEEK, since=datetime.combine(week_start, time.min)
            )
            if already or not self.qualifies_for_no_leave_week(employee_id, day, settings):
                return False
        except Exception:
            logger.exception("No-leave-week check failed for employee %s", employee_id)
            return False
        return self._ledger.award(employee_id, no_leave_week_award(settings), settings=settings, now=now)

    def _announce_ranking(self, today: date, now: datetime) -> bool:
        entries = self._leaderboard.get_leaderboard(LeaderboardWindow.QUARTERLY, now=now)
        week_start, week_end = week_bounds(today)
        try:
            return bool(self._notifier.announce_ranking(format_weekly_ranking(entries, week_start, week_end)))
        except Exception:
            logger.exception("Weekly ranking announcement failed")
            return False
