from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .badges.evaluator import BadgeEvaluator
from .badges.factory import BadgeConditionFactory
from .badges.mysql_badge_repository import MySQLBadgeRepository
from .core.constants import DEFAULT_LEADERBOARD_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .gamification.daily_check import DailyCheckService
from .gamification.service import GamificationService
from .history.mysql_history_repository import MySQLHistoryRepository
from .leaderboard.mysql_standings_repository import MySQLStandingsRepository
from .leaderboard.service import LeaderboardService
from .notifications.line_notifier import LineNotifier
from .notifications.notifier import BadgeNotifier, LoggingNotifier
from .points.ledger import PointsLedger
from .points.mysql_points_repository import MySQLPointsRepository
from .recalculation.service import RecalculationService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsGateway
from .streaks.tracker import StreakTracker


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    settings_repo: MySQLSettingsRepository
    points_repo: MySQLPointsRepository
    badges_repo: MySQLBadgeRepository
    history_repo: MySQLHistoryRepository
    employees_repo: MySQLEmployeeRepository
    standings_repo: MySQLStandingsRepository

    notifier: BadgeNotifier
    settings_gateway: SettingsGateway
    ledger: PointsLedger
    streak_tracker: StreakTracker
    badge_evaluator: BadgeEvaluator
    leaderboard_service: LeaderboardService
    gamification_service: GamificationService
    recalculation_service: RecalculationService
    daily_check_service: DailyCheckService


def build_container(
    *,
    db_config: dict,
    line_channel_access_token: Optional[str] = None,
    line_target_id: Optional[str] = None,
    leaderboard_limit: int = DEFAULT_LEADERBOARD_LIMIT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    settings_repo = MySQLSettingsRepository(conn)
    points_repo = MySQLPointsRepository(conn)
    badges_repo = MySQLBadgeRepository(conn)
    history_repo = MySQLHistoryRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    standings_repo = MySQLStandingsRepository(conn)

    notifier: BadgeNotifier
    if line_channel_access_token:
        notifier = LineNotifier(
            channel_access_token=line_channel_access_token,
            employees=employees_repo,
            target_id=line_target_id,
        )
    else:
        notifier = LoggingNotifier()

    settings_gateway = SettingsGateway(settings_repo)
    ledger = PointsLedger(points_repo)
    streak_tracker = StreakTracker(points_repo, ledger)
    badge_evaluator = BadgeEvaluator(
        badges_repo,
        points_repo,
        history_repo,
        notifier,
        factory=BadgeConditionFactory(),
    )
    leaderboard_service = LeaderboardService(standings_repo, badges_repo, limit=leaderboard_limit)
    gamification_service = GamificationService(
        settings_gateway,
        ledger,
        streak_tracker,
        badge_evaluator,
        points_repo,
        badges_repo,
        leaderboard_service,
    )
    recalculation_service = RecalculationService(
        settings_gateway,
        points_repo,
        history_repo,
        employees_repo,
        badge_evaluator,
    )
    daily_check_service = DailyCheckService(
        settings_gateway,
        employees_repo,
        history_repo,
        points_repo,
        ledger,
        badge_evaluator,
        leaderboard_service,
        notifier,
    )

    return Container(
        conn=conn,
        settings_repo=settings_repo,
        points_repo=points_repo,
        badges_repo=badges_repo,
        history_repo=history_repo,
        employees_repo=employees_repo,
        standings_repo=standings_repo,
        notifier=notifier,
        settings_gateway=settings_gateway,
        ledger=ledger,
        streak_tracker=streak_tracker,
        badge_evaluator=badge_evaluator,
        leaderboard_service=leaderboard_service,
        gamification_service=gamification_service,
        recalculation_service=recalculation_service,
        daily_check_service=daily_check_service,
    )
