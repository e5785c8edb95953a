from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..badges.repository import BadgeRepository
from ..common.datetime_utils import now_local, quarter_tag
from ..core.constants import DEFAULT_LEADERBOARD_LIMIT
from ..core.enums import LeaderboardWindow
from ..progression.levels import DEFAULT_RANK, rank_icon
from .model import LeaderboardEntry, Standing
from .repository import StandingsRepository

logger = logging.getLogger(__name__)


class LeaderboardService:
    def __init__(
        self,
        standings: StandingsRepository,
        badges: BadgeRepository,
        *,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
    ):
        self._standings = standings
        self._badges = badges
        self._limit = int(limit)

    def get_leaderboard(
        self,
        window: LeaderboardWindow = LeaderboardWindow.QUARTERLY,
        branch_id: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[LeaderboardEntry]:
        now = now or now_local()
        current_q = quarter_tag(now.date())
        limit = self._limit if limit is None else max(0, int(limit))

        try:
            rows = [
                s
                for s in self._standings.list_standings()
                if s.employee.is_rankable and (branch_id is None or s.employee.branch_id == branch_id)
            ]

            def quarterly(s: Standing) -> int:
                # A stale quarter tag has not been rolled over yet: it scores zero this quarter.
                return s.aggregate.quarterly_points if s.aggregate.current_quarter == current_q else 0

            if window == LeaderboardWindow.QUARTERLY:
                rows.sort(key=lambda s: (-quarterly(s), -s.aggregate.total_points, s.employee.employee_id))
            else:
                rows.sort(key=lambda s: (-s.aggregate.total_points, -quarterly(s), s.employee.employee_id))
            rows = rows[:limit]

            counts = self._badges.count_by_employee([s.employee.employee_id for s in rows])
        except Exception:
            logger.exception("Error building %s leaderboard", window.value)
            return []

        entries: list[LeaderboardEntry] = []
        for idx, s in enumerate(rows, start=1):
            agg = s.aggregate
            stale = agg.current_quarter != current_q
            tier = DEFAULT_RANK.name if stale else agg.rank_tier
            entries.append(
                LeaderboardEntry(
                    rank=idx,
                    employee_id=s.employee.employee_id,
                    employee_name=s.employee.name,
                    branch_id=s.employee.branch_id,
                    total_points=agg.total_points,
                    quarterly_points=quarterly(s),
                    level=agg.level,
                    level_name=agg.level_name,
                    rank_tier=tier,
                    rank_icon=rank_icon(tier),
                    current_streak=agg.current_streak,
                    badge_count=counts.get(s.employee.employee_id, 0),
                )
            )
        return entries
