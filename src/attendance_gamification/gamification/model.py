from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..badges.model import EarnedBadgeView


@dataclass(frozen=True)
class GamificationResult:
    """What an attendance or overtime event earned."""

    points_earned: int = 0
    new_badges: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EmployeeProfile:
    employee_id: int
    total_points: int
    quarterly_points: int
    current_quarter: str
    level: int
    level_name: str
    next_level_points: int
    progress_to_next_level: int
    rank_tier: str
    rank_icon: str
    next_rank_points: int
    progress_to_next_rank: int
    current_streak: int
    longest_streak: int
    recent_badges: tuple[EarnedBadgeView, ...] = field(default_factory=tuple)
    leaderboard_rank: Optional[int] = None


@dataclass(frozen=True)
class DailyCheckSummary:
    enabled: bool = True
    processed: int = 0
    badges_awarded: int = 0
    weekly_bonuses: int = 0
    ranking_announced: bool = False
