"""Level (lifetime) and rank tier (quarterly) step functions.

Both tables are ascending by threshold; the highest row whose threshold is
not above the points wins, so the first row is the default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class LevelStep:
    threshold: int
    level: int
    name: str


@dataclass(frozen=True)
class RankTier:
    threshold: int
    name: str
    icon: str


@dataclass(frozen=True)
class Progress:
    next_threshold: int
    percent: int


LEVELS: tuple[LevelStep, ...] = (
    LevelStep(0, 1, "Rookie"),
    LevelStep(200, 2, "Regular"),
    LevelStep(600, 3, "Reliable"),
    LevelStep(1500, 4, "Star"),
    LevelStep(3000, 5, "Super Star"),
    LevelStep(6000, 6, "MVP"),
    LevelStep(10000, 7, "Legend"),
    LevelStep(15000, 8, "Immortal"),
)

RANK_TIERS: tuple[RankTier, ...] = (
    RankTier(0, "Unranked", "🔘"),
    RankTier(50, "Bronze", "🥉"),
    RankTier(150, "Silver", "🥈"),
    RankTier(300, "Gold", "🥇"),
    RankTier(500, "Platinum", "💎"),
    RankTier(700, "Diamond", "👑"),
)

DEFAULT_LEVEL = LEVELS[0]
DEFAULT_RANK = RANK_TIERS[0]


def _step_index(points: int, thresholds: Sequence[int]) -> int:
    idx = 0
    for i, threshold in enumerate(thresholds):
        if points >= threshold:
            idx = i
    return idx


def _progress(points: int, thresholds: Sequence[int]) -> Progress:
    idx = _step_index(points, thresholds)
    if idx + 1 >= len(thresholds):
        return Progress(next_threshold=0, percent=100)

    current_min = thresholds[idx]
    next_min = thresholds[idx + 1]
    percent = round((points - current_min) / (next_min - current_min) * 100)
    return Progress(next_threshold=next_min, percent=max(0, min(100, percent)))


def calculate_level(total_points: int) -> LevelStep:
    return LEVELS[_step_index(total_points, [s.threshold for s in LEVELS])]


def calculate_rank_tier(quarterly_points: int) -> RankTier:
    return RANK_TIERS[_step_index(quarterly_points, [t.threshold for t in RANK_TIERS])]


def level_progress(total_points: int) -> Progress:
    return _progress(total_points, [s.threshold for s in LEVELS])


def rank_progress(quarterly_points: int) -> Progress:
    return _progress(quarterly_points, [t.threshold for t in RANK_TIERS])


def rank_icon(tier_name: str) -> str:
    for tier in RANK_TIERS:
        if tier.name == tier_name:
            return tier.icon
    return DEFAULT_RANK.icon
