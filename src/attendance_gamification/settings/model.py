from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from typing import Mapping

from ..common.datetime_utils import is_known_timezone, parse_hhmm
from ..core.constants import (
    DEFAULT_STREAK_BONUS_EVERY,
    DEFAULT_TIMEZONE,
    DEFAULT_WORK_START_TIME,
    DEFAULT_WORKING_DAYS,
)

logger = logging.getLogger(__name__)

# Keys read from system_settings together with their defaults.
DEFAULT_SETTING_VALUES: dict[str, str] = {
    "gamify_enabled": "true",
    "gamify_points_on_time": "10",
    "gamify_points_early": "5",
    "gamify_points_full_day": "5",
    "gamify_points_ot": "15",
    "gamify_points_streak_bonus": "25",
    "gamify_points_late_penalty": "-5",
    "gamify_points_no_leave_week": "20",
    "gamify_early_minutes": "15",
    "gamify_streak_bonus_every": str(DEFAULT_STREAK_BONUS_EVERY),
    "gamify_timezone": DEFAULT_TIMEZONE,
    "working_days": ",".join(str(d) for d in DEFAULT_WORKING_DAYS),
    "work_start_time": DEFAULT_WORK_START_TIME,
    "enable_weekly_ranking_announcement": "true",
    "weekly_ranking_day": "0",
}


def _int(values: Mapping[str, str], key: str) -> int:
    raw = values.get(key)
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        if raw not in (None, ""):
            logger.warning("Ignoring malformed setting %s=%r", key, raw)
        return int(DEFAULT_SETTING_VALUES[key])


def _flag(values: Mapping[str, str], key: str) -> bool:
    raw = values.get(key)
    if raw is None or str(raw).strip() == "":
        raw = DEFAULT_SETTING_VALUES[key]
    return str(raw).strip().lower() != "false"


def _working_days(raw: str | None) -> frozenset[int]:
    if not raw:
        return frozenset(DEFAULT_WORKING_DAYS)
    try:
        days = frozenset(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        logger.warning("Ignoring malformed working_days=%r", raw)
        return frozenset(DEFAULT_WORKING_DAYS)
    return frozenset(d for d in days if 0 <= d <= 6) or frozenset(DEFAULT_WORKING_DAYS)


def _work_start(raw: str | None) -> time:
    try:
        return parse_hhmm(raw or DEFAULT_WORK_START_TIME)
    except ValueError:
        logger.warning("Ignoring malformed work_start_time=%r", raw)
        return parse_hhmm(DEFAULT_WORK_START_TIME)


def _timezone(raw: str | None) -> str:
    name = (raw or "").strip() or DEFAULT_TIMEZONE
    if not is_known_timezone(name):
        logger.warning("Ignoring unknown gamify_timezone=%r", raw)
        return DEFAULT_TIMEZONE
    return name


@dataclass(frozen=True)
class GamificationSettings:
    """Resolved engine configuration, read once and passed into each call.

    `working_days` uses 0 = Sunday .. 6 = Saturday.
    """

    enabled: bool = True
    points_on_time: int = 10
    points_early: int = 5
    points_full_day: int = 5
    points_ot: int = 15
    points_streak_bonus: int = 25
    points_late_penalty: int = -5
    points_no_leave_week: int = 20
    early_minutes: int = 15
    streak_bonus_every: int = DEFAULT_STREAK_BONUS_EVERY
    timezone: str = DEFAULT_TIMEZONE
    working_days: frozenset[int] = frozenset(DEFAULT_WORKING_DAYS)
    work_start_time: time = time(9, 0)
    weekly_ranking_enabled: bool = True
    weekly_ranking_day: int = 0

    @classmethod
    def disabled(cls) -> "GamificationSettings":
        return cls(enabled=False)

    @classmethod
    def from_values(cls, values: Mapping[str, str]) -> "GamificationSettings":
        bonus_every = _int(values, "gamify_streak_bonus_every")
        return cls(
            enabled=_flag(values, "gamify_enabled"),
            points_on_time=_int(values, "gamify_points_on_time"),
            points_early=_int(values, "gamify_points_early"),
            points_full_day=_int(values, "gamify_points_full_day"),
            points_ot=_int(values, "gamify_points_ot"),
            points_streak_bonus=_int(values, "gamify_points_streak_bonus"),
            points_late_penalty=_int(values, "gamify_points_late_penalty"),
            points_no_leave_week=_int(values, "gamify_points_no_leave_week"),
            early_minutes=_int(values, "gamify_early_minutes"),
            streak_bonus_every=bonus_every if bonus_every > 0 else DEFAULT_STREAK_BONUS_EVERY,
            timezone=_timezone(values.get("gamify_timezone")),
            working_days=_working_days(values.get("working_days")),
            work_start_time=_work_start(values.get("work_start_time")),
            weekly_ranking_enabled=_flag(values, "enable_weekly_ranking_announcement"),
            weekly_ranking_day=_int(values, "weekly_ranking_day") % 7,
        )
