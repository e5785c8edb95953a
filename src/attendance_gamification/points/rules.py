"""Pure point rules shared by live event processing and history replay."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import minutes_of_day, to_local
from ..core.enums import ActionType, ReferenceType
from ..settings.model import GamificationSettings
from .model import PointAward, PointTotals


def is_early_checkin(settings: GamificationSettings, checkin_time: datetime) -> bool:
    """Checked in at least `early_minutes` before the configured work start."""
    local = to_local(checkin_time, settings.timezone)
    work_start = settings.work_start_time.hour * 60 + settings.work_start_time.minute
    return work_start - minutes_of_day(local) >= settings.early_minutes


def checkin_awards(
    settings: GamificationSettings,
    *,
    is_late: bool,
    checkin_time: Optional[datetime],
    reference_id: Optional[int] = None,
) -> list[PointAward]:
    if is_late:
        return [
            PointAward(
                ActionType.LATE_PENALTY,
                settings.points_late_penalty,
                "Late arrival",
                reference_id,
                ReferenceType.ATTENDANCE,
            )
        ]

    awards = [
        PointAward(
            ActionType.ON_TIME_CHECKIN,
            settings.points_on_time,
            "On-time check-in",
            reference_id,
            ReferenceType.ATTENDANCE,
        )
    ]
    if checkin_time is not None and is_early_checkin(settings, checkin_time):
        awards.append(
            PointAward(
                ActionType.EARLY_CHECKIN,
                settings.points_early,
                f"Arrived {settings.early_minutes} minutes early",
                reference_id,
                ReferenceType.ATTENDANCE,
            )
        )
    return awards


def checkout_award(settings: GamificationSettings, reference_id: Optional[int] = None) -> PointAward:
    return PointAward(
        ActionType.FULL_ATTENDANCE_DAY,
        settings.points_full_day,
        "Full attendance day",
        reference_id,
        ReferenceType.ATTENDANCE,
    )


def overtime_award(settings: GamificationSettings, reference_id: Optional[int] = None) -> PointAward:
    return PointAward(
        ActionType.OT_COMPLETED,
        settings.points_ot,
        "Overtime completed",
        reference_id,
        ReferenceType.OVERTIME,
    )


def streak_bonus_award(settings: GamificationSettings, streak: int) -> Optional[PointAward]:
    if streak <= 0 or streak % settings.streak_bonus_every != 0:
        return None
    return PointAward(
        ActionType.STREAK_BONUS,
        settings.points_streak_bonus,
        f"Streak bonus: {streak} consecutive days",
    )


def no_leave_week_award(settings: GamificationSettings) -> PointAward:
    return PointAward(ActionType.NO_LEAVE_WEEK, settings.points_no_leave_week, "No leave all week")


def fold_award(totals: PointTotals, award: PointAward, *, counts_for_quarter: bool) -> PointTotals:
    return totals.apply(award.points, counts_for_quarter=counts_for_quarter)
