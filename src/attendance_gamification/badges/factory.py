from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ConditionType
from .conditions.activity_conditions import EarlyCountCondition, OvertimeCountCondition, StreakDaysCondition
from .conditions.attendance_conditions import (
    AttendanceCountCondition,
    FirstCheckinCondition,
    OnTimeStreakCondition,
)
from .conditions.base import BadgeCondition
from .conditions.monthly_conditions import NoLeaveMonthCondition, OnTimeMonthCondition


def _default_conditions() -> dict[str, BadgeCondition]:
    return {
        ConditionType.FIRST_CHECKIN.value: FirstCheckinCondition(),
        ConditionType.ON_TIME_STREAK.value: OnTimeStreakCondition(),
        ConditionType.ON_TIME_MONTH.value: OnTimeMonthCondition(),
        ConditionType.EARLY_COUNT.value: EarlyCountCondition(),
        ConditionType.OT_COUNT.value: OvertimeCountCondition(),
        ConditionType.STREAK_DAYS.value: StreakDaysCondition(),
        ConditionType.NO_LEAVE_MONTH.value: NoLeaveMonthCondition(),
        ConditionType.ATTENDANCE_COUNT.value: AttendanceCountCondition(),
    }


@dataclass
class BadgeConditionFactory:
    """Factory Pattern: condition type string -> condition strategy."""

    conditions: dict[str, BadgeCondition] = field(default_factory=_default_conditions)

    def register(self, condition_type: str, condition: BadgeCondition) -> None:
        self.conditions[condition_type] = condition

    def for_type(self, condition_type: str) -> Optional[BadgeCondition]:
        return self.conditions.get(condition_type)

    def is_monthly(self, condition_type: str) -> bool:
        condition = self.for_type(condition_type)
        return bool(condition and condition.monthly)
