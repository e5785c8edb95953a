from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization on admin endpoints."""

    ADMIN = "admin"
    STAFF = "staff"


class ActionType(str, Enum):
    """Tag stored on every point transaction."""

    ON_TIME_CHECKIN = "on_time_checkin"
    EARLY_CHECKIN = "early_checkin"
    FULL_ATTENDANCE_DAY = "full_attendance_day"
    OT_COMPLETED = "ot_completed"
    NO_LEAVE_WEEK = "no_leave_week"
    STREAK_BONUS = "streak_bonus"
    LATE_PENALTY = "late_penalty"


class ReferenceType(str, Enum):
    ATTENDANCE = "attendance"
    OVERTIME = "ot"


class ConditionType(str, Enum):
    """Badge condition types understood by the badge evaluator."""

    FIRST_CHECKIN = "first_checkin"
    ON_TIME_STREAK = "on_time_streak"
    ON_TIME_MONTH = "on_time_month"
    EARLY_COUNT = "early_count"
    OT_COUNT = "ot_count"
    STREAK_DAYS = "streak_days"
    NO_LEAVE_MONTH = "no_leave_month"
    ATTENDANCE_COUNT = "attendance_count"


class LeaderboardWindow(str, Enum):
    QUARTERLY = "quarterly"
    LIFETIME = "alltime"


class AccountStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestStatus(str, Enum):
    """Approval state of leave and overtime requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
