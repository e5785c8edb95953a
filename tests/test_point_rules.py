from datetime import datetime, time, timezone

from attendance_gamification.core.enums import ActionType
from attendance_gamification.points.model import PointTotals
from attendance_gamification.points.rules import (
    checkin_awards,
    is_early_checkin,
    streak_bonus_award,
)
from attendance_gamification.settings.model import GamificationSettings

SETTINGS = GamificationSettings(work_start_time=time(9, 0), early_minutes=15, timezone="Asia/Bangkok")


def test_late_checkin_only_gets_penalty():
    awards = checkin_awards(SETTINGS, is_late=True, checkin_time=datetime(2025, 3, 3, 9, 20), reference_id=7)

    assert [a.action_type for a in awards] == [ActionType.LATE_PENALTY]
    assert awards[0].points == -5
    assert awards[0].reference_id == 7


def test_on_time_checkin_without_early_bonus():
    awards = checkin_awards(SETTINGS, is_late=False, checkin_time=datetime(2025, 3, 3, 8, 50))

    assert [a.action_type for a in awards] == [ActionType.ON_TIME_CHECKIN]


def test_early_checkin_adds_bonus():
    awards = checkin_awards(SETTINGS, is_late=False, checkin_time=datetime(2025, 3, 3, 8, 45))

    assert [a.action_type for a in awards] == [ActionType.ON_TIME_CHECKIN, ActionType.EARLY_CHECKIN]
    assert sum(a.points for a in awards) == 15


def test_early_window_uses_configured_timezone_for_aware_times():
    # 01:40 UTC is 08:40 in Bangkok
    assert is_early_checkin(SETTINGS, datetime(2025, 3, 3, 1, 40, tzinfo=timezone.utc))
    # 02:00 UTC is 09:00 in Bangkok
    assert not is_early_checkin(SETTINGS, datetime(2025, 3, 3, 2, 0, tzinfo=timezone.utc))


def test_streak_bonus_cadence():
    assert streak_bonus_award(SETTINGS, 4) is None
    assert streak_bonus_award(SETTINGS, 0) is None

    bonus = streak_bonus_award(SETTINGS, 10)
    assert bonus is not None
    assert bonus.action_type == ActionType.STREAK_BONUS
    assert bonus.points == 25


def test_totals_clamp_independently():
    totals = PointTotals(total=3, quarterly=0)

    totals = totals.apply(-5, counts_for_quarter=True)
    assert totals == PointTotals(total=0, quarterly=0)

    totals = PointTotals(total=40, quarterly=2).apply(-5, counts_for_quarter=False)
    assert totals == PointTotals(total=35, quarterly=2)
