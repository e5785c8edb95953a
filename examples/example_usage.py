"""Example: drive the gamification engine from the service layer (no Flask).

The attendance flow calls these right after it stores a check-in / check-out.
"""

import importlib
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from attendance_gamification.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.gamification_service

    result = service.process_checkin(1, is_late=False, checkin_time=datetime.now(), attendance_id=None)
    print("points:", result.points_earned, "badges:", list(result.new_badges))

    profile = service.get_employee_profile(1)
    print(f"{profile.level_name} {profile.rank_icon} {profile.rank_tier} - {profile.total_points} pts (#{profile.leaderboard_rank})")


if __name__ == "__main__":
    main()
