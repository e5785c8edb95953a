"""Run the daily gamification sweep; meant to be scheduled once a day (cron)."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from attendance_gamification.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        line_channel_access_token=getattr(settings, "LINE_CHANNEL_ACCESS_TOKEN", "") or None,
        line_target_id=getattr(settings, "LINE_TARGET_ID", "") or None,
        leaderboard_limit=int(getattr(settings, "LEADERBOARD_LIMIT", 50)),
    )

    summary = container.daily_check_service.run_daily_check()
    if not summary.enabled:
        print("Gamification is disabled; nothing to do")
        return
    print(
        f"OK: processed={summary.processed} badges={summary.badges_awarded} "
        f"weekly_bonuses={summary.weekly_bonuses} ranking_announced={summary.ranking_announced}"
    )


if __name__ == "__main__":
    main()
