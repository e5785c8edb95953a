"""Rebuild points, streaks and badges for every rankable employee from raw history.

Usage: python scripts/recalculate_all.py [employee_id ...]
"""

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
from attendance_gamification.core.exceptions import RecalculationError


def main(argv: list[str]) -> int:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))
    service = container.recalculation_service

    if argv:
        failed = 0
        for raw in argv:
            try:
                agg = service.recalculate(int(raw))
            except RecalculationError as e:
                print(f"FAIL: {e}")
                failed += 1
                continue
            if agg is None:
                print("Gamification is disabled; nothing recalculated")
                return 0
            print(f"OK: employee {agg.employee_id} total={agg.total_points} quarterly={agg.quarterly_points}")
        return 1 if failed else 0

    summary = service.recalculate_all()
    print(f"OK: recalculated {summary.processed} employees")
    if summary.failed:
        print("FAILED: " + ", ".join(str(i) for i in summary.failed))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
