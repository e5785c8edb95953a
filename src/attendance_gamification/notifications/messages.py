from __future__ import annotations

from datetime import date
from typing import Sequence

from ..leaderboard.model import LeaderboardEntry

_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def format_weekly_ranking(entries: Sequence[LeaderboardEntry], week_start: date, week_end: date, *, top: int = 10) -> str:
    """Plain-text quarterly top list for the weekly announcement."""
    lines = [
        "🏆 Weekly Ranking",
        f"{week_start:%d/%m/%Y} - {week_end:%d/%m/%Y}",
        "",
    ]
    if not entries:
        lines.append("No rankings yet this quarter.")
        return "\n".join(lines)

    for e in entries[:top]:
        marker = _MEDALS.get(e.rank, f"{e.rank}.")
        lines.append(f"{marker} {e.employee_name} {e.rank_icon} {e.quarterly_points} pts")
    return "\n".join(lines)


def format_badge_message(employee_name: str, badge_icon: str, badge_name: str) -> str:
    return f"{badge_icon} Congratulations {employee_name}! You earned the \"{badge_name}\" badge."
