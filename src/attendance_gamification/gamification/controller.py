from __future__ import annotations

import hmac
import logging
from datetime import date, datetime
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..badges.model import BadgeProgress, EarnedBadgeView
from ..core.enums import LeaderboardWindow, Role
from ..core.exceptions import AuthorizationError, RecalculationError, ValidationError
from ..container import Container
from ..leaderboard.model import LeaderboardEntry
from .model import EmployeeProfile

logger = logging.getLogger(__name__)


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _recent_badge_dict(view: EarnedBadgeView) -> dict[str, Any]:
    return {
        "badge_id": view.badge.badge_id,
        "code": view.badge.code,
        "name": view.badge.name,
        "icon": view.badge.icon,
        "tier": view.badge.tier,
        "earned_at": _iso(view.earned_at),
        "month_context": view.month_context,
    }


def _profile_dict(p: EmployeeProfile) -> dict[str, Any]:
    return {
        "employee_id": p.employee_id,
        "total_points": p.total_points,
        "quarterly_points": p.quarterly_points,
        "current_quarter": p.current_quarter,
        "level": p.level,
        "level_name": p.level_name,
        "next_level_points": p.next_level_points,
        "progress_to_next_level": p.progress_to_next_level,
        "rank_tier": p.rank_tier,
        "rank_icon": p.rank_icon,
        "next_rank_points": p.next_rank_points,
        "progress_to_next_rank": p.progress_to_next_rank,
        "current_streak": p.current_streak,
        "longest_streak": p.longest_streak,
        "recent_badges": [_recent_badge_dict(b) for b in p.recent_badges],
        "leaderboard_rank": p.leaderboard_rank,
    }


def _badge_progress_dict(bp: BadgeProgress) -> dict[str, Any]:
    b = bp.badge
    return {
        "badge_id": b.badge_id,
        "code": b.code,
        "name": b.name,
        "description": b.description,
        "icon": b.icon,
        "category": b.category,
        "tier": b.tier,
        "condition_type": b.condition_type,
        "condition_value": b.condition_value,
        "points_reward": b.points_reward,
        "earned": bp.earned,
        "earned_at": _iso(bp.earned_at),
        "progress": bp.progress,
    }


def _entry_dict(e: LeaderboardEntry) -> dict[str, Any]:
    return {
        "rank": e.rank,
        "employee_id": e.employee_id,
        "employee_name": e.employee_name,
        "branch_id": e.branch_id,
        "total_points": e.total_points,
        "quarterly_points": e.quarterly_points,
        "level": e.level,
        "level_name": e.level_name,
        "rank_tier": e.rank_tier,
        "rank_icon": e.rank_icon,
        "current_streak": e.current_streak,
        "badge_count": e.badge_count,
    }


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Unauthorized"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Unauthorized"}), 401
            if session.get("role") != Role.ADMIN.value:
                return jsonify({"success": False, "message": "Admin only"}), 403
            return view(*args, **kwargs)

        return wrapper

    def _target_employee() -> int:
        """The session user, or ?employee_id= for admins."""
        raw = request.args.get("employee_id")
        own_id = int(session["user_id"])
        if not raw:
            return own_id
        if int(raw) != own_id and session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Cannot view another employee's gamification data")
        return int(raw)

    @app.route("/api/gamification/profile", methods=["GET"], endpoint="gamification_profile")
    @login_required
    def profile():
        try:
            data = container.gamification_service.get_employee_profile(_target_employee())
            return jsonify({"success": True, "data": _profile_dict(data)})
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Error loading gamification profile")
            return jsonify({"success": False, "message": "Internal server error"}), 500

    @app.route("/api/gamification/badges", methods=["GET"], endpoint="gamification_badges")
    @login_required
    def badges():
        try:
            data = container.gamification_service.get_badges_with_progress(_target_employee())
            return jsonify({"success": True, "data": [_badge_progress_dict(b) for b in data]})
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Error loading badges")
            return jsonify({"success": False, "message": "Internal server error"}), 500

    @app.route("/api/gamification/leaderboard", methods=["GET"], endpoint="gamification_leaderboard")
    @login_required
    def leaderboard():
        try:
            window = LeaderboardWindow(request.args.get("period", LeaderboardWindow.QUARTERLY.value))
            raw_branch = request.args.get("branch_id")
            branch_id = int(raw_branch) if raw_branch else None
        except ValueError:
            return jsonify({"success": False, "message": "Invalid period or branch_id"}), 400

        entries = container.gamification_service.get_leaderboard(window, branch_id)
        return jsonify(
            {
                "success": True,
                "data": {
                    "period": window.value,
                    "leaderboard": [_entry_dict(e) for e in entries],
                },
            }
        )

    @app.route("/api/gamification/settings", methods=["GET"], endpoint="gamification_settings")
    @admin_required
    def get_settings():
        try:
            return jsonify({"success": True, "data": container.settings_gateway.list_raw()})
        except Exception:
            logger.exception("Error loading gamification settings")
            return jsonify({"success": False, "message": "Internal server error"}), 500

    @app.route("/api/gamification/settings", methods=["PUT"], endpoint="gamification_settings_update")
    @admin_required
    def update_settings():
        payload = request.get_json(silent=True)
        try:
            updated = container.settings_gateway.update_settings(payload)
            return jsonify({"success": True, "data": {"updated": updated}})
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Error updating gamification settings")
            return jsonify({"success": False, "message": "Internal server error"}), 500

    @app.route("/api/gamification/recalculate", methods=["POST"], endpoint="gamification_recalculate")
    @admin_required
    def recalculate():
        payload = request.get_json(silent=True) or {}
        service = container.recalculation_service

        raw_id = payload.get("employee_id")
        if raw_id is None:
            summary = service.recalculate_all()
            return jsonify(
                {
                    "success": not summary.failed,
                    "data": {"processed": summary.processed, "failed": list(summary.failed)},
                }
            )

        try:
            employee_id = int(raw_id)
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "Invalid employee_id"}), 400

        try:
            agg = service.recalculate(employee_id)
        except RecalculationError as e:
            return jsonify({"success": False, "message": str(e)}), 500

        if agg is None:
            return jsonify({"success": False, "message": "Gamification is disabled"}), 409
        return jsonify(
            {
                "success": True,
                "data": {
                    "employee_id": agg.employee_id,
                    "total_points": agg.total_points,
                    "quarterly_points": agg.quarterly_points,
                    "current_quarter": agg.current_quarter,
                    "level": agg.level,
                    "level_name": agg.level_name,
                    "rank_tier": agg.rank_tier,
                    "current_streak": agg.current_streak,
                    "longest_streak": agg.longest_streak,
                },
            }
        )

    @app.route("/api/gamification/daily-check", methods=["GET"], endpoint="gamification_daily_check")
    def daily_check():
        secret = str(app.config.get("CRON_SECRET") or "")
        provided = request.headers.get("Authorization", "")
        if not secret or not hmac.compare_digest(provided, f"Bearer {secret}"):
            return jsonify({"success": False, "message": "Unauthorized"}), 401

        try:
            summary = container.daily_check_service.run_daily_check()
        except Exception:
            logger.exception("Daily gamification check failed")
            return jsonify({"success": False, "message": "Internal server error"}), 500

        return jsonify(
            {
                "success": True,
                "data": {
                    "enabled": summary.enabled,
                    "processed": summary.processed,
                    "badges_awarded": summary.badges_awarded,
                    "weekly_bonuses": summary.weekly_bonuses,
                    "ranking_announced": summary.ranking_announced,
                },
            }
        )
