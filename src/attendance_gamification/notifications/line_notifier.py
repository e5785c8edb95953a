from __future__ import annotations

import logging
from typing import Optional

import requests

from ..employees.repository import EmployeeRepository
from .messages import format_badge_message
from .notifier import BadgeNotification, BadgeNotifier

logger = logging.getLogger(__name__)

LINE_PUSH_ENDPOINT = "https://api.line.me/v2/bot/message/push"


class LineNotifier(BadgeNotifier):
    """Pushes badge and ranking messages through the LINE Messaging API."""

    def __init__(
        self,
        *,
        channel_access_token: str,
        employees: EmployeeRepository,
        target_id: Optional[str] = None,
        endpoint: str = LINE_PUSH_ENDPOINT,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        self._token = channel_access_token
        self._employees = employees
        self._target_id = target_id
        self._endpoint = endpoint
        self._timeout = timeout
        self._http = session or requests.Session()

    def _push(self, to: str, text: str) -> bool:
        try:
            resp = self._http.post(
                self._endpoint,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json",
                },
                json={"to": to, "messages": [{"type": "text", "text": text}]},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("LINE push failed: %s", e)
            return False

        if resp.status_code != 200:
            logger.error("LINE push rejected (%s): %s", resp.status_code, resp.text)
            return False
        return True

    def notify_badge(self, notification: BadgeNotification) -> None:
        try:
            employee = self._employees.get_by_id(notification.employee_id)
        except Exception:
            logger.exception("Could not load employee %s for badge notification", notification.employee_id)
            return
        if not employee or not employee.line_user_id:
            return

        text = format_badge_message(employee.name, notification.badge_icon, notification.badge_name)
        if notification.points_reward:
            text += f" (+{notification.points_reward} pts)"
        self._push(employee.line_user_id, text)

    def announce_ranking(self, message: str) -> bool:
        if not self._target_id:
            logger.warning("LINE_TARGET_ID not configured; weekly ranking not sent")
            return False
        return self._push(self._target_id, message)
