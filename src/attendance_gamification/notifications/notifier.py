from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeNotification:
    employee_id: int
    badge_name: str
    badge_icon: str
    points_reward: int = 0


class BadgeNotifier(Protocol):
    """Outbound notification sink. Implementations must not raise."""

    def notify_badge(self, notification: BadgeNotification) -> None:
        raise NotImplementedError

    def announce_ranking(self, message: str) -> bool:
        raise NotImplementedError


class LoggingNotifier(BadgeNotifier):
    """Default sink when no messaging channel is configured."""

    def notify_badge(self, notification: BadgeNotification) -> None:
        logger.info(
            "Badge earned: employee=%s badge=%s %s",
            notification.employee_id,
            notification.badge_icon,
            notification.badge_name,
        )

    def announce_ranking(self, message: str) -> bool:
        logger.info("Weekly ranking:\n%s", message)
        return True
