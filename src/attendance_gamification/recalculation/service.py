from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..badges.evaluator import BadgeEvaluator
from ..common.datetime_utils import now_local, quarter_window
from ..core.exceptions import RecalculationError
from ..employees.repository import EmployeeRepository
from ..history.repository import HistoryRepository
from ..points.model import EmployeeAggregate
from ..points.repository import PointsRepository
from ..settings.service import SettingsGateway
from .replay import replay_history

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecalculationSummary:
    processed: int = 0
    failed: tuple[int, ...] = field(default_factory=tuple)


class RecalculationService:
    """Administrative rebuild of derived gamification state from raw history.

    Not reentrant per employee: callers must not recalculate the same
    employee concurrently.
    """

    def __init__(
        self,
        settings: SettingsGateway,
        points: PointsRepository,
        history: HistoryRepository,
        employees: EmployeeRepository,
        evaluator: BadgeEvaluator,
    ):
        self._settings = settings
        self._points = points
        self._history = history
        self._employees = employees
        self._evaluator = evaluator

    def recalculate(self, employee_id: int, *, now: Optional[datetime] = None) -> Optional[EmployeeAggregate]:
        """Rebuild one employee. Returns the written aggregate, or None when the feature is off."""
        now = now or now_local()
        settings = self._settings.load()
        if not settings.enabled:
            logger.info("Gamification disabled; skipping recalculation of employee %s", employee_id)
            return None

        window = quarter_window(now.date())
        try:
            result = replay_history(
                employee_id,
                self._history.list_attendance(employee_id),
                self._history.list_completed_overtime(employee_id),
                settings=settings,
                window=window,
            )
            aggregate = result.to_aggregate(employee_id, window.tag)
            self._points.rebuild_employee(aggregate, result.transactions)
        except Exception as e:
            logger.exception("Recalculation failed for employee %s", employee_id)
            raise RecalculationError(employee_id, str(e)) from e

        self._evaluator.check_and_award_badges(employee_id, now=now)
        logger.info(
            "Recalculated employee %s: %s txns, total=%s quarterly=%s streak=%s",
            employee_id,
            len(result.transactions),
            aggregate.total_points,
            aggregate.quarterly_points,
            aggregate.current_streak,
        )
        return aggregate

    def recalculate_all(self, *, now: Optional[datetime] = None) -> RecalculationSummary:
        now = now or now_local()
        processed = 0
        failed: list[int] = []
        for employee in self._employees.list_all():
            if not employee.is_rankable:
                continue
            try:
                self.recalculate(employee.employee_id, now=now)
                processed += 1
            except RecalculationError:
                failed.append(employee.employee_id)
        return RecalculationSummary(processed=processed, failed=tuple(failed))
