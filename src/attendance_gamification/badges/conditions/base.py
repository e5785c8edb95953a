from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import EmployeeSnapshot


class BadgeCondition(ABC):
    """Strategy Pattern: one predicate per badge condition type."""

    # Monthly conditions can be earned once per calendar month.
    monthly: bool = False

    @abstractmethod
    def is_met(self, snapshot: EmployeeSnapshot, threshold: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def current_value(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        raise NotImplementedError

    def target(self, threshold: int) -> int:
        return threshold

    def progress(self, snapshot: EmployeeSnapshot, threshold: int) -> int:
        """0-100 progress for UI bars."""
        target = self.target(threshold)
        if target <= 0:
            return 100
        return min(100, round(self.current_value(snapshot, threshold) / target * 100))
