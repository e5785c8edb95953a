from __future__ import annotations

from typing import Protocol, Sequence

from .model import Standing


class StandingsRepository(Protocol):
    def list_standings(self) -> Sequence[Standing]:
        """Every aggregate joined with its employee, unfiltered and unordered."""

        raise NotImplementedError
