from __future__ import annotations

from typing import Protocol, Sequence


class SettingsRepository(Protocol):
    """Key/value access to the system_settings table."""

    def get_many(self, keys: Sequence[str]) -> dict[str, str]:
        raise NotImplementedError

    def get_by_prefix(self, prefix: str) -> dict[str, str]:
        raise NotImplementedError

    def upsert(self, key: str, value: str) -> None:
        raise NotImplementedError
