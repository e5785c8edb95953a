from __future__ import annotations

import logging
from typing import Mapping

from ..common.datetime_utils import is_known_timezone
from ..core.constants import SETTING_PREFIX
from ..core.exceptions import ValidationError
from .model import DEFAULT_SETTING_VALUES, GamificationSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsGateway:
    """Reads engine settings and resolves them into a GamificationSettings value."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def load(self) -> GamificationSettings:
        try:
            values = self._settings.get_many(list(DEFAULT_SETTING_VALUES))
        except Exception:
            # Unreadable configuration means the engine stays out of the way.
            logger.exception("Could not read gamification settings; treating feature as disabled")
            return GamificationSettings.disabled()
        return GamificationSettings.from_values(values)

    def list_raw(self) -> dict[str, str]:
        """Admin view: defaults overlaid with stored `gamify_*` values."""
        merged = {k: v for k, v in DEFAULT_SETTING_VALUES.items() if k.startswith(SETTING_PREFIX)}
        merged.update(self._settings.get_by_prefix(SETTING_PREFIX))
        return merged

    def update_settings(self, values: Mapping[str, object]) -> list[str]:
        if not isinstance(values, Mapping):
            raise ValidationError("settings must be an object")

        pending = {str(k): str(v).strip() for k, v in values.items() if str(k).startswith(SETTING_PREFIX)}
        zone = pending.get("gamify_timezone")
        if zone is not None and not is_known_timezone(zone):
            raise ValidationError(f"Unknown time zone: {zone}")

        updated: list[str] = []
        for key, value in pending.items():
            self._settings.upsert(key, value)
            updated.append(key)
        if updated:
            logger.info("Updated gamification settings: %s", ", ".join(sorted(updated)))
        return updated
