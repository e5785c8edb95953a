from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_many(self, keys: Sequence[str]) -> dict[str, str]:
        if not keys:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT setting_key, setting_value
                FROM system_settings
                WHERE setting_key IN ({in_clause(keys)})
                """,
                tuple(keys),
            )
            return {r["setting_key"]: r["setting_value"] or "" for r in fetchall(cur)}

    def get_by_prefix(self, prefix: str) -> dict[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT setting_key, setting_value
                FROM system_settings
                WHERE setting_key LIKE %s
                ORDER BY setting_key
                """,
                (prefix.replace("_", "\\_") + "%",),
            )
            return {r["setting_key"]: r["setting_value"] or "" for r in fetchall(cur)}

    def upsert(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_settings (setting_key, setting_value)
                VALUES (%s, %s)
                ON DUPLICATE KEY UPDATE setting_value = VALUES(setting_value)
                """,
                (key, value),
            )
