# backend/taskboard/database/user_settings_operations.py
"""
User Settings Operations - Database layer for per-user preferences.

Preferences live in a JSONB column (user_settings.settings); the engine only
reads the timezone key.
"""

from typing import Dict, Iterable, Optional

import psycopg

from ..constants import USER_SETTINGS_TIMEZONE_KEY
from .core import AsyncDatabase
from .exceptions import UserSettingsOperationError


class UserSettingsQueryBuilder:
    """Centralized query builder for user settings operations."""

    @staticmethod
    def build_timezone_query():
        """Build bulk timezone lookup using named parameters."""
        return """
            SELECT user_id, settings->>%(key)s AS timezone
            FROM user_settings
            WHERE user_id = ANY(%(owner_ids)s)
        """


class UserSettingsOperations:
    """Async database operations for user settings."""

    def __init__(self, db: AsyncDatabase) -> None:
        """Initialize with async database instance."""
        self.db = db

    async def get_timezones(self, owner_ids: Iterable[str]) -> Dict[str, str]:
        """
        Get stored timezone preferences for many owners in one read.

        Owners without a row, or with an empty timezone value, are absent
        from the result; the caller applies its fallback.

        Args:
            owner_ids: Owner user ids

        Returns:
            Mapping of owner id to IANA timezone identifier
        """
        ids = sorted({str(owner_id) for owner_id in owner_ids})
        if not ids:
            return {}

        try:
            query = UserSettingsQueryBuilder.build_timezone_query()

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        query, {"key": USER_SETTINGS_TIMEZONE_KEY, "owner_ids": ids}
                    )
                    rows = await cur.fetchall()

            timezones: Dict[str, str] = {}
            for row in rows:
                timezone_name: Optional[str] = row["timezone"]
                if timezone_name:
                    timezones[str(row["user_id"])] = timezone_name
            return timezones

        except (psycopg.Error, KeyError, ValueError) as e:
            raise UserSettingsOperationError(
                "Failed to load user timezones",
                operation="get_timezones",
                details={"owner_count": len(ids)},
            ) from e
