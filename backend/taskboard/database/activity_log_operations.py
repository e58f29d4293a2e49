# backend/taskboard/database/activity_log_operations.py
"""
Activity Log Operations - append-only audit rows for user-visible actions.
"""

import json
from typing import Any, Dict, Optional

import psycopg

from ..enums import ActivityAction
from .core import AsyncDatabase
from .exceptions import ActivityLogOperationError


class ActivityLogOperations:
    """Async database operations for the activity_log table."""

    def __init__(self, db: AsyncDatabase) -> None:
        """Initialize with async database instance."""
        self.db = db

    async def log_activity(
        self,
        user_id: str,
        action: ActivityAction,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Append one activity row.

        Args:
            user_id: User the action belongs to
            action: Action identifier
            details: JSON-serializable payload stored in the details column
        """
        try:
            query = """
                INSERT INTO activity_log (user_id, action, details)
                VALUES (%(user_id)s, %(action)s, %(details)s::jsonb)
            """

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        query,
                        {
                            "user_id": user_id,
                            "action": action.value,
                            "details": json.dumps(details or {}),
                        },
                    )

        except (psycopg.Error, KeyError, ValueError, TypeError) as e:
            raise ActivityLogOperationError(
                "Failed to write activity log",
                operation="log_activity",
                details={"user_id": user_id, "action": action.value},
            ) from e
