# backend/tests/database/conftest.py
"""
Shared fixtures and configuration for database operations tests.

Provides common mocking utilities and test data factories for database tests.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict
from unittest.mock import AsyncMock, Mock

import pytest


@pytest.fixture
def mock_async_db():
    """
    Mock async database connection for testing database operations.

    Returns:
        tuple: (db_mock, connection_mock, cursor_mock) for easy access in tests
    """
    db = Mock()
    conn = AsyncMock()
    cursor = AsyncMock()

    # Setup async context managers
    db.get_connection.return_value.__aenter__ = AsyncMock(return_value=conn)
    db.get_connection.return_value.__aexit__ = AsyncMock(return_value=None)
    conn.cursor = Mock()
    conn.cursor.return_value.__aenter__ = AsyncMock(return_value=cursor)
    conn.cursor.return_value.__aexit__ = AsyncMock(return_value=None)

    return db, conn, cursor


# Test data factories
class TestDataFactory:
    """Factory for creating consistent task rows as psycopg's dict_row returns them."""

    __test__ = False

    @staticmethod
    def create_task_row(**overrides) -> Dict[str, Any]:
        """Create mock task row."""
        defaults = {
            "id": uuid.UUID("11111111-1111-1111-1111-111111111111"),
            "owner_id": uuid.UUID("22222222-2222-2222-2222-222222222222"),
            "title": "Water the plants",
            "due_date": datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc),
            "is_completed": True,
            "recurrence_rule": {"frequency": "weekly", "interval": 2},
            "mirror_task_id": None,
            "column_id": None,
            "tags": [],
        }
        defaults.update(overrides)
        return defaults


@pytest.fixture
def test_data_factory():
    """Provide test data factory."""
    return TestDataFactory
