# backend/taskboard/database/core.py

"""
Base database class for composition-based architecture.

Operations classes receive an AsyncDatabase and borrow connections from it;
every borrowed connection runs inside one transaction that commits when the
block exits cleanly and rolls back otherwise.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger

db_logger = get_service_logger(LoggerName.DATABASE, LogSource.DATABASE, LogEmoji.DATABASE)


class AsyncDatabaseCore:
    """
    Core async database functionality.

    Provides connection pooling and transaction scoping without any knowledge
    of the tables that operations classes query.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: Optional[int] = None,
        pool_timeout: Optional[int] = None,
    ) -> None:
        """
        Args:
            database_url: PostgreSQL DSN (defaults to settings.database_url)
            pool_size: Maximum pool size (defaults to settings.db_pool_size)
            pool_timeout: Seconds to wait for a pooled connection
        """
        self._database_url = database_url
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._pool: Optional[AsyncConnectionPool] = None

    def _resolve_config(self) -> tuple[str, int, int]:
        if self._database_url and self._pool_size and self._pool_timeout:
            return self._database_url, self._pool_size, self._pool_timeout

        from ..config import get_settings

        settings = get_settings()
        return (
            self._database_url or settings.database_url,
            self._pool_size or settings.db_pool_size,
            self._pool_timeout or settings.db_pool_timeout,
        )

    async def initialize(self) -> None:
        """
        Initialize the async connection pool.

        Must be called before using any database operations.

        Raises:
            psycopg.Error: If the pool cannot be opened
        """
        database_url, pool_size, pool_timeout = self._resolve_config()
        try:
            self._pool = AsyncConnectionPool(
                database_url,
                min_size=1,
                max_size=pool_size,
                timeout=pool_timeout,
                kwargs={
                    "row_factory": dict_row,
                    "connect_timeout": 15,
                },
                open=False,
            )
            await self._pool.open()
        except (psycopg.Error, ConnectionError, OSError) as e:
            db_logger.error(f"Failed to initialize async database pool: {e}")
            raise

    async def close(self) -> None:
        """Close the connection pool and release its connections."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def check_pool_health(self) -> bool:
        """
        Check if the async database connection pool is healthy.

        Returns:
            True if pool is healthy, False otherwise
        """
        if not self._pool:
            return False

        try:
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT 1")
                    await cur.fetchone()

            return True
        except (psycopg.Error, OSError) as e:
            db_logger.warning(f"Async database health check failed: {e}")
            return False

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[Any, None]:
        """
        Borrow a connection wrapped in a transaction.

        Yields:
            Connection: An async database connection with dict_row factory

        Raises:
            RuntimeError: If the pool was never initialized

        Usage:
            async with db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT * FROM tasks")
                    data = await cur.fetchall()
        """
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        async with self._pool.connection() as conn:
            async with conn.transaction():
                yield conn


# Composition-based database class for services and workers
AsyncDatabase = AsyncDatabaseCore
