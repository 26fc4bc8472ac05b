"""Async SQLite connection provider."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from familiar.utils.logging import get_logger

logger = get_logger(__name__)


class AsyncSQLiteConnection:
    """Opens a connection per operation with auto-commit/rollback."""

    def __init__(self, db_path: str):
        self._db_path = db_path

    @property
    def db_path(self) -> str:
        return self._db_path

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection. Commits on success, rolls back on exception."""
        async with aiosqlite.connect(self._db_path) as conn:
            conn.row_factory = aiosqlite.Row
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                logger.exception("Database operation failed, transaction rolled back.")
                raise
