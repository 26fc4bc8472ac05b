"""SQLite-backed append-only conversation store."""

import json
import sqlite3
from datetime import UTC, datetime

import aiosqlite

from familiar.errors import StorageError
from familiar.models.messages import Message
from familiar.storage.connection import AsyncSQLiteConnection
from familiar.utils.logging import get_logger

logger = get_logger(__name__)

_CREATE_MESSAGES_TABLE = """
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    attachments TEXT,
    timestamp TEXT NOT NULL
)
"""


class ConversationStore:
    """Durable, ordered log of the messages of a single conversation.

    Records are keyed by insertion sequence. Every write is committed before
    the awaiting caller resumes, so a returned ``append`` is the durability
    barrier for that message.
    """

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def initialize(self) -> None:
        """Create the messages table if it does not exist yet."""
        try:
            async with self._conn.acquire() as conn:
                await conn.execute(_CREATE_MESSAGES_TABLE)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to initialize conversation store: {e}") from e

        logger.info(f"Conversation store ready at {self._conn.db_path}")

    async def append(self, message: Message) -> None:
        """Durably append a message.

        Raises:
            StorageError: If the write could not be committed
        """
        attachments = json.dumps(list(message.attachments)) if message.attachments else None
        try:
            async with self._conn.acquire() as conn:
                await conn.execute(
                    "INSERT INTO messages (role, content, attachments, timestamp) VALUES (?, ?, ?, ?)",
                    (message.role, message.content, attachments, datetime.now(UTC).isoformat()),
                )
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to append {message.role} message: {e}") from e

    async def load_recent(self, limit: int) -> list[Message]:
        """Load the last ``limit`` messages, oldest first.

        Raises:
            StorageError: If the messages could not be read
        """
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(
                    "SELECT role, content, attachments FROM messages ORDER BY id DESC LIMIT ?",
                    (limit,),
                )
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to load conversation history: {e}") from e

        messages = [self._row_to_message(row) for row in rows]
        messages.reverse()
        return messages

    async def clear(self) -> None:
        """Delete every persisted message. Does not re-seed a system message."""
        try:
            async with self._conn.acquire() as conn:
                await conn.execute("DELETE FROM messages")
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to clear conversation history: {e}") from e

        logger.info("Conversation store cleared")

    async def count(self) -> int:
        """Return the number of persisted messages."""
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall("SELECT COUNT(*) FROM messages")
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to count messages: {e}") from e

        return int(list(rows)[0][0])

    @staticmethod
    def _row_to_message(row: aiosqlite.Row) -> Message:
        attachments = tuple(json.loads(row["attachments"])) if row["attachments"] else None
        return Message(role=row["role"], content=row["content"], attachments=attachments)
