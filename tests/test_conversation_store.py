"""Tests for the SQLite conversation store."""

import sqlite3

import pytest

from familiar.errors import StorageError
from familiar.models.messages import Message
from familiar.storage.connection import AsyncSQLiteConnection
from familiar.storage.conversation_store import ConversationStore


class TestConversationStore:
    """Tests for append, load, clear and count."""

    @pytest.mark.asyncio
    async def test_load_recent_returns_oldest_first(self, store):
        """Test that the most recent window comes back in insertion order."""
        await store.initialize()
        for i in range(5):
            await store.append(Message(role="user", content=f"message {i}"))

        loaded = await store.load_recent(3)

        assert [m.content for m in loaded] == ["message 2", "message 3", "message 4"]

    @pytest.mark.asyncio
    async def test_load_recent_on_empty_store(self, store):
        """Test that an empty store loads an empty list."""
        await store.initialize()
        assert await store.load_recent(50) == []

    @pytest.mark.asyncio
    async def test_append_survives_new_connection(self, store, settings):
        """Test that appended messages are durable across store instances."""
        await store.initialize()
        await store.append(Message(role="system", content="prompt"))
        await store.append(Message(role="user", content="hi"))

        reopened = ConversationStore(AsyncSQLiteConnection(settings.db_path))
        loaded = await reopened.load_recent(10)

        assert [(m.role, m.content) for m in loaded] == [("system", "prompt"), ("user", "hi")]

    @pytest.mark.asyncio
    async def test_attachments_round_trip(self, store):
        """Test that attachment references are stored and restored."""
        await store.initialize()
        await store.append(Message(role="user", content="look", attachments=("data:image/png;base64,AAAA",)))

        [loaded] = await store.load_recent(1)

        assert loaded.attachments == ("data:image/png;base64,AAAA",)

    @pytest.mark.asyncio
    async def test_clear_deletes_everything(self, store):
        """Test that clear removes all rows and does not re-seed."""
        await store.initialize()
        await store.append(Message(role="system", content="prompt"))
        await store.append(Message(role="user", content="hi"))

        await store.clear()

        assert await store.count() == 0
        assert await store.load_recent(10) == []

    @pytest.mark.asyncio
    async def test_rows_written_with_timestamp(self, store, settings):
        """Test the persisted layout of a message row."""
        await store.initialize()
        await store.append(Message(role="assistant", content="hello"))

        with sqlite3.connect(settings.db_path) as conn:
            row = conn.execute("SELECT id, role, content, attachments, timestamp FROM messages").fetchone()

        assert row[0] == 1
        assert row[1:4] == ("assistant", "hello", None)
        assert row[4]

    @pytest.mark.asyncio
    async def test_unwritable_path_raises_storage_error(self, tmp_path):
        """Test that database faults surface as StorageError."""
        store = ConversationStore(AsyncSQLiteConnection(str(tmp_path / "missing" / "db.sqlite")))

        with pytest.raises(StorageError, match="Failed to initialize"):
            await store.initialize()
