"""Shared fixtures for the test suite."""

from pathlib import Path

import pytest
from fakes import create_echo_tool

from familiar.config import Settings
from familiar.storage.connection import AsyncSQLiteConnection
from familiar.storage.conversation_store import ConversationStore
from familiar.tools.file_system import create_file_system_tool
from familiar.tools.registry import ToolsRegistry


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def settings(tmp_path: Path, workspace: Path) -> Settings:
    return Settings(
        db_path=str(tmp_path / "familiar.db"),
        workspace_root=workspace,
        max_tool_iterations=4,
        _env_file=None,
    )


@pytest.fixture
def store(settings: Settings) -> ConversationStore:
    """Store on a temporary database. Call ``initialize`` before use."""
    return ConversationStore(AsyncSQLiteConnection(settings.db_path))


@pytest.fixture
def echo_calls() -> list[str]:
    return []


@pytest.fixture
def registry(workspace: Path, echo_calls: list[str]) -> ToolsRegistry:
    return ToolsRegistry([create_file_system_tool(workspace), create_echo_tool(echo_calls)])
