"""File system access tool."""

import asyncio
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from familiar.tools.base import ToolDefinition

FILE_SYSTEM_DESCRIPTION = (
    "Access file system. Actions: 'read_file', 'write_file', 'list_dir'. "
    "Paths must be absolute or relative to the workspace root."
)


class FileSystemInput(BaseModel):
    """Input schema for the file system tool."""

    action: Literal["read_file", "write_file", "list_dir"]
    path: str = Field(..., min_length=1, description="File or directory path")
    content: str | None = Field(default=None, description="Content to write (for write_file)")


def resolve_workspace_path(workspace_root: Path, raw_path: str) -> Path:
    """Resolve a path against the workspace root.

    Raises:
        PermissionError: If the resolved path lies outside the workspace
    """
    root = workspace_root.resolve()
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        candidate = root / candidate
    resolved = candidate.resolve()

    if resolved != root and root not in resolved.parents:
        raise PermissionError(f"Path is outside the workspace: {raw_path}")
    return resolved


def _list_dir(path: Path) -> str:
    entries = sorted(path.iterdir(), key=lambda p: p.name)
    if not entries:
        return "(empty directory)"
    return "\n".join(f"{entry.name}/" if entry.is_dir() else entry.name for entry in entries)


def create_file_system_tool(workspace_root: Path) -> ToolDefinition:
    async def file_system_handler(params: FileSystemInput) -> str:
        path = resolve_workspace_path(workspace_root, params.path)

        if params.action == "read_file":
            return await asyncio.to_thread(path.read_text, encoding="utf-8")

        if params.action == "write_file":
            await asyncio.to_thread(path.write_text, params.content or "", encoding="utf-8")
            return f"Successfully wrote to {params.path}"

        return await asyncio.to_thread(_list_dir, path)

    return ToolDefinition(
        name="file_system",
        description=FILE_SYSTEM_DESCRIPTION,
        input_schema_class=FileSystemInput,
        handler=file_system_handler,
    )
