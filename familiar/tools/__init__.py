"""Tools the agent can call."""

from familiar.config import Settings
from familiar.tools.base import ToolDefinition
from familiar.tools.browser import create_browser_tool
from familiar.tools.file_system import create_file_system_tool
from familiar.tools.registry import ToolsRegistry


def create_default_registry(settings: Settings) -> ToolsRegistry:
    """Build and freeze the registry of bundled tools."""
    registry = ToolsRegistry(
        [
            create_file_system_tool(settings.workspace_root),
            create_browser_tool(timeout=settings.browser_timeout),
        ]
    )
    registry.freeze()
    return registry


__all__ = ["ToolDefinition", "ToolsRegistry", "create_default_registry"]
