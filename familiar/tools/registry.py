"""Tools registry: registration, schema description and dispatch."""

import json
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from familiar.errors import DuplicateToolError, RegistryFrozenError, ToolExecutionError, ToolNotFoundError
from familiar.models.tools import ToolFailure, ToolInvocationRequest, ToolOutcome, ToolSuccess
from familiar.tools.base import ToolDefinition
from familiar.utils.logging import get_logger

logger = get_logger(__name__)


class ToolsRegistry:
    """Maps tool names to tool definitions.

    Populated once at startup, then frozen. Reads need no locking after that.
    """

    def __init__(self, tools: Iterable[ToolDefinition] = ()):
        """Initialize the registry, registering any tools given."""
        self._tools: dict[str, ToolDefinition] = {}
        self._frozen = False

        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        """Register a new tool.

        Raises:
            DuplicateToolError: If a tool with the same name is already registered
            RegistryFrozenError: If the registry has been frozen
        """
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {tool.name}: registry is frozen")
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def freeze(self) -> None:
        """Disallow further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def describe_all(self) -> list[dict[str, Any]]:
        """Describe every tool, sorted by name so the output is registration-order independent."""
        return [self._tools[name].describe().model_dump() for name in sorted(self._tools)]

    def schema_document(self) -> str:
        """Render the tool schema document embedded in the system prompt."""
        return json.dumps(self.describe_all(), indent=2, sort_keys=True)

    async def invoke(self, name: str, args: dict[str, Any]) -> str:
        """Execute a tool by name.

        Args:
            name: Registered tool name
            args: Raw arguments from the model's tool call

        Returns:
            The tool's textual result

        Raises:
            ToolNotFoundError: If no such tool is registered
            ToolExecutionError: If arguments are invalid or the tool fails
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.error(f"Unknown tool requested: {name}")
            raise ToolNotFoundError(name)

        try:
            params = tool.parse_input(args)
        except ValidationError as e:
            logger.warning(f"Invalid arguments for tool {name}: {e}")
            raise ToolExecutionError(name, f"Invalid arguments for {name}: {e}") from e

        try:
            result = await tool.handler(params)
            if not isinstance(result, str):
                raise TypeError(f"Tool {name} returned {type(result).__name__}, expected str")
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            raise ToolExecutionError(name, str(e) or type(e).__name__) from e

        logger.debug(f"Tool {name} succeeded: {result[:100]}...")
        return result

    async def dispatch(self, request: ToolInvocationRequest) -> ToolOutcome:
        """Invoke a tool and fold dispatch errors into a failure outcome."""
        try:
            return ToolSuccess(text=await self.invoke(request.name, request.args))
        except (ToolNotFoundError, ToolExecutionError) as e:
            return ToolFailure(error=str(e))

    def get_tool_names(self) -> list[str]:
        """Get list of all registered tool names."""
        return list(self._tools.keys())

    def has_tool(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
