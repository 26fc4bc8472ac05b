"""Base types and definitions for tools."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from familiar.models.tools import ToolDescriptor

ToolHandler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool the agent can call."""

    name: str
    description: str
    input_schema_class: type[BaseModel]
    handler: ToolHandler

    def get_json_schema(self) -> dict[str, Any]:
        """Get JSON schema for this tool's input."""
        return self.input_schema_class.model_json_schema()

    def parse_input(self, raw_input: dict[str, Any]) -> BaseModel:
        """Parse and validate tool input."""
        return self.input_schema_class.model_validate(raw_input)

    def describe(self) -> ToolDescriptor:
        """Describe this tool for the tool schema document."""
        return ToolDescriptor(name=self.name, description=self.description, parameters=self.get_json_schema())
