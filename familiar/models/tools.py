"""Tool descriptor, invocation request and outcome models."""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from familiar.models.messages import TOOL_ERROR_PREFIX, TOOL_OUTPUT_PREFIX, Message


class ToolDescriptor(BaseModel):
    """Public description of a registered tool, as embedded in the system prompt."""

    name: str
    description: str
    parameters: dict[str, Any]

    model_config = ConfigDict(frozen=True)


class ToolCallPayload(BaseModel):
    """Wire format of a tool call: exactly ``tool`` and ``args``, nothing else."""

    tool: str = Field(min_length=1)
    args: dict[str, Any]

    model_config = ConfigDict(extra="forbid", strict=True)


class ToolInvocationRequest(BaseModel):
    """A tool call parsed from an assistant response."""

    name: str
    args: dict[str, Any]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_response(cls, text: str) -> "ToolInvocationRequest | None":
        """Parse a raw model response as a tool call.

        Only a response consisting of a single JSON object with exactly the
        ``tool`` and ``args`` keys qualifies. Surrounding whitespace is
        allowed; prose, code fences or extra keys make it chat.

        Args:
            text: Raw response text from the inference engine

        Returns:
            The parsed request, or None if the text is ordinary chat
        """
        stripped = text.strip()
        if not stripped.startswith("{"):
            return None

        try:
            raw = json.loads(stripped)
        except json.JSONDecodeError:
            return None

        if not isinstance(raw, dict):
            return None

        try:
            payload = ToolCallPayload.model_validate(raw)
        except ValidationError:
            return None

        return cls(name=payload.tool, args=payload.args)


class ToolSuccess(BaseModel):
    """Tool ran and produced text."""

    kind: Literal["success"] = "success"
    text: str

    def to_observation(self) -> Message:
        return Message(role="user", content=f"{TOOL_OUTPUT_PREFIX}{self.text}")


class ToolFailure(BaseModel):
    """Tool lookup or execution failed."""

    kind: Literal["failure"] = "failure"
    error: str

    def to_observation(self) -> Message:
        return Message(role="user", content=f"{TOOL_ERROR_PREFIX}{self.error}")


ToolOutcome = Annotated[ToolSuccess | ToolFailure, Field(discriminator="kind")]
