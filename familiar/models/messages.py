"""Conversation message models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["system", "user", "assistant"]

TOOL_OUTPUT_PREFIX = "Tool Output: "
TOOL_ERROR_PREFIX = "Tool Error: "


class Message(BaseModel):
    """A single message in the conversation. Immutable once created."""

    role: Role
    content: str
    attachments: tuple[str, ...] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_observation(self) -> bool:
        """Whether this is a synthetic tool observation fed back to the model."""
        return self.role == "user" and (
            self.content.startswith(TOOL_OUTPUT_PREFIX) or self.content.startswith(TOOL_ERROR_PREFIX)
        )
