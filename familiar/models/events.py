"""Events emitted by the orchestrator to the transport."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from familiar.models.messages import Role


class StatusChanged(BaseModel):
    """Busy/idle status change with a human-readable label."""

    type: Literal["status"] = "status"
    label: str
    is_busy: bool

    model_config = ConfigDict(frozen=True)


class MessageAppended(BaseModel):
    """A message for the presentation surface to display."""

    type: Literal["message"] = "message"
    role: Role
    content: str

    model_config = ConfigDict(frozen=True)


TurnEvent = Annotated[StatusChanged | MessageAppended, Field(discriminator="type")]

turn_event_adapter: TypeAdapter[TurnEvent] = TypeAdapter(TurnEvent)
