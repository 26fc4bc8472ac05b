"""Request and response models for the HTTP surface."""

from datetime import datetime

from pydantic import BaseModel, Field

from familiar.models.messages import Message


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str


class StatusResponse(BaseModel):
    """Snapshot of the orchestrator state."""

    phase: str
    is_busy: bool
    degraded: bool
    unavailable_reason: str | None = None
    queued_inputs: int
    history_length: int
    turn_id: str | None = None


class HistoryResponse(BaseModel):
    messages: list[Message]


class MessageRequest(BaseModel):
    """User input to queue for the orchestrator."""

    message: str = Field(min_length=1)


class AcceptedResponse(BaseModel):
    """Input was queued; results arrive over the websocket.

    ``subscribers`` is the number of websocket clients connected when the
    input was queued. With none, events for this input are not delivered.
    """

    queued: bool = True
    position: int
    subscribers: int = 0
