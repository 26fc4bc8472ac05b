"""State definitions for the turn graph."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel

from familiar.models.tools import ToolInvocationRequest


class TurnPhase(StrEnum):
    """Lifecycle phase of the orchestrator."""

    IDLE = "idle"
    AWAITING_INFERENCE = "awaiting_inference"
    RESPONSE_RECEIVED = "response_received"
    EXECUTING_TOOL = "executing_tool"
    TURN_COMPLETE = "turn_complete"


class TurnState(BaseModel):
    """State carried through the nodes of a single turn.

    The conversation itself lives on the orchestrator; this only tracks the
    control flow of the current model/tool round-trips.
    """

    turn_id: str

    # Number of inference calls made so far in this turn
    iterations: int = 0

    raw_response: str | None = None
    pending_call: ToolInvocationRequest | None = None

    # Control flow
    next_step: Literal["execute_tool", "respond", "exhausted"] | None = None
