"""Edge logic and routing for the turn graph."""

from typing import Literal

from familiar.graphs.state import TurnState
from familiar.utils.logging import get_logger, get_turn_logger

logger = get_logger(__name__)


def route_classification(state: TurnState) -> Literal["execute_tool", "respond", "exhausted"]:
    """Route from the classify node.

    A response without a pending tool call always ends the turn as chat.
    """
    get_turn_logger(logger, state.turn_id).debug(f"Routing from classify node. Next step: {state.next_step}")

    if state.pending_call is None:
        return "respond"

    return state.next_step or "respond"
