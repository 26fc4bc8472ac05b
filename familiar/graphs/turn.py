"""Turn graph: inference and tool round-trips for one user input."""

from typing import Any

from langgraph.graph import END, StateGraph

from familiar.graphs.edges import route_classification
from familiar.graphs.nodes import TurnNodes, TurnRuntime
from familiar.graphs.state import TurnState
from familiar.utils.logging import get_logger

logger = get_logger(__name__)


def create_turn_graph(runtime: TurnRuntime, max_iterations: int):
    """Create the turn graph.

    infer -> classify -> (execute_tool -> infer | respond | exhausted). At most
    ``max_iterations`` inference calls happen per turn; a tool call requested
    by the last of them is answered with a fallback message instead.

    Args:
        runtime: Collaborators the nodes call into
        max_iterations: Inference calls allowed per turn

    Returns:
        Compiled LangGraph workflow
    """
    if max_iterations < 1:
        raise ValueError("max_iterations must be at least 1")

    logger.info(f"Creating turn graph with {max_iterations} max iterations")

    nodes = TurnNodes(runtime, max_iterations)
    workflow = StateGraph(TurnState)

    workflow.add_node("infer", nodes.infer)
    workflow.add_node("classify", nodes.classify)
    workflow.add_node("execute_tool", nodes.execute_tool)
    workflow.add_node("respond", nodes.respond)
    workflow.add_node("exhausted", nodes.exhausted)

    workflow.set_entry_point("infer")
    workflow.add_edge("infer", "classify")

    workflow.add_conditional_edges(
        "classify",
        route_classification,
        {
            "execute_tool": "execute_tool",
            "respond": "respond",
            "exhausted": "exhausted",
        },
    )

    workflow.add_edge("execute_tool", "infer")
    workflow.add_edge("respond", END)
    workflow.add_edge("exhausted", END)

    return workflow.compile()


def turn_config(turn_id: str, max_iterations: int) -> dict[str, Any]:
    """Invocation config with a recursion limit that fits the iteration cap."""
    return {
        "configurable": {"turn_id": turn_id},
        "recursion_limit": 3 * max_iterations + 3,
    }
