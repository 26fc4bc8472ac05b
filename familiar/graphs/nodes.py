"""Node implementations for the turn graph."""

from typing import Any, Protocol

from familiar.graphs.state import TurnPhase, TurnState
from familiar.models.events import MessageAppended, StatusChanged, TurnEvent
from familiar.models.messages import Message
from familiar.models.tools import ToolInvocationRequest, ToolOutcome, ToolSuccess
from familiar.utils.logging import get_logger, get_turn_logger

logger = get_logger(__name__)

THINKING_LABEL = "Thinking"

ITERATION_LIMIT_MESSAGE = (
    "I apologize, but I've reached the maximum number of tool calls for this request. "
    "Please try again or rephrase your request."
)


class TurnRuntime(Protocol):
    """Collaborators the turn graph drives. Implemented by the orchestrator."""

    async def infer(self) -> str: ...

    async def record(self, message: Message) -> None: ...

    async def emit(self, event: TurnEvent) -> None: ...

    async def dispatch(self, request: ToolInvocationRequest) -> ToolOutcome: ...

    def set_phase(self, phase: TurnPhase) -> None: ...


class TurnNodes:
    """Graph nodes bound to a runtime and an iteration cap."""

    def __init__(self, runtime: TurnRuntime, max_iterations: int):
        self.runtime = runtime
        self.max_iterations = max_iterations

    async def infer(self, state: TurnState) -> dict[str, Any]:
        """Run the engine over the full history.

        Inference and storage errors propagate and abort the turn.
        """
        self.runtime.set_phase(TurnPhase.AWAITING_INFERENCE)
        await self.runtime.emit(StatusChanged(label=THINKING_LABEL, is_busy=True))

        iteration = state.iterations + 1
        get_turn_logger(logger, state.turn_id).info(f"Inference call {iteration}/{self.max_iterations}")

        response = await self.runtime.infer()

        self.runtime.set_phase(TurnPhase.RESPONSE_RECEIVED)
        return {"raw_response": response, "iterations": iteration}

    async def classify(self, state: TurnState) -> dict[str, Any]:
        request = ToolInvocationRequest.from_response(state.raw_response or "")

        if request is None:
            return {"pending_call": None, "next_step": "respond"}

        if state.iterations >= self.max_iterations:
            get_turn_logger(logger, state.turn_id).warning(
                f"Tool call {request.name} requested after {state.iterations} "
                "inference calls, iteration limit reached"
            )
            return {"pending_call": request, "next_step": "exhausted"}

        get_turn_logger(logger, state.turn_id).info(f"Detected tool call: {request.name}")
        return {"pending_call": request, "next_step": "execute_tool"}

    async def execute_tool(self, state: TurnState) -> dict[str, Any]:
        """Execute the pending call and feed the observation back.

        The raw call is kept in the history so the model sees its own request
        next to the observation, but it is not shown to the user.
        """
        request = state.pending_call
        if request is None:
            raise RuntimeError("execute_tool reached without a pending tool call")

        self.runtime.set_phase(TurnPhase.EXECUTING_TOOL)
        await self.runtime.record(Message(role="assistant", content=state.raw_response or ""))
        await self.runtime.emit(StatusChanged(label=f"Running tool: {request.name}", is_busy=True))

        outcome = await self.runtime.dispatch(request)

        if isinstance(outcome, ToolSuccess):
            get_turn_logger(logger, state.turn_id).info(f"Tool {request.name} completed")
            notice = f"Tool '{request.name}' completed"
        else:
            get_turn_logger(logger, state.turn_id).warning(f"Tool {request.name} failed: {outcome.error}")
            notice = f"Tool '{request.name}' failed: {outcome.error}"

        await self.runtime.emit(MessageAppended(role="system", content=notice))
        await self.runtime.record(outcome.to_observation())

        return {"pending_call": None, "next_step": None, "raw_response": None}

    async def respond(self, state: TurnState) -> dict[str, Any]:
        content = state.raw_response or ""
        await self.runtime.record(Message(role="assistant", content=content))
        await self.runtime.emit(MessageAppended(role="assistant", content=content))
        self.runtime.set_phase(TurnPhase.TURN_COMPLETE)
        return {"next_step": None}

    async def exhausted(self, state: TurnState) -> dict[str, Any]:
        await self.runtime.record(Message(role="assistant", content=ITERATION_LIMIT_MESSAGE))
        await self.runtime.emit(MessageAppended(role="assistant", content=ITERATION_LIMIT_MESSAGE))
        self.runtime.set_phase(TurnPhase.TURN_COMPLETE)
        return {"pending_call": None, "next_step": None}
