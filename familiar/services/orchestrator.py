"""Orchestrator: drives turns from user input to a completed response."""

import asyncio

from cuid2 import cuid_wrapper

from familiar.context import AgentContext
from familiar.errors import (
    GenerationFailedError,
    InferenceUnavailableError,
    InputRejectedError,
    StorageError,
)
from familiar.graphs.state import TurnPhase, TurnState
from familiar.graphs.turn import create_turn_graph, turn_config
from familiar.models.api import StatusResponse
from familiar.models.events import MessageAppended, StatusChanged, TurnEvent
from familiar.models.messages import Message
from familiar.models.tools import ToolInvocationRequest, ToolOutcome
from familiar.utils.logging import get_logger, get_turn_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()

ONLINE_LABEL = "Online"
LLM_ERROR_LABEL = "LLM Error"

GREETING_MESSAGE = "System online. Waiting for input..."
UNAVAILABLE_MESSAGE = "LLM is not loaded. Please check model path."
RESET_NOTICE = "Conversation history cleared."
TECHNICAL_DIFFICULTIES_MESSAGE = "I apologize, but I'm experiencing technical difficulties. Please try again."


class Orchestrator:
    """Single consumer of the transport input queue.

    Owns the in-memory conversation history and is its only writer. Every
    message is appended to the store before it is appended in memory, so the
    two never disagree on order. Turns are processed strictly one at a time.
    """

    def __init__(self, context: AgentContext):
        self.context = context
        self._history: list[Message] = []
        self._phase = TurnPhase.IDLE
        self._degraded = context.engine is None
        self._turn_id: str | None = None
        self._max_iterations = context.settings.max_tool_iterations
        self._graph = create_turn_graph(self, self._max_iterations)

    @property
    def history(self) -> tuple[Message, ...]:
        return tuple(self._history)

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    @property
    def is_busy(self) -> bool:
        return self._phase != TurnPhase.IDLE

    @property
    def degraded(self) -> bool:
        return self._degraded

    def status(self) -> StatusResponse:
        return StatusResponse(
            phase=self._phase.value,
            is_busy=self.is_busy,
            degraded=self._degraded,
            unavailable_reason=self.context.unavailable_reason if self._degraded else None,
            queued_inputs=self.context.transport.inputs.qsize(),
            history_length=len(self._history),
            turn_id=self._turn_id,
        )

    async def start(self) -> None:
        """Initialize the store and load the conversation.

        Raises:
            StorageError: If the store cannot be initialized or read
        """
        store = self.context.store
        await store.initialize()

        if self._degraded:
            logger.error(f"Inference engine unavailable, running degraded: {self.context.unavailable_reason}")
            await self.emit(MessageAppended(role="assistant", content=UNAVAILABLE_MESSAGE))
            await self.emit(StatusChanged(label=LLM_ERROR_LABEL, is_busy=False))

        loaded = await store.load_recent(self.context.settings.history_limit)
        if not loaded:
            await self._seed()
        elif loaded[0].role != "system":
            # Older window cut off the system message; it is not re-persisted
            self._history = [self._system_message(), *loaded]
        else:
            self._history = loaded

        logger.info(f"Loaded {len(self._history)} messages into history")

        if not self._degraded:
            await self.emit(StatusChanged(label=ONLINE_LABEL, is_busy=False))
            await self.emit(MessageAppended(role="assistant", content=GREETING_MESSAGE))

    async def run(self) -> None:
        """Drain the input queue forever. Cancel the task to stop."""
        inputs = self.context.transport.inputs
        logger.info("Orchestrator waiting for input")

        while True:
            text = await inputs.get()
            try:
                await self.handle_input(text)
            finally:
                inputs.task_done()

    async def handle_input(self, text: str) -> None:
        """Process one raw input from the transport."""
        text = text.strip()
        if not text:
            return

        if self._degraded:
            await self.emit(MessageAppended(role="assistant", content=UNAVAILABLE_MESSAGE))
            await self.emit(StatusChanged(label=LLM_ERROR_LABEL, is_busy=False))
            return

        if text == self.context.settings.reset_sentinel:
            await self.reset()
            return

        await self._run_turn(text)

    async def reset(self) -> None:
        """Clear the store and the history, then re-seed the system message."""
        logger.info("Resetting conversation")

        try:
            await self.context.store.clear()
            self._history = []
            await self._seed()
        except StorageError as e:
            logger.error(f"Reset failed: {e}")
            await self.emit(MessageAppended(role="system", content=f"Storage error: {e}"))
        else:
            await self.emit(MessageAppended(role="system", content=RESET_NOTICE))

        await self.emit(StatusChanged(label=ONLINE_LABEL, is_busy=False))

    async def _run_turn(self, text: str) -> None:
        turn_id = cuid()
        self._turn_id = turn_id
        turn_log = get_turn_logger(logger, turn_id)
        turn_log.info("Starting turn")

        try:
            self.context.token_counter.validate(text, self.context.settings.max_message_tokens)

            if not self._history:
                await self._seed()

            await self.record(Message(role="user", content=text))

            initial_state = TurnState(turn_id=turn_id)
            await self._graph.ainvoke(initial_state.model_dump(), turn_config(turn_id, self._max_iterations))

            turn_log.info("Turn complete")

        except InputRejectedError as e:
            turn_log.warning(f"Input rejected: {e}")
            await self.emit(MessageAppended(role="system", content=str(e)))

        except InferenceUnavailableError as e:
            turn_log.error(f"Inference engine became unavailable: {e}")
            self._degraded = True
            self.context.unavailable_reason = str(e)
            await self.emit(MessageAppended(role="assistant", content=UNAVAILABLE_MESSAGE))

        except GenerationFailedError as e:
            turn_log.error(f"Generation failed: {e}")
            await self.emit(MessageAppended(role="system", content=f"LLM Error: {e}"))

        except StorageError as e:
            turn_log.error(f"Storage error: {e}")
            await self.emit(MessageAppended(role="system", content=f"Storage error: {e}"))

        except Exception as e:
            turn_log.error(f"Turn failed: {e}", exc_info=True)
            await self.emit(MessageAppended(role="system", content=TECHNICAL_DIFFICULTIES_MESSAGE))

        finally:
            self._phase = TurnPhase.IDLE
            self._turn_id = None
            label = LLM_ERROR_LABEL if self._degraded else ONLINE_LABEL
            await self.emit(StatusChanged(label=label, is_busy=False))

    async def _seed(self) -> None:
        """Persist a fresh system message and start the history with it."""
        message = self._system_message()
        await self.context.store.append(message)
        self._history = [message]

    def _system_message(self) -> Message:
        return Message(role="system", content=self.context.system_prompt)

    # Turn graph runtime

    async def infer(self) -> str:
        """Run the engine on a worker thread over a snapshot of the history."""
        engine = self.context.engine
        if engine is None:
            raise InferenceUnavailableError(self.context.unavailable_reason or "Inference engine is not loaded")

        snapshot = tuple(self._history)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, engine.generate, snapshot)

    async def record(self, message: Message) -> None:
        """Append to the store, then to memory."""
        await self.context.store.append(message)
        self._history.append(message)

    async def emit(self, event: TurnEvent) -> None:
        await self.context.transport.emit(event)

    async def dispatch(self, request: ToolInvocationRequest) -> ToolOutcome:
        return await self.context.registry.dispatch(request)

    def set_phase(self, phase: TurnPhase) -> None:
        logger.debug(f"Phase {self._phase.value} -> {phase.value}")
        self._phase = phase
