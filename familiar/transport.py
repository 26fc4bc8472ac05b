"""Channel pair between the orchestrator and presentation surfaces."""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from familiar.models.events import TurnEvent
from familiar.utils.logging import get_logger

logger = get_logger(__name__)


class EventSink(Protocol):
    """Receives events emitted by the orchestrator."""

    async def emit(self, event: TurnEvent) -> None: ...


class ChannelTransport:
    """Input queue of plain strings plus fan-out of typed events.

    Surfaces push user text with ``send`` and read events from a queue
    obtained with ``subscribe``. Events emitted while nobody is subscribed
    are dropped.
    """

    def __init__(self):
        self.inputs: asyncio.Queue[str] = asyncio.Queue()
        self._subscribers: set[asyncio.Queue[TurnEvent]] = set()

    async def send(self, text: str) -> int:
        """Queue user input. Returns the number of inputs waiting, including this one."""
        await self.inputs.put(text)
        return self.inputs.qsize()

    async def emit(self, event: TurnEvent) -> None:
        if not self._subscribers:
            logger.debug(f"Dropping {event.type} event, no subscribers")
            return

        for queue in tuple(self._subscribers):
            queue.put_nowait(event)

    def subscribe(self) -> asyncio.Queue[TurnEvent]:
        queue: asyncio.Queue[TurnEvent] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[TurnEvent]) -> None:
        self._subscribers.discard(queue)

    @contextmanager
    def subscription(self) -> Iterator[asyncio.Queue[TurnEvent]]:
        """Subscribe for the duration of a ``with`` block."""
        queue = self.subscribe()
        try:
            yield queue
        finally:
            self.unsubscribe(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
