"""API endpoints for the agent."""

import asyncio
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from familiar import __version__
from familiar.api.deps import get_orchestrator, get_transport, get_ws_transport
from familiar.models.api import (
    AcceptedResponse,
    HealthResponse,
    HistoryResponse,
    MessageRequest,
    StatusResponse,
)
from familiar.services.orchestrator import Orchestrator
from familiar.transport import ChannelTransport
from familiar.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )


@router.get("/status", response_model=StatusResponse, tags=["Agent"])
async def get_status(orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)]) -> StatusResponse:
    return orchestrator.status()


@router.get("/history", response_model=HistoryResponse, tags=["Agent"])
async def get_history(
    orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)],
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> HistoryResponse:
    """Return the most recent in-memory messages, oldest first."""
    return HistoryResponse(messages=list(orchestrator.history[-limit:]))


@router.post(
    "/messages",
    response_model=AcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Agent"],
)
async def post_message(
    request: MessageRequest,
    transport: Annotated[ChannelTransport, Depends(get_transport)],
) -> AcceptedResponse:
    """Queue a user message.

    Responses are delivered only as events to websocket clients connected
    while the turn runs. Events are not buffered: without a subscriber they
    are dropped, and the result can only be read back from /history.
    """
    logger.info(f"Queueing message: {request.message[:50]}...")
    if not transport.subscriber_count:
        logger.debug("No websocket subscribers, turn events will be dropped")
    position = await transport.send(request.message)
    return AcceptedResponse(position=position, subscribers=transport.subscriber_count)


@router.post(
    "/reset",
    response_model=AcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Agent"],
)
async def post_reset(
    orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)],
    transport: Annotated[ChannelTransport, Depends(get_transport)],
) -> AcceptedResponse:
    """Queue a conversation reset behind any pending input."""
    position = await transport.send(orchestrator.context.settings.reset_sentinel)
    return AcceptedResponse(position=position, subscribers=transport.subscriber_count)


@router.websocket("/ws")
async def websocket_events(
    websocket: WebSocket,
    transport: Annotated[ChannelTransport, Depends(get_ws_transport)],
) -> None:
    """Bidirectional channel: text frames in as user input, JSON events out."""
    with transport.subscription() as events:
        await websocket.accept()

        async def forward_events() -> None:
            while True:
                event = await events.get()
                await websocket.send_text(event.model_dump_json())

        forwarder = asyncio.create_task(forward_events())
        try:
            while True:
                text = await websocket.receive_text()
                await transport.send(text)
        except WebSocketDisconnect:
            logger.info("Websocket client disconnected")
        finally:
            forwarder.cancel()
