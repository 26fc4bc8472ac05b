"""API dependency wiring from application state."""

from fastapi import Request, WebSocket

from familiar.services.orchestrator import Orchestrator
from familiar.transport import ChannelTransport


def get_orchestrator(request: Request) -> Orchestrator:
    return request.app.state.orchestrator


def get_transport(request: Request) -> ChannelTransport:
    return request.app.state.context.transport


def get_ws_transport(websocket: WebSocket) -> ChannelTransport:
    return websocket.app.state.context.transport
