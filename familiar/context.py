"""Explicit runtime context handed to the orchestrator."""

from dataclasses import dataclass

from familiar.config import Settings
from familiar.inference.base import InferenceEngine
from familiar.storage.conversation_store import ConversationStore
from familiar.tools.registry import ToolsRegistry
from familiar.transport import ChannelTransport
from familiar.utils.tokens import TokenCounter


@dataclass
class AgentContext:
    """Everything the orchestrator collaborates with, constructed once at startup.

    ``engine`` is None when the inference engine failed to initialize; the
    reason is kept in ``unavailable_reason``.
    """

    settings: Settings
    store: ConversationStore
    registry: ToolsRegistry
    transport: ChannelTransport
    system_prompt: str
    token_counter: TokenCounter
    engine: InferenceEngine | None = None
    unavailable_reason: str | None = None
