"""Startup wiring for the agent context."""

from collections.abc import Awaitable, Callable

from familiar.config import Settings
from familiar.context import AgentContext
from familiar.errors import InferenceUnavailableError
from familiar.inference import create_engine
from familiar.inference.base import InferenceEngine
from familiar.persona import Persona, build_system_prompt
from familiar.storage.connection import AsyncSQLiteConnection
from familiar.storage.conversation_store import ConversationStore
from familiar.tools import create_default_registry
from familiar.tools.registry import ToolsRegistry
from familiar.transport import ChannelTransport
from familiar.utils.logging import get_logger
from familiar.utils.tokens import TokenCounter

logger = get_logger(__name__)

EngineFactory = Callable[[Settings, TokenCounter], Awaitable[InferenceEngine]]


async def build_context(
    settings: Settings,
    transport: ChannelTransport | None = None,
    engine_factory: EngineFactory = create_engine,
    registry: ToolsRegistry | None = None,
    token_counter: TokenCounter | None = None,
) -> AgentContext:
    """Construct every collaborator once.

    A failing engine factory does not abort startup: the context is returned
    without an engine and the orchestrator runs degraded.
    """
    token_counter = token_counter or TokenCounter()
    if registry is None:
        registry = create_default_registry(settings)
    registry.freeze()

    persona = Persona.from_settings(settings)
    system_prompt = build_system_prompt(persona, registry.schema_document())

    engine: InferenceEngine | None = None
    unavailable_reason: str | None = None
    try:
        engine = await engine_factory(settings, token_counter)
    except InferenceUnavailableError as e:
        logger.error(f"Failed to initialize inference engine: {e}")
        unavailable_reason = str(e)
    except Exception as e:
        logger.error(f"Inference engine setup crashed: {e}", exc_info=True)
        unavailable_reason = f"Inference engine setup failed: {e}"

    logger.info(f"Built context with {len(registry)} tools: {', '.join(sorted(registry.get_tool_names()))}")

    return AgentContext(
        settings=settings,
        store=ConversationStore(AsyncSQLiteConnection(settings.db_path)),
        registry=registry,
        transport=transport or ChannelTransport(),
        system_prompt=system_prompt,
        token_counter=token_counter,
        engine=engine,
        unavailable_reason=unavailable_reason,
    )
