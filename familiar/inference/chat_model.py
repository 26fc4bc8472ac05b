"""Inference engines backed by LangChain chat models."""

from collections.abc import Callable, Iterator, Sequence
from typing import Any

import httpx
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_ollama import ChatOllama

from familiar.config import Settings
from familiar.errors import InferenceUnavailableError
from familiar.inference.base import InferenceEngine
from familiar.inference.rate_limit import InferenceRateLimiter
from familiar.models.messages import Message
from familiar.utils.logging import get_logger
from familiar.utils.tokens import TokenCounter

logger = get_logger(__name__)


def to_langchain_messages(messages: Sequence[Message]) -> list[BaseMessage]:
    """Convert conversation messages to LangChain messages.

    Attachments on user messages are passed as image blocks next to the text.
    """
    converted: list[BaseMessage] = []
    for message in messages:
        if message.role == "system":
            converted.append(SystemMessage(content=message.content))
        elif message.role == "assistant":
            converted.append(AIMessage(content=message.content))
        elif message.attachments:
            blocks: list[str | dict[str, Any]] = [{"type": "text", "text": message.content}]
            blocks.extend({"type": "image_url", "image_url": {"url": ref}} for ref in message.attachments)
            converted.append(HumanMessage(content=blocks))
        else:
            converted.append(HumanMessage(content=message.content))
    return converted


def chunk_text(content: str | list[Any]) -> str:
    """Extract the text of a streamed chunk, whose content may be a list of blocks."""
    if isinstance(content, str):
        return content

    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ChatModelEngine(InferenceEngine):
    """Runs a LangChain chat model, streaming and joining its output."""

    def __init__(
        self,
        model: BaseChatModel,
        name: str,
        rate_limiter: InferenceRateLimiter | None = None,
        token_counter: TokenCounter | None = None,
    ):
        self.model = model
        self.name = name
        self.rate_limiter = rate_limiter
        self.token_counter = token_counter or TokenCounter(encoding_name=None)

    def stream(self, messages: Sequence[Message]) -> Iterator[str]:
        if self.rate_limiter is not None:
            estimated = sum(self.token_counter.estimate(m.content) for m in messages)
            self.rate_limiter.acquire(estimated, identifier=self.name)

        logger.debug(f"Calling {self.name} with {len(messages)} messages")
        for chunk in self.model.stream(to_langchain_messages(messages)):
            text = chunk_text(chunk.content)
            if text:
                yield text


async def check_ollama_model(
    base_url: str,
    model: str,
    timeout: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Verify the Ollama server is reachable and has ``model`` pulled.

    Raises:
        InferenceUnavailableError: If the server is down or the model is missing
    """
    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as client:
            response = await client.get("/api/tags")
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise InferenceUnavailableError(f"Ollama server unavailable at {base_url}: {e}") from e

    try:
        available = {entry.get("name", "") for entry in response.json().get("models", [])}
    except (ValueError, AttributeError, TypeError) as e:
        raise InferenceUnavailableError(f"Unexpected response from Ollama at {base_url}: {e}") from e

    candidates = {model, f"{model}:latest"}
    if not available & candidates:
        raise InferenceUnavailableError(f"Model {model} is not available on {base_url}. Pull it with `ollama pull`.")


def build_chat_model(settings: Settings) -> BaseChatModel:
    """Construct the LangChain chat model for the configured provider."""
    if settings.inference_provider == "anthropic":
        return ChatAnthropic(
            model=settings.anthropic_model,
            api_key=settings.anthropic_api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    return ChatOllama(
        model=settings.ollama_model,
        base_url=settings.ollama_base_url,
        temperature=settings.temperature,
        num_predict=settings.max_tokens,
    )


async def create_engine(
    settings: Settings,
    token_counter: TokenCounter | None = None,
    model_builder: Callable[[Settings], BaseChatModel] = build_chat_model,
) -> InferenceEngine:
    """Build the configured inference engine.

    Raises:
        InferenceUnavailableError: If the engine cannot be initialized
    """
    provider = settings.inference_provider

    if provider == "anthropic" and not settings.anthropic_api_key:
        raise InferenceUnavailableError("FAMILIAR_ANTHROPIC_API_KEY is required for the anthropic provider")
    if provider == "ollama":
        await check_ollama_model(settings.ollama_base_url, settings.ollama_model)

    try:
        model = model_builder(settings)
    except Exception as e:
        raise InferenceUnavailableError(f"Failed to construct {provider} chat model: {e}") from e

    model_name = settings.anthropic_model if provider == "anthropic" else settings.ollama_model
    logger.info(f"Using {provider} model {model_name}")

    rate_limiter = InferenceRateLimiter(
        requests_per_minute=settings.requests_per_minute,
        tokens_per_minute=settings.tokens_per_minute,
    )
    return ChatModelEngine(model, name=provider, rate_limiter=rate_limiter, token_counter=token_counter)
