"""Inference engine contract."""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence

from familiar.errors import GenerationFailedError, InferenceUnavailableError
from familiar.models.messages import Message
from familiar.utils.logging import get_logger

logger = get_logger(__name__)


class InferenceEngine(ABC):
    """Produces a response string for an ordered list of messages.

    Calls are blocking and slow. Callers must run ``generate`` on a worker
    thread, never on the coordination loop.
    """

    name: str = "engine"

    @abstractmethod
    def stream(self, messages: Sequence[Message]) -> Iterator[str]:
        """Yield response text fragments. A fresh iterator is produced per call."""

    def generate(self, messages: Sequence[Message]) -> str:
        """Generate a complete response by joining the streamed fragments.

        Raises:
            InferenceUnavailableError: If the engine can no longer serve requests
            GenerationFailedError: If this generation failed or produced no text
        """
        try:
            response = "".join(self.stream(messages))
        except (InferenceUnavailableError, GenerationFailedError):
            raise
        except Exception as e:
            logger.error(f"{self.name} generation failed: {e}")
            raise GenerationFailedError(f"{self.name} generation failed: {e}") from e

        if not response.strip():
            raise GenerationFailedError(f"{self.name} returned an empty response")

        return response
