"""Token estimation and input validation."""

import tiktoken

from familiar.errors import InputRejectedError
from familiar.utils.logging import get_logger

logger = get_logger(__name__)


class TokenCounter:
    """Estimates token counts with tiktoken, falling back to ~4 characters per token."""

    tokenizer: tiktoken.Encoding | None = None

    def __init__(self, encoding_name: str | None = "cl100k_base"):
        """Initialize the counter.

        Args:
            encoding_name: tiktoken encoding to load, or None to always use the fallback
        """
        if encoding_name is None:
            return

        try:
            # Close enough for local chat models and Claude alike
            self.tokenizer = tiktoken.get_encoding(encoding_name)
        except Exception as e:
            logger.warning(f"tiktoken encoding {encoding_name} unavailable, using character estimate: {e}")
            self.tokenizer = None

    def estimate(self, text: str) -> int:
        """Estimate token count for a piece of text."""
        try:
            return len(self.tokenizer.encode(text)) if self.tokenizer else len(text) // 4
        except Exception:
            return len(text) // 4

    def validate(self, text: str, limit: int) -> None:
        """Validate that a user message doesn't exceed the token limit.

        Raises:
            InputRejectedError: If the message exceeds the limit
        """
        token_count = self.estimate(text)
        if token_count > limit:
            raise InputRejectedError(f"Message exceeds token limit: {token_count} tokens > {limit} limit")
