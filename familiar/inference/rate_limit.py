"""Request and token rate limiting for inference calls."""

import time

from limits import parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from familiar.utils.logging import get_logger

logger = get_logger(__name__)


class InferenceRateLimiter:
    """Moving-window rate limiter for inference calls.

    Waiting is done with a blocking sleep, so ``acquire`` must only be called
    from the inference worker thread.
    """

    def __init__(self, requests_per_minute: int = 50, tokens_per_minute: int = 40_000):
        """Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests per minute
            tokens_per_minute: Maximum tokens per minute
        """
        self.storage = MemoryStorage()
        self.limiter = MovingWindowRateLimiter(self.storage)

        self.request_limit = parse(f"{requests_per_minute}/minute")
        self.token_limit = parse(f"{tokens_per_minute}/minute")

    def acquire(self, estimated_tokens: int, identifier: str = "inference") -> None:
        """Block until one request costing ``estimated_tokens`` fits in both windows."""
        logger.debug(f"Checking rate limit for {estimated_tokens} tokens, identifier: {identifier}")

        while not self.limiter.hit(self.request_limit, identifier):
            self._wait(self.request_limit, identifier, "Request")

        # A single oversized request can never fit, so charge at most the whole window
        cost = max(1, min(estimated_tokens, self.token_limit.amount))
        token_identifier = f"{identifier}_tokens"
        while not self.limiter.hit(self.token_limit, token_identifier, cost=cost):
            self._wait(self.token_limit, token_identifier, "Token")

    def _wait(self, limit, identifier: str, kind: str) -> None:
        window_stats = self.limiter.get_window_stats(limit, identifier)
        wait_time = max(0.05, window_stats.reset_time - time.time())
        logger.warning(f"{kind} rate limit exceeded, waiting {wait_time:.2f}s")
        time.sleep(wait_time)
