"""Tests for token estimation, input validation and rate limiting."""

from unittest.mock import Mock, patch

import pytest

from familiar.errors import InputRejectedError
from familiar.inference.rate_limit import InferenceRateLimiter
from familiar.utils.tokens import TokenCounter


class TestTokenValidation:
    """Tests for message token validation."""

    @pytest.fixture
    def counter(self):
        """Create TokenCounter with a mocked tokenizer for consistent testing."""
        counter = TokenCounter(encoding_name=None)
        counter.tokenizer = Mock()
        return counter

    def test_validate_within_limit(self, counter):
        """Test that messages within token limit pass validation."""
        counter.tokenizer.encode.return_value = ["token"] * 500

        # Should not raise exception
        counter.validate("Short message", limit=1000)

    def test_validate_exceeds_limit(self, counter):
        """Test that messages exceeding token limit are rejected."""
        counter.tokenizer.encode.return_value = ["token"] * 1500

        with pytest.raises(InputRejectedError, match="Message exceeds token limit: 1500 tokens > 1000 limit"):
            counter.validate("Very long message", limit=1000)

    def test_validate_fallback_without_tokenizer(self, counter):
        """Test token validation fallback when tokenizer is unavailable."""
        counter.tokenizer = None

        # Short message (under 4000 chars = ~1000 tokens) should pass
        counter.validate("a" * 3000, limit=1000)

        # Long message (over 4000 chars = ~1000 tokens) should fail
        with pytest.raises(InputRejectedError, match="Message exceeds token limit"):
            counter.validate("a" * 5000, limit=1000)

    def test_estimate_falls_back_when_encoding_fails(self, counter):
        """Test that tokenizer errors fall back to the character estimate."""
        counter.tokenizer.encode.side_effect = RuntimeError("bad input")
        assert counter.estimate("a" * 40) == 10

    def test_unknown_encoding_uses_fallback(self):
        """Test that a missing tiktoken encoding does not break construction."""
        with patch("familiar.utils.tokens.tiktoken.get_encoding", side_effect=ValueError("unknown")):
            counter = TokenCounter(encoding_name="does-not-exist")

        assert counter.tokenizer is None
        assert counter.estimate("abcdefgh") == 2


class TestInferenceRateLimiter:
    """Tests for the moving-window inference rate limiter."""

    def test_requests_within_limit_do_not_wait(self):
        """Test that calls under both limits pass straight through."""
        limiter = InferenceRateLimiter(requests_per_minute=5, tokens_per_minute=1000)

        with patch("familiar.inference.rate_limit.time.sleep") as sleep:
            for _ in range(5):
                limiter.acquire(100)

        sleep.assert_not_called()

    def test_request_limit_waits(self):
        """Test that exceeding the request limit sleeps until the window frees up."""
        limiter = InferenceRateLimiter(requests_per_minute=1, tokens_per_minute=1000)
        limiter.acquire(10)

        hits = iter([False, True])
        with (
            patch.object(limiter.limiter, "hit", side_effect=lambda *args, **kwargs: next(hits, True)),
            patch("familiar.inference.rate_limit.time.sleep") as sleep,
        ):
            limiter.acquire(10)

        sleep.assert_called_once()
        assert sleep.call_args.args[0] > 0

    def test_oversized_request_charged_at_most_the_window(self):
        """Test that a request bigger than the token window still goes through."""
        limiter = InferenceRateLimiter(requests_per_minute=10, tokens_per_minute=100)

        with patch("familiar.inference.rate_limit.time.sleep") as sleep:
            limiter.acquire(10_000)

        sleep.assert_not_called()
