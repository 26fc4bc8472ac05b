"""Tests for logging configuration and per-turn log prefixes."""

import logging

import pytest
from fakes import ScriptedEngine, make_orchestrator

from familiar.utils.logging import LogConfig, get_logger, get_turn_logger, setup_logging


class TestTurnLogger:
    """Tests for the turn-scoped logger adapter."""

    def test_prefixes_turn_id(self, caplog):
        """Test that messages carry the turn id as a prefix and as a record attribute."""
        logger = get_logger("familiar.tests.turns", level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="familiar.tests.turns"):
            get_turn_logger(logger, "turn123").info("Starting turn")

        [record] = caplog.records
        assert record.getMessage() == "[turn123] Starting turn"
        assert record.turn_id == "turn123"

    def test_keeps_caller_extra(self, caplog):
        logger = get_logger("familiar.tests.turns", level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="familiar.tests.turns"):
            get_turn_logger(logger, "turn123").warning("Tool failed", extra={"tool": "echo"})

        [record] = caplog.records
        assert record.tool == "echo"
        assert record.turn_id == "turn123"

    @pytest.mark.asyncio
    async def test_turn_records_share_one_turn_id(self, settings, registry, caplog):
        """Test that orchestrator and graph records of one turn carry the same id."""
        orchestrator, _ = await make_orchestrator(settings, ScriptedEngine(["Hello!"]), registry)

        with caplog.at_level(logging.INFO):
            await orchestrator.handle_input("hello")

        turn_records = [r for r in caplog.records if hasattr(r, "turn_id")]
        turn_ids = {r.turn_id for r in turn_records}
        assert len(turn_ids) == 1

        [turn_id] = turn_ids
        messages = [r.getMessage() for r in turn_records]
        assert f"[{turn_id}] Starting turn" in messages
        assert f"[{turn_id}] Inference call 1/{settings.max_tool_iterations}" in messages
        assert f"[{turn_id}] Turn complete" in messages


class TestSetupLogging:
    """Tests for process-wide logging setup."""

    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_quiets_configured_libraries(self, restore_root_logger):
        setup_logging(LogConfig(level="DEBUG", quiet_loggers=["familiar.tests.noisy"]))

        assert logging.getLogger("familiar.tests.noisy").level == logging.WARNING
        assert logging.getLogger().level == logging.DEBUG
