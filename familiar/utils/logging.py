"""Logging configuration."""

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

from pydantic import BaseModel, Field


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    quiet_loggers: list[str] = Field(
        default_factory=lambda: ["anthropic", "httpx", "httpcore", "aiosqlite", "uvicorn.access"]
    )


def setup_logging(config: LogConfig | None = None) -> None:
    """Set up logging configuration for the agent process."""
    if config is None:
        config = LogConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)
        level: Optional explicit level, otherwise LOG_LEVEL from the environment

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = level if level else os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(log_level.upper())

    return logger


class TurnLogger(logging.LoggerAdapter):
    """Prefixes every record with the turn id and attaches it as ``record.turn_id``.

    Lets one turn be followed across the orchestrator and the graph nodes.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        turn_id = self.extra["turn_id"]
        kwargs["extra"] = {**(kwargs.get("extra") or {}), "turn_id": turn_id}
        return f"[{turn_id}] {msg}", kwargs


def get_turn_logger(logger: logging.Logger, turn_id: str) -> TurnLogger:
    return TurnLogger(logger, {"turn_id": turn_id})
