"""Runtime configuration.

Settings are read from ``FAMILIAR_*`` environment variables or a local
``.env`` file. Construct ``Settings`` directly in tests to avoid touching the
process environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Agent settings from environment variables."""

    # =============================================================================
    # CONVERSATION
    # =============================================================================

    db_path: str = Field(default="familiar.db")
    history_limit: int = Field(default=50, ge=1)
    max_tool_iterations: int = Field(default=8, ge=1)
    reset_sentinel: str = Field(default="__CLEAR__")

    persona_name: str = Field(default="Familiar")
    persona_prompt: str | None = Field(default=None)

    # =============================================================================
    # INFERENCE
    # =============================================================================

    inference_provider: Literal["ollama", "anthropic"] = Field(default="ollama")

    ollama_base_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="qwen2.5:7b-instruct")

    anthropic_model: str = Field(default="claude-3-5-sonnet-20241022")
    anthropic_api_key: str | None = Field(default=None)

    temperature: float = Field(default=0.1)
    max_tokens: int = Field(default=2048)

    # Input and rate limits
    max_message_tokens: int = Field(default=2000)
    requests_per_minute: int = Field(default=50)
    tokens_per_minute: int = Field(default=40_000)

    # =============================================================================
    # TOOLS
    # =============================================================================

    workspace_root: Path = Field(default=Path("."))
    browser_timeout: float = Field(default=20.0)

    # =============================================================================
    # SERVER
    # =============================================================================

    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=9001)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="FAMILIAR_", env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
