"""
Environment-based configuration management for VoiceWarden.

Uses pydantic-settings to load configuration values from environment
variables and .env files. The moderation service and the shared library
read their settings from this module to ensure consistent handling.

All environment variables are prefixed with ``VW_`` to avoid collisions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``VW_``-prefixed environment variables.

    Attributes:
        redis_url: Redis connection URL (alert publish channel).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Render log lines as JSON instead of console text.
        allowed_language: Language code speakers are expected to use.
        window_size: Token capacity of each live sliding window.
        stream_idle_timeout_s: Seconds without a chunk after which a live
            stream is discarded.
        lexicon_path: Optional word-list file replacing the built-in lexicon.
        whitelist_path: Optional word-list file replacing the built-in whitelist.
        validator_api_key: Bearer key for the flag-validation LLM endpoint.
        validator_url: OpenAI-compatible chat-completions URL.
        validator_model: Model identifier sent to the validator.
        validator_timeout_s: Upper bound on one validation round-trip.
        validator_max_attempts: Delivery attempts for the validator request.
        api_host: Bind address for the moderation service.
        api_port: Bind port for the moderation service.
    """

    model_config = SettingsConfigDict(
        env_prefix="VW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Redis ──
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL.",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")
    log_json: bool = Field(default=True, description="Emit JSON log lines.")

    # ── Moderation policy ──
    allowed_language: str = Field(
        default="en",
        max_length=10,
        description="Language code speakers are expected to use.",
    )
    window_size: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Token capacity of each live sliding window.",
    )
    stream_idle_timeout_s: float = Field(
        default=600.0,
        gt=0,
        description="Idle seconds before a live stream is discarded.",
    )
    lexicon_path: str = Field(default="", description="Custom lexicon word-list file.")
    whitelist_path: str = Field(default="", description="Custom whitelist word-list file.")

    # ── Flag validator (LLM) ──
    validator_api_key: str = Field(default="", description="Validator API key.")
    validator_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        description="OpenAI-compatible chat-completions URL.",
    )
    validator_model: str = Field(
        default="llama-3.1-70b-versatile",
        description="Model identifier sent to the validator.",
    )
    validator_timeout_s: float = Field(
        default=10.0,
        gt=0.0,
        description="Upper bound on one validation round-trip in seconds.",
    )
    validator_max_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Delivery attempts for the validator request.",
    )

    # ── API ──
    api_host: str = Field(default="0.0.0.0", description="Service bind address.")
    api_port: int = Field(default=8010, ge=1, le=65535, description="Service bind port.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
