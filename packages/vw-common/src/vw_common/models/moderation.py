"""
Moderation policy configuration model for VoiceWarden.

Enumerates every option the detectors recognise, each with a documented
default. Keyword lists that are absent or empty fall back to the
built-in classroom-discussion defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_TOPIC_KEYWORDS: tuple[str, ...] = (
    "discuss", "discussion", "topic", "question", "answer", "think", "opinion",
    "agree", "disagree", "why", "how", "what", "explain", "understand",
    "learn", "study", "class", "lesson", "subject", "idea", "point",
)

DEFAULT_OFF_TOPIC_INDICATORS: tuple[str, ...] = (
    "game", "play", "fun", "bored", "tired", "hungry", "lunch", "break",
    "homework", "test", "exam", "grade", "teacher", "school", "friend",
    "phone", "video", "movie", "music", "song", "dance",
)


class ModerationConfig(BaseModel):
    """Per-session moderation policy.

    Attributes:
        window_size: Live sliding-window capacity in tokens (default 8).
        allowed_language: Language code speakers should use (default ``en``).
        topic_keywords: Words that mark a segment as on-topic.
        topic_prompt: Discussion prompt handed to the validator, if any.
        off_topic_indicators: Words that suggest drift.
        dominance_threshold: Talk-time share above which a speaker dominates
            (``None`` = 0.5).
        silence_threshold: Talk-time share below which a speaker is silent
            (``None`` = 0.05).
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    window_size: int = Field(default=8, ge=1, le=64, description="Window capacity.")
    allowed_language: str = Field(default="en", max_length=10, description="Allowed language.")
    topic_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TOPIC_KEYWORDS),
        description="On-topic keywords.",
    )
    topic_prompt: str | None = Field(default=None, description="Discussion prompt.")
    off_topic_indicators: list[str] = Field(
        default_factory=lambda: list(DEFAULT_OFF_TOPIC_INDICATORS),
        description="Off-topic indicator words.",
    )
    dominance_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    silence_threshold: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("topic_keywords", mode="before")
    @classmethod
    def _default_topic_keywords(cls, value: Any) -> Any:
        return value or list(DEFAULT_TOPIC_KEYWORDS)

    @field_validator("off_topic_indicators", mode="before")
    @classmethod
    def _default_off_topic_indicators(cls, value: Any) -> Any:
        return value or list(DEFAULT_OFF_TOPIC_INDICATORS)
