"""
Transcript data models for VoiceWarden.

Defines the Pydantic models for a transcript Segment (one speaker turn
supplied by the caller) and its optional per-word timings. Segments are
immutable: the moderation engine reads them and never mutates them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class TranscriptWord(BaseModel):
    """A single transcribed word with its timing.

    Attributes:
        text: The transcribed word.
        start_time: Start offset in seconds from session start.
        end_time: End offset in seconds from session start.
        confidence: ASR confidence for this word (0.0–1.0), if known.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    text: str = Field(..., description="The transcribed word.")
    start_time: float = Field(..., ge=0.0, description="Start offset in seconds.")
    end_time: float = Field(..., ge=0.0, description="End offset in seconds.")
    confidence: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="ASR confidence for this word.",
    )


class Segment(BaseModel):
    """An immutable unit of transcript.

    Attributes:
        speaker: Speaker label (e.g. ``Speaker 1``).
        text: Transcribed text of the turn.
        start_time: Segment start in seconds from session start.
        end_time: Segment end in seconds from session start.
        language: Detected language code, if the recognizer reported one.
        words: Per-word timings, if available.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    speaker: str = Field(default="", description="Speaker label.")
    text: str = Field(default="", description="Transcribed text.")
    start_time: float = Field(default=0.0, ge=0.0, description="Start in seconds.")
    end_time: float = Field(default=0.0, ge=0.0, description="End in seconds.")
    language: str | None = Field(
        default=None,
        max_length=10,
        description="Detected language code.",
    )
    words: tuple[TranscriptWord, ...] = Field(
        default=(),
        description="Per-word timings.",
    )

    @property
    def start_ms(self) -> int:
        """Segment start converted to whole milliseconds (floor)."""
        return int(self.start_time * 1000)

    @property
    def duration(self) -> float:
        """Segment length in seconds (never negative)."""
        return max(0.0, self.end_time - self.start_time)
