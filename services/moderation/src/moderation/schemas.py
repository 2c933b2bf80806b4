"""
Request and response schemas for the VoiceWarden moderation service.

Pydantic models validating HTTP request bodies.  Engine results are
dataclasses and are serialised by FastAPI directly.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from vw_common.models import ModerationConfig, ModerationFlags, Segment


class _Body(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class TextRequest(_Body):
    """Body for the batch detection endpoints."""

    text: str = Field(default="", description="Text to scan.")


class IngestRequest(_Body):
    """Body for feeding a chunk into a live stream."""

    chunk: str = Field(default="", description="Arriving text chunk.")
    device_id: str | None = Field(default=None, description="Device to alert for.")
    transcript_id: str = Field(default="", description="Transcript id.")
    speaker: str = Field(default="", description="Speaker label.")
    timestamp_ms: int = Field(default=0, ge=0, description="Offset in ms.")
    config: ModerationConfig | None = Field(
        default=None,
        description="Session policy; its window size applies to a new stream.",
    )


class AnalyzeRequest(_Body):
    """Body for a full-session content analysis."""

    transcript_id: str = Field(default="", description="Transcript id.")
    segments: list[Segment] = Field(default_factory=list)
    config: ModerationConfig = Field(default_factory=ModerationConfig)


class ReviewRequest(_Body):
    """Body for validating proposed flags of one segment."""

    transcript_id: str = Field(default="", description="Transcript id.")
    segment: Segment
    proposed_flags: ModerationFlags = Field(default_factory=ModerationFlags)
    config: ModerationConfig = Field(default_factory=ModerationConfig)
