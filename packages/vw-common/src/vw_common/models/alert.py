"""
Alert event models for VoiceWarden.

Defines the real-time AlertEvent broadcast to subscribers of the publish
channel, its type enumeration, and the live-detection severity levels.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from vw_common.models.flag import FlagRecord, FlagType


class Severity(str, enum.Enum):
    """Severity of a live detection."""

    HIGH = "high"
    MEDIUM = "medium"


class AlertType(str, enum.Enum):
    """Alert message type, one per flag category."""

    PROFANITY_ALERT = "PROFANITY_ALERT"
    LANGUAGE_POLICY_ALERT = "LANGUAGE_POLICY_ALERT"
    PARTICIPATION_ALERT = "PARTICIPATION_ALERT"
    TOPIC_ADHERENCE_ALERT = "TOPIC_ADHERENCE_ALERT"


_ALERT_TYPE_BY_FLAG: dict[FlagType, AlertType] = {
    FlagType.PROFANITY: AlertType.PROFANITY_ALERT,
    FlagType.LANGUAGE_POLICY: AlertType.LANGUAGE_POLICY_ALERT,
    FlagType.PARTICIPATION: AlertType.PARTICIPATION_ALERT,
    FlagType.OFF_TOPIC: AlertType.TOPIC_ADHERENCE_ALERT,
}


class AlertEvent(BaseModel):
    """A real-time alert broadcast on the publish channel.

    Attributes:
        type: Alert message type.
        device_id: Recording device (or user) that produced the audio.
        transcript_id: Transcript the alert belongs to.
        flagged_word: Offending word or phrase.
        timestamp_ms: Offset in milliseconds from session start.
        speaker: Speaker label.
        context: Surrounding text.
        flag_type: Flag category.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    type: AlertType = Field(default=AlertType.PROFANITY_ALERT, description="Alert type.")
    device_id: str = Field(..., description="Originating device id.")
    transcript_id: str = Field(default="", description="Transcript id.")
    flagged_word: str = Field(..., description="Offending word or phrase.")
    timestamp_ms: int = Field(default=0, ge=0, description="Offset in ms.")
    speaker: str = Field(default="", description="Speaker label.")
    context: str = Field(default="", description="Surrounding text.")
    flag_type: FlagType = Field(default=FlagType.PROFANITY, description="Flag category.")

    @classmethod
    def from_flag(cls, flag: FlagRecord, device_id: str) -> AlertEvent:
        """Build the alert announcing *flag* for *device_id*."""
        return cls(
            type=_ALERT_TYPE_BY_FLAG[flag.flag_type],
            device_id=device_id,
            transcript_id=flag.transcript_id,
            flagged_word=flag.flagged_word,
            timestamp_ms=flag.timestamp_ms,
            speaker=flag.speaker,
            context=flag.context,
            flag_type=flag.flag_type,
        )
