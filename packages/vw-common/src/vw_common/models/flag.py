"""
Flag record models for VoiceWarden.

Defines the FlagRecord handed to the persistence layer and to the
external validator, and the three-bucket ModerationFlags container used
both for the analyzer's proposals and for what survives validation.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class FlagType(str, enum.Enum):
    """Category of a moderation flag."""

    PROFANITY = "profanity"
    LANGUAGE_POLICY = "language_policy"
    OFF_TOPIC = "off_topic"
    PARTICIPATION = "participation"


class FlagRecord(BaseModel):
    """A single moderation flag, shaped for storage and alerting.

    Attributes:
        transcript_id: Transcript the flag belongs to.
        flagged_word: Offending word, detected language, or a marker such
            as ``off_topic``.
        context: Surrounding text (or a validator explanation).
        timestamp_ms: Offset in milliseconds from session start.
        speaker: Speaker label.
        flag_type: Flag category.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    transcript_id: str = Field(default="", description="Owning transcript id.")
    flagged_word: str = Field(..., description="Flagged word or marker.")
    context: str = Field(default="", description="Surrounding text.")
    timestamp_ms: int = Field(default=0, ge=0, description="Offset in ms.")
    speaker: str = Field(default="", description="Speaker label.")
    flag_type: FlagType = Field(default=FlagType.PROFANITY, description="Flag category.")

    @property
    def identity(self) -> tuple[str, int, str]:
        """Key used to pair a reviewed flag with the flag it came from."""
        return (self.flagged_word.lower(), self.timestamp_ms, self.flag_type.value)


class ModerationFlags(BaseModel):
    """Flags grouped by the category the validator reviews.

    Attributes:
        profanity: Profanity flags.
        language_policy: Non-allowed-language flags.
        off_topic: Topic-drift flags.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    profanity: list[FlagRecord] = Field(default_factory=list)
    language_policy: list[FlagRecord] = Field(default_factory=list)
    off_topic: list[FlagRecord] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """``True`` when no category holds a flag."""
        return not (self.profanity or self.language_policy or self.off_topic)

    def all_flags(self) -> list[FlagRecord]:
        """Every flag, profanity first, then language policy, then off-topic."""
        return [*self.profanity, *self.language_policy, *self.off_topic]


ProposedFlags = ModerationFlags
ReviewedFlags = ModerationFlags
