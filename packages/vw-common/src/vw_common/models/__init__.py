"""
Shared Pydantic data models for VoiceWarden.

This package contains the cross-module data models: transcript segments,
flag records, alert events, and the moderation policy configuration.
"""

from vw_common.models.alert import AlertEvent, AlertType, Severity
from vw_common.models.flag import (
    FlagRecord,
    FlagType,
    ModerationFlags,
    ProposedFlags,
    ReviewedFlags,
)
from vw_common.models.moderation import (
    DEFAULT_OFF_TOPIC_INDICATORS,
    DEFAULT_TOPIC_KEYWORDS,
    ModerationConfig,
)
from vw_common.models.transcript import Segment, TranscriptWord

__all__ = [
    "AlertEvent",
    "AlertType",
    "DEFAULT_OFF_TOPIC_INDICATORS",
    "DEFAULT_TOPIC_KEYWORDS",
    "FlagRecord",
    "FlagType",
    "ModerationConfig",
    "ModerationFlags",
    "ProposedFlags",
    "ReviewedFlags",
    "Segment",
    "Severity",
    "TranscriptWord",
]
