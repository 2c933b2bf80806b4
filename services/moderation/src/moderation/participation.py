"""
Participation balance analysis for VoiceWarden.

Computes each speaker's share of talk time over a batch of segments and
reports a dominant speaker and silent speakers.  Runs at session end,
when the full conversation is known.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from vw_common.models import FlagRecord, FlagType, ModerationConfig, Segment

DEFAULT_DOMINANCE_THRESHOLD = 0.5
DEFAULT_SILENCE_THRESHOLD = 0.05
CONTEXT_CHARS = 150

DOMINANCE_MARKER = "participation_dominance"
SILENCE_MARKER = "participation_silence"


@dataclass
class SpeakerParticipation:
    """Talk-time statistics of one speaker."""

    speaker_id: str
    talk_time: float
    segment_count: int
    percentage: float


@dataclass
class ParticipationBalance:
    """Participation summary of a conversation.

    Attributes:
        speakers: Per-speaker statistics, largest share first.
        is_balanced: ``True`` when nobody dominates and nobody is silent.
        dominant_speaker: Speaker above the dominance threshold, if any.
        silent_speakers: Speakers below the silence threshold.
        imbalance_reason: Human-readable explanation when unbalanced.
    """

    speakers: list[SpeakerParticipation] = field(default_factory=list)
    is_balanced: bool = True
    dominant_speaker: str | None = None
    silent_speakers: list[str] = field(default_factory=list)
    imbalance_reason: str | None = None


def analyze_participation(
    segments: Sequence[Segment],
    config: ModerationConfig | None = None,
) -> ParticipationBalance:
    """Measure how evenly *segments* are spread across speakers."""
    if not segments:
        return ParticipationBalance()

    dominance = DEFAULT_DOMINANCE_THRESHOLD
    silence = DEFAULT_SILENCE_THRESHOLD
    if config is not None:
        if config.dominance_threshold is not None:
            dominance = config.dominance_threshold
        if config.silence_threshold is not None:
            silence = config.silence_threshold

    talk: dict[str, float] = {}
    counts: dict[str, int] = {}
    for seg in segments:
        talk[seg.speaker] = talk.get(seg.speaker, 0.0) + seg.duration
        counts[seg.speaker] = counts.get(seg.speaker, 0) + 1

    total = sum(talk.values())
    speakers: list[SpeakerParticipation] = []
    dominant: str | None = None
    silent: list[str] = []

    for speaker_id, talk_time in talk.items():
        share = talk_time / total if total > 0 else 0.0
        speakers.append(
            SpeakerParticipation(
                speaker_id=speaker_id,
                talk_time=talk_time,
                segment_count=counts[speaker_id],
                percentage=share,
            )
        )
        if share > dominance:
            dominant = speaker_id
        if share < silence:
            silent.append(speaker_id)

    speakers.sort(key=lambda s: s.percentage, reverse=True)

    reason: str | None = None
    if dominant is not None:
        share = next(s.percentage for s in speakers if s.speaker_id == dominant)
        reason = f"{dominant} dominates with {share * 100:.0f}% of talk time"
    elif silent:
        reason = f"{len(silent)} speaker(s) are silent or barely participating"

    return ParticipationBalance(
        speakers=speakers,
        is_balanced=dominant is None and not silent,
        dominant_speaker=dominant,
        silent_speakers=silent,
        imbalance_reason=reason,
    )


def participation_flags(
    balance: ParticipationBalance,
    segments: Sequence[Segment],
    transcript_id: str = "",
) -> list[FlagRecord]:
    """One flag for the dominant speaker and one per silent speaker.

    Each flag uses the speaker's first segment for context and timestamp.
    """
    if balance.is_balanced:
        return []

    first_segment: dict[str, Segment] = {}
    for seg in segments:
        first_segment.setdefault(seg.speaker, seg)

    targets: list[tuple[str, str]] = []
    if balance.dominant_speaker is not None:
        targets.append((balance.dominant_speaker, DOMINANCE_MARKER))
    targets.extend((speaker, SILENCE_MARKER) for speaker in balance.silent_speakers)

    flags: list[FlagRecord] = []
    for speaker, marker in targets:
        seg = first_segment.get(speaker)
        if seg is None:
            continue
        flags.append(
            FlagRecord(
                transcript_id=transcript_id,
                flagged_word=marker,
                context=seg.text[:CONTEXT_CHARS],
                timestamp_ms=seg.start_ms,
                speaker=speaker,
                flag_type=FlagType.PARTICIPATION,
            )
        )
    return flags
