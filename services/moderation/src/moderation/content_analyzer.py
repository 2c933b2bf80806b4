"""
Content analysis for VoiceWarden transcripts.

Turns detector output into flag records.  ``analyze_segment`` runs the
real-time checks (profanity, language policy) on one segment as it
arrives; ``analyze_content`` runs every check over a finished session,
including topic adherence and participation, which need the whole
conversation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import structlog

from vw_common.models import FlagRecord, FlagType, ModerationConfig, ModerationFlags, Segment

from moderation import topic_adherence
from moderation.batch_detector import BatchDetector, iter_tokens
from moderation.language_policy import detect_language_policy_violations
from moderation.participation import (
    ParticipationBalance,
    analyze_participation,
    participation_flags,
)
from moderation.topic_adherence import TopicAdherenceResult

logger = structlog.get_logger()

CONTEXT_WORDS = 3
LOW_ADHERENCE_SCORE = 0.7


@dataclass
class ContentAnalysisResult:
    """Every check's outcome for one transcript.

    Attributes:
        profanity: Profanity flags, one per offending word.
        language_policy: Non-allowed-language flags, one per segment.
        participation: Talk-time balance summary.
        participation_flags: Dominance/silence flags.
        topic_adherence: Topic adherence score and off-topic flags.
    """

    profanity: list[FlagRecord] = field(default_factory=list)
    language_policy: list[FlagRecord] = field(default_factory=list)
    participation: ParticipationBalance = field(default_factory=ParticipationBalance)
    participation_flags: list[FlagRecord] = field(default_factory=list)
    topic_adherence: TopicAdherenceResult = field(default_factory=TopicAdherenceResult)

    @property
    def proposed_flags(self) -> ModerationFlags:
        """The flag categories submitted for validation."""
        return ModerationFlags(
            profanity=list(self.profanity),
            language_policy=list(self.language_policy),
            off_topic=list(self.topic_adherence.off_topic_segments),
        )

    @property
    def all_flagged_items(self) -> list[FlagRecord]:
        return [
            *self.profanity,
            *self.language_policy,
            *self.topic_adherence.off_topic_segments,
            *self.participation_flags,
        ]


def _word_timestamp_ms(segment: Segment, index: int, word_count: int) -> int:
    """Timestamp of the *index*-th word, interpolated when timings are missing."""
    if len(segment.words) == word_count:
        return int(segment.words[index].start_time * 1000)
    per_word_ms = segment.duration * 1000 / word_count
    return int(segment.start_time * 1000 + index * per_word_ms)


def profanity_flags(
    segment: Segment,
    transcript_id: str = "",
    detector: BatchDetector | None = None,
) -> list[FlagRecord]:
    """Flag each profane word of *segment* with its timestamp and nearby words."""
    detector = detector or BatchDetector()
    matches = detector.detect(segment.text)
    if not matches:
        return []

    tokens = list(iter_tokens(segment.text))
    index_by_offset = {offset: i for i, (offset, _) in enumerate(tokens)}
    words = [tok for _, tok in tokens]

    flags: list[FlagRecord] = []
    for m in matches:
        i = index_by_offset[m.offset]
        context = " ".join(words[max(0, i - CONTEXT_WORDS): i + CONTEXT_WORDS + 1])
        flags.append(
            FlagRecord(
                transcript_id=transcript_id,
                flagged_word=m.source_text,
                context=context,
                timestamp_ms=_word_timestamp_ms(segment, i, len(words)),
                speaker=segment.speaker,
                flag_type=FlagType.PROFANITY,
            )
        )
    return flags


def analyze_segment(
    segment: Segment,
    transcript_id: str = "",
    config: ModerationConfig | None = None,
    detector: BatchDetector | None = None,
) -> ModerationFlags:
    """Real-time checks for one arriving segment.

    Only profanity and language policy are evaluated; topic adherence
    needs the full conversation and is left empty here.
    """
    config = config or ModerationConfig()
    return ModerationFlags(
        profanity=profanity_flags(segment, transcript_id, detector),
        language_policy=detect_language_policy_violations(
            [segment], transcript_id, config.allowed_language
        ),
    )


def analyze_content(
    segments: Sequence[Segment],
    transcript_id: str = "",
    config: ModerationConfig | None = None,
    detector: BatchDetector | None = None,
) -> ContentAnalysisResult:
    """Run every check over a finished transcript and log the decisions."""
    config = config or ModerationConfig()
    detector = detector or BatchDetector()
    log = logger.bind(transcript_id=transcript_id)

    profanity: list[FlagRecord] = []
    for segment in segments:
        profanity.extend(profanity_flags(segment, transcript_id, detector))

    language = detect_language_policy_violations(segments, transcript_id, config.allowed_language)
    balance = analyze_participation(segments, config)
    adherence = topic_adherence.analyze(segments, config, transcript_id)

    result = ContentAnalysisResult(
        profanity=profanity,
        language_policy=language,
        participation=balance,
        participation_flags=participation_flags(balance, segments, transcript_id),
        topic_adherence=adherence,
    )

    if profanity:
        log.info(
            "profanity_detected",
            count=len(profanity),
            words=[f.flagged_word for f in profanity],
        )
    if language:
        log.info(
            "language_policy_violation",
            count=len(language),
            detected_languages=sorted({f.flagged_word for f in language}),
            allowed_language=config.allowed_language,
        )
    if not balance.is_balanced:
        log.info(
            "participation_imbalance",
            dominant_speaker=balance.dominant_speaker,
            silent_speakers=balance.silent_speakers,
            reason=balance.imbalance_reason,
        )
    if adherence.score < LOW_ADHERENCE_SCORE:
        log.info(
            "low_topic_adherence",
            score=adherence.score,
            off_topic_count=len(adherence.off_topic_segments),
        )
    log.info(
        "content_analysis_complete",
        segments=len(segments),
        topic_adherence_score=adherence.score,
        detected_keywords=adherence.detected_keywords,
        off_topic_indicators=adherence.off_topic_indicators,
        speakers={s.speaker_id: round(s.percentage, 3) for s in balance.speakers},
    )
    return result
