"""
Keyword-based topic adherence scoring for VoiceWarden.

Classifies each transcript segment as on or off topic from configured
topic keywords and off-topic indicator words, and scores a batch as the
share of on-topic segments.  Drift requires positive evidence: a segment
mentioning neither keyword type counts as on-topic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from vw_common.models import FlagRecord, FlagType, ModerationConfig, Segment

OFF_TOPIC_MARKER = "off_topic"
CONTEXT_CHARS = 150

_NON_WORD_RE = re.compile(r"[^\w]")


@dataclass
class TopicAdherenceResult:
    """Outcome of a topic adherence analysis.

    Attributes:
        score: Share of on-topic segments, 1.0 = fully on topic.
        off_topic_segments: One flag per off-topic segment.
        detected_keywords: Topic keywords seen, in first-seen order.
        off_topic_indicators: Off-topic indicators seen, in first-seen order.
    """

    score: float = 1.0
    off_topic_segments: list[FlagRecord] = field(default_factory=list)
    detected_keywords: list[str] = field(default_factory=list)
    off_topic_indicators: list[str] = field(default_factory=list)


def clean_words(text: str) -> list[str]:
    """Lower-case *text*, split on whitespace, drop non-word characters per token."""
    return [_NON_WORD_RE.sub("", w) for w in text.lower().split()]


def analyze(
    segments: Sequence[Segment],
    config: ModerationConfig | None = None,
    transcript_id: str = "",
) -> TopicAdherenceResult:
    """Score how well *segments* stay on topic.

    Topic keywords count only as whole cleaned tokens.  Indicators are
    collected as whole cleaned tokens across the batch, but a segment is
    tested for them by substring on its lowercased text, so a segment saying
    "playing" is off-topic once "play" has been seen as a word.

    Args:
        segments: Transcript segments, in order.
        config: Keyword configuration; built-in defaults when omitted.
        transcript_id: Stamped on the generated flags.

    Returns:
        A :class:`TopicAdherenceResult`; pure function of its inputs.
    """
    if not segments:
        return TopicAdherenceResult()

    config = config or ModerationConfig()
    topic_keywords = {k.lower() for k in config.topic_keywords if k}
    indicators = {k.lower() for k in config.off_topic_indicators if k}

    detected: dict[str, None] = {}
    found_indicators: dict[str, None] = {}
    flags: list[FlagRecord] = []
    on_topic = 0

    for segment in segments:
        text = segment.text.lower()
        has_topic_keyword = False
        for word in clean_words(text):
            if word in topic_keywords:
                detected[word] = None
                has_topic_keyword = True
            if word in indicators:
                found_indicators[word] = None

        has_indicator = any(ind in text for ind in found_indicators)
        if has_indicator and not has_topic_keyword:
            flags.append(
                FlagRecord(
                    transcript_id=transcript_id,
                    flagged_word=OFF_TOPIC_MARKER,
                    context=segment.text[:CONTEXT_CHARS],
                    timestamp_ms=segment.start_ms,
                    speaker=segment.speaker,
                    flag_type=FlagType.OFF_TOPIC,
                )
            )
        else:
            on_topic += 1

    return TopicAdherenceResult(
        score=on_topic / len(segments),
        off_topic_segments=flags,
        detected_keywords=list(detected),
        off_topic_indicators=list(found_indicators),
    )
