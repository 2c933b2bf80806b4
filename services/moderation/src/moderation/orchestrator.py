"""
Moderation orchestrator for VoiceWarden.

Submits proposed flags to the external validator and merges its verdict.
Validation is advisory: when no validator is configured, or the call
fails or times out, the proposed flags are returned unchanged so that
ingestion never blocks on a third-party service.
"""

from __future__ import annotations

import asyncio

import structlog

from vw_common.config import get_settings
from vw_common.models import FlagRecord, ModerationConfig, ModerationFlags, Segment

from moderation.validator import FlagValidator, ValidatorUnavailable

logger = structlog.get_logger()


def _keep_known(proposed: list[FlagRecord], reviewed: list[FlagRecord]) -> list[FlagRecord]:
    """Proposed flags the validator kept, carrying the validator's context.

    Items the validator returns that match no proposed flag are dropped.
    """
    by_identity = {flag.identity: flag for flag in proposed}
    kept: dict[tuple[str, int, str], FlagRecord] = {}
    for item in reviewed:
        original = by_identity.get(item.identity)
        if original is None or item.identity in kept:
            continue
        kept[item.identity] = original.model_copy(
            update={"context": item.context or original.context}
        )
    return list(kept.values())


def merge_verdict(proposed: ModerationFlags, reviewed: ModerationFlags) -> ModerationFlags:
    """Restrict *reviewed* to flags that were actually proposed."""
    return ModerationFlags(
        profanity=_keep_known(proposed.profanity, reviewed.profanity),
        language_policy=_keep_known(proposed.language_policy, reviewed.language_policy),
        off_topic=_keep_known(proposed.off_topic, reviewed.off_topic),
    )


async def review(
    transcript_id: str,
    segment: Segment,
    proposed: ModerationFlags,
    config: ModerationConfig | None = None,
    validator: FlagValidator | None = None,
    timeout_s: float | None = None,
) -> ModerationFlags:
    """Cross-check *proposed* flags with the external validator.

    Args:
        transcript_id: Transcript the segment belongs to.
        segment: The segment the flags were raised on.
        proposed: Flags produced by the local detectors.
        config: Policy handed to the validator prompt.
        validator: External validator; ``None`` disables validation.
        timeout_s: Bound on the whole validator call; defaults to
            ``Settings.validator_timeout_s``.

    Returns:
        The reviewed flags, or *proposed* itself when validation is
        unavailable for any reason.
    """
    if validator is None or not validator.is_configured:
        return proposed
    if proposed.is_empty:
        return proposed

    config = config or ModerationConfig()
    timeout = timeout_s or get_settings().validator_timeout_s
    log = logger.bind(transcript_id=transcript_id, validator=validator.name)

    try:
        reviewed = await asyncio.wait_for(
            validator.validate(transcript_id, segment, proposed, config),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        log.warning("validator_unavailable", reason="timeout", timeout_s=timeout)
        return proposed
    except ValidatorUnavailable as exc:
        log.warning("validator_unavailable", reason=str(exc))
        return proposed
    except Exception as exc:  # noqa: BLE001
        log.error("validator_unexpected_error", error=str(exc))
        return proposed

    merged = merge_verdict(proposed, reviewed)
    log.info(
        "flags_reviewed",
        proposed=len(proposed.all_flags()),
        kept=len(merged.all_flags()),
    )
    return merged
