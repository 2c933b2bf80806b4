"""Integration tests: content analysis -> validator review -> alerts.

Runs a finished transcript through every check, reviews the proposed
flags with a chat-completions validator served by ``httpx.MockTransport``,
and publishes the surviving flags through the alert publisher.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx

from vw_common.models import FlagType, ModerationConfig, Segment

from moderation import orchestrator
from moderation.alert_publisher import AlertPublisher
from moderation.content_analyzer import analyze_content
from moderation.validator import ChatCompletionValidator

_URL = "https://llm.example.com/v1/chat/completions"


Handler = Callable[[httpx.Request], httpx.Response]


def _validator(handler: Handler) -> ChatCompletionValidator:
    v = ChatCompletionValidator(api_key="test-key", url=_URL, max_attempts=1)
    v._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return v


def _keep_categories(*keys: str) -> Handler:
    """Handler echoing back the proposed flags of the given categories."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        proposed = json.loads(body["messages"][1]["content"])["proposedFlags"]
        verdict = {k: (proposed[k] if k in keys else []) for k in ("profanity", "languagePolicy", "offTopic")}
        return httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(verdict)}}]})

    return handler


class TestSessionModeration:
    """Full-session moderation flow."""

    async def test_analysis_flags_every_category(self, classroom_transcript: list[Segment]) -> None:
        result = analyze_content(classroom_transcript, "tx-1")

        (profanity,) = result.profanity
        assert profanity.flagged_word == "damn"
        assert profanity.timestamp_ms == 8750
        assert profanity.speaker == "ben"

        (language,) = result.language_policy
        assert language.flagged_word == "zh"

        (off_topic,) = result.topic_adherence.off_topic_segments
        assert off_topic.speaker == "ben"
        assert result.topic_adherence.score == 0.75
        assert result.participation.is_balanced is True

    async def test_reviewed_flags_are_published(self, classroom_transcript: list[Segment]) -> None:
        result = analyze_content(classroom_transcript, "tx-1")
        validator = _validator(_keep_categories("profanity", "languagePolicy"))

        reviewed = await orchestrator.review(
            "tx-1",
            classroom_transcript[2],
            result.proposed_flags,
            ModerationConfig(),
            validator=validator,
        )
        await validator.close()

        assert [f.flag_type for f in reviewed.all_flags()] == [
            FlagType.PROFANITY,
            FlagType.LANGUAGE_POLICY,
        ]

        redis = AsyncMock()
        redis.publish = AsyncMock(return_value=1)
        sent = await AlertPublisher(redis).publish_flags(reviewed.all_flags(), "dev-7")

        assert sent == 2
        channels = {call.args[0] for call in redis.publish.call_args_list}
        assert channels == {"alerts:dev-7"}
        types = [call.args[1]["type"] for call in redis.publish.call_args_list]
        assert types == ["PROFANITY_ALERT", "LANGUAGE_POLICY_ALERT"]

    async def test_validator_outage_keeps_proposed(self, classroom_transcript: list[Segment]) -> None:
        result = analyze_content(classroom_transcript, "tx-1")
        proposed = result.proposed_flags
        validator = _validator(lambda request: httpx.Response(503))

        reviewed = await orchestrator.review(
            "tx-1", classroom_transcript[2], proposed, validator=validator
        )
        await validator.close()

        assert reviewed == proposed
        assert len(reviewed.all_flags()) == 3
