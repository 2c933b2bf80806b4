"""
External flag validator for VoiceWarden.

Sends a segment and its proposed flags to an OpenAI-compatible
chat-completions endpoint together with the moderation policy, and
parses the flags the model chose to keep.  Every failure surfaces as
:class:`ValidatorUnavailable`; the orchestrator turns that into a
fall-back to the proposed flags.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from vw_common.config import get_settings
from vw_common.models import FlagRecord, FlagType, ModerationConfig, ModerationFlags, Segment

logger = structlog.get_logger()

_TEMPERATURE = 0.2

# Wire key -> (model field, flag type) for each reviewed category.
_CATEGORIES: dict[str, tuple[str, FlagType]] = {
    "profanity": ("profanity", FlagType.PROFANITY),
    "languagePolicy": ("language_policy", FlagType.LANGUAGE_POLICY),
    "offTopic": ("off_topic", FlagType.OFF_TOPIC),
}


class ValidatorUnavailable(Exception):
    """The validator could not produce a usable verdict."""


def build_system_prompt(config: ModerationConfig) -> str:
    """Policy prompt describing the topic, allowed language, and flagging rules."""
    keywords = ", ".join(config.topic_keywords)
    if config.topic_prompt:
        topic_line = f'Primary topic/prompt: "{config.topic_prompt}".'
    elif keywords:
        topic_line = f"Primary topic keywords: {keywords}."
    else:
        topic_line = "No explicit topic provided."

    return " ".join(
        [
            "You are an assistant that validates content moderation signals "
            "for live classroom/group discussions.",
            topic_line,
            f"Allowed language code: {config.allowed_language}.",
            "Your job: decide whether proposed flags (profanity, language policy, "
            "off_topic) are correct, given the segment text and context.",
            "Rules:",
            "- Profanity: only flag explicit offensive words or slurs. Ignore markup like <end>.",
            "- Language policy: flag only if the spoken language is clearly not the "
            "allowed language; minor loanwords are OK.",
            "- Off-topic: flag only if the utterance clearly diverges from the given "
            "topic; short greetings or transitions are not off-topic.",
            "Return a strict JSON with fields: profanity[], languagePolicy[], offTopic[] "
            "of items to keep.",
            "Each item must include: transcriptId, flaggedWord, context, timestampMs, "
            "speaker, flagType.",
            "The 'context' field should explain why the content was flagged.",
        ]
    )


def parse_review(payload: Any) -> ModerationFlags:
    """Validate the model's JSON verdict.

    Raises:
        ValidatorUnavailable: If the payload is not an object holding the
            three category arrays of well-formed flag items.
    """
    if not isinstance(payload, dict):
        raise ValidatorUnavailable("verdict is not a JSON object")

    buckets: dict[str, list[FlagRecord]] = {}
    for key, (field_name, flag_type) in _CATEGORIES.items():
        items = payload.get(key)
        if not isinstance(items, list):
            raise ValidatorUnavailable(f"verdict is missing the {key} array")
        try:
            buckets[field_name] = [
                FlagRecord.model_validate({**item, "flagType": flag_type})
                for item in items
            ]
        except (TypeError, ValidationError) as exc:
            raise ValidatorUnavailable(f"malformed {key} item: {exc}") from exc
    return ModerationFlags(**buckets)


class FlagValidator(ABC):
    """Interface of an external service that reviews proposed flags.

    Attributes:
        name: Human-readable validator name used in logs.
    """

    name: str = "base"

    @property
    def is_configured(self) -> bool:
        """Whether the validator has what it needs to be called."""
        return True

    @abstractmethod
    async def validate(
        self,
        transcript_id: str,
        segment: Segment,
        proposed: ModerationFlags,
        config: ModerationConfig,
    ) -> ModerationFlags:
        """Return the subset of *proposed* the validator keeps.

        Raises:
            ValidatorUnavailable: On any failure to obtain a verdict.
        """

    async def close(self) -> None:
        """Release any resources held by the validator (override if needed)."""


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class ChatCompletionValidator(FlagValidator):
    """Reviews flags with an OpenAI-compatible chat-completions endpoint.

    Uses :mod:`httpx` for async HTTP and :mod:`tenacity` for retrying
    transport errors and 5xx responses.  Unset arguments fall back to
    :class:`~vw_common.config.Settings`.

    Args:
        api_key: Bearer token; without one the validator is not configured.
        url: Chat-completions URL.
        model: Model identifier.
        timeout: Per-request timeout in seconds.
        max_attempts: Delivery attempts.
    """

    name: str = "chat_completion"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = settings.validator_api_key if api_key is None else api_key
        self.url = url or settings.validator_url
        self.model = model or settings.validator_model
        self.timeout = timeout or settings.validator_timeout_s
        self.max_attempts = max_attempts or settings.validator_max_attempts
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the shared ``httpx.AsyncClient``."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _post_with_retry(self, body: dict[str, Any]) -> httpx.Response:
        """POST *body* to the endpoint with retry.

        The retry decorator is built per call so ``max_attempts`` can be set
        at construction time rather than module-import time.
        """

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        async def _inner() -> httpx.Response:
            client = await self._get_client()
            resp = await client.post(
                self.url,
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
            )
            resp.raise_for_status()
            return resp

        return await _inner()

    def _request_body(
        self,
        transcript_id: str,
        segment: Segment,
        proposed: ModerationFlags,
        config: ModerationConfig,
    ) -> dict[str, Any]:
        user_payload = {
            "transcriptId": transcript_id,
            "segment": segment.model_dump(mode="json", by_alias=True, exclude_none=True),
            "proposedFlags": proposed.model_dump(mode="json", by_alias=True),
        }
        return {
            "model": self.model,
            "temperature": _TEMPERATURE,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": build_system_prompt(config)},
                {"role": "user", "content": json.dumps(user_payload)},
            ],
        }

    async def validate(
        self,
        transcript_id: str,
        segment: Segment,
        proposed: ModerationFlags,
        config: ModerationConfig,
    ) -> ModerationFlags:
        if not self.is_configured:
            raise ValidatorUnavailable("no validator API key configured")

        body = self._request_body(transcript_id, segment, proposed, config)
        try:
            resp = await self._post_with_retry(body)
            content = resp.json()["choices"][0]["message"]["content"]
            verdict = json.loads(content)
        except (httpx.HTTPStatusError, httpx.TransportError) as exc:
            raise ValidatorUnavailable(f"validator request failed: {exc}") from exc
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ValidatorUnavailable(f"unparsable validator response: {exc}") from exc

        reviewed = parse_review(verdict)
        logger.debug(
            "validator_verdict",
            validator=self.name,
            transcript_id=transcript_id,
            kept=len(reviewed.all_flags()),
            proposed=len(proposed.all_flags()),
        )
        return reviewed

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
