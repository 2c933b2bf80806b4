"""Shared fixtures for moderation service tests."""

from __future__ import annotations

import os

import pytest

# Keep tests independent of a developer's .env / shell.
os.environ.setdefault("VW_REDIS_URL", "redis://localhost:6379/0")
os.environ["VW_VALIDATOR_API_KEY"] = ""
os.environ["VW_LEXICON_PATH"] = ""
os.environ["VW_WHITELIST_PATH"] = ""

from vw_common.config import get_settings
from vw_common.models import Segment

from moderation.batch_detector import BatchDetector
from moderation.lexicon import Lexicon, get_default_lexicon
from moderation.lexicon_matcher import LexiconMatcher


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    get_settings.cache_clear()


@pytest.fixture()
def lexicon() -> Lexicon:
    """The built-in lexicon."""
    return get_default_lexicon()


@pytest.fixture()
def small_lexicon() -> Lexicon:
    """A tiny lexicon with predictable iteration order."""
    return Lexicon(["damn", "what the heck", "scoundrel"], ["damnation"])


@pytest.fixture()
def matcher(lexicon: Lexicon) -> LexiconMatcher:
    return LexiconMatcher(lexicon)


@pytest.fixture()
def detector(lexicon: Lexicon) -> BatchDetector:
    return BatchDetector(lexicon)


@pytest.fixture()
def discussion() -> list[Segment]:
    """A short two-speaker classroom discussion."""
    return [
        Segment(speaker="alice", text="let's discuss the topic", start_time=0.0, end_time=4.0),
        Segment(speaker="bob", text="I'm so bored, let's play a game", start_time=4.0, end_time=6.5),
        Segment(speaker="alice", text="what do you think about the question", start_time=6.5, end_time=10.0),
    ]
