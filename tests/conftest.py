"""Shared pytest fixtures for VoiceWarden integration tests.

Provides the sample classroom transcript used across the suites.
"""

from __future__ import annotations

import pytest

from vw_common.models import Segment


@pytest.fixture()
def classroom_transcript() -> list[Segment]:
    """A short mixed transcript touching every moderation check."""
    return [
        Segment(speaker="teacher", text="today we discuss the water cycle", start_time=0.0, end_time=4.0),
        Segment(speaker="ana", text="I think evaporation is the first point", start_time=4.0, end_time=8.0),
        Segment(speaker="ben", text="this is damn boring, let's play a game", start_time=8.0, end_time=11.0),
        Segment(speaker="chen", text="我不知道", language="zh", start_time=11.0, end_time=12.0),
    ]
