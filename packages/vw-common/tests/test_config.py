"""
Tests for vw-common configuration module.

Validates that environment-based configuration loading, default values,
and validation constraints work correctly via pydantic-settings.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from vw_common.config import Settings, get_settings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clear_settings_cache() -> None:
    """Reset the ``get_settings`` lru_cache between tests."""
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Tests: default values
# ---------------------------------------------------------------------------


class TestSettingsDefaults:
    """Verify that ``Settings`` populates sane defaults when no env vars are set."""

    @staticmethod
    def _clean_env():
        """Remove VW_ env vars so Settings reads only hardcoded defaults."""
        return {k: v for k, v in os.environ.items() if not k.startswith("VW_")}

    def test_default_redis_url(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).redis_url == "redis://localhost:6379/0"

    def test_default_window_size(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).window_size == 8

    def test_default_stream_idle_timeout(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).stream_idle_timeout_s == 600.0

    def test_default_allowed_language(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).allowed_language == "en"

    def test_default_validator_key_is_empty(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).validator_api_key == ""

    def test_default_validator_timeout(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).validator_timeout_s == 10.0

    def test_default_log_level(self) -> None:
        with patch.dict(os.environ, self._clean_env(), clear=True):
            assert Settings(_env_file=None).log_level == "INFO"


# ---------------------------------------------------------------------------
# Tests: environment variable overrides
# ---------------------------------------------------------------------------


class TestSettingsFromEnv:
    """Verify that env vars with VW_ prefix override defaults."""

    def test_override_redis_url(self) -> None:
        with patch.dict(os.environ, {"VW_REDIS_URL": "redis://other:6380/1"}):
            s = Settings()
        assert s.redis_url == "redis://other:6380/1"

    def test_override_window_size(self) -> None:
        with patch.dict(os.environ, {"VW_WINDOW_SIZE": "12"}):
            s = Settings()
        assert s.window_size == 12

    def test_override_allowed_language(self) -> None:
        with patch.dict(os.environ, {"VW_ALLOWED_LANGUAGE": "hi"}):
            s = Settings()
        assert s.allowed_language == "hi"

    def test_override_validator_timeout(self) -> None:
        with patch.dict(os.environ, {"VW_VALIDATOR_TIMEOUT_S": "2.5"}):
            s = Settings()
        assert s.validator_timeout_s == pytest.approx(2.5)


# ---------------------------------------------------------------------------
# Tests: validation constraints
# ---------------------------------------------------------------------------


class TestSettingsValidation:
    """Verify pydantic validators on ``Settings`` fields."""

    def test_window_size_zero(self) -> None:
        with pytest.raises(ValidationError):
            Settings(window_size=0)  # type: ignore[call-arg]

    def test_validator_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(validator_timeout_s=0)  # type: ignore[call-arg]

    def test_validator_attempts_bounded(self) -> None:
        with pytest.raises(ValidationError):
            Settings(validator_max_attempts=0)  # type: ignore[call-arg]

    def test_api_port_range(self) -> None:
        with pytest.raises(ValidationError):
            Settings(api_port=70000)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Tests: get_settings singleton
# ---------------------------------------------------------------------------


class TestGetSettings:
    """Verify the cached ``get_settings()`` helper."""

    def setup_method(self) -> None:
        _clear_settings_cache()

    def teardown_method(self) -> None:
        _clear_settings_cache()

    def test_returns_settings_instance(self) -> None:
        s = get_settings()
        assert isinstance(s, Settings)

    def test_cached(self) -> None:
        a = get_settings()
        b = get_settings()
        assert a is b
