"""
Structured logging setup for VoiceWarden.

Configures structlog for JSON-formatted structured logging. Every log line
includes timestamp, level, service name, and event. Per-stream context
(stream_id, transcript_id) is bound at processing time through contextvars.
"""

from __future__ import annotations

import logging
import sys

import structlog

from vw_common.config import get_settings


def configure_logging(
    service_name: str,
    log_level: str | None = None,
    json_logs: bool | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        service_name: Value of the ``service`` key on every log line.
        log_level: Level name; defaults to ``Settings.log_level``.
        json_logs: Render JSON instead of console output; defaults to
            ``Settings.log_json``.
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    use_json = settings.log_json if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)
