"""
Structured logging for the coach, using structlog wrapping stdlib.

Console output by default, one JSON object per line with
COACH_LOG_FORMAT=json. Every event is stamped with app="coach".

Messages users send are about eating and self-harm, so their raw text is
never logged: the redact_user_text processor replaces any SENSITIVE_KEYS
value with its length before rendering. Log user_id and derived labels
(emotion, action, category) instead.

Usage:
    from coach.logging_config import get_logger, setup_logging

    setup_logging()
    logger = get_logger(__name__)
    logger.info("mood_logged", user_id="alice", emotion="stressed")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

APP_NAME = "coach"

# Event keys that may carry what the user typed
SENSITIVE_KEYS = frozenset({"text", "content", "message_text", "reply"})


def add_app_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def redact_user_text(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in SENSITIVE_KEYS & event_dict.keys():
        value = event_dict[key]
        event_dict[key] = f"<redacted {len(value)} chars>" if isinstance(value, str) else "<redacted>"
    return event_dict


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    if level is None:
        level = os.environ.get("COACH_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("COACH_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_app_name,
        redact_user_text,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderers: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # logging.getLogger() callers in the library modules share the renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # The SDK's HTTP client logs request bodies at DEBUG
    for noisy in ("anthropic", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["SENSITIVE_KEYS", "add_app_name", "get_logger", "redact_user_text", "setup_logging"]
