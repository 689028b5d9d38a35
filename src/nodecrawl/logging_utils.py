"""Loguru sink setup for processes that embed the engine.

The engine itself only emits records; installing sinks is left to the
embedding application, either directly through :func:`configure_logging`
or through ``load_settings(configure_logs=True)``.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "chat"]

DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {extra[endpoint]:<12} | {name}:{line} | {message}"
CHAT_FORMAT = "[{extra[endpoint]}] {message}"

_active: tuple[LogProfile, str] | None = None


def _inject_context(record: loguru.Record) -> None:
    record["extra"].setdefault("endpoint", "-")


def _sink_for(profile: LogProfile) -> dict[str, Any]:
    if profile == "chat":
        # RichHandler renders level and time itself.
        handler = RichHandler(console=get_console(), show_time=False, show_path=False, markup=False)
        return {"sink": handler, "format": CHAT_FORMAT}
    return {"sink": sys.stderr, "format": DEFAULT_FORMAT}


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> bool:
    """Replace the loguru handlers with the sink for ``profile``.

    ``level`` falls back to ``NODECRAWL_LOG_LEVEL``, then INFO. Returns False
    when the same profile and level are already installed.
    """

    global _active
    resolved = (level or os.getenv("NODECRAWL_LOG_LEVEL") or "INFO").upper()
    if _active == (profile, resolved):
        return False

    handler = _sink_for(profile)
    handler.update(level=resolved, backtrace=False, diagnose=False)
    logger.configure(handlers=[handler], patcher=_inject_context)
    _active = (profile, resolved)
    return True
