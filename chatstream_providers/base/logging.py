"""Structured JSON logging for provider adapters and the stream lifecycle.

All records go through the ``chatstream`` logger. Adapters and the facade use
children of it (``chatstream.anthropic``, ``chatstream.facade``...) that own
no handlers, so every event is written once by the base logger.

Each event is one flat JSON object. ``normalized_log_event`` adds the keys
every lifecycle event carries (see ``REQUIRED_NORMALIZED_KEYS``) so stream
start/end records can be filtered the same way for every provider.

Anything that may hold a credential or a system prompt is passed through
:func:`chatstream_providers.base.redaction.redact` by the caller first.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext


BASE_LOGGER_NAME = "chatstream"
LOG_LEVEL_ENV = "CHATSTREAM_LOG_LEVEL"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)

# Marker attributes so handlers installed by callers are never touched.
_CONSOLE_MARK = "_chatstream_console"
_FILE_MARK = "_chatstream_file"


def _formatter(json_mode: bool) -> logging.Formatter:
    if json_mode:
        return JsonFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")


def _level_from(value: int | str | None, default: int) -> int:
    """Resolve a numeric level or a name like ``"warn"``; unknown names give ``default``."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    return logging.getLevelNamesMapping().get(name, default)


def _console_handlers(logger: logging.Logger):
    return [h for h in logger.handlers if getattr(h, _CONSOLE_MARK, False)]


def _base_logger(json_mode: bool, level: int) -> logging.Logger:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    wanted = _level_from(os.getenv(LOG_LEVEL_ENV), level)
    logger.setLevel(wanted)
    consoles = _console_handlers(logger)
    if not consoles:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_formatter(json_mode))
        setattr(console, _CONSOLE_MARK, True)
        logger.addHandler(console)
        logger.propagate = False
        consoles = [console]
    for console in consoles:
        console.setLevel(wanted)
        # stderr may have been swapped (pytest capsys) since the handler was built
        if console.stream is not sys.stderr:
            with contextlib.suppress(ValueError):
                console.setStream(sys.stderr)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the ``chatstream`` logger or a propagating child of it.

    ``CHATSTREAM_LOG_LEVEL`` overrides ``level`` and is re-read on each call.
    """
    base = _base_logger(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return base
    child = logging.getLogger(name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime.

    ``level`` (number or name) applies to the logger and its managed handlers;
    ``None`` keeps the current level. A ``file_path`` attaches a rotating file
    handler (replacing a managed one pointing elsewhere); ``file_path=None``
    detaches it.
    """
    logger = get_logger(json_mode=json_mode)
    if level is not None:
        logger.setLevel(_level_from(level, logger.level))
        for handler in logger.handlers:
            handler.setLevel(logger.level)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    keep: Optional[logging.FileHandler] = None
    for handler in [h for h in logger.handlers if getattr(h, _FILE_MARK, False)]:
        if target and isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            keep = handler
            continue
        logger.removeHandler(handler)
        handler.close()

    if target is None:
        return logger
    if keep is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        keep = RotatingFileHandler(
            target, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        setattr(keep, _FILE_MARK, True)
        logger.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    keep.setLevel(logger.level)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Write ``event`` plus context and fields as a single JSON line.

    ``None`` values are dropped unless ``keep_none`` is set. Values that are
    not JSON serializable are rendered with ``str``.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """``log_event`` with the normalized lifecycle keys always present.

    ``error_code`` is left out when there is no error. Extra fields fill in
    but never replace a normalized key that already has a value.
    """
    if isinstance(tokens, Mapping):
        tokens = dict(tokens)
    elif tokens is not None:
        tokens = {"value": repr(tokens)}
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": tokens,
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and fields.get(key) is None:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
