"""Structured JSON logger for vaultpub.

Each record is a single-line JSON object so that publishing runs can be
grepped or shipped to a log pipeline without extra parsing::

    {"ts": "2026-10-19T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "vaultpub.orchestrator", "message": "upload failed",
     "name": "cat.png", "error": "HTTP 502"}

Module loggers propagate to one handler on the ``vaultpub`` logger, which
logs ``WARNING`` and above until a host calls :func:`configure_logging`::

    from vaultpub.observability import configure_logging, get_logger

    configure_logging("info")
    log = get_logger("vaultpub.resolver")
    log.info("resolved", extra={"extra_fields": {"path": "assets/cat.png"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Fields passed as ``extra={"extra_fields": {...}}`` are
    merged into the top level; ``exception`` and ``stack_info`` are added
    when the record carries them.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields is not None:
            entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


ROOT_LOGGER = "vaultpub"

DEFAULT_LEVEL = logging.WARNING

# The single handler installed on the package logger; module loggers
# ("vaultpub.resolver", ...) propagate to it.
_handler: logging.Handler | None = None


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def configure_logging(
    level: int | str = DEFAULT_LEVEL,
    stream: Any | None = None,
) -> logging.Logger:
    """Install the JSON handler on the ``vaultpub`` logger.

    Calling it again replaces the previous handler, so hosts (and the
    CLI's ``--verbose`` flag) can change the level or the stream at any
    time.

    Parameters
    ----------
    level:
        Minimum level for the whole package, as an ``int`` or a
        case-insensitive name.  Defaults to ``WARNING``.
    stream:
        Output stream.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The package logger.
    """
    global _handler

    root = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(StructuredFormatter())
    root.addHandler(_handler)
    root.setLevel(_resolve_level(level))
    root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return the logger *name*, installing the package handler on first use.

    Module loggers carry no handler or level of their own; records
    propagate to the ``vaultpub`` logger configured by
    :func:`configure_logging`.
    """
    if _handler is None:
        configure_logging()
    return logging.getLogger(name)
