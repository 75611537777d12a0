"""Default notifier and clipboard implementations for headless runs."""

from __future__ import annotations

import sys
from typing import IO

from vaultpub.observability import get_logger

log = get_logger("vaultpub.notices")


class LoggingNotifier:
    """Notifier that records every notice in the structured log.

    Notices are also kept in :attr:`messages` so callers (and tests) can
    inspect what the user would have seen.
    """

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str, timeout_ms: int | None = None) -> None:
        self.messages.append(message)
        log.info(
            message,
            extra={"extra_fields": {"op": "notice", "timeout_ms": timeout_ms}},
        )


class StreamClipboard:
    """Clipboard stand-in that writes the published text to a stream.

    Parameters
    ----------
    stream:
        Target text stream.  Defaults to ``sys.stdout`` at write time.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def write_text(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(text)
        stream.flush()
