"""Trace sinks receiving the human-readable decision log."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from ignore_committer.models import TraceLevel, TraceLine

logger = logging.getLogger(__name__)


class TraceSink(Protocol):
    """Write-only append target for decision log lines."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class RecordingTraceSink:
    """Keeps every line in order so it can be attached to a Verdict."""

    def __init__(self) -> None:
        self.lines: list[TraceLine] = []

    def info(self, message: str) -> None:
        self.lines.append(TraceLine(TraceLevel.INFO, message))

    def error(self, message: str) -> None:
        self.lines.append(TraceLine(TraceLevel.ERROR, message))

    def messages(self) -> list[str]:
        """Rendered lines, error lines carrying their marker."""
        return [line.render() for line in self.lines]


class LoggingTraceSink:
    """
    Forwards trace lines to a stdlib logger.

    Optionally passes every line on to a delegate sink as well.
    """

    def __init__(
        self,
        target: Optional[logging.Logger] = None,
        delegate: Optional[TraceSink] = None,
    ) -> None:
        self._logger = target or logger
        self._delegate = delegate

    def info(self, message: str) -> None:
        self._logger.info(message)
        if self._delegate is not None:
            self._delegate.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
        if self._delegate is not None:
            self._delegate.error(message)


def replay(lines: list[TraceLine], sink: TraceSink) -> None:
    """Write recorded lines to another sink, preserving severity."""
    for line in lines:
        if line.is_error:
            sink.error(line.message)
        else:
            sink.info(line.message)
