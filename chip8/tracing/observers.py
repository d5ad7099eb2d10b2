"""Stock trace observers: logging sink and bounded in-memory recorder."""

from __future__ import annotations

import collections
import logging
from typing import Deque, Optional, Tuple

from .dispatcher import TraceEvent, TraceEventType, TraceObserver

logger = logging.getLogger(__name__)


class LoggingObserver(TraceObserver):
    """Forward trace events to :mod:`logging`."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger

    def handle_event(self, event: TraceEvent) -> None:
        if event.type is TraceEventType.FAULT:
            self._logger.error("%s", event.format())
            dump = event.payload.get("dump")
            if dump:
                self._logger.error("%s", dump)
            return
        self._logger.debug("%s", event.format())


class RecordingObserver(TraceObserver):
    """Keep the most recent ``limit`` events."""

    def __init__(self, limit: int = 64) -> None:
        self._events: Deque[TraceEvent] = collections.deque(maxlen=limit)

    def handle_event(self, event: TraceEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> Tuple[TraceEvent, ...]:
        return tuple(self._events)

    def messages(self, kind: Optional[TraceEventType] = None) -> Tuple[str, ...]:
        return tuple(
            event.message
            for event in self._events
            if kind is None or event.type is kind
        )

    def clear(self) -> None:
        self._events.clear()


__all__ = ["LoggingObserver", "RecordingObserver"]
