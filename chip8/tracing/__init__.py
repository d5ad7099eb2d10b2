"""Tracing utilities for the CHIP-8 interpreter."""

from .dispatcher import (
    TraceDispatcher,
    TraceEvent,
    TraceEventType,
    TraceObserver,
)
from .observers import LoggingObserver, RecordingObserver

__all__ = [
    "TraceDispatcher",
    "TraceEvent",
    "TraceEventType",
    "TraceObserver",
    "LoggingObserver",
    "RecordingObserver",
]
