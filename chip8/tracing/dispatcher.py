"""Tracing event dispatcher and observer interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol


class TraceEventType(Enum):
    """Kinds of tracing events emitted by the interpreter."""

    INSTRUCTION = "instruction"
    DRAW = "draw"
    FAULT = "fault"


@dataclass
class TraceEvent:
    """Structured tracing event."""

    type: TraceEventType
    pc: Optional[int] = None
    opcode: Optional[int] = None
    message: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        prefix = ""
        if self.pc is not None:
            prefix = f"[{self.pc:03X}] "
        return prefix + self.message


class TraceObserver(Protocol):
    """Interface for tracing observers."""

    def handle_event(self, event: TraceEvent) -> None: ...


class TraceDispatcher:
    """Dispatches tracing events to registered observers."""

    def __init__(self) -> None:
        self._observers: List[TraceObserver] = []

    # ------------------------------------------------------------------ #
    # Observer management
    # ------------------------------------------------------------------ #
    def register(self, observer: TraceObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister(self, observer: TraceObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def observers(self) -> Iterable[TraceObserver]:
        return tuple(self._observers)

    def has_observers(self) -> bool:
        """Return True when any observers are registered."""
        return bool(self._observers)

    # ------------------------------------------------------------------ #
    # Convenience emission helpers
    # ------------------------------------------------------------------ #
    def record_instruction(self, pc: int, opcode: int, message: str) -> None:
        self._emit(TraceEvent(TraceEventType.INSTRUCTION, pc=pc, opcode=opcode, message=message))

    def record_draw(
        self, pc: int, opcode: int, *, collision: Optional[bool] = None
    ) -> None:
        payload: Dict[str, Any] = {}
        if collision is not None:
            payload["collision"] = collision
        self._emit(
            TraceEvent(
                TraceEventType.DRAW,
                pc=pc,
                opcode=opcode,
                message="display redraw",
                payload=payload,
            )
        )

    def record_fault(
        self, pc: int, opcode: Optional[int], message: str, dump: str = ""
    ) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.FAULT,
                pc=pc,
                opcode=opcode,
                message=f"panic: {message}",
                payload={"dump": dump},
            )
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _emit(self, event: TraceEvent) -> None:
        for observer in tuple(self._observers):
            observer.handle_event(event)


__all__ = [
    "TraceDispatcher",
    "TraceObserver",
    "TraceEvent",
    "TraceEventType",
]
