"""Headless driver loop: paces steps and forwards key events."""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, Optional, Union

from .config import MachineConfig
from .interpreter import Interpreter
from .keyboard import Keypad

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    """Press or release of a keypad key, applied before the next step."""

    key: int
    pressed: bool = True


@dataclass(frozen=True)
class QuitEvent:
    """Stops the driver loop before the next step."""


InputEvent = Union[KeyEvent, QuitEvent]


@dataclass
class RunStats:
    steps: int = 0
    draws: int = 0
    elapsed: float = 0.0
    quit_requested: bool = False


class Driver:
    """Repeatedly steps an interpreter at the configured pacing interval."""

    def __init__(
        self,
        interpreter: Interpreter,
        keypad: Keypad,
        *,
        config: Optional[MachineConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.interpreter = interpreter
        self.keypad = keypad
        self.config = config or interpreter.config
        self._sleep = sleep
        self._clock = clock
        self._pending: Deque[InputEvent] = deque()

    def post(self, event: InputEvent) -> None:
        self._pending.append(event)

    def post_all(self, events: Iterable[InputEvent]) -> None:
        self._pending.extend(events)

    def _drain_events(self) -> bool:
        """Apply queued input; return True when a quit was requested."""

        while self._pending:
            event = self._pending.popleft()
            if isinstance(event, QuitEvent):
                return True
            if event.pressed:
                self.keypad.press(event.key)
            else:
                self.keypad.release(event.key)
        return False

    def run(
        self,
        max_steps: Optional[int] = None,
        *,
        realtime: bool = True,
        on_step: Optional[Callable[[Interpreter], Iterable[InputEvent]]] = None,
    ) -> RunStats:
        """Step until ``max_steps``, a ``QuitEvent``, or a machine fault.

        ``on_step`` is polled after every step and may return more input
        events, the way a windowing backend would pump its event queue.
        Machine faults propagate to the caller untouched.
        """

        stats = RunStats()
        start = self._clock()
        interval = self.config.step_interval
        try:
            while max_steps is None or stats.steps < max_steps:
                if self._drain_events():
                    stats.quit_requested = True
                    break
                result = self.interpreter.step()
                stats.steps += 1
                if result.redrawn:
                    stats.draws += 1
                if on_step is not None:
                    self.post_all(on_step(self.interpreter))
                if realtime:
                    self._sleep(interval)
        finally:
            stats.elapsed = self._clock() - start
            logger.debug(
                "Driver stopped after %d steps (%d draws) in %.3fs",
                stats.steps,
                stats.draws,
                stats.elapsed,
            )
        return stats


__all__ = ["Driver", "InputEvent", "KeyEvent", "QuitEvent", "RunStats"]
