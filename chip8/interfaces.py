"""Capability interfaces the interpreter drives.

Concrete adapters (headless keypad, frame buffer, image renderer, a
graphical backend) implement these structurally; the interpreter never
imports them.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

# 32 rows, bit k of row y is pixel (x=k, y).
Bitmap = Sequence[int]


class Keyboard(Protocol):
    """Reports the state of the 16-key hex keypad."""

    def is_pressed(self, key: int) -> bool: ...

    def pressed_key(self) -> Optional[int]: ...


class Display(Protocol):
    """Receives the full bitmap after every display-mutating instruction."""

    def draw(self, bitmap: Bitmap) -> None: ...


__all__ = ["Bitmap", "Display", "Keyboard"]
