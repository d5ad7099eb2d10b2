"""Headless hex keypad implementing the ``Keyboard`` capability."""

from __future__ import annotations

from typing import Dict, Optional, Set, Tuple

from .constants import NUM_KEYS
from .errors import InvalidKeyError

# Classic layout: the left 4x4 block of a QWERTY keyboard.
#
#   1 2 3 4      1 2 3 C
#   q w e r  ->  4 5 6 D
#   a s d f      7 8 9 E
#   z x c v      A 0 B F
HOST_KEYMAP: Dict[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


def validate_key(key: int) -> int:
    if not 0 <= key < NUM_KEYS:
        raise InvalidKeyError(f"expected key between 0x0 and 0xF, got {key}")
    return key


def host_key_to_keypad(name: str) -> Optional[int]:
    """Translate a host key name (case-insensitive) into a keypad code."""

    return HOST_KEYMAP.get(name.strip().lower())


class Keypad:
    """Set of currently held keys, fed by the driver loop."""

    def __init__(self) -> None:
        self._held: Set[int] = set()

    def press(self, key: int) -> None:
        self._held.add(validate_key(key))

    def release(self, key: int) -> None:
        self._held.discard(validate_key(key))

    def release_all(self) -> None:
        self._held.clear()

    def press_host(self, name: str) -> bool:
        key = host_key_to_keypad(name)
        if key is None:
            return False
        self.press(key)
        return True

    def release_host(self, name: str) -> bool:
        key = host_key_to_keypad(name)
        if key is None:
            return False
        self.release(key)
        return True

    # ------------------------------------------------------------------ #
    # Keyboard capability
    # ------------------------------------------------------------------ #
    def is_pressed(self, key: int) -> bool:
        return validate_key(key) in self._held

    def pressed_key(self) -> Optional[int]:
        # Lowest code wins so repeated polls with the same held set agree.
        return min(self._held) if self._held else None

    def pressed_keys(self) -> Tuple[int, ...]:
        return tuple(sorted(self._held))


__all__ = ["HOST_KEYMAP", "Keypad", "host_key_to_keypad", "validate_key"]
