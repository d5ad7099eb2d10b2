from __future__ import annotations

import pytest

from chip8.errors import InvalidKeyError
from chip8.keyboard import HOST_KEYMAP, Keypad, host_key_to_keypad


def test_keymap_covers_every_key_once() -> None:
    assert sorted(HOST_KEYMAP.values()) == list(range(16))


@pytest.mark.parametrize(
    ("name", "key"), [("1", 0x1), ("4", 0xC), ("x", 0x0), ("V", 0xF), (" q ", 0x4)]
)
def test_host_key_translation(name: str, key: int) -> None:
    assert host_key_to_keypad(name) == key


def test_unmapped_host_key() -> None:
    assert host_key_to_keypad("p") is None
    keypad = Keypad()
    assert keypad.press_host("p") is False
    assert keypad.pressed_key() is None


def test_press_and_release(keypad: Keypad) -> None:
    keypad.press(0xA)
    assert keypad.is_pressed(0xA)
    assert not keypad.is_pressed(0xB)

    keypad.release(0xA)
    assert not keypad.is_pressed(0xA)


def test_pressed_key_reports_lowest_held(keypad: Keypad) -> None:
    assert keypad.pressed_key() is None
    keypad.press(0xC)
    keypad.press(0x3)

    assert keypad.pressed_key() == 0x3
    assert keypad.pressed_keys() == (0x3, 0xC)

    keypad.release_all()
    assert keypad.pressed_keys() == ()


def test_host_press_release(keypad: Keypad) -> None:
    assert keypad.press_host("w")
    assert keypad.is_pressed(0x5)
    assert keypad.release_host("W")
    assert not keypad.is_pressed(0x5)


@pytest.mark.parametrize("key", [-1, 16, 0xFF])
def test_out_of_range_keys_rejected(keypad: Keypad, key: int) -> None:
    with pytest.raises(InvalidKeyError):
        keypad.press(key)
    with pytest.raises(InvalidKeyError):
        keypad.is_pressed(key)
