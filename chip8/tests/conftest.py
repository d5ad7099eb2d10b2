"""Shared pytest fixtures for the CHIP-8 interpreter tests."""

from __future__ import annotations

import random
from typing import Callable, Iterable, Optional

import pytest

from chip8.config import MachineConfig
from chip8.display import FrameBuffer
from chip8.interpreter import Interpreter
from chip8.keyboard import Keypad

MachineFactory = Callable[..., Interpreter]


def assemble(words: Iterable[int]) -> bytes:
    """Pack 16-bit opcodes big-endian."""

    out = bytearray()
    for word in words:
        out += bytes(((word >> 8) & 0xFF, word & 0xFF))
    return bytes(out)


@pytest.fixture(name="assemble")
def assemble_fixture() -> Callable[[Iterable[int]], bytes]:
    return assemble


@pytest.fixture
def keypad() -> Keypad:
    return Keypad()


@pytest.fixture
def frame_buffer() -> FrameBuffer:
    return FrameBuffer()


@pytest.fixture
def make_machine(keypad: Keypad, frame_buffer: FrameBuffer) -> MachineFactory:
    """Build an interpreter with ``program`` (list of opcodes) loaded at 0x200."""

    def _factory(
        program: Iterable[int] = (),
        *,
        config: Optional[MachineConfig] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ) -> Interpreter:
        machine = Interpreter(
            keypad,
            frame_buffer,
            config=config or MachineConfig(seed=1234),
            rng=rng,
            **kwargs,
        )
        machine.load(assemble(program))
        return machine

    return _factory


@pytest.fixture
def machine(make_machine: MachineFactory) -> Interpreter:
    return make_machine()
