"""Main memory and in-memory call stack for the CHIP-8 interpreter."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

from .constants import (
    FONT_BASE,
    FONT_DATA,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    STACK_BASE,
    STACK_FRAME_SIZE,
    STACK_LIMIT,
)
from .errors import (
    FaultKind,
    MemoryBoundsError,
    ProgramTooLargeError,
    ReservedAddressError,
    StackOverflowError,
    StackUnderflowError,
)


@dataclass
class MemoryWrite:
    """Single byte stored through the memory interface."""

    address: int
    value: int
    previous: int
    pc: Optional[int] = None


class Memory:
    """4 KB byte-addressable memory with the call stack in its low 32 bytes.

    The stack is not a separate array: ``push`` writes return addresses
    big-endian into ``[STACK_BASE, STACK_LIMIT)`` and ``sp`` indexes the
    next free slot.
    """

    def __init__(self, *, log_limit: int = 256) -> None:
        self._data = bytearray(MEMORY_SIZE)
        self._data[FONT_BASE : FONT_BASE + len(FONT_DATA)] = FONT_DATA
        self.sp = STACK_BASE
        self._write_log: Deque[MemoryWrite] = deque(maxlen=log_limit)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytearray:
        return self._data

    # ------------------------------------------------------------------ #
    # Raw access
    # ------------------------------------------------------------------ #
    def check_range(self, address: int, length: int = 1) -> None:
        if address < 0 or address + length > MEMORY_SIZE:
            raise MemoryBoundsError(
                f"access of {length} byte(s) past end of memory",
                address=address,
            )

    def check_writable(self, address: int, length: int = 1) -> None:
        """Reject program-indexed writes into the stack/font region."""

        if address < PROGRAM_START:
            raise ReservedAddressError(
                "write to reserved memory",
                kind=FaultKind.RESERVED_WRITE,
                address=address,
            )
        self.check_range(address, length)

    def read_byte(self, address: int) -> int:
        self.check_range(address)
        return self._data[address]

    def read_word(self, address: int) -> int:
        self.check_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, length: int) -> bytes:
        self.check_range(address, length)
        return bytes(self._data[address : address + length])

    def write_byte(self, address: int, value: int, pc: Optional[int] = None) -> None:
        self.check_range(address)
        value &= 0xFF
        self._write_log.append(
            MemoryWrite(address=address, value=value, previous=self._data[address], pc=pc)
        )
        self._data[address] = value

    def write_log(self) -> Tuple[MemoryWrite, ...]:
        return tuple(self._write_log)

    def clear_log(self) -> None:
        self._write_log.clear()

    def load_program(self, data: bytes) -> None:
        if len(data) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(
                f"program is {len(data)} bytes, at most {MAX_PROGRAM_SIZE} fit "
                f"between 0x{PROGRAM_START:03X} and 0x{MEMORY_SIZE:03X}"
            )
        self._data[PROGRAM_START : PROGRAM_START + len(data)] = data

    # ------------------------------------------------------------------ #
    # Stack discipline
    # ------------------------------------------------------------------ #
    def push(self, address: int) -> None:
        if self.sp >= STACK_LIMIT:
            raise StackOverflowError("stack overflow", address=address)
        self._data[self.sp] = (address >> 8) & 0xFF
        self._data[self.sp + 1] = address & 0xFF
        self.sp += STACK_FRAME_SIZE

    def pop(self) -> int:
        if self.sp == STACK_BASE:
            raise StackUnderflowError("return with empty stack")
        self.sp -= STACK_FRAME_SIZE
        return (self._data[self.sp] << 8) | self._data[self.sp + 1]

    def peek(self) -> Optional[int]:
        if self.sp == STACK_BASE:
            return None
        return (self._data[self.sp - 2] << 8) | self._data[self.sp - 1]

    @property
    def depth(self) -> int:
        return (self.sp - STACK_BASE) // STACK_FRAME_SIZE

    def stack_frames(self) -> Tuple[int, ...]:
        """Return addresses on the stack, oldest first."""

        return tuple(
            (self._data[slot] << 8) | self._data[slot + 1]
            for slot in range(STACK_BASE, self.sp, STACK_FRAME_SIZE)
        )


__all__ = ["Memory", "MemoryWrite"]
