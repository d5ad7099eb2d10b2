from __future__ import annotations

import pytest

from chip8.constants import (
    FONT_BASE,
    FONT_DATA,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    STACK_LIMIT,
)
from chip8.errors import (
    FaultKind,
    MemoryBoundsError,
    ProgramTooLargeError,
    ReservedAddressError,
    StackOverflowError,
    StackUnderflowError,
)
from chip8.memory import Memory


def test_fresh_memory_holds_only_font() -> None:
    mem = Memory()

    assert len(mem) == MEMORY_SIZE
    assert mem.read_block(FONT_BASE, len(FONT_DATA)) == FONT_DATA
    assert not any(mem.data[:FONT_BASE])
    assert not any(mem.data[FONT_BASE + len(FONT_DATA) :])
    assert mem.sp == 0


def test_load_program_copies_verbatim_at_0x200() -> None:
    mem = Memory()
    mem.load_program(b"\x12\x34\xAB")

    assert mem.read_block(PROGRAM_START, 4) == b"\x12\x34\xAB\x00"
    assert mem.read_word(PROGRAM_START) == 0x1234


def test_load_program_accepts_exactly_full_image() -> None:
    mem = Memory()
    mem.load_program(b"\xEE" * MAX_PROGRAM_SIZE)

    assert mem.read_byte(MEMORY_SIZE - 1) == 0xEE


def test_load_program_rejects_oversized_image() -> None:
    mem = Memory()

    with pytest.raises(ProgramTooLargeError) as excinfo:
        mem.load_program(b"\x00" * (MAX_PROGRAM_SIZE + 1))

    assert excinfo.value.kind is FaultKind.PROGRAM_TOO_LARGE
    assert mem.read_byte(PROGRAM_START) == 0


def test_push_writes_big_endian_frames_into_low_memory() -> None:
    mem = Memory()
    mem.push(0x2AB)
    mem.push(0x3CD)

    assert mem.sp == 4
    assert bytes(mem.data[0:4]) == b"\x02\xAB\x03\xCD"
    assert mem.stack_frames() == (0x2AB, 0x3CD)
    assert mem.peek() == 0x3CD
    assert mem.depth == 2


def test_pop_returns_frames_in_lifo_order() -> None:
    mem = Memory()
    mem.push(0x200)
    mem.push(0x456)

    assert mem.pop() == 0x456
    assert mem.pop() == 0x200
    assert mem.sp == 0
    assert mem.peek() is None


def test_sixteen_frames_fit_and_seventeenth_overflows() -> None:
    mem = Memory()
    for frame in range(16):
        mem.push(0x200 + frame * 2)
    assert mem.sp == STACK_LIMIT

    with pytest.raises(StackOverflowError):
        mem.push(0x300)

    # Nothing past the stack region was touched.
    assert mem.sp == STACK_LIMIT
    assert mem.read_block(FONT_BASE, len(FONT_DATA)) == FONT_DATA


def test_pop_on_empty_stack_underflows() -> None:
    mem = Memory()

    with pytest.raises(StackUnderflowError) as excinfo:
        mem.pop()

    assert excinfo.value.kind is FaultKind.STACK_UNDERFLOW
    assert mem.sp == 0


@pytest.mark.parametrize("address", [0x000, 0x020, 0x1FF])
def test_check_writable_rejects_reserved_region(address: int) -> None:
    mem = Memory()

    with pytest.raises(ReservedAddressError) as excinfo:
        mem.check_writable(address)

    assert excinfo.value.kind is FaultKind.RESERVED_WRITE
    assert excinfo.value.address == address


def test_check_writable_rejects_run_past_end() -> None:
    mem = Memory()

    mem.check_writable(MEMORY_SIZE - 3, 3)
    with pytest.raises(MemoryBoundsError):
        mem.check_writable(MEMORY_SIZE - 2, 3)


def test_reads_past_end_fault() -> None:
    mem = Memory()

    with pytest.raises(MemoryBoundsError):
        mem.read_word(MEMORY_SIZE - 1)
    with pytest.raises(MemoryBoundsError):
        mem.read_block(MEMORY_SIZE - 4, 5)


def test_write_byte_masks_and_logs_previous_value() -> None:
    mem = Memory()
    mem.write_byte(0x300, 0x1AB, pc=0x202)
    mem.write_byte(0x300, 0x01)

    assert mem.read_byte(0x300) == 0x01
    log = mem.write_log()
    assert [(w.address, w.value, w.previous) for w in log] == [
        (0x300, 0xAB, 0x00),
        (0x300, 0x01, 0xAB),
    ]
    assert log[0].pc == 0x202

    mem.clear_log()
    assert mem.write_log() == ()
