"""Shared machine constants for the CHIP-8 interpreter.

This module centralizes the fixed memory layout, display geometry and
built-in font used across the interpreter, adapters and tests.
"""

# 4 KB of addressable memory.
MEMORY_SIZE = 0x1000

# Programs are loaded here; everything below is reserved for the
# interpreter (call stack and font).
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

# Return addresses live in main memory: 16 frames of two big-endian bytes
# occupying [STACK_BASE, STACK_LIMIT).
STACK_BASE = 0x00
STACK_LIMIT = 0x20
STACK_FRAME_SIZE = 2
STACK_DEPTH = (STACK_LIMIT - STACK_BASE) // STACK_FRAME_SIZE

# Built-in hex digit glyphs, 5 bytes each, placed right after the stack.
FONT_BASE = 0x20
FONT_GLYPH_SIZE = 5

# Display is 64x32, packed as one 64-bit word per row (bit k = column k).
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
ROW_MASK = (1 << DISPLAY_WIDTH) - 1

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
NUM_KEYS = 16

OPCODE_SIZE = 2
INDEX_MASK = 0xFFFF

# Timers decay once per TIMER_DIVIDER executed instructions, which at the
# default 500 Hz step rate approximates 60 Hz.
TIMER_DIVIDER = 8
DEFAULT_CYCLES_PER_SECOND = 500

FONT_DATA = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)


def glyph_address(digit: int) -> int:
    """Return the address of the font glyph for ``digit`` (0x0-0xF)."""

    return FONT_BASE + digit * FONT_GLYPH_SIZE
