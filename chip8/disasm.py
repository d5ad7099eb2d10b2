"""Opcode field decoding and human-readable instruction descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple

from .constants import OPCODE_SIZE, PROGRAM_START


@dataclass(frozen=True)
class DecodedOpcode:
    """Fixed opcode fields, used selectively per instruction family."""

    opcode: int
    addr: int
    x: int
    y: int
    kk: int
    n: int

    @property
    def family(self) -> int:
        return self.opcode >> 12


def decode(opcode: int) -> DecodedOpcode:
    opcode &= 0xFFFF
    return DecodedOpcode(
        opcode=opcode,
        addr=opcode & 0xFFF,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        kk=opcode & 0xFF,
        n=opcode & 0xF,
    )


_Formatter = Callable[[DecodedOpcode], str]

# (mask, pattern, formatter); first match wins.
_PATTERNS: List[Tuple[int, int, _Formatter]] = [
    (0xFFFF, 0x00E0, lambda d: "CLS"),
    (0xFFFF, 0x00EE, lambda d: "RET"),
    (0xF000, 0x1000, lambda d: f"JP 0x{d.addr:03X}"),
    (0xF000, 0x2000, lambda d: f"CALL 0x{d.addr:03X}"),
    (0xF000, 0x3000, lambda d: f"SE V{d.x:X}, 0x{d.kk:02X}"),
    (0xF000, 0x4000, lambda d: f"SNE V{d.x:X}, 0x{d.kk:02X}"),
    (0xF00F, 0x5000, lambda d: f"SE V{d.x:X}, V{d.y:X}"),
    (0xF000, 0x6000, lambda d: f"LD V{d.x:X}, 0x{d.kk:02X}"),
    (0xF000, 0x7000, lambda d: f"ADD V{d.x:X}, 0x{d.kk:02X}"),
    (0xF00F, 0x8000, lambda d: f"LD V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8001, lambda d: f"OR V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8002, lambda d: f"AND V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8003, lambda d: f"XOR V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8004, lambda d: f"ADD V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8005, lambda d: f"SUB V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8006, lambda d: f"SHR V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x8007, lambda d: f"SUBN V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x800E, lambda d: f"SHL V{d.x:X}, V{d.y:X}"),
    (0xF00F, 0x9000, lambda d: f"SNE V{d.x:X}, V{d.y:X}"),
    (0xF000, 0xA000, lambda d: f"LD I, 0x{d.addr:03X}"),
    (0xF000, 0xB000, lambda d: f"JP 0x{d.addr:03X}"),
    (0xF000, 0xC000, lambda d: f"RND V{d.x:X}, 0x{d.kk:02X}"),
    (0xF000, 0xD000, lambda d: f"DRW V{d.x:X}, V{d.y:X}, {d.n}"),
    (0xF0FF, 0xE09E, lambda d: f"SKP V{d.x:X}"),
    (0xF0FF, 0xE0A1, lambda d: f"SKNP V{d.x:X}"),
    (0xF0FF, 0xF007, lambda d: f"LD V{d.x:X}, DT"),
    (0xF0FF, 0xF00A, lambda d: f"LD V{d.x:X}, K"),
    (0xF0FF, 0xF015, lambda d: f"LD DT, V{d.x:X}"),
    (0xF0FF, 0xF018, lambda d: f"LD ST, V{d.x:X}"),
    (0xF0FF, 0xF01E, lambda d: f"ADD I, V{d.x:X}"),
    (0xF0FF, 0xF029, lambda d: f"LD F, V{d.x:X}"),
    (0xF0FF, 0xF033, lambda d: f"LD B, V{d.x:X}"),
    (0xF0FF, 0xF055, lambda d: f"LD [I], V0-V{d.x:X}"),
    (0xF0FF, 0xF065, lambda d: f"LD V0-V{d.x:X}, [I]"),
]


def mnemonic(opcode: int) -> str:
    """Return assembler-style text for ``opcode``, or ``DW`` for unknown words."""

    decoded = decode(opcode)
    for mask, pattern, formatter in _PATTERNS:
        if decoded.opcode & mask == pattern:
            return formatter(decoded)
    return f"DW 0x{decoded.opcode:04X}"


def is_known(opcode: int) -> bool:
    return not mnemonic(opcode).startswith("DW ")


def describe(opcode: int) -> str:
    return f"{opcode & 0xFFFF:04X}  {mnemonic(opcode)}"


def disassemble(
    data: bytes, start: int = PROGRAM_START
) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, opcode, text)`` for each aligned word in ``data``.

    A trailing odd byte is reported as a one-byte ``DB`` entry.
    """

    end = len(data) - len(data) % OPCODE_SIZE
    for offset in range(0, end, OPCODE_SIZE):
        opcode = (data[offset] << 8) | data[offset + 1]
        yield start + offset, opcode, mnemonic(opcode)
    if end != len(data):
        yield start + end, data[end], f"DB 0x{data[end]:02X}"


__all__ = [
    "DecodedOpcode",
    "decode",
    "describe",
    "disassemble",
    "is_known",
    "mnemonic",
]
