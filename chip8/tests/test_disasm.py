from __future__ import annotations

import pytest

from chip8.disasm import decode, describe, disassemble, is_known, mnemonic


def test_decode_splits_fixed_fields() -> None:
    d = decode(0xD12F)

    assert d.family == 0xD
    assert (d.addr, d.x, d.y, d.kk, d.n) == (0x12F, 0x1, 0x2, 0x2F, 0xF)


@pytest.mark.parametrize(
    ("opcode", "text"),
    [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1234, "JP 0x234"),
        (0x2ABC, "CALL 0xABC"),
        (0x6A02, "LD VA, 0x02"),
        (0x8124, "ADD V1, V2"),
        (0x812E, "SHL V1, V2"),
        (0xB300, "JP 0x300"),
        (0xD125, "DRW V1, V2, 5"),
        (0xE29E, "SKP V2"),
        (0xF30A, "LD V3, K"),
        (0xFA55, "LD [I], V0-VA"),
        (0xF265, "LD V0-V2, [I]"),
    ],
)
def test_mnemonics(opcode: int, text: str) -> None:
    assert mnemonic(opcode) == text
    assert is_known(opcode)


@pytest.mark.parametrize("opcode", [0x0123, 0x5121, 0x8008, 0x9001, 0xE0FF, 0xF0FF])
def test_unknown_words_render_as_data(opcode: int) -> None:
    assert mnemonic(opcode) == f"DW 0x{opcode:04X}"
    assert not is_known(opcode)


def test_describe_prefixes_raw_word() -> None:
    assert describe(0x6A02) == "6A02  LD VA, 0x02"


def test_disassemble_listing_with_trailing_byte() -> None:
    listing = list(disassemble(bytes([0x60, 0x01, 0x12, 0x00, 0xFF])))

    assert listing == [
        (0x200, 0x6001, "LD V0, 0x01"),
        (0x202, 0x1200, "JP 0x200"),
        (0x204, 0xFF, "DB 0xFF"),
    ]


def test_disassemble_custom_origin() -> None:
    ((address, opcode, _),) = disassemble(b"\x00\xE0", start=0x300)

    assert (address, opcode) == (0x300, 0x00E0)
