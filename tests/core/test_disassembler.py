from __future__ import annotations

import pytest

from chip8emu.core.disassembler import disassemble, format_listing, iter_program
from tests.helpers import words_to_bytes


@pytest.mark.parametrize(
    "opcode,text",
    [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x0123, "SYS #123"),
        (0x1228, "JP #228"),
        (0x2ABC, "CALL #ABC"),
        (0x3A12, "SE VA, #12"),
        (0x4B0F, "SNE VB, #0F"),
        (0x5120, "SE V1, V2"),
        (0x6A02, "LD VA, #02"),
        (0x7FFF, "ADD VF, #FF"),
        (0x8120, "LD V1, V2"),
        (0x8124, "ADD V1, V2"),
        (0x8126, "SHR V1, V2"),
        (0x8127, "SUBN V1, V2"),
        (0x812E, "SHL V1, V2"),
        (0x9120, "SNE V1, V2"),
        (0xA050, "LD I, #050"),
        (0xB300, "JP V0, #300"),
        (0xC30F, "RND V3, #0F"),
        (0xD015, "DRW V0, V1, 5"),
        (0xE49E, "SKP V4"),
        (0xE4A1, "SKNP V4"),
        (0xF507, "LD V5, DT"),
        (0xF50A, "LD V5, K"),
        (0xF515, "LD DT, V5"),
        (0xF518, "LD ST, V5"),
        (0xF51E, "ADD I, V5"),
        (0xF529, "LD F, V5"),
        (0xF533, "LD B, V5"),
        (0xF555, "LD [I], V5"),
        (0xF565, "LD V5, [I]"),
    ],
)
def test_mnemonics(opcode: int, text: str) -> None:
    assert disassemble(opcode) == text


@pytest.mark.parametrize("opcode", [0x5121, 0x8128, 0x912F, 0xE400, 0xF5FF])
def test_non_instructions_render_as_data(opcode: int) -> None:
    assert disassemble(opcode) == f"DW #{opcode:04X}"


def test_iter_program_addresses_words_from_origin() -> None:
    image = words_to_bytes(0x6A02, 0x00E0)
    assert list(iter_program(image)) == [
        (0x200, 0x6A02, "LD VA, #02"),
        (0x202, 0x00E0, "CLS"),
    ]


def test_trailing_odd_byte_is_data() -> None:
    image = words_to_bytes(0x1200) + b"\x7F"
    entries = list(iter_program(image, origin=0x300))

    assert entries[-1] == (0x302, 0x7F, "DB #7F")


def test_format_listing() -> None:
    image = words_to_bytes(0x6A02, 0x00E0) + b"\x01"
    assert format_listing(image).splitlines() == [
        "200  6A02  LD VA, #02",
        "202  00E0  CLS",
        "204  01  DB #01",
    ]


def test_empty_image_has_empty_listing() -> None:
    assert format_listing(b"") == ""
