"""
Built-in hexadecimal character sprites.

Each glyph is 4 pixels wide and 5 rows tall; the glyph lives in the high
nibble of each byte so it can be drawn directly with ``Dxy5``.  The table
is copied into memory at :data:`FONTSET_START_ADDRESS` when the state is
constructed, and ``Fx29`` points I at ``FONTSET_START_ADDRESS + 5 * digit``.
"""

from __future__ import annotations

from typing import List

FONTSET_START_ADDRESS: int = 0x050
GLYPH_HEIGHT: int = 5
GLYPH_COUNT: int = 16

# fmt: off
FONTSET: List[int] = [
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
# fmt: on

FONTSET_SIZE: int = len(FONTSET)


def glyph_address(digit: int) -> int:
    """Return the memory address of the sprite for hexadecimal *digit*."""
    return FONTSET_START_ADDRESS + GLYPH_HEIGHT * digit
