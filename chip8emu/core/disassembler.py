"""
Disassembler for the base CHIP-8 instruction set.

Used by the machine's instruction trace and by ``main.py --disassemble``.
Mnemonics follow Cowgod's technical reference (``LD``, ``SE``, ``DRW`` ...).
Words that are not base instructions (data, sprites, or SUPER-CHIP
extensions) are rendered as ``DW #xxxx``.
"""

from __future__ import annotations

from typing import Iterator, Tuple

_ALU_MNEMONICS: dict[int, str] = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

_F_FORMATS: dict[int, str] = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(opcode: int) -> str:
    """Return the assembly text for a single 16-bit *opcode*."""
    opcode &= 0xFFFF
    family = opcode >> 12
    x = (opcode >> 8) & 0xF
    y = (opcode >> 4) & 0xF
    n = opcode & 0xF
    kk = opcode & 0xFF
    nnn = opcode & 0xFFF

    if opcode == 0x00E0:
        return "CLS"
    if opcode == 0x00EE:
        return "RET"
    if family == 0x0:
        return f"SYS #{nnn:03X}"
    if family == 0x1:
        return f"JP #{nnn:03X}"
    if family == 0x2:
        return f"CALL #{nnn:03X}"
    if family == 0x3:
        return f"SE V{x:X}, #{kk:02X}"
    if family == 0x4:
        return f"SNE V{x:X}, #{kk:02X}"
    if family == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    if family == 0x6:
        return f"LD V{x:X}, #{kk:02X}"
    if family == 0x7:
        return f"ADD V{x:X}, #{kk:02X}"
    if family == 0x8 and n in _ALU_MNEMONICS:
        return f"{_ALU_MNEMONICS[n]} V{x:X}, V{y:X}"
    if family == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    if family == 0xA:
        return f"LD I, #{nnn:03X}"
    if family == 0xB:
        return f"JP V0, #{nnn:03X}"
    if family == 0xC:
        return f"RND V{x:X}, #{kk:02X}"
    if family == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    if family == 0xE and kk == 0x9E:
        return f"SKP V{x:X}"
    if family == 0xE and kk == 0xA1:
        return f"SKNP V{x:X}"
    if family == 0xF and kk in _F_FORMATS:
        return _F_FORMATS[kk].format(x=x)
    return f"DW #{opcode:04X}"


def iter_program(
    image: bytes, origin: int = 0x200
) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, opcode, text)`` for each word of *image*.

    A trailing odd byte is reported as a one-byte ``DB`` entry.
    """
    for offset in range(0, len(image) - 1, 2):
        opcode = (image[offset] << 8) | image[offset + 1]
        yield origin + offset, opcode, disassemble(opcode)
    if len(image) % 2:
        last = image[-1]
        yield origin + len(image) - 1, last, f"DB #{last:02X}"


def format_listing(image: bytes, origin: int = 0x200) -> str:
    """Return a printable listing of *image* loaded at *origin*."""
    lines = []
    for address, opcode, text in iter_program(image, origin):
        width = 2 if text.startswith("DB") else 4
        lines.append(f"{address:03X}  {opcode:0{width}X}  {text}")
    return "\n".join(lines)
