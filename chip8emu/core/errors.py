"""
Exception hierarchy for the CHIP-8 interpreter.

Load-time failures and ISA precondition violations are raised as
subclasses of :class:`Chip8Error` so callers can catch the whole family in
one place.  None of them is raised after a partial state mutation: the
handler validates first and only then writes.
"""

from __future__ import annotations


class Chip8Error(Exception):
    """Base class for every error raised by the interpreter."""


class RomTooLargeError(Chip8Error, ValueError):
    """The program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, capacity: int) -> None:
        super().__init__(
            f"ROM image is {size} bytes, only {capacity} bytes available"
        )
        self.size = size
        self.capacity = capacity


class IllegalOpcodeError(Chip8Error):
    """The fetched word matches none of the 35 base instructions."""

    def __init__(self, opcode: int, pc: int) -> None:
        super().__init__(f"Illegal opcode {opcode:04X} at {pc:03X}")
        self.opcode = opcode
        self.pc = pc


class StackOverflowError(Chip8Error):
    """``2nnn`` executed with all sixteen stack slots in use."""


class StackUnderflowError(Chip8Error):
    """``00EE`` executed with an empty call stack."""


class FontDigitError(Chip8Error, ValueError):
    """``Fx29`` asked for a glyph outside the hexadecimal digits 0-F."""
