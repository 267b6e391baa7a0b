"""
ROM loading service for the CHIP-8 interpreter.

CHIP-8 program images carry no header: the file is copied verbatim to
0x200.  This service reads the file, enforces the size limit before
anything reaches memory, and produces a short description for ``--info``.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass

from chip8emu.core.disassembler import disassemble
from chip8emu.core.errors import RomTooLargeError
from chip8emu.core.state import Chip8State


@dataclass(frozen=True)
class RomInfo:
    """Summary of a program image."""

    title: str
    rom_size: int
    free_bytes: int
    sha1: str
    entry_instruction: str


class RomBytesService:
    """Static utility for loading CHIP-8 images."""

    @staticmethod
    def read(path: str) -> bytes:
        """Read a program image from *path*.

        Raises:
            FileNotFoundError: If *path* does not exist.
            RomTooLargeError: If the image does not fit above 0x200.
            OSError: On general I/O failure.
        """
        with open(path, "rb") as fh:
            data = fh.read()
        RomBytesService.validate(data)
        return data

    @staticmethod
    def validate(data: bytes) -> None:
        """Raise :class:`RomTooLargeError` if *data* cannot be loaded."""
        if len(data) > Chip8State.MAX_ROM_SIZE:
            raise RomTooLargeError(len(data), Chip8State.MAX_ROM_SIZE)

    @staticmethod
    def describe(path: str) -> RomInfo:
        """Return a :class:`RomInfo` for the image at *path*."""
        data = RomBytesService.read(path)
        if len(data) >= 2:
            entry = disassemble((data[0] << 8) | data[1])
        else:
            entry = "(empty)"
        return RomInfo(
            title=os.path.splitext(os.path.basename(path))[0],
            rom_size=len(data),
            free_bytes=Chip8State.MAX_ROM_SIZE - len(data),
            sha1=hashlib.sha1(data).hexdigest(),
            entry_instruction=entry,
        )
