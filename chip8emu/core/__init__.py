# CHIP-8 interpreter core
"""
Processor state, the fetch/decode/execute engine and the frame driver.

Nothing in this package imports pygame or numpy; the core can run headless.
"""

from chip8emu.core.cpu import Chip8CPU
from chip8emu.core.errors import (
    Chip8Error,
    FontDigitError,
    IllegalOpcodeError,
    RomTooLargeError,
    StackOverflowError,
    StackUnderflowError,
)
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.input_state import InputState
from chip8emu.core.machine import Machine, MachineConfig
from chip8emu.core.state import Chip8State
from chip8emu.core.types import JumpOffsetPolicy, Key

__all__ = [
    "Chip8CPU",
    "Chip8State",
    "FrameBuffer",
    "InputState",
    "Machine",
    "MachineConfig",
    "JumpOffsetPolicy",
    "Key",
    # errors
    "Chip8Error",
    "FontDigitError",
    "IllegalOpcodeError",
    "RomTooLargeError",
    "StackOverflowError",
    "StackUnderflowError",
]
