"""
Core enumerations and type definitions for the CHIP-8 interpreter.
"""

from enum import IntEnum


class JumpOffsetPolicy(IntEnum):
    """How ``Bnnn`` (jump to nnn + V0) treats a target past 0xFFF."""

    Unmasked = 0
    Wrap12Bit = 1


class Key(IntEnum):
    """The sixteen hexadecimal keys of the CHIP-8 keypad."""

    Key0 = 0x0
    Key1 = 0x1
    Key2 = 0x2
    Key3 = 0x3
    Key4 = 0x4
    Key5 = 0x5
    Key6 = 0x6
    Key7 = 0x7
    Key8 = 0x8
    Key9 = 0x9
    KeyA = 0xA
    KeyB = 0xB
    KeyC = 0xC
    KeyD = 0xD
    KeyE = 0xE
    KeyF = 0xF


class HostAction(IntEnum):
    """Window-level actions that do not reach the emulated keypad."""

    Quit = 0
    Pause = 1
    Reset = 2
