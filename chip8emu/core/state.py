"""
Chip8State -- the complete mutable state of the CHIP-8 processor.

The state store is plain data.  It is constructed once, handed explicitly
to :class:`~chip8emu.core.cpu.Chip8CPU`, and mutated only by instruction
execution (and by the external loader, input and timer collaborators).

Memory map
----------

===============  ============================================
Address          Contents
===============  ============================================
0x000 - 0x1FF    Reserved (interpreter area)
0x050 - 0x09F    Built-in hexadecimal font (80 bytes)
0x200 - 0xFFF    Program image and working RAM
===============  ============================================
"""

from __future__ import annotations

from typing import List

from chip8emu.core.font_tables import FONTSET, FONTSET_START_ADDRESS
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.input_state import KEY_COUNT, InputState


class Chip8State:
    """Registers, memory, stack, timers, keypad and display."""

    MEMORY_SIZE: int = 4096
    MEMORY_MASK: int = MEMORY_SIZE - 1
    START_ADDRESS: int = 0x200
    MAX_ROM_SIZE: int = MEMORY_SIZE - START_ADDRESS

    REGISTER_COUNT: int = 16
    FLAG_REGISTER: int = 0xF
    STACK_DEPTH: int = 16

    def __init__(self) -> None:
        # General purpose registers V0..VF (VF doubles as the flag register).
        self.v: List[int] = [0] * self.REGISTER_COUNT

        self.memory: bytearray = bytearray(self.MEMORY_SIZE)
        start = FONTSET_START_ADDRESS
        self.memory[start:start + len(FONTSET)] = bytes(FONTSET)

        self.pc: int = self.START_ADDRESS
        self.index: int = 0

        self.stack: List[int] = [0] * self.STACK_DEPTH
        self.sp: int = 0

        self.delay_timer: int = 0
        self.sound_timer: int = 0

        self.keypad: InputState = InputState()
        self.frame_buffer: FrameBuffer = FrameBuffer()

        # Most recently fetched instruction word.
        self.opcode: int = 0

    # ------------------------------------------------------------------
    # Serialisation helpers (save-state support)
    # ------------------------------------------------------------------

    def get_snapshot(self) -> dict:
        """Return a serialisable snapshot of the whole processor state."""
        return {
            "v": list(self.v),
            "memory": bytes(self.memory),
            "pc": self.pc,
            "index": self.index,
            "stack": list(self.stack),
            "sp": self.sp,
            "delay_timer": self.delay_timer,
            "sound_timer": self.sound_timer,
            "opcode": self.opcode,
            "keypad": self.keypad.get_snapshot(),
            "frame_buffer": self.frame_buffer.get_snapshot(),
        }

    def restore_snapshot(self, snap: dict) -> None:
        """Restore the processor state from :meth:`get_snapshot` output.

        The whole snapshot is checked before anything is written.

        Raises:
            ValueError: If a field has the wrong size or ``sp`` is outside
                0-16.
        """
        for field, expected in (
            ("memory", self.MEMORY_SIZE),
            ("v", self.REGISTER_COUNT),
            ("stack", self.STACK_DEPTH),
            ("keypad", KEY_COUNT),
            ("frame_buffer", self.frame_buffer.size),
        ):
            if len(snap[field]) != expected:
                raise ValueError(
                    f"Snapshot {field} size mismatch: expected {expected}, "
                    f"got {len(snap[field])}"
                )
        if not 0 <= snap["sp"] <= self.STACK_DEPTH:
            raise ValueError(f"Snapshot stack pointer out of range: {snap['sp']}")

        self.v[:] = snap["v"]
        self.memory[:] = snap["memory"]
        self.pc = snap["pc"]
        self.index = snap["index"]
        self.stack[:] = snap["stack"]
        self.sp = snap["sp"]
        self.delay_timer = snap["delay_timer"]
        self.sound_timer = snap["sound_timer"]
        self.opcode = snap["opcode"]
        self.keypad.restore_snapshot(snap["keypad"])
        self.frame_buffer.restore_snapshot(snap["frame_buffer"])

    def __repr__(self) -> str:
        regs = " ".join(f"V{i:X}={val:02X}" for i, val in enumerate(self.v))
        return (
            f"Chip8State(PC={self.pc:03X} I={self.index:03X} SP={self.sp} "
            f"DT={self.delay_timer} ST={self.sound_timer} {regs})"
        )
