"""Shared builders for the interpreter tests."""

from __future__ import annotations

import random

from chip8emu.core.cpu import Chip8CPU
from chip8emu.core.machine import Machine, MachineConfig
from chip8emu.core.state import Chip8State
from chip8emu.core.types import JumpOffsetPolicy


def words_to_bytes(*words: int) -> bytes:
    out = bytearray()
    for word in words:
        out += bytes(((word >> 8) & 0xFF, word & 0xFF))
    return bytes(out)


def make_cpu(
    *words: int,
    seed: int = 0,
    jump_policy: JumpOffsetPolicy = JumpOffsetPolicy.Unmasked,
) -> Chip8CPU:
    """Return a CPU whose memory holds *words* at 0x200."""
    state = Chip8State()
    image = words_to_bytes(*words)
    state.memory[0x200:0x200 + len(image)] = image
    return Chip8CPU(state, random.Random(seed), jump_policy)


def execute(cpu: Chip8CPU, opcode: int) -> None:
    """Place *opcode* at PC and run one cycle."""
    s = cpu.state
    s.memory[s.pc & 0xFFF] = (opcode >> 8) & 0xFF
    s.memory[(s.pc + 1) & 0xFFF] = opcode & 0xFF
    cpu.cycle()


def press(state: Chip8State, *keys: int) -> None:
    """Latch *keys* down as the frame driver would."""
    for key in keys:
        state.keypad.raise_input(key, True)
    state.keypad.capture_input_state()


def make_machine(*words: int, **config) -> Machine:
    config.setdefault("seed", 0)
    machine = Machine(MachineConfig(**config))
    machine.load_rom(words_to_bytes(*words))
    return machine
