"""
Machine -- owns the processor state and CPU and drives them frame by frame.

The interpreter core knows nothing about wall-clock time.  The machine is
the collaborator that supplies it:

* **Image load** -- :meth:`Machine.load_rom` copies a program to 0x200
  after checking it fits.
* **Input** -- :meth:`Machine.compute_next_frame` publishes the keypad
  staging buffer at each frame boundary.
* **Pacing** -- each frame runs :attr:`MachineConfig.cycles_per_frame`
  instructions.
* **Timers** -- both timers are decremented once per frame (60 Hz with
  the default configuration), never below zero.

The host (the pygame window, or a test) decides how often to call
:meth:`Machine.compute_next_frame`.  Stopping calls is all it takes to
cancel a pending ``Fx0A`` key wait.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from chip8emu.core.cpu import Chip8CPU
from chip8emu.core.disassembler import disassemble
from chip8emu.core.errors import Chip8Error, RomTooLargeError
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.input_state import InputState
from chip8emu.core.logger import DEFAULT_LOGGER, LEVEL_INFO, LEVEL_TRACE, ILogger
from chip8emu.core.state import Chip8State
from chip8emu.core.types import JumpOffsetPolicy


@dataclass(frozen=True)
class MachineConfig:
    """Run-time parameters of a :class:`Machine`.

    Attributes
    ----------
    cycles_per_frame:
        Instructions executed per :meth:`Machine.compute_next_frame`.
        10 cycles at 60 frames per second gives the customary ~600 Hz.
    frame_hz:
        Frames per second requested from the host loop; also the timer
        decrement rate.
    jump_policy:
        Masking behaviour of ``Bnnn``.
    seed:
        Seed for the ``Cxkk`` random source.  ``None`` uses OS entropy.
    """

    cycles_per_frame: int = 10
    frame_hz: int = 60
    jump_policy: JumpOffsetPolicy = JumpOffsetPolicy.Unmasked
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.cycles_per_frame < 1:
            raise ValueError(
                f"cycles_per_frame must be positive, got {self.cycles_per_frame}"
            )
        if self.frame_hz < 1:
            raise ValueError(f"frame_hz must be positive, got {self.frame_hz}")


class Machine:
    """A complete CHIP-8 system: state, CPU, and the frame driver."""

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        logger: Optional[ILogger] = None,
    ) -> None:
        self.config: MachineConfig = config if config is not None else MachineConfig()
        self.logger: ILogger = logger if logger is not None else DEFAULT_LOGGER

        self.rng: random.Random = random.Random(self.config.seed)
        self.state: Chip8State = Chip8State()
        self.cpu: Chip8CPU = Chip8CPU(self.state, self.rng, self.config.jump_policy)

        self.rom: bytes = b""
        self.frame_number: int = 0
        self.machine_halt: bool = False

    # ------------------------------------------------------------------
    # Convenience accessors for the host layers
    # ------------------------------------------------------------------

    @property
    def frame_buffer(self) -> FrameBuffer:
        return self.state.frame_buffer

    @property
    def input_state(self) -> InputState:
        return self.state.keypad

    @property
    def frame_hz(self) -> int:
        return self.config.frame_hz

    @property
    def sound_active(self) -> bool:
        """``True`` while the beeper should sound."""
        return self.state.sound_timer > 0

    # ------------------------------------------------------------------
    # Image load
    # ------------------------------------------------------------------

    def load_rom(self, data: bytes) -> None:
        """Copy *data* into memory starting at 0x200.

        Raises:
            RomTooLargeError: If *data* is longer than 3584 bytes.  Memory is
                left untouched in that case.
        """
        capacity = Chip8State.MAX_ROM_SIZE
        if len(data) > capacity:
            raise RomTooLargeError(len(data), capacity)
        start = Chip8State.START_ADDRESS
        self.state.memory[start:start + len(data)] = data
        self.rom = bytes(data)
        self.logger.log(LEVEL_INFO, f"Loaded {len(data)} byte image at {start:03X}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Return to the power-on state and reload the current image.

        The keypad is carried over, so keys held across the reset stay
        pressed.
        """
        keypad = self.state.keypad
        self.state = Chip8State()
        self.state.keypad = keypad
        self.rng.seed(self.config.seed)
        self.cpu = Chip8CPU(self.state, self.rng, self.config.jump_policy)
        self.frame_number = 0
        self.machine_halt = False
        if self.rom:
            self.load_rom(self.rom)
        self.logger.log(LEVEL_INFO, "Machine reset")

    def step(self) -> None:
        """Execute a single instruction, tracing it if enabled."""
        if self.logger.level >= LEVEL_TRACE:
            s = self.state
            mask = Chip8State.MEMORY_MASK
            opcode = (s.memory[s.pc & mask] << 8) | s.memory[(s.pc + 1) & mask]
            self.logger.log(
                LEVEL_TRACE, f"{s.pc:03X}  {opcode:04X}  {disassemble(opcode)}"
            )
        self.cpu.cycle()

    def tick_timers(self) -> None:
        """Decrement the delay and sound timers towards zero."""
        s = self.state
        if s.delay_timer > 0:
            s.delay_timer -= 1
        if s.sound_timer > 0:
            s.sound_timer -= 1

    def compute_next_frame(self) -> None:
        """Advance the emulation by one video frame.

        Captures input, runs ``cycles_per_frame`` instructions and then
        ticks the timers once.  Does nothing while :attr:`machine_halt`
        is set.

        Raises:
            Chip8Error: If an instruction faults.  The machine is halted
                first and stays halted until :meth:`reset`.
        """
        if self.machine_halt:
            return
        self.state.keypad.capture_input_state()
        try:
            for _ in range(self.config.cycles_per_frame):
                self.step()
        except Chip8Error as exc:
            self.machine_halt = True
            self.logger.log(LEVEL_INFO, f"Machine halted: {exc}")
            raise
        self.tick_timers()
        self.frame_number += 1

    # ------------------------------------------------------------------
    # Serialisation helpers (save-state support)
    # ------------------------------------------------------------------

    def get_snapshot(self) -> dict:
        """Return a serialisable snapshot of the machine."""
        return {
            "state": self.state.get_snapshot(),
            "frame_number": self.frame_number,
            "machine_halt": self.machine_halt,
            "cycle_count": self.cpu.cycle_count,
            "rng": self.rng.getstate(),
        }

    def restore_snapshot(self, snapshot: dict) -> None:
        """Restore the machine from :meth:`get_snapshot` output."""
        self.state.restore_snapshot(snapshot["state"])
        self.frame_number = snapshot.get("frame_number", 0)
        self.machine_halt = snapshot.get("machine_halt", False)
        self.cpu.cycle_count = snapshot.get("cycle_count", 0)
        if "rng" in snapshot:
            self.rng.setstate(snapshot["rng"])

    def __repr__(self) -> str:
        return (
            f"Machine("
            f"cycles_per_frame={self.config.cycles_per_frame}, "
            f"frame_hz={self.config.frame_hz}, "
            f"rom_bytes={len(self.rom)}, "
            f"frame={self.frame_number})"
        )
