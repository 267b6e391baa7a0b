"""
Machine creation factory for the CHIP-8 interpreter.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("pong.ch8", cycles_per_frame=15, seed=1)
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional, Union

from chip8emu.core.logger import ILogger
from chip8emu.core.machine import Machine, MachineConfig
from chip8emu.core.types import JumpOffsetPolicy
from chip8emu.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create a CHIP-8 machine from a ROM file."""

    @staticmethod
    def create(
        rom_path: str,
        cycles_per_frame: Optional[int] = None,
        frame_hz: Optional[int] = None,
        jump_policy: Optional[Union[JumpOffsetPolicy, str]] = None,
        seed: Optional[int] = None,
        core_logger: Optional[ILogger] = None,
    ) -> Machine:
        """Build and return a machine with *rom_path* loaded.

        Parameters
        ----------
        rom_path:
            Filesystem path to the program image.
        cycles_per_frame, frame_hz:
            Overrides for the :class:`MachineConfig` defaults.
        jump_policy:
            A :class:`JumpOffsetPolicy` or its name (e.g. ``"Wrap12Bit"``).
        seed:
            Seed for the random source used by ``Cxkk``.
        core_logger:
            Logger handed to the machine for lifecycle and trace output.

        Raises
        ------
        FileNotFoundError
            If *rom_path* does not exist.
        RomTooLargeError
            If the image does not fit in memory.
        KeyError
            If *jump_policy* names no policy.
        """
        if isinstance(jump_policy, str):
            jump_policy = JumpOffsetPolicy[jump_policy]

        overrides = {}
        if cycles_per_frame is not None:
            overrides["cycles_per_frame"] = cycles_per_frame
        if frame_hz is not None:
            overrides["frame_hz"] = frame_hz
        if jump_policy is not None:
            overrides["jump_policy"] = jump_policy
        config = MachineConfig(seed=seed, **overrides)
        logger.info("Machine config: %s", asdict(config))

        logger.info("Loading ROM: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)
        logger.info("ROM size: %d bytes", len(rom_bytes))

        machine = Machine(config, logger=core_logger)
        machine.load_rom(rom_bytes)
        logger.info("Machine created: %r", machine)
        return machine
