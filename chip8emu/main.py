#!/usr/bin/env python3
"""
CHIP-8 interpreter -- main entry point.

Parses command-line arguments, creates the machine from a ROM file, and
launches the pygame display window.

Usage examples::

    # Run a ROM with the default 10 instructions per frame
    python -m chip8emu.main roms/pong.ch8

    # Faster CPU, bigger window, reproducible random numbers
    python -m chip8emu.main roms/pong.ch8 --cycles 20 --scale 16 --seed 42

    # Print ROM metadata or a disassembly without launching
    python -m chip8emu.main roms/pong.ch8 --info
    python -m chip8emu.main roms/pong.ch8 --disassemble

    # Trace every executed instruction to stdout
    python -m chip8emu.main roms/pong.ch8 --trace --no-audio
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from chip8emu.core.disassembler import format_listing
from chip8emu.core.errors import Chip8Error
from chip8emu.core.logger import LEVEL_TRACE, ConsoleLogger
from chip8emu.core.types import JumpOffsetPolicy
from chip8emu.shell.services.rom_bytes_service import RomBytesService


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chip8emu",
        description=(
            "CHIP-8 interpreter.  Load a program image and run it in a "
            "pygame window."
        ),
    )

    parser.add_argument(
        "rom",
        help="Path to the program image (.ch8)",
    )

    # Timing
    parser.add_argument(
        "--cycles", "-c",
        type=int,
        default=None,
        help="Instructions executed per frame.  Default: 10.",
    )
    parser.add_argument(
        "--hz",
        type=int,
        default=None,
        help="Frames (and timer ticks) per second.  Default: 60.",
    )

    # Behaviour
    policy_names = [p.name for p in JumpOffsetPolicy]
    parser.add_argument(
        "--jump-policy",
        choices=policy_names,
        default=None,
        metavar="POLICY",
        help=(
            "Target masking for the Bnnn jump.  Valid values: "
            + ", ".join(policy_names) + ".  Default: Unmasked."
        ),
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random number instruction.",
    )

    # Display
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=10,
        help="Display scale factor (1-32).  Default: 10.",
    )
    parser.add_argument(
        "--fg",
        default=None,
        metavar="RRGGBB",
        help="Colour of lit pixels.",
    )
    parser.add_argument(
        "--bg",
        default=None,
        metavar="RRGGBB",
        help="Colour of unlit pixels.",
    )

    # Audio
    parser.add_argument(
        "--no-audio",
        action="store_true",
        default=False,
        help="Disable the beeper.",
    )

    # Debugging / info
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print ROM metadata and exit without launching the emulator.",
    )
    parser.add_argument(
        "--disassemble",
        action="store_true",
        default=False,
        help="Print a disassembly of the ROM and exit.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=False,
        help="Print every executed instruction.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Info / disassembly modes
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> int:
    """Print human-readable metadata for a ROM."""
    try:
        info = RomBytesService.describe(rom_path)
    except (OSError, Chip8Error) as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1

    print("CHIP-8 ROM Information")
    print("=" * 40)
    for key, value in vars(info).items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    return 0


def _print_disassembly(rom_path: str) -> int:
    """Print a listing of the ROM loaded at 0x200."""
    try:
        data = RomBytesService.read(rom_path)
    except (OSError, Chip8Error) as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1
    print(format_listing(data))
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    logger = logging.getLogger("chip8emu.main")

    rom_path: str = os.path.expanduser(args.rom)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    if args.info:
        return _print_rom_info(rom_path)
    if args.disassemble:
        return _print_disassembly(rom_path)

    # The display stack is only needed from here on.
    from chip8emu.platform.window import Window
    from chip8emu.shell.frame_renderer import (
        DEFAULT_BACKGROUND,
        DEFAULT_FOREGROUND,
        parse_colour,
    )
    from chip8emu.shell.services.machine_factory import MachineFactory

    try:
        foreground = parse_colour(args.fg) if args.fg else DEFAULT_FOREGROUND
        background = parse_colour(args.bg) if args.bg else DEFAULT_BACKGROUND
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    core_logger = ConsoleLogger(level=LEVEL_TRACE) if args.trace else None

    try:
        machine = MachineFactory.create(
            rom_path=rom_path,
            cycles_per_frame=args.cycles,
            frame_hz=args.hz,
            jump_policy=args.jump_policy,
            seed=args.seed,
            core_logger=core_logger,
        )
    except (OSError, Chip8Error, ValueError) as exc:
        logger.debug("Failed to create machine", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Starting emulation ...")
    try:
        window = Window(
            machine,
            scale=args.scale,
            enable_audio=not args.no_audio,
            title=os.path.basename(rom_path),
            background=background,
            foreground=foreground,
        )
        window.run()
    except Chip8Error as exc:
        logger.error("Emulation stopped: %s (%r)", exc, machine.cpu)
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
