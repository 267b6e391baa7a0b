"""
Pytest configuration for the chip8emu test suite.

The platform tests construct pygame surfaces and events.  SDL is pointed at
its dummy drivers so the suite runs without a display or sound card.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
