"""
Frame renderer for the CHIP-8 interpreter.
Converts the machine's 64x32 lit/unlit FrameBuffer into an RGB pygame
Surface.

The core stores one byte per cell (``0`` unlit, ``1`` lit).  The renderer
wraps that buffer in a numpy array without copying, maps it through a
two-entry colour look-up table and blits the result into a reusable
Surface at native resolution.  Scaling to the window is the window's job.
"""

from __future__ import annotations

import logging
import string
from typing import Tuple

import numpy as np
import pygame

from chip8emu.core.frame_buffer import FrameBuffer

logger = logging.getLogger(__name__)

Colour = Tuple[int, int, int]

DEFAULT_BACKGROUND: Colour = (0x10, 0x10, 0x10)
DEFAULT_FOREGROUND: Colour = (0xE0, 0xE0, 0xE0)


def parse_colour(text: str) -> Colour:
    """Parse ``RRGGBB`` or ``#RRGGBB`` into an ``(r, g, b)`` tuple.

    Raises:
        ValueError: If *text* is not six hexadecimal digits.
    """
    value = text[1:] if text.startswith("#") else text
    if len(value) != 6 or not all(c in string.hexdigits for c in value):
        raise ValueError(f"Colour must be RRGGBB, got {text!r}")
    packed = int(value, 16)
    return (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF


class FrameRenderer:
    """Renders :attr:`machine.frame_buffer` into a pygame Surface.

    Parameters
    ----------
    machine:
        Anything exposing a ``frame_buffer`` attribute.
    background, foreground:
        Colours for unlit and lit cells.
    """

    def __init__(
        self,
        machine: object,
        background: Colour = DEFAULT_BACKGROUND,
        foreground: Colour = DEFAULT_FOREGROUND,
    ) -> None:
        self._machine = machine
        self._width: int = FrameBuffer.WIDTH
        self._height: int = FrameBuffer.HEIGHT

        # Row 0 = unlit, row 1 = lit.
        self._lut: np.ndarray = np.zeros((2, 3), dtype=np.uint8)
        self.set_colours(background, foreground)

        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))

        logger.info("FrameRenderer: %dx%d native", self._width, self._height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def set_colours(self, background: Colour, foreground: Colour) -> None:
        """Replace the unlit/lit colours."""
        self._lut[0] = background
        self._lut[1] = foreground

    def to_rgb(self) -> np.ndarray:
        """Return the current frame as an ``(H, W, 3)`` uint8 array."""
        fb = self._machine.frame_buffer  # type: ignore[attr-defined]
        cells = np.frombuffer(fb.video_buffer, dtype=np.uint8)
        cells = cells.reshape((self._height, self._width))
        return self._lut[cells]

    def render(self) -> pygame.Surface:
        """Render the current frame and return the reused surface."""
        rgb = self.to_rgb()
        # pygame surfarray expects (W, H, 3).
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface
