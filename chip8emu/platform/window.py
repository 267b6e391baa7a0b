"""
pygame front end for the CHIP-8 interpreter.

:class:`Window` opens a scaled view of the 64x32 display and runs the host
loop.  One loop iteration is one video frame:

1. pump keyboard events into the keypad staging buffer,
2. apply host actions (quit, pause, reset),
3. ``machine.compute_next_frame()`` unless paused,
4. gate the beeper on the sound timer,
5. render, scale to the current window size and flip,
6. sleep until the next frame is due (``frame_hz``).

Example::

    machine = MachineFactory.create("pong.ch8")
    Window(machine, scale=12).run()
"""

from __future__ import annotations

import logging
import time

import pygame

from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.platform.audio import AudioDevice
from chip8emu.platform.input_handler import InputHandler
from chip8emu.shell.frame_renderer import (
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    Colour,
    FrameRenderer,
)

logger = logging.getLogger(__name__)


_CAPTION: str = "CHIP-8"

_MIN_SCALE: int = 1
_MAX_SCALE: int = 32

# Seconds between caption refreshes of the measured frame rate.
_FPS_WINDOW: float = 1.0


class Window:
    """Owns the pygame display and the per-frame host loop.

    Parameters
    ----------
    machine:
        A :class:`~chip8emu.core.machine.Machine`.  The window only uses
        ``frame_buffer``, ``frame_hz``, ``input_state``, ``sound_active``,
        ``compute_next_frame()`` and ``reset()``.
    scale:
        Pixels per CHIP-8 cell, clamped to 1-32.
    enable_audio:
        ``False`` keeps the mixer closed.
    title:
        ROM name appended to the caption.
    background, foreground:
        Unlit and lit cell colours.
    """

    def __init__(
        self,
        machine: object,
        scale: int = 10,
        *,
        enable_audio: bool = True,
        title: str = "",
        background: Colour = DEFAULT_BACKGROUND,
        foreground: Colour = DEFAULT_FOREGROUND,
    ) -> None:
        self._machine = machine
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._frame_hz: int = getattr(machine, "frame_hz", 60)
        self._caption: str = f"{_CAPTION} - {title}" if title else _CAPTION
        self._running: bool = False
        self._paused: bool = False

        if not pygame.get_init():
            pygame.init()

        size = (FrameBuffer.WIDTH * self._scale, FrameBuffer.HEIGHT * self._scale)
        self._screen: pygame.Surface = pygame.display.set_mode(size, pygame.RESIZABLE)
        pygame.display.set_caption(self._caption)
        self._clock: pygame.time.Clock = pygame.time.Clock()

        self._renderer = FrameRenderer(machine, background, foreground)
        self._audio = AudioDevice(machine, enabled=enable_audio)
        self._input = InputHandler(machine)

        self._frames_since: int = 0
        self._fps_mark: float = 0.0
        self._fps: float = 0.0

        logger.info(
            "Window: %dx%d (scale=%d) at %d Hz", size[0], size[1],
            self._scale, self._frame_hz,
        )

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        self._paused = value

    @property
    def fps(self) -> float:
        """Frame rate measured over the last second."""
        return self._fps

    # ------------------------------------------------------------------
    # Host loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Run frames until the window is closed or Escape is pressed.

        Interpreter errors propagate after pygame has been shut down.
        """
        self._running = True
        self._fps_mark = time.monotonic()
        self._frames_since = 0
        logger.info("Host loop started")

        try:
            while self._running:
                self._tick()
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self._close()

    def _tick(self) -> None:
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return

        if self._input.take_pause_toggle():
            self._paused = not self._paused
            logger.info("%s", "Paused" if self._paused else "Resumed")
        if self._input.take_reset_request():
            logger.info("Reset")
            self._machine.reset()  # type: ignore[attr-defined]

        if not self._paused:
            self._machine.compute_next_frame()  # type: ignore[attr-defined]
        self._audio.update()

        self._present()
        self._clock.tick(self._frame_hz)
        self._count_frame()

    def _present(self) -> None:
        frame = self._renderer.render()
        self._screen.blit(
            pygame.transform.scale(frame, self._screen.get_size()), (0, 0)
        )
        pygame.display.flip()

    def _count_frame(self) -> None:
        self._frames_since += 1
        now = time.monotonic()
        elapsed = now - self._fps_mark
        if elapsed < _FPS_WINDOW:
            return
        self._fps = self._frames_since / elapsed
        self._frames_since = 0
        self._fps_mark = now
        state = "  [paused]" if self._paused else ""
        pygame.display.set_caption(f"{self._caption}  [{self._fps:.1f} fps]{state}")

    def _close(self) -> None:
        logger.info("Closing window")
        self._audio.shutdown()
        pygame.quit()
