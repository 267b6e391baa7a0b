"""
Audio output device for the CHIP-8 interpreter.
Uses pygame.mixer to sound a tone while the sound timer is non-zero.

The CHIP-8 has a single beeper: it is on whenever the sound timer is
greater than zero.  This module pre-computes one period-aligned buffer of
a square wave with numpy, wraps it in a ``pygame.mixer.Sound`` and loops
it on a dedicated channel.  :meth:`AudioDevice.update` is called once per
frame and starts or stops the loop on the edges of ``machine.sound_active``.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pygame

logger = logging.getLogger(__name__)

_SAMPLE_RATE: int = 44100
_TONE_HZ: int = 440
_AMPLITUDE: int = 4096

# pygame mixer buffer size (in samples).
_MIXER_BUFFER_SAMPLES: int = 512


def square_wave(frequency: int, sample_rate: int, amplitude: int) -> np.ndarray:
    """Return one second's worth of signed 16-bit square wave samples,
    trimmed to a whole number of periods so it loops without a click."""
    period = max(2, sample_rate // frequency)
    periods = max(1, sample_rate // period)
    t = np.arange(period * periods)
    wave = np.where((t % period) < period // 2, amplitude, -amplitude)
    return wave.astype(np.int16)


class AudioDevice:
    """Gate a looping tone on the machine's sound timer.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected attribute: ``sound_active`` (bool).
    enabled:
        Set to ``False`` to create the device in a silent / no-op mode.
    frequency:
        Tone frequency in Hz.
    """

    def __init__(
        self,
        machine: object,
        *,
        enabled: bool = True,
        frequency: int = _TONE_HZ,
    ) -> None:
        self._machine = machine
        self._enabled: bool = enabled
        self._frequency: int = frequency
        self._channel: Optional[pygame.mixer.Channel] = None
        self._tone: Optional[pygame.mixer.Sound] = None
        self._playing: bool = False

        if not self._enabled:
            logger.info("AudioDevice: disabled (silent mode)")
            return

        self._init_mixer()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def playing(self) -> bool:
        return self._playing

    def update(self) -> None:
        """Start or stop the tone to match the sound timer.

        Call this once per frame, **after** ``machine.compute_next_frame``.
        """
        if not self._enabled or self._channel is None:
            return

        active = bool(getattr(self._machine, "sound_active", False))
        if active and not self._playing:
            self._channel.play(self._tone, loops=-1)
            self._playing = True
        elif not active and self._playing:
            self._channel.stop()
            self._playing = False

    def shutdown(self) -> None:
        """Stop playback and release the mixer."""
        self._shutdown_mixer()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _init_mixer(self) -> None:
        """Initialise the pygame mixer and build the tone."""
        try:
            pygame.mixer.init(
                frequency=_SAMPLE_RATE,
                size=-16,       # signed 16-bit
                channels=1,     # mono
                buffer=_MIXER_BUFFER_SAMPLES,
            )
        except pygame.error as exc:
            logger.error("AudioDevice: mixer init failed: %s", exc)
            self._enabled = False
            return

        actual_freq, actual_size, actual_channels = pygame.mixer.get_init()
        samples = square_wave(self._frequency, actual_freq, _AMPLITUDE)
        if actual_channels > 1:
            samples = np.repeat(samples[:, np.newaxis], actual_channels, axis=1)
        self._tone = pygame.sndarray.make_sound(np.ascontiguousarray(samples))
        self._channel = pygame.mixer.Channel(0)

        logger.info(
            "AudioDevice: mixer ready at %d Hz, %d-bit, %d ch (tone %d Hz)",
            actual_freq,
            abs(actual_size),
            actual_channels,
            self._frequency,
        )

    def _shutdown_mixer(self) -> None:
        """Stop the mixer channel and release resources."""
        if self._channel is not None:
            try:
                self._channel.stop()
            except pygame.error:
                logger.debug("AudioDevice: channel already closed")
            self._channel = None
        self._tone = None
        self._playing = False

        if pygame.mixer.get_init():
            pygame.mixer.quit()
