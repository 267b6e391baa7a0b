"""
Input handler for the CHIP-8 interpreter.
Maps keyboard keys to the sixteen keypad latches.

Keyboard layout
---------------
The hexadecimal keypad of the COSMAC VIP is mapped onto the left-hand
4x4 block of a QWERTY keyboard::

    Keypad        Keyboard
    1 2 3 C       1 2 3 4
    4 5 6 D       Q W E R
    7 8 9 E       A S D F
    A 0 B F       Z X C V

===================  ============================
Key                  Action
===================  ============================
Escape               Quit
P                    Pause / resume
F1                   Reset the machine
===================  ============================
"""

from __future__ import annotations

import logging
from typing import Optional

import pygame

from chip8emu.core.types import HostAction, Key

logger = logging.getLogger(__name__)


_KEY_MAP: dict[int, Key] = {
    pygame.K_1: Key.Key1,
    pygame.K_2: Key.Key2,
    pygame.K_3: Key.Key3,
    pygame.K_4: Key.KeyC,
    pygame.K_q: Key.Key4,
    pygame.K_w: Key.Key5,
    pygame.K_e: Key.Key6,
    pygame.K_r: Key.KeyD,
    pygame.K_a: Key.Key7,
    pygame.K_s: Key.Key8,
    pygame.K_d: Key.Key9,
    pygame.K_f: Key.KeyE,
    pygame.K_z: Key.KeyA,
    pygame.K_x: Key.Key0,
    pygame.K_c: Key.KeyB,
    pygame.K_v: Key.KeyF,
}

_HOST_MAP: dict[int, HostAction] = {
    pygame.K_ESCAPE: HostAction.Quit,
    pygame.K_p: HostAction.Pause,
    pygame.K_F1: HostAction.Reset,
}


class InputHandler:
    """Translates pygame keyboard events into keypad latches.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected interface:

        * ``input_state.raise_input(key: int, down: bool)``
    """

    def __init__(self, machine: object) -> None:
        self._machine = machine
        self._quit_requested: bool = False
        self._pause_toggled: bool = False
        self._reset_requested: bool = False

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def quit_requested(self) -> bool:
        """``True`` if the user pressed Escape or closed the window."""
        return self._quit_requested

    def take_pause_toggle(self) -> bool:
        """Return and clear the pending pause toggle."""
        toggled, self._pause_toggled = self._pause_toggled, False
        return toggled

    def take_reset_request(self) -> bool:
        """Return and clear the pending reset request."""
        requested, self._reset_requested = self._reset_requested, False
        return requested

    def poll(self) -> None:
        """Pump the pygame event queue and process all pending events."""
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
            return

        if event.type == pygame.KEYDOWN:
            self._on_key(event.key, down=True)
        elif event.type == pygame.KEYUP:
            self._on_key(event.key, down=False)

    def clear_all(self) -> None:
        """Release all keypad keys."""
        for key in Key:
            self._send(key, False)

    # ------------------------------------------------------------------
    # Keyboard handlers
    # ------------------------------------------------------------------

    def _on_key(self, pygame_key: int, *, down: bool) -> None:
        action = _HOST_MAP.get(pygame_key)
        if action is not None:
            if down:
                self._on_host_action(action)
            return

        key = self.map_key(pygame_key)
        if key is not None:
            self._send(key, down)

    def _on_host_action(self, action: HostAction) -> None:
        if action == HostAction.Quit:
            self._quit_requested = True
        elif action == HostAction.Pause:
            self._pause_toggled = True
        elif action == HostAction.Reset:
            self._reset_requested = True
        logger.debug("Host action: %s", action.name)

    @staticmethod
    def map_key(pygame_key: int) -> Optional[Key]:
        """Return the keypad key bound to *pygame_key*, if any."""
        return _KEY_MAP.get(pygame_key)

    # ------------------------------------------------------------------
    # Machine bridge
    # ------------------------------------------------------------------

    def _send(self, key: Key, down: bool) -> None:
        self._machine.input_state.raise_input(int(key), down)  # type: ignore[attr-defined]
