"""
InputState - the sixteen keypad latches, double-buffered.

Host code (the pygame input handler, or a test) writes key events into a
staging buffer with :meth:`InputState.raise_input`.  At every frame
boundary the driver calls :meth:`InputState.capture_input_state`, which
copies the staging buffer into the latches the interpreter reads through
:meth:`InputState.is_pressed` and :meth:`InputState.first_pressed`.

The interpreter itself never writes to either buffer.
"""

from __future__ import annotations

from typing import List, Optional

KEY_COUNT: int = 16


class InputState:
    """Keypad latches as seen by the interpreter."""

    def __init__(self) -> None:
        self._next_keys: List[bool] = [False] * KEY_COUNT
        self._keys: List[bool] = [False] * KEY_COUNT

    # ------------------------------------------------------------------
    # Frame-boundary snapshot
    # ------------------------------------------------------------------

    def capture_input_state(self) -> None:
        """Publish the staging buffer to the latches the core reads."""
        self._keys[:] = self._next_keys

    # ------------------------------------------------------------------
    # Host-side input event injection
    # ------------------------------------------------------------------

    def raise_input(self, key: int, down: bool) -> None:
        """Press (``down=True``) or release *key* in the staging buffer.

        Keys outside 0-15 are ignored.
        """
        if 0 <= key < KEY_COUNT:
            self._next_keys[key] = down

    def clear_all_input(self) -> None:
        """Release every key, in both the staging buffer and the latches."""
        for i in range(KEY_COUNT):
            self._next_keys[i] = False
            self._keys[i] = False

    # ------------------------------------------------------------------
    # Sampling (the interpreter reads the captured latches)
    # ------------------------------------------------------------------

    def is_pressed(self, key: int) -> bool:
        """Return ``True`` if *key* is latched down.

        An index outside 0-15 reads as not pressed.
        """
        if 0 <= key < KEY_COUNT:
            return self._keys[key]
        return False

    def first_pressed(self) -> Optional[int]:
        """Return the lowest latched key index, or ``None``."""
        for key in range(KEY_COUNT):
            if self._keys[key]:
                return key
        return None

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def get_snapshot(self) -> list:
        return list(self._keys)

    def restore_snapshot(self, keys: list) -> None:
        if len(keys) != KEY_COUNT:
            raise ValueError(
                f"Snapshot size mismatch: expected {KEY_COUNT}, got {len(keys)}"
            )
        self._keys[:] = [bool(k) for k in keys]
        self._next_keys[:] = self._keys

    def __repr__(self) -> str:
        held = [f"{k:X}" for k in range(KEY_COUNT) if self._keys[k]]
        return f"InputState(pressed=[{', '.join(held)}])"
