"""
FrameBuffer -- the 64x32 monochrome display of the CHIP-8.

The buffer holds one byte per cell, laid out row-major:
``video_buffer[y * WIDTH + x]``.  A cell is either ``1`` (lit) or ``0``
(unlit).  The interpreter never sets a cell directly; sprites are XORed on
with :meth:`FrameBuffer.toggle`.

Sprite placement quirk
----------------------
``Dxyn`` wraps only the sprite anchor onto the screen.  Each sprite pixel
is then addressed as ``(y0 + row) * WIDTH + (x0 + col)`` with no clamp on
the column, so a sprite crossing the right edge continues on the *next*
row, starting at column 0.  Offsets past the end of the buffer
(:attr:`FrameBuffer.size`) are dropped by :meth:`toggle`.
"""

from __future__ import annotations


class FrameBuffer:
    """Holds the lit/unlit state of every display cell."""

    WIDTH: int = 64
    HEIGHT: int = 32

    LIT: int = 1
    UNLIT: int = 0

    def __init__(self) -> None:
        self._size: int = self.WIDTH * self.HEIGHT
        self.video_buffer: bytearray = bytearray(self._size)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Total number of cells in the buffer."""
        return self._size

    def offset(self, x: int, y: int) -> int:
        """Return the linear offset of cell (*x*, *y*) without clamping."""
        return y * self.WIDTH + x

    def read_pixel(self, x: int, y: int) -> int:
        """Return ``1`` if the on-screen cell (*x*, *y*) is lit.

        Raises:
            IndexError: If the coordinates are outside the screen.
        """
        if not (0 <= x < self.WIDTH and 0 <= y < self.HEIGHT):
            raise IndexError(f"pixel ({x}, {y}) outside {self.WIDTH}x{self.HEIGHT}")
        return self.video_buffer[self.offset(x, y)]

    def toggle(self, offset: int) -> bool:
        """XOR a lit pixel onto the cell at linear *offset*.

        Returns:
            ``True`` if the cell was lit before (and is now unlit), which is
            the collision condition for ``Dxyn``.  Offsets outside the
            buffer are ignored and report no collision.
        """
        if not 0 <= offset < self._size:
            return False
        was_lit = self.video_buffer[offset] == self.LIT
        self.video_buffer[offset] ^= self.LIT
        return was_lit

    def clear(self) -> None:
        """Turn every cell off."""
        self.video_buffer[:] = bytes(self._size)

    @property
    def lit_count(self) -> int:
        """Number of lit cells (handy for tests and diagnostics)."""
        return self.video_buffer.count(self.LIT)

    def rows(self) -> list[str]:
        """Render the buffer as text, ``#`` for lit and ``.`` for unlit."""
        out = []
        for y in range(self.HEIGHT):
            start = y * self.WIDTH
            line = self.video_buffer[start:start + self.WIDTH]
            out.append("".join("#" if c else "." for c in line))
        return out

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def get_snapshot(self) -> bytes:
        """Return an immutable copy of the cells."""
        return bytes(self.video_buffer)

    def restore_snapshot(self, data: bytes) -> None:
        """Restore the cells from a previous snapshot.

        Raises:
            ValueError: If *data* is not exactly :attr:`size` bytes long.
        """
        if len(data) != self._size:
            raise ValueError(
                f"Snapshot size mismatch: expected {self._size}, got {len(data)}"
            )
        self.video_buffer[:] = data

    def __repr__(self) -> str:
        return (
            f"FrameBuffer({self.WIDTH}x{self.HEIGHT}, lit={self.lit_count})"
        )
