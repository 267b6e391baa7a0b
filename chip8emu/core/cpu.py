"""
CHIP-8 interpreter core: fetch, decode and the 35 instruction handlers.

Every cycle reads the big-endian word at PC, advances PC by two, latches
the word into :attr:`Chip8State.opcode` and dispatches it.  Handlers take
their operands exclusively from the latched word:

* ``x``   -- bits 8-11, register index
* ``y``   -- bits 4-7, register index
* ``kk``  -- bits 0-7, immediate byte
* ``n``   -- bits 0-3, immediate nibble
* ``nnn`` -- bits 0-11, address

Behaviours worth knowing:

* VF is written by 8xy4/8xy5/8xy6/8xy7/8xyE and Dxyn.  Source registers are
  read before anything is written, so the flag always describes the
  original operands even when x or y is 0xF.
* 8xy6 and 8xyE shift **Vy** into Vx (COSMAC VIP behaviour).
* Fx55 and Fx65 leave I unchanged.
* Fx0A never blocks the host: with no key latched it rewinds PC so the
  same instruction is fetched again on the next cycle.
* Dxyn wraps only the sprite anchor; see
  :mod:`chip8emu.core.frame_buffer` for the row-bleed quirk.
* Every memory access is taken modulo 4096, so a large I aliases back into
  memory instead of trapping.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional

from chip8emu.core.errors import (
    FontDigitError,
    IllegalOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from chip8emu.core.font_tables import GLYPH_COUNT, glyph_address
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.state import Chip8State
from chip8emu.core.types import JumpOffsetPolicy

Handler = Callable[[], None]
Selector = Callable[[int], Handler]


class Chip8CPU:
    """Executes instructions against an explicitly supplied state.

    Parameters
    ----------
    state:
        The processor state to mutate.
    rng:
        Random source for ``Cxkk``.  Pass a seeded :class:`random.Random`
        for reproducible runs; ``None`` creates an OS-seeded one.
    jump_policy:
        Whether ``Bnnn`` masks its target to 12 bits.
    """

    SPRITE_WIDTH: int = 8

    def __init__(
        self,
        state: Chip8State,
        rng: Optional[random.Random] = None,
        jump_policy: JumpOffsetPolicy = JumpOffsetPolicy.Unmasked,
    ) -> None:
        self.state = state
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.jump_policy = JumpOffsetPolicy(jump_policy)
        self.cycle_count: int = 0

        self._opcode_table: List[Selector] = self._build_opcode_table()

    # ------------------------------------------------------------------
    # Fetch / decode / execute
    # ------------------------------------------------------------------

    def cycle(self) -> None:
        """Fetch, decode and execute exactly one instruction."""
        s = self.state
        mem = s.memory
        mask = Chip8State.MEMORY_MASK
        pc = s.pc
        s.opcode = (mem[pc & mask] << 8) | mem[(pc + 1) & mask]
        s.pc = (pc + 2) & 0xFFFF
        self.decode(s.opcode)()
        self.cycle_count += 1

    def decode(self, opcode: int) -> Handler:
        """Return the handler for *opcode*.

        Raises:
            IllegalOpcodeError: If *opcode* is not one of the base
                instructions.
        """
        return self._opcode_table[(opcode >> 12) & 0xF](opcode)

    def _illegal(self, opcode: int) -> IllegalOpcodeError:
        return IllegalOpcodeError(opcode, (self.state.pc - 2) & 0xFFFF)

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    # ==================================================================
    # Instruction handlers
    # ==================================================================

    # -- 0 family --------------------------------------------------------

    def op_0nnn(self) -> None:
        """SYS nnn -- a call into host machine code; ignored."""

    def op_00e0(self) -> None:
        """CLS"""
        self.state.frame_buffer.clear()

    def op_00ee(self) -> None:
        """RET"""
        s = self.state
        if s.sp == 0:
            raise StackUnderflowError(
                f"RET with empty stack at {(s.pc - 2) & 0xFFFF:03X}"
            )
        s.sp -= 1
        s.pc = s.stack[s.sp]

    # -- flow control ----------------------------------------------------

    def op_1nnn(self) -> None:
        """JP nnn"""
        self.state.pc = self.state.opcode & 0x0FFF

    def op_2nnn(self) -> None:
        """CALL nnn"""
        s = self.state
        if s.sp >= Chip8State.STACK_DEPTH:
            raise StackOverflowError(
                f"CALL with full stack ({Chip8State.STACK_DEPTH} frames) "
                f"at {(s.pc - 2) & 0xFFFF:03X}"
            )
        s.stack[s.sp] = s.pc
        s.sp += 1
        s.pc = s.opcode & 0x0FFF

    def op_3xkk(self) -> None:
        """SE Vx, kk"""
        s = self.state
        if s.v[(s.opcode >> 8) & 0xF] == s.opcode & 0xFF:
            self._skip()

    def op_4xkk(self) -> None:
        """SNE Vx, kk"""
        s = self.state
        if s.v[(s.opcode >> 8) & 0xF] != s.opcode & 0xFF:
            self._skip()

    def op_5xy0(self) -> None:
        """SE Vx, Vy"""
        s = self.state
        if s.v[(s.opcode >> 8) & 0xF] == s.v[(s.opcode >> 4) & 0xF]:
            self._skip()

    # -- immediates --------------------------------------------------------

    def op_6xkk(self) -> None:
        """LD Vx, kk"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] = s.opcode & 0xFF

    def op_7xkk(self) -> None:
        """ADD Vx, kk -- wraps, VF untouched."""
        s = self.state
        x = (s.opcode >> 8) & 0xF
        s.v[x] = (s.v[x] + (s.opcode & 0xFF)) & 0xFF

    # -- 8 family: register ALU ------------------------------------------

    def op_8xy0(self) -> None:
        """LD Vx, Vy"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] = s.v[(s.opcode >> 4) & 0xF]

    def op_8xy1(self) -> None:
        """OR Vx, Vy"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] |= s.v[(s.opcode >> 4) & 0xF]

    def op_8xy2(self) -> None:
        """AND Vx, Vy"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] &= s.v[(s.opcode >> 4) & 0xF]

    def op_8xy3(self) -> None:
        """XOR Vx, Vy"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] ^= s.v[(s.opcode >> 4) & 0xF]

    def op_8xy4(self) -> None:
        """ADD Vx, Vy -- VF = carry, written after the sum."""
        s = self.state
        x = (s.opcode >> 8) & 0xF
        total = s.v[x] + s.v[(s.opcode >> 4) & 0xF]
        s.v[x] = total & 0xFF
        s.v[Chip8State.FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_8xy5(self) -> None:
        """SUB Vx, Vy -- VF = NOT borrow (strict Vx > Vy)."""
        s = self.state
        x = (s.opcode >> 8) & 0xF
        vx = s.v[x]
        vy = s.v[(s.opcode >> 4) & 0xF]
        s.v[Chip8State.FLAG_REGISTER] = 1 if vx > vy else 0
        s.v[x] = (vx - vy) & 0xFF

    def op_8xy6(self) -> None:
        """SHR Vx, Vy -- VF = bit shifted out."""
        s = self.state
        source = s.v[(s.opcode >> 4) & 0xF]
        s.v[Chip8State.FLAG_REGISTER] = source & 0x01
        s.v[(s.opcode >> 8) & 0xF] = source >> 1

    def op_8xy7(self) -> None:
        """SUBN Vx, Vy -- VF = NOT borrow (strict Vy > Vx)."""
        s = self.state
        x = (s.opcode >> 8) & 0xF
        vx = s.v[x]
        vy = s.v[(s.opcode >> 4) & 0xF]
        s.v[Chip8State.FLAG_REGISTER] = 1 if vy > vx else 0
        s.v[x] = (vy - vx) & 0xFF

    def op_8xye(self) -> None:
        """SHL Vx, Vy -- VF = bit shifted out."""
        s = self.state
        source = s.v[(s.opcode >> 4) & 0xF]
        s.v[Chip8State.FLAG_REGISTER] = (source >> 7) & 0x01
        s.v[(s.opcode >> 8) & 0xF] = (source << 1) & 0xFF

    def op_9xy0(self) -> None:
        """SNE Vx, Vy"""
        s = self.state
        if s.v[(s.opcode >> 8) & 0xF] != s.v[(s.opcode >> 4) & 0xF]:
            self._skip()

    # -- index, jump with offset, random ---------------------------------

    def op_annn(self) -> None:
        """LD I, nnn"""
        self.state.index = self.state.opcode & 0x0FFF

    def op_bnnn(self) -> None:
        """JP V0, nnn"""
        s = self.state
        target = (s.opcode & 0x0FFF) + s.v[0]
        if self.jump_policy == JumpOffsetPolicy.Wrap12Bit:
            target &= 0x0FFF
        s.pc = target

    def op_cxkk(self) -> None:
        """RND Vx, kk"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] = self.rng.randint(0, 0xFF) & (s.opcode & 0xFF)

    # -- display ---------------------------------------------------------

    def op_dxyn(self) -> None:
        """DRW Vx, Vy, n -- XOR an 8xn sprite from memory[I]."""
        s = self.state
        opcode = s.opcode
        fb = s.frame_buffer
        mem = s.memory
        mask = Chip8State.MEMORY_MASK

        x0 = s.v[(opcode >> 8) & 0xF] % FrameBuffer.WIDTH
        y0 = s.v[(opcode >> 4) & 0xF] % FrameBuffer.HEIGHT
        height = opcode & 0xF

        collision = False
        for row in range(height):
            sprite = mem[(s.index + row) & mask]
            if not sprite:
                continue
            line = fb.offset(x0, y0 + row)
            for col in range(self.SPRITE_WIDTH):
                if sprite & (0x80 >> col):
                    if fb.toggle(line + col):
                        collision = True

        s.v[Chip8State.FLAG_REGISTER] = 1 if collision else 0

    # -- E family: keypad ------------------------------------------------

    def op_ex9e(self) -> None:
        """SKP Vx"""
        s = self.state
        if s.keypad.is_pressed(s.v[(s.opcode >> 8) & 0xF]):
            self._skip()

    def op_exa1(self) -> None:
        """SKNP Vx"""
        s = self.state
        if not s.keypad.is_pressed(s.v[(s.opcode >> 8) & 0xF]):
            self._skip()

    # -- F family: timers, keypad wait, index/memory ---------------------

    def op_fx07(self) -> None:
        """LD Vx, DT"""
        s = self.state
        s.v[(s.opcode >> 8) & 0xF] = s.delay_timer

    def op_fx0a(self) -> None:
        """LD Vx, K -- retried every cycle until a key is latched."""
        s = self.state
        key = s.keypad.first_pressed()
        if key is None:
            s.pc = (s.pc - 2) & 0xFFFF
            return
        s.v[(s.opcode >> 8) & 0xF] = key

    def op_fx15(self) -> None:
        """LD DT, Vx"""
        s = self.state
        s.delay_timer = s.v[(s.opcode >> 8) & 0xF]

    def op_fx18(self) -> None:
        """LD ST, Vx"""
        s = self.state
        s.sound_timer = s.v[(s.opcode >> 8) & 0xF]

    def op_fx1e(self) -> None:
        """ADD I, Vx -- VF untouched."""
        s = self.state
        s.index = (s.index + s.v[(s.opcode >> 8) & 0xF]) & 0xFFFF

    def op_fx29(self) -> None:
        """LD F, Vx"""
        s = self.state
        digit = s.v[(s.opcode >> 8) & 0xF]
        if digit >= GLYPH_COUNT:
            raise FontDigitError(
                f"No font glyph for {digit:#04x} at {(s.pc - 2) & 0xFFFF:03X}"
            )
        s.index = glyph_address(digit)

    def op_fx33(self) -> None:
        """LD B, Vx -- hundreds, tens, ones at I, I+1, I+2."""
        s = self.state
        mem = s.memory
        mask = Chip8State.MEMORY_MASK
        value = s.v[(s.opcode >> 8) & 0xF]
        mem[s.index & mask] = value // 100
        mem[(s.index + 1) & mask] = (value // 10) % 10
        mem[(s.index + 2) & mask] = value % 10

    def op_fx55(self) -> None:
        """LD [I], Vx"""
        s = self.state
        mem = s.memory
        mask = Chip8State.MEMORY_MASK
        for r in range(((s.opcode >> 8) & 0xF) + 1):
            mem[(s.index + r) & mask] = s.v[r]

    def op_fx65(self) -> None:
        """LD Vx, [I]"""
        s = self.state
        mem = s.memory
        mask = Chip8State.MEMORY_MASK
        for r in range(((s.opcode >> 8) & 0xF) + 1):
            s.v[r] = mem[(s.index + r) & mask]

    # ==================================================================
    # Dispatch table -- 16 entries keyed by the high nibble
    # ==================================================================

    def _build_opcode_table(self) -> List[Selector]:
        """Construct the high-nibble dispatch table.

        Each entry maps the full opcode to its handler.  Families that
        share a high nibble look the rest of the word up in a secondary
        table and raise :class:`IllegalOpcodeError` on a miss, so no word
        outside the base instruction set is ever executed as a no-op.
        """

        def _direct(handler: Handler) -> Selector:
            def _select(opcode: int) -> Handler:
                return handler
            return _select

        def _by_mask(
            mask: int,
            table: Dict[int, Handler],
            default: Optional[Handler] = None,
        ) -> Selector:
            def _select(opcode: int) -> Handler:
                handler = table.get(opcode & mask, default)
                if handler is None:
                    raise self._illegal(opcode)
                return handler
            return _select

        t: List[Selector] = [None] * 16  # type: ignore[list-item]

        # 00E0 / 00EE match the whole word; every other 0nnn is SYS.
        t[0x0] = _by_mask(0xFFFF, {
            0x00E0: self.op_00e0,
            0x00EE: self.op_00ee,
        }, default=self.op_0nnn)
        t[0x1] = _direct(self.op_1nnn)
        t[0x2] = _direct(self.op_2nnn)
        t[0x3] = _direct(self.op_3xkk)
        t[0x4] = _direct(self.op_4xkk)
        t[0x5] = _by_mask(0x000F, {0x0: self.op_5xy0})
        t[0x6] = _direct(self.op_6xkk)
        t[0x7] = _direct(self.op_7xkk)
        t[0x8] = _by_mask(0x000F, {
            0x0: self.op_8xy0,
            0x1: self.op_8xy1,
            0x2: self.op_8xy2,
            0x3: self.op_8xy3,
            0x4: self.op_8xy4,
            0x5: self.op_8xy5,
            0x6: self.op_8xy6,
            0x7: self.op_8xy7,
            0xE: self.op_8xye,
        })
        t[0x9] = _by_mask(0x000F, {0x0: self.op_9xy0})
        t[0xA] = _direct(self.op_annn)
        t[0xB] = _direct(self.op_bnnn)
        t[0xC] = _direct(self.op_cxkk)
        t[0xD] = _direct(self.op_dxyn)
        t[0xE] = _by_mask(0x00FF, {
            0x9E: self.op_ex9e,
            0xA1: self.op_exa1,
        })
        t[0xF] = _by_mask(0x00FF, {
            0x07: self.op_fx07,
            0x0A: self.op_fx0a,
            0x15: self.op_fx15,
            0x18: self.op_fx18,
            0x1E: self.op_fx1e,
            0x29: self.op_fx29,
            0x33: self.op_fx33,
            0x55: self.op_fx55,
            0x65: self.op_fx65,
        })
        return t

    # ------------------------------------------------------------------
    # Debug / repr
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        s = self.state
        return (
            f"Chip8CPU(PC=${s.pc:03X} I=${s.index:03X} SP={s.sp} "
            f"opcode=${s.opcode:04X} cycles={self.cycle_count})"
        )
