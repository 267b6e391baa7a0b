"""Register arithmetic, logic and shift instructions."""

from __future__ import annotations

import pytest

from chip8emu.core.cpu import Chip8CPU
from tests.helpers import execute, make_cpu


def alu(cpu: Chip8CPU, opcode: int, a: int, b: int) -> None:
    s = cpu.state
    s.v[(opcode >> 8) & 0xF] = a
    s.v[(opcode >> 4) & 0xF] = b
    s.pc = 0x200
    execute(cpu, opcode)


def test_add_sets_carry_iff_sum_exceeds_255() -> None:
    cpu = make_cpu()
    v = cpu.state.v
    for a in range(256):
        for b in range(256):
            alu(cpu, 0x8124, a, b)
            assert v[1] == (a + b) & 0xFF
            assert v[0xF] == (1 if a + b > 255 else 0)


def test_sub_sets_flag_iff_vx_greater_than_vy() -> None:
    cpu = make_cpu()
    v = cpu.state.v
    for a in range(256):
        for b in range(256):
            alu(cpu, 0x8125, a, b)
            assert v[1] == (a - b) & 0xFF
            assert v[0xF] == (1 if a > b else 0)


def test_subn_mirrors_sub_with_operands_swapped() -> None:
    cpu = make_cpu()
    v = cpu.state.v
    for a in range(256):
        for b in range(256):
            alu(cpu, 0x8127, a, b)
            assert v[1] == (b - a) & 0xFF
            assert v[0xF] == (1 if b > a else 0)


def test_equal_operands_clear_the_subtract_flags() -> None:
    cpu = make_cpu()
    alu(cpu, 0x8125, 0x40, 0x40)
    assert cpu.state.v[1] == 0
    assert cpu.state.v[0xF] == 0

    alu(cpu, 0x8127, 0x40, 0x40)
    assert cpu.state.v[0xF] == 0


def test_shift_right_uses_vy_and_reports_lsb() -> None:
    cpu = make_cpu()
    for value in range(256):
        alu(cpu, 0x8126, 0xAA, value)
        assert cpu.state.v[1] == value >> 1
        assert cpu.state.v[0xF] == value & 1
        assert cpu.state.v[2] == value


def test_shift_left_uses_vy_and_reports_msb() -> None:
    cpu = make_cpu()
    for value in range(256):
        alu(cpu, 0x812E, 0x00, value)
        assert cpu.state.v[1] == (value << 1) & 0xFF
        assert cpu.state.v[0xF] == value >> 7


def test_flag_register_as_source_is_read_before_it_is_overwritten() -> None:
    cpu = make_cpu()
    cpu.state.v[0xF] = 0x03
    cpu.state.pc = 0x200
    execute(cpu, 0x81F6)

    assert cpu.state.v[1] == 0x01
    assert cpu.state.v[0xF] == 1


@pytest.mark.parametrize(
    "opcode,vf,vy,expected_vf",
    [
        (0x8F14, 0xFF, 0x01, 1),      # flag written last
        (0x8F15, 0x05, 0x03, 0x02),   # result written last
        (0x8F16, 0x00, 0x05, 0x02),
        (0x8F17, 0x03, 0x05, 0x02),
        (0x8F1E, 0x00, 0x81, 0x02),
    ],
)
def test_flag_register_as_destination(
    opcode: int, vf: int, vy: int, expected_vf: int
) -> None:
    cpu = make_cpu()
    cpu.state.v[0xF] = vf
    cpu.state.v[1] = vy
    execute(cpu, opcode)

    assert cpu.state.v[0xF] == expected_vf


def test_add_immediate_wraps_and_leaves_flag_alone() -> None:
    cpu = make_cpu()
    cpu.state.v[0xF] = 0xAA
    cpu.state.v[1] = 0xFF
    execute(cpu, 0x7102)

    assert cpu.state.v[1] == 0x01
    assert cpu.state.v[0xF] == 0xAA


def test_load_immediate_and_register_copy() -> None:
    cpu = make_cpu(0x6A02, 0x8BA0)
    cpu.cycle()
    cpu.cycle()

    assert cpu.state.v[0xA] == 0x02
    assert cpu.state.v[0xB] == 0x02
    assert cpu.state.pc == 0x204


@pytest.mark.parametrize(
    "opcode,expected",
    [
        (0x8121, 0b1110),
        (0x8122, 0b1000),
        (0x8123, 0b0110),
    ],
)
def test_bitwise_logic(opcode: int, expected: int) -> None:
    cpu = make_cpu()
    cpu.state.v[0xF] = 0x77
    alu(cpu, opcode, 0b1100, 0b1010)

    assert cpu.state.v[1] == expected
    assert cpu.state.v[0xF] == 0x77
