"""Sprite drawing, collision and the edge placement rules."""

from __future__ import annotations

from chip8emu.core.cpu import Chip8CPU
from tests.helpers import execute, make_cpu


def draw(cpu: Chip8CPU, x: int, y: int, *rows: int) -> None:
    s = cpu.state
    s.index = 0x300
    s.memory[0x300:0x300 + len(rows)] = bytes(rows)
    s.v[0] = x
    s.v[1] = y
    execute(cpu, 0xD010 | len(rows))


def lit(cpu: Chip8CPU) -> set:
    buf = cpu.state.frame_buffer.video_buffer
    return {(i % 64, i // 64) for i, c in enumerate(buf) if c}


def test_font_zero_draws_fourteen_pixels() -> None:
    cpu = make_cpu()
    cpu.state.index = 0x050
    execute(cpu, 0xD015)

    assert cpu.state.frame_buffer.lit_count == 14
    assert cpu.state.v[0xF] == 0
    assert cpu.state.frame_buffer.rows()[0].startswith("####....")
    assert cpu.state.frame_buffer.rows()[1].startswith("#..#....")


def test_redrawing_erases_and_reports_collision() -> None:
    cpu = make_cpu()
    cpu.state.index = 0x050
    execute(cpu, 0xD015)
    execute(cpu, 0xD015)

    assert cpu.state.frame_buffer.lit_count == 0
    assert cpu.state.v[0xF] == 1


def test_anchor_wraps_onto_screen() -> None:
    cpu = make_cpu()
    draw(cpu, 67, 33, 0x80)

    assert lit(cpu) == {(3, 1)}


def test_right_edge_bleeds_onto_next_row() -> None:
    cpu = make_cpu()
    draw(cpu, 62, 0, 0xFF)

    expected = {(62, 0), (63, 0)} | {(col, 1) for col in range(6)}
    assert lit(cpu) == expected
    assert cpu.state.v[0xF] == 0


def test_rows_past_bottom_are_dropped() -> None:
    cpu = make_cpu()
    draw(cpu, 0, 31, 0xFF, 0xFF, 0xFF)

    assert lit(cpu) == {(col, 31) for col in range(8)}


def test_bottom_right_corner_drops_overflow() -> None:
    cpu = make_cpu()
    draw(cpu, 62, 31, 0xFF)

    assert lit(cpu) == {(62, 31), (63, 31)}
    assert cpu.state.v[0xF] == 0


def test_partial_overlap_collides_and_keeps_new_pixels() -> None:
    cpu = make_cpu()
    draw(cpu, 0, 0, 0x80)
    draw(cpu, 0, 0, 0xC0)

    assert lit(cpu) == {(1, 0)}
    assert cpu.state.v[0xF] == 1


def test_collision_flag_is_cleared_by_a_clean_draw() -> None:
    cpu = make_cpu()
    cpu.state.v[0xF] = 1
    draw(cpu, 10, 10, 0x01)

    assert cpu.state.v[0xF] == 0
    assert lit(cpu) == {(17, 10)}


def test_zero_height_draws_nothing_and_clears_flag() -> None:
    cpu = make_cpu()
    cpu.state.v[0xF] = 1
    execute(cpu, 0xD010)

    assert cpu.state.frame_buffer.lit_count == 0
    assert cpu.state.v[0xF] == 0


def test_flag_register_as_coordinate_is_read_first() -> None:
    cpu = make_cpu()
    cpu.state.index = 0x300
    cpu.state.memory[0x300] = 0x80
    cpu.state.v[0xF] = 10
    execute(cpu, 0xDF01)

    assert lit(cpu) == {(10, 0)}
    assert cpu.state.v[0xF] == 0


def test_clear_screen() -> None:
    cpu = make_cpu()
    draw(cpu, 5, 5, 0xFF, 0xFF)
    execute(cpu, 0x00E0)

    assert cpu.state.frame_buffer.lit_count == 0
