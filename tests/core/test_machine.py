"""Frame driver, image loading, timers, tracing and save states."""

from __future__ import annotations

import pytest

from chip8emu.core.errors import RomTooLargeError, StackUnderflowError
from chip8emu.core.logger import LEVEL_TRACE, ConsoleLogger
from chip8emu.core.machine import Machine, MachineConfig
from chip8emu.core.types import JumpOffsetPolicy
from tests.helpers import make_machine, words_to_bytes


def test_load_then_clear_screen() -> None:
    m = make_machine(0x6A02, 0x00E0)
    m.frame_buffer.toggle(0)

    m.step()
    assert m.state.v[0xA] == 0x02
    assert m.state.pc == 0x202

    m.step()
    assert m.frame_buffer.lit_count == 0
    assert m.state.pc == 0x204


def test_oversize_image_is_rejected_without_touching_memory() -> None:
    m = Machine()
    before = bytes(m.state.memory)

    with pytest.raises(RomTooLargeError) as info:
        m.load_rom(bytes([0xAB]) * 3585)

    assert info.value.size == 3585
    assert bytes(m.state.memory) == before
    assert m.rom == b""


def test_image_filling_all_of_program_memory_loads() -> None:
    m = Machine()
    m.load_rom(bytes([0x5A]) * 3584)

    assert m.state.memory[0x200] == 0x5A
    assert m.state.memory[0xFFF] == 0x5A
    assert m.state.pc == 0x200


def test_timers_count_down_to_zero_and_stop() -> None:
    m = Machine()
    m.state.delay_timer = 2
    m.state.sound_timer = 1
    assert m.sound_active

    m.tick_timers()
    assert (m.state.delay_timer, m.state.sound_timer) == (1, 0)
    assert not m.sound_active

    m.tick_timers()
    m.tick_timers()
    assert (m.state.delay_timer, m.state.sound_timer) == (0, 0)


def test_frame_runs_configured_cycles_then_ticks_timers_once() -> None:
    # V2 = 5; DT = V2; loop forever
    m = make_machine(0x6205, 0xF215, 0x1204, cycles_per_frame=10)
    m.compute_next_frame()

    assert m.cpu.cycle_count == 10
    assert m.state.delay_timer == 4
    assert m.frame_number == 1

    m.compute_next_frame()
    assert m.cpu.cycle_count == 20
    assert m.state.delay_timer == 3


def test_frame_captures_staged_input() -> None:
    m = make_machine(0xF10A, 0x1202, cycles_per_frame=1)

    m.compute_next_frame()
    assert m.state.pc == 0x200

    m.input_state.raise_input(0xC, True)
    assert m.state.pc == 0x200
    m.compute_next_frame()

    assert m.state.v[1] == 0xC
    assert m.state.pc == 0x202


def test_halted_machine_does_not_advance() -> None:
    m = make_machine(0x1200)
    m.machine_halt = True
    m.state.delay_timer = 9

    m.compute_next_frame()

    assert m.cpu.cycle_count == 0
    assert m.frame_number == 0
    assert m.state.delay_timer == 9


def test_reset_restores_power_on_state_and_reloads_image() -> None:
    m = make_machine(0x6A02, 0xA300, 0x1204)
    m.compute_next_frame()
    m.frame_buffer.toggle(7)

    m.reset()

    assert m.state.pc == 0x200
    assert m.state.v[0xA] == 0
    assert m.state.index == 0
    assert m.frame_buffer.lit_count == 0
    assert m.frame_number == 0
    assert m.state.memory[0x200:0x206] == words_to_bytes(0x6A02, 0xA300, 0x1204)


def test_trace_logs_each_instruction() -> None:
    lines: list[str] = []
    m = Machine(MachineConfig(seed=0), ConsoleLogger(LEVEL_TRACE, lines.append))
    m.load_rom(words_to_bytes(0x6A02, 0x00E0))
    m.step()
    m.step()

    assert lines == [
        "[CHIP8:1] Loaded 4 byte image at 200",
        "[CHIP8:2] 200  6A02  LD VA, #02",
        "[CHIP8:2] 202  00E0  CLS",
    ]


def test_default_logger_is_silent(capsys: pytest.CaptureFixture[str]) -> None:
    m = make_machine(0x6A02)
    m.step()

    assert capsys.readouterr().out == ""


def test_snapshot_restores_machine() -> None:
    m = make_machine(0xC0FF, 0x7101, 0x1200, cycles_per_frame=3)
    m.compute_next_frame()
    snap = m.get_snapshot()

    m.compute_next_frame()
    later = m.get_snapshot()
    m.compute_next_frame()

    m.restore_snapshot(snap)
    assert m.frame_number == 1
    assert m.cpu.cycle_count == 3
    m.compute_next_frame()
    assert m.get_snapshot() == later


def test_same_seed_gives_same_random_sequence() -> None:
    program = (0xC0FF, 0xC1FF, 0xC2FF, 0xC3FF)
    a = make_machine(*program, seed=99, cycles_per_frame=4)
    b = make_machine(*program, seed=99, cycles_per_frame=4)
    a.compute_next_frame()
    b.compute_next_frame()

    assert a.state.v[:4] == b.state.v[:4]


def test_reset_replays_random_sequence() -> None:
    m = make_machine(0xC0FF, 0xC1FF, seed=5, cycles_per_frame=2)
    m.compute_next_frame()
    first = m.state.v[:2]

    m.reset()
    m.compute_next_frame()
    assert m.state.v[:2] == first


def test_jump_policy_is_passed_to_cpu() -> None:
    m = make_machine(0xBFF5, jump_policy=JumpOffsetPolicy.Wrap12Bit)
    m.state.v[0] = 0x10
    m.step()

    assert m.state.pc == 0x005


@pytest.mark.parametrize(
    "kwargs",
    [{"cycles_per_frame": 0}, {"frame_hz": 0}, {"cycles_per_frame": -3}],
)
def test_config_rejects_non_positive_rates(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        MachineConfig(**kwargs)


def test_key_held_across_reset_stays_pressed() -> None:
    m = make_machine(0x1200, cycles_per_frame=1)
    m.input_state.raise_input(5, True)
    m.compute_next_frame()

    m.load_rom(words_to_bytes(0xF10A, 0x1202))
    m.reset()
    m.compute_next_frame()

    assert m.state.v[1] == 5
    assert m.state.pc == 0x202


def test_fault_halts_machine_until_reset() -> None:
    m = make_machine(0x00EE, cycles_per_frame=3)

    with pytest.raises(StackUnderflowError):
        m.compute_next_frame()
    assert m.machine_halt
    assert m.frame_number == 0

    m.compute_next_frame()
    assert m.cpu.cycle_count == 0

    m.reset()
    assert not m.machine_halt
