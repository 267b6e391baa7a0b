from __future__ import annotations

from chip8emu.core.logger import (
    DEFAULT_LOGGER,
    LEVEL_INFO,
    LEVEL_TRACE,
    ConsoleLogger,
    NullLogger,
)


def test_null_logger_is_a_singleton() -> None:
    assert NullLogger() is NullLogger()
    assert DEFAULT_LOGGER is NullLogger()
    assert DEFAULT_LOGGER.level == 0


def test_console_logger_filters_by_level() -> None:
    lines: list[str] = []
    log = ConsoleLogger(LEVEL_INFO, lines.append)

    log.log(LEVEL_INFO, "loaded")
    log.log(LEVEL_TRACE, "200  00E0  CLS")
    assert lines == ["[CHIP8:1] loaded"]

    log.level = LEVEL_TRACE
    log.log(LEVEL_TRACE, "202  1202  JP #202")
    assert lines[-1] == "[CHIP8:2] 202  1202  JP #202"


def test_console_logger_prints_by_default(capsys) -> None:
    ConsoleLogger().log(LEVEL_INFO, "hello")
    assert capsys.readouterr().out == "[CHIP8:1] hello\n"
