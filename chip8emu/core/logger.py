"""
Lightweight logging hooks for the interpreter core.

The machine writes lifecycle messages and per-instruction trace lines
through this level-filtered interface.  It checks :attr:`ILogger.level`
before formatting anything; the default :class:`NullLogger` reports 0.

Levels: ``1`` lifecycle events (load, reset), ``2`` instruction trace.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

LEVEL_INFO: int = 1
LEVEL_TRACE: int = 2


class ILogger(ABC):
    """Logging interface with level-based filtering."""

    @property
    @abstractmethod
    def level(self) -> int: ...

    @level.setter
    @abstractmethod
    def level(self, value: int): ...

    @abstractmethod
    def log(self, level: int, message: str): ...


class NullLogger(ILogger):
    """No-op logger implementation."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._level = 0
        return cls._instance

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int):
        self._level = value

    def log(self, level: int, message: str):
        pass


class ConsoleLogger(ILogger):
    """Logger that writes through *sink* (``print`` by default)."""

    def __init__(self, level: int = LEVEL_INFO,
                 sink: Optional[Callable[[str], None]] = None):
        self._level = level
        self._sink = sink if sink is not None else print

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int):
        self._level = value

    def log(self, level: int, message: str):
        if level <= self._level:
            self._sink(f"[CHIP8:{level}] {message}")


# Default logger instance
DEFAULT_LOGGER: ILogger = NullLogger()
