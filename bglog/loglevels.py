"""Logging levels and the run-time registry of enabled levels."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass

DEBUG_VALUE = 100
INFO_VALUE = 300
WARNING_VALUE = 500
FATAL_VALUE = 1000
INTERNAL_FATAL_VALUE = 2000


@dataclass(frozen=True)
class Level:
    """A logging level: a numeric value and its name."""

    value: int
    text: str


DEBUG = Level(DEBUG_VALUE, "DEBUG")
INFO = Level(INFO_VALUE, "INFO")
WARNING = Level(WARNING_VALUE, "WARNING")
FATAL = Level(FATAL_VALUE, "FATAL")

CONTRACT = Level(INTERNAL_FATAL_VALUE, "CONTRACT")
FATAL_SIGNAL = Level(INTERNAL_FATAL_VALUE + 1, "FATAL_SIGNAL")
FATAL_EXCEPTION = Level(INTERNAL_FATAL_VALUE + 2, "FATAL_EXCEPTION")

DEFAULT_LEVELS = (DEBUG, INFO, WARNING, FATAL)


@dataclass
class LoggingLevel:
    """A level together with whether it is enabled."""

    level: Level
    status: bool = True


class Status(enum.Enum):
    """Registry status of a level."""

    ABSENT = "absent"
    ENABLED = "enabled"
    DISABLED = "disabled"


_lock = threading.Lock()
_levels: dict[int, LoggingLevel] = {}


def _defaults() -> dict[int, LoggingLevel]:
    return {level.value: LoggingLevel(level, True) for level in DEFAULT_LEVELS}


_levels.update(_defaults())


def was_fatal(level: Level) -> bool:
    """True if a message at ``level`` must shut the logger down."""
    return level.value >= FATAL.value


def add_log_level(level: Level, enabled: bool = True) -> None:
    """Register ``level``, enabled or disabled, replacing any same-valued one."""
    with _lock:
        _levels[level.value] = LoggingLevel(level, enabled)


def reset() -> None:
    """Keep only the default levels, all enabled."""
    with _lock:
        _levels.clear()
        _levels.update(_defaults())


def set_highest(level: Level) -> None:
    """Enable registered levels at or above ``level`` and disable the rest."""
    with _lock:
        for entry in _levels.values():
            entry.status = entry.level.value >= level.value


def set_enabled(level: Level, enabled: bool) -> None:
    """Set the status of ``level`` if it is registered; otherwise do nothing."""
    with _lock:
        if level.value in _levels:
            _levels[level.value] = LoggingLevel(level, enabled)


def disable(level: Level) -> None:
    """Disable a registered level."""
    set_enabled(level, False)


def enable(level: Level) -> None:
    """Enable a registered level."""
    set_enabled(level, True)


def disable_all() -> None:
    """Disable every registered level, FATAL included."""
    with _lock:
        for entry in _levels.values():
            entry.status = False


def enable_all() -> None:
    """Enable every registered level."""
    with _lock:
        for entry in _levels.values():
            entry.status = True


def get_all() -> dict[int, LoggingLevel]:
    """A snapshot of the registry, ordered by level value."""
    with _lock:
        return {
            value: LoggingLevel(entry.level, entry.status)
            for value, entry in sorted(_levels.items())
        }


def to_string(levels: dict[int, LoggingLevel] | None = None) -> str:
    """One line per level with its name, value and status (1 or 0)."""
    if levels is None:
        levels = get_all()
    return "".join(
        f"name: {entry.level.text} level: {value} status: {int(entry.status)}\n"
        for value, entry in sorted(levels.items())
    )


def get_status(level: Level) -> Status:
    """Whether ``level`` is absent, enabled or disabled in the registry."""
    with _lock:
        entry = _levels.get(level.value)
    if entry is None:
        return Status.ABSENT
    return Status.ENABLED if entry.status else Status.DISABLED


def log_level(level: Level) -> bool:
    """True if messages at ``level`` should be logged."""
    with _lock:
        entry = _levels.get(level.value)
    return entry is not None and entry.status