"""Log severity levels."""

from __future__ import annotations

from enum import IntEnum

from quicklog.errors import QuicklogError


class LogLevel(IntEnum):
    """Ordered log severity, lowest first."""

    DEBUG = 0
    TRACE = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5

    @property
    def prefix(self) -> str:
        """One-character prefix shown in every log line."""
        return _PREFIXES[self]


_PREFIXES: dict[LogLevel, str] = {
    LogLevel.DEBUG: "D",
    LogLevel.TRACE: "T",
    LogLevel.INFO: "I",
    LogLevel.WARN: "W",
    LogLevel.ERROR: "E",
    LogLevel.FATAL: "F",
}

# Accepted aliases when parsing level names from configuration
_ALIASES: dict[str, LogLevel] = {
    "WARNING": LogLevel.WARN,
    "CRITICAL": LogLevel.FATAL,
}


def parse_level(value: str | int | LogLevel) -> LogLevel:
    """Convert a level name, prefix or number into a LogLevel.

    Args:
        value: Level name ("warn"), one-character prefix ("W") or integer.

    Returns:
        The matching LogLevel.

    Raises:
        QuicklogError: If the value does not name a level.
    """
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return LogLevel(value)
        except ValueError:
            raise QuicklogError(f"Unknown log level: {value!r}") from None
    if isinstance(value, str):
        name = value.strip().upper()
        if name.isdigit():
            return parse_level(int(name))
        if name in LogLevel.__members__:
            return LogLevel[name]
        if name in _ALIASES:
            return _ALIASES[name]
        for level, prefix in _PREFIXES.items():
            if name == prefix:
                return level
    raise QuicklogError(f"Unknown log level: {value!r}")
