"""Leveled logging to a stream and a daily gzip-archived log file.

Create a Logger and pass it around, or call init() once to set up the
package-wide default logger used by the module-level functions::

    import quicklog

    quicklog.init("./logs/")
    quicklog.infof("started %s", name)
    ...
    quicklog.close()  # archives the last day's log

close() must be called before the program exits, otherwise the final
day's content is left unarchived in current.log.
"""

from __future__ import annotations

import os

from quicklog.diagnostics import disable_diagnostics, enable_diagnostics, get_logger
from quicklog.errors import (
    AlreadyInitializedError,
    ArchiveError,
    FatalError,
    NotInitializedError,
    QuicklogError,
    SinkOpenError,
)
from quicklog.levels import LogLevel, parse_level
from quicklog.logger import Config, Logger, format_line
from quicklog.settings import DEFAULT_LOG_DIR, Settings, load_settings
from quicklog.sink import Sink

__all__ = [
    "AlreadyInitializedError",
    "ArchiveError",
    "Config",
    "DEFAULT_CONFIG",
    "DEFAULT_LOG_DIR",
    "FatalError",
    "LogLevel",
    "Logger",
    "NotInitializedError",
    "QuicklogError",
    "Settings",
    "Sink",
    "SinkOpenError",
    "close",
    "debugf",
    "disable_diagnostics",
    "enable_diagnostics",
    "error",
    "errorf",
    "fatal_err",
    "fatalf",
    "format_line",
    "get_default",
    "get_level",
    "get_logger",
    "infof",
    "init",
    "is_archiving",
    "load_settings",
    "parse_level",
    "set_archiving",
    "set_dir",
    "set_level",
    "set_write_log_file",
    "tracef",
    "warnf",
]

# One extra trace frame for the module-level wrappers below
DEFAULT_CONFIG = Config(
    level=LogLevel.DEBUG,
    trace_skip=2,
    write_log_file=True,
    archive_logs=True,
)


class _DefaultState:
    """Holder for the package-wide default logger."""

    def __init__(self) -> None:
        """Start without a default logger."""
        self.logger: Logger | None = None


_state = _DefaultState()


def init(directory: str | os.PathLike[str] = DEFAULT_LOG_DIR, config: Config | None = None) -> Logger:
    """Create the default logger.

    May be called once; call close() before initializing again.

    Args:
        directory: Directory for current.log and archives.
        config: Configuration. Defaults to DEFAULT_CONFIG.

    Returns:
        The default logger.

    Raises:
        AlreadyInitializedError: If a default logger already exists.
    """
    if _state.logger is not None:
        raise AlreadyInitializedError("quicklog default logger is already initialized")
    _state.logger = Logger(directory, config if config is not None else DEFAULT_CONFIG)
    return _state.logger


def get_default() -> Logger:
    """Return the default logger.

    Raises:
        NotInitializedError: If init() has not been called.
    """
    if _state.logger is None:
        raise NotInitializedError("quicklog default logger is not initialized; call quicklog.init() first")
    return _state.logger


def close() -> None:
    """Archive and close the default logger, then forget it.

    Raises:
        ArchiveError: If the final archive cannot be written.
    """
    default = get_default()
    _state.logger = None
    default.close()


def set_dir(directory: str | os.PathLike[str]) -> None:
    get_default().set_dir(directory)


def get_level() -> LogLevel:
    return get_default().get_level()


def set_level(level: LogLevel) -> None:
    get_default().set_level(level)


def is_archiving() -> bool:
    return get_default().is_archiving()


def set_archiving(archive_logs: bool) -> None:
    get_default().set_archiving(archive_logs)


def set_write_log_file(write_log_file: bool) -> None:
    get_default().set_write_log_file(write_log_file)


def debugf(fmt: str, *args: object) -> None:
    get_default().debugf(fmt, *args)


def tracef(fmt: str, *args: object) -> None:
    get_default().tracef(fmt, *args)


def infof(fmt: str, *args: object) -> None:
    get_default().infof(fmt, *args)


def warnf(fmt: str, *args: object) -> None:
    get_default().warnf(fmt, *args)


def errorf(fmt: str, *args: object) -> None:
    get_default().errorf(fmt, *args)


def error(exc: BaseException) -> None:
    get_default().error(exc)


def fatalf(fmt: str, *args: object) -> None:
    get_default().fatalf(fmt, *args)


def fatal_err(exc: BaseException) -> None:
    get_default().fatal_err(exc)
