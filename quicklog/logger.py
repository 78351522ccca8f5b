"""Leveled logger writing to a stream and a daily rotating file.

Every line goes to the destination stream. When file output is enabled the
line is also appended to ``<directory>/current.log``; once that file is from
a previous day it is archived, closed and reopened empty.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from quicklog.diagnostics import get_logger
from quicklog.errors import FatalError
from quicklog.levels import LogLevel
from quicklog.sink import CURRENT_LOG_NAME, Sink

if TYPE_CHECKING:
    from quicklog.settings import Settings

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d; %H:%M:%S"
LINE_FORMAT = "[{prefix}; {timestamp}] {message}\n"
LABELED_LINE_FORMAT = "[{prefix}; {timestamp}] {{{label}}} {message}\n"

DEFAULT_TRACE_SKIP = 1


@dataclass(frozen=True)
class Config:
    """Logger configuration.

    A Config passed to Logger is used as a whole; only a missing
    destination is filled in with stdout.
    """

    # Prepended to every message as "{label}" when non-empty
    label: str = ""
    # Lowest level that is written
    level: LogLevel = LogLevel.DEBUG
    # Frames to skip when resolving the tracef call site
    trace_skip: int = DEFAULT_TRACE_SKIP
    # Write current.log even when archiving is off
    write_log_file: bool = False
    archive_logs: bool = True
    destination: TextIO | None = None


def format_line(message: str, level: LogLevel, label: str = "", now: datetime | None = None) -> str:
    """Format one log line.

    Args:
        message: Already formatted message text.
        level: Severity of the line.
        label: Optional label shown in braces after the header.
        now: Timestamp to use. Defaults to the current time.

    Returns:
        The line, including the trailing newline.
    """
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    template = LABELED_LINE_FORMAT if label else LINE_FORMAT
    return template.format(prefix=level.prefix, timestamp=timestamp, label=label, message=message)


def _interpolate(fmt: str, args: tuple[object, ...]) -> str:
    """Apply printf-style arguments, leaving the format alone when there are none."""
    if not args:
        return fmt
    return fmt % args


class Logger:
    """Leveled logger with a daily rotating, gzip-archived log file.

    Not thread-safe: callers sharing a Logger across threads must serialize
    every call themselves.
    """

    def __init__(self, directory: str | os.PathLike[str], config: Config | None = None) -> None:
        """Initialize the logger.

        Args:
            directory: Directory holding current.log and the archives.
            config: Full configuration. Defaults to Config().
        """
        if config is None:
            config = Config()
        if config.destination is None:
            config = replace(config, destination=sys.stdout)

        self._config = config
        self._sink = Sink()
        self._directory = Path(directory)
        self._current_log_path = self._directory / CURRENT_LOG_NAME

    @classmethod
    def from_settings(cls, settings: Settings, destination: TextIO | None = None) -> Logger:
        """Create a logger from loaded settings.

        Args:
            settings: Settings to apply.
            destination: Stream for immediate output. Defaults to stdout.

        Returns:
            A configured Logger.
        """
        return cls(settings.directory, settings.to_config(destination))

    @property
    def config(self) -> Config:
        """Current configuration."""
        return self._config

    @property
    def directory(self) -> Path:
        """Directory holding the log files."""
        return self._directory

    @property
    def current_log_path(self) -> Path:
        """Path of the active log file."""
        return self._current_log_path

    @property
    def destination(self) -> TextIO:
        """Stream receiving every written line."""
        return self._config.destination  # type: ignore[return-value]

    @property
    def sink(self) -> Sink:
        """The sink holding the active log file."""
        return self._sink

    def set_dir(self, directory: str | os.PathLike[str]) -> None:
        """Change the log directory.

        An already open file keeps being used until the next rotation.
        """
        self._directory = Path(directory)
        self._current_log_path = self._directory / CURRENT_LOG_NAME

    def get_level(self) -> LogLevel:
        return self._config.level

    def set_level(self, level: LogLevel) -> None:
        self._config = replace(self._config, level=level)

    def is_archiving(self) -> bool:
        return self._config.archive_logs

    def set_archiving(self, archive_logs: bool) -> None:
        self._config = replace(self._config, archive_logs=archive_logs)

    def writes_log_file(self) -> bool:
        return self._config.write_log_file

    def set_write_log_file(self, write_log_file: bool) -> None:
        self._config = replace(self._config, write_log_file=write_log_file)

    def _file_output_enabled(self) -> bool:
        return self._config.write_log_file or self._config.archive_logs

    def _open_sink(self) -> None:
        self._sink = Sink.open(self._directory, self._current_log_path)

    def archive_current_log(self) -> Path | None:
        """Archive the whole active log file next to it.

        Returns:
            Path of the new archive, or None if archiving is disabled.

        Raises:
            ArchiveError: If the archive cannot be written.
        """
        directory = self._sink.directory if self._sink.directory is not None else self._directory
        return self._sink.archive(directory, self._config.archive_logs)

    def _rotate(self) -> None:
        """Archive the stale file and open a fresh one for today."""
        logger.info(f"Rotating {self._current_log_path} (created {self._sink.created_at:%Y-%m-%d})")
        try:
            self.archive_current_log()
        finally:
            self._sink.close()
            self._open_sink()

    def write_line(self, destination: TextIO, message: str, level: LogLevel) -> None:
        """Format a line, write it to the destination and the log file.

        The destination write always happens. If the log file is from a
        previous day it is rotated instead, and this line is not written
        to the new file.

        Args:
            destination: Stream for the immediate write.
            message: Message text.
            level: Severity of the line.

        Raises:
            SinkOpenError: If the log file cannot be opened.
            ArchiveError: If rotation could not archive the stale file.
        """
        line = format_line(message, level, self._config.label)

        try:
            destination.write(line)
        except (OSError, ValueError) as exc:
            logger.warning(f"Failed to write log line to destination: {exc}")

        if not self._file_output_enabled():
            return

        if not self._sink.is_ok():
            self._open_sink()

        if self._sink.is_today():
            self._sink.write(line.encode("utf-8", errors="backslashreplace"))
        else:
            self._rotate()

    def logf(self, level: LogLevel, fmt: str, *args: object) -> None:
        """Log a printf-style message if the level passes the threshold."""
        if level < self._config.level:
            return
        self.write_line(self.destination, _interpolate(fmt, args), level)

    def debugf(self, fmt: str, *args: object) -> None:
        self.logf(LogLevel.DEBUG, fmt, *args)

    def tracef(self, fmt: str, *args: object) -> None:
        """Log at TRACE with the caller's ``[file:line]`` in front.

        The caller is found by walking ``trace_skip`` frames up from here.
        """
        frame = sys._getframe(self._config.trace_skip)
        location = f"[{frame.f_code.co_filename}:{frame.f_lineno}]"
        if args:
            location = location.replace("%", "%%")
        self.logf(LogLevel.TRACE, f"{location} {fmt}", *args)

    def infof(self, fmt: str, *args: object) -> None:
        self.logf(LogLevel.INFO, fmt, *args)

    def warnf(self, fmt: str, *args: object) -> None:
        self.logf(LogLevel.WARN, fmt, *args)

    def errorf(self, fmt: str, *args: object) -> None:
        self.logf(LogLevel.ERROR, fmt, *args)

    def error(self, exc: BaseException) -> None:
        """Log an exception's message at ERROR."""
        self.logf(LogLevel.ERROR, "%s", exc)

    def fatalf(self, fmt: str, *args: object) -> None:
        """Log at FATAL, then raise FatalError with the message.

        Raises:
            FatalError: Always.
        """
        message = _interpolate(fmt, args)
        self.logf(LogLevel.FATAL, "%s", message)
        raise FatalError(message)

    def fatal_err(self, exc: BaseException) -> None:
        """Log an exception at FATAL, then raise FatalError from it.

        Raises:
            FatalError: Always.
        """
        self.logf(LogLevel.FATAL, "%s", exc)
        raise FatalError(str(exc)) from exc

    def close(self) -> None:
        """Archive the active file one last time and close it.

        The file is closed even when archiving fails.

        Raises:
            ArchiveError: If the final archive cannot be written.
        """
        if not self._sink.is_ok():
            return
        try:
            self.archive_current_log()
        finally:
            self._sink.close()
