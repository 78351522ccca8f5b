"""The active log file and its archival.

A Sink owns exactly one open file, ``current.log``, and knows the day it
was created on. Archives are gzip copies named ``<YYYY-MM-DD>_<n>.log.gz``
where ``n`` is one more than the number of archives already present for
that date.
"""

from __future__ import annotations

import glob
import gzip
import os
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from quicklog.diagnostics import get_logger
from quicklog.errors import ArchiveError, SinkOpenError

logger = get_logger(__name__)

CURRENT_LOG_NAME = "current.log"
ARCHIVE_SUFFIX = ".log.gz"
ARCHIVE_DATE_FORMAT = "%Y-%m-%d"

# Mode for created directories and files (rwxrwxr-x)
FILE_MODE = 0o775


def archive_stem(directory: str | os.PathLike[str], created_at: datetime) -> Path:
    """Return the date-based path prefix shared by a day's archives.

    Args:
        directory: Directory the archives live in.
        created_at: Creation time of the archived file.

    Returns:
        Path of the form ``<directory>/<YYYY-MM-DD>``.
    """
    return Path(directory) / created_at.strftime(ARCHIVE_DATE_FORMAT)


def next_archive_path(directory: str | os.PathLike[str], created_at: datetime) -> Path:
    """Return a collision-free archive path for the given day.

    Args:
        directory: Directory the archives live in.
        created_at: Creation time of the archived file.

    Returns:
        Path ``<directory>/<YYYY-MM-DD>_<n>.log.gz`` with n = existing + 1.
    """
    stem = archive_stem(directory, created_at)
    existing = glob.glob(glob.escape(str(stem)) + "*" + ARCHIVE_SUFFIX)
    return Path(f"{stem}_{len(existing) + 1}{ARCHIVE_SUFFIX}")


class Sink:
    """Holds the active log file of one Logger.

    The handle is either fully open or None; there is no half-open state.
    Not safe for concurrent use.
    """

    def __init__(
        self,
        handle: BinaryIO | None = None,
        created_at: datetime | None = None,
        directory: Path | None = None,
    ) -> None:
        """Create a sink, empty unless a handle is given."""
        self.handle = handle
        self.created_at = created_at if created_at is not None else datetime.min
        # Directory the held file lives in
        self.directory = directory

    @classmethod
    def open(cls, directory: str | os.PathLike[str], path: str | os.PathLike[str]) -> Sink:
        """Create the directory and truncate-open the log file.

        The creation time is the file's modification time on disk.

        Args:
            directory: Directory to create, including missing parents.
            path: Log file to truncate and open for reading and writing.

        Returns:
            An open Sink.

        Raises:
            SinkOpenError: If the directory, the file or its stat fails.
        """
        try:
            os.makedirs(directory, mode=FILE_MODE, exist_ok=True)
        except OSError as exc:
            raise SinkOpenError(f"Cannot create log directory {directory}: {exc}") from exc

        try:
            fd = os.open(path, os.O_RDWR | os.O_TRUNC | os.O_CREAT, FILE_MODE)
        except OSError as exc:
            raise SinkOpenError(f"Cannot open log file {path}: {exc}") from exc
        handle = os.fdopen(fd, "r+b")

        try:
            stat = os.stat(path)
        except OSError as exc:
            handle.close()
            raise SinkOpenError(f"Cannot stat log file {path}: {exc}") from exc

        created_at = datetime.fromtimestamp(stat.st_mtime)
        logger.debug(f"Opened log file {path} (created {created_at:%Y-%m-%d %H:%M:%S})")
        return cls(handle, created_at, Path(directory))

    def is_ok(self) -> bool:
        """Return True if a file is currently held."""
        return self.handle is not None

    def is_today(self) -> bool:
        """Return True if the file was created on the current calendar day."""
        now = datetime.now()
        created = self.created_at
        return (
            created.timetuple().tm_yday == now.timetuple().tm_yday
            and created.year == now.year
        )

    def write(self, data: bytes) -> None:
        """Append data to the held file.

        Raises:
            ValueError: If no file is held.
            OSError: If the write fails.
        """
        if self.handle is None:
            raise ValueError("write to a closed sink")
        self.handle.write(data)
        self.handle.flush()

    def read_all(self) -> bytes:
        """Return the entire content of the held file from its start."""
        if self.handle is None:
            raise ValueError("read from a closed sink")
        self.handle.seek(0, os.SEEK_SET)
        return self.handle.read()

    def close(self) -> None:
        """Close the held file. Does nothing when no file is held."""
        if self.handle is None:
            return
        self.handle.close()
        self.handle = None

    def archive(self, directory: str | os.PathLike[str], enabled: bool = True) -> Path | None:
        """Write a gzip copy of the whole file into directory.

        Args:
            directory: Directory the archive is created in.
            enabled: When False nothing is written.

        Returns:
            Path of the archive, or None when archiving is disabled.

        Raises:
            ArchiveError: If listing, creating, reading or compressing fails.
        """
        if not enabled:
            return None

        try:
            archive_path = next_archive_path(directory, self.created_at)
        except OSError as exc:
            raise ArchiveError(f"Cannot list archives in {directory}: {exc}") from exc

        try:
            content = self.read_all()
        except (OSError, ValueError) as exc:
            raise ArchiveError(f"Cannot read log file for archive {archive_path}: {exc}") from exc

        try:
            fd = os.open(archive_path, os.O_WRONLY | os.O_CREAT, FILE_MODE)
        except OSError as exc:
            raise ArchiveError(f"Cannot create archive {archive_path}: {exc}") from exc

        with os.fdopen(fd, "wb") as archive_file:
            try:
                with gzip.GzipFile(fileobj=archive_file, mode="wb") as writer:
                    writer.write(content)
            except OSError as exc:
                archive_path.unlink(missing_ok=True)
                raise ArchiveError(f"Cannot write archive {archive_path}: {exc}") from exc

        logger.debug(f"Archived {len(content)} bytes to {archive_path}")
        return archive_path
