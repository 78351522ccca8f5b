"""Shared test fixtures for quicklog."""

import io
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from quicklog import Config, Logger


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Directory for current.log and archives (not created yet)."""
    return tmp_path / "logs"


@pytest.fixture
def stream() -> io.StringIO:
    """In-memory destination stream."""
    return io.StringIO()


@pytest.fixture
def file_logger(log_dir: Path, stream: io.StringIO) -> Iterator[Logger]:
    """Logger writing to the in-memory stream and to log_dir/current.log."""
    logger = Logger(log_dir, Config(destination=stream, write_log_file=True, archive_logs=True))
    yield logger
    logger.sink.close()


@pytest.fixture
def yesterday() -> datetime:
    """The current moment minus one day."""
    return datetime.now() - timedelta(days=1)


