"""Helpers shared by the quicklog tests."""

import gzip
import re
from pathlib import Path

LINE_PATTERN = re.compile(
    r"^\[(?P<prefix>[DTIWEF]); (?P<date>\d{4}-\d{2}-\d{2}); (?P<time>\d{2}:\d{2}:\d{2})\] (?P<message>.*)\n$"
)


def split_lines(text: str) -> list[str]:
    """Split output into lines, keeping the newlines."""
    return text.splitlines(keepends=True)


def read_archive(path: Path) -> bytes:
    """Return the decompressed content of a .log.gz archive."""
    return gzip.decompress(path.read_bytes())


def archives(directory: Path) -> list[Path]:
    """Return all archives in a directory, sorted by name."""
    return sorted(directory.glob("*.log.gz"))
