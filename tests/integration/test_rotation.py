"""End-to-end rotation and archival scenarios."""

import io
from datetime import datetime, timedelta
from pathlib import Path

from quicklog import Config, Logger, LogLevel
from tests.helpers import LINE_PATTERN, archives, read_archive, split_lines


def test_threshold_scenario(tmp_path: Path) -> None:
    """Below-threshold calls write nothing; the first passing call lands in both places."""
    directory = tmp_path / "x"
    stream = io.StringIO()
    logger = Logger(f"{directory}/", Config(level=LogLevel.WARN, write_log_file=True, destination=stream))

    logger.infof("a")
    assert stream.getvalue() == ""
    assert not directory.exists()

    logger.warnf("b")
    match = LINE_PATTERN.match(stream.getvalue())
    assert match is not None
    assert match["prefix"] == "W"
    assert match["message"] == "b"
    assert (directory / "current.log").read_text() == stream.getvalue()

    logger.close()


def test_stale_file_rotation_scenario(tmp_path: Path) -> None:
    """A file created yesterday is archived as <yesterday>_1 and current.log starts empty."""
    stream = io.StringIO()
    logger = Logger(tmp_path, Config(destination=stream))
    logger.infof("from yesterday")
    logger.debugf("also from yesterday")
    pre_rotation = (tmp_path / "current.log").read_bytes()

    yesterday = datetime.now() - timedelta(days=1)
    logger.sink.created_at = yesterday
    logger.errorf("first line today")

    archive = tmp_path / f"{yesterday:%Y-%m-%d}_1.log.gz"
    assert archives(tmp_path) == [archive]
    assert read_archive(archive) == pre_rotation
    assert (tmp_path / "current.log").read_bytes() == b""

    # The line that triggered rotation only reached the stream
    lines = split_lines(stream.getvalue())
    assert len(lines) == 3
    assert lines[-1].endswith("] first line today\n")

    # Later lines the same day are appended again
    logger.infof("second line today")
    assert (tmp_path / "current.log").read_text().endswith("] second line today\n")
    logger.close()


def test_rotation_without_archiving_scenario(tmp_path: Path) -> None:
    """With archiving off, rotation still reopens the file but writes no .gz."""
    logger = Logger(tmp_path, Config(write_log_file=True, archive_logs=False, destination=io.StringIO()))
    logger.infof("old content")
    logger.sink.created_at = datetime.now() - timedelta(days=1)

    logger.infof("rotating")

    assert archives(tmp_path) == []
    assert logger.sink.is_today()
    assert (tmp_path / "current.log").read_bytes() == b""
    logger.close()
    assert archives(tmp_path) == []


def test_several_rotations_for_one_date(tmp_path: Path) -> None:
    """Rotating the same date repeatedly numbers the archives _1, _2, _3."""
    logger = Logger(tmp_path, Config(destination=io.StringIO()))
    stale = datetime.now() - timedelta(days=3)

    contents = []
    for n in range(3):
        logger.infof("round %d", n)
        contents.append((tmp_path / "current.log").read_bytes())
        logger.sink.created_at = stale
        logger.infof("rotate %d", n)

    expected = [tmp_path / f"{stale:%Y-%m-%d}_{n}.log.gz" for n in (1, 2, 3)]
    assert archives(tmp_path) == expected
    assert [read_archive(path) for path in expected] == contents
    logger.close()


def test_close_after_rotation(tmp_path: Path) -> None:
    """close() archives today's content alongside yesterday's archive."""
    logger = Logger(tmp_path, Config(destination=io.StringIO()))
    logger.infof("yesterday")
    yesterday = datetime.now() - timedelta(days=1)
    logger.sink.created_at = yesterday
    logger.infof("rotates")
    logger.infof("today")
    today_content = (tmp_path / "current.log").read_bytes()

    logger.close()

    today_archive = tmp_path / f"{datetime.now():%Y-%m-%d}_1.log.gz"
    assert archives(tmp_path) == sorted([tmp_path / f"{yesterday:%Y-%m-%d}_1.log.gz", today_archive])
    assert read_archive(today_archive) == today_content
    assert not logger.sink.is_ok()


def test_restart_same_day_keeps_numbering(tmp_path: Path) -> None:
    """A second logger on the same directory continues the day's numbering."""
    for run in range(2):
        logger = Logger(tmp_path, Config(destination=io.StringIO()))
        logger.infof("run %d", run)
        logger.close()

    today = f"{datetime.now():%Y-%m-%d}"
    assert [path.name for path in archives(tmp_path)] == [f"{today}_1.log.gz", f"{today}_2.log.gz"]
    assert read_archive(tmp_path / f"{today}_2.log.gz").endswith(b"] run 1\n")
