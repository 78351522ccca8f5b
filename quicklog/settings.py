"""Loading quicklog settings from the environment or a JSON file."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from quicklog.diagnostics import get_logger
from quicklog.errors import QuicklogError
from quicklog.levels import LogLevel, parse_level
from quicklog.logger import DEFAULT_TRACE_SKIP, Config

logger = get_logger(__name__)

DEFAULT_LOG_DIR = "./logs/"
MIN_TRACE_SKIP = 0
MAX_TRACE_SKIP = 64

# Environment variables read by Settings.from_env
ENV_KEYS: dict[str, str] = {
    "directory": "QUICKLOG_DIR",
    "level": "QUICKLOG_LEVEL",
    "label": "QUICKLOG_LABEL",
    "trace_skip": "QUICKLOG_TRACE_SKIP",
    "write_log_file": "QUICKLOG_WRITE_LOG_FILE",
    "archive_logs": "QUICKLOG_ARCHIVE_LOGS",
}
CONFIG_PATH_ENV = "QUICKLOG_CONFIG"


@dataclass(frozen=True)
class Settings:
    """User-configurable logger settings."""

    directory: str = DEFAULT_LOG_DIR
    level: LogLevel = LogLevel.DEBUG
    label: str = ""
    trace_skip: int = DEFAULT_TRACE_SKIP
    write_log_file: bool = False
    archive_logs: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Settings:
        """Create settings from a mapping, applying defaults for invalid values.

        Args:
            data: Mapping containing raw settings values.

        Returns:
            A Settings instance with validated values.
        """
        defaults = cls()

        directory = _coerce_str(data.get("directory"))
        if not directory:
            directory = defaults.directory

        level = _coerce_level(data.get("level"))
        if level is None:
            level = defaults.level

        label = _coerce_str(data.get("label"))
        if label is None:
            label = defaults.label

        trace_skip = _coerce_int(data.get("trace_skip"))
        if trace_skip is None or trace_skip < MIN_TRACE_SKIP or trace_skip > MAX_TRACE_SKIP:
            trace_skip = defaults.trace_skip

        write_log_file = _coerce_bool(data.get("write_log_file"))
        if write_log_file is None:
            write_log_file = defaults.write_log_file

        archive_logs = _coerce_bool(data.get("archive_logs"))
        if archive_logs is None:
            archive_logs = defaults.archive_logs

        return cls(
            directory=directory,
            level=level,
            label=label,
            trace_skip=trace_skip,
            write_log_file=write_log_file,
            archive_logs=archive_logs,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Create settings from QUICKLOG_* environment variables.

        Args:
            environ: Environment to read. Defaults to os.environ.

        Returns:
            Settings with unset or invalid variables at their defaults.
        """
        if environ is None:
            environ = os.environ
        raw = {field: environ[key] for field, key in ENV_KEYS.items() if key in environ}
        return cls.from_mapping(raw)

    def to_config(self, destination: TextIO | None = None) -> Config:
        """Build a logger Config from these settings.

        Args:
            destination: Stream for immediate output. None means stdout.

        Returns:
            The equivalent Config.
        """
        return Config(
            label=self.label,
            level=self.level,
            trace_skip=self.trace_skip,
            write_log_file=self.write_log_file,
            archive_logs=self.archive_logs,
            destination=destination,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize settings to a dictionary.

        Returns:
            Dictionary representation of settings.
        """
        return {
            "directory": self.directory,
            "level": self.level.name,
            "label": self.label,
            "trace_skip": self.trace_skip,
            "write_log_file": self.write_log_file,
            "archive_logs": self.archive_logs,
        }


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Load settings from a JSON file.

    Args:
        path: Settings file. Defaults to $QUICKLOG_CONFIG, else the environment.

    Returns:
        Loaded settings, or defaults if the file is missing or invalid.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if not env_path:
            return Settings.from_env()
        path = env_path

    settings_path = Path(path).expanduser()
    if not settings_path.exists():
        return Settings()

    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning(f"Failed to parse settings file {settings_path}: {exc}")
        return Settings()
    except OSError as exc:
        logger.warning(f"Failed to read settings file {settings_path}: {exc}")
        return Settings()

    if not isinstance(raw, dict):
        logger.warning(f"Settings file {settings_path} contains invalid data")
        return Settings()

    return Settings.from_mapping(raw)


def save_settings(settings: Settings, path: str | os.PathLike[str]) -> None:
    """Persist settings to a JSON file.

    Args:
        settings: Settings to persist.
        path: Destination file.
    """
    settings_path = Path(path).expanduser()
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Failed to save settings to {settings_path}: {exc}")


def _coerce_str(value: object) -> str | None:
    """Coerce a value into a string if possible.

    Args:
        value: Raw value to coerce.

    Returns:
        String value or None.
    """
    if isinstance(value, str):
        return value
    return None


def _coerce_int(value: object) -> int | None:
    """Coerce a value into an integer if possible.

    Args:
        value: Raw value to coerce.

    Returns:
        Integer value or None.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _coerce_bool(value: object) -> bool | None:
    """Coerce a value into a boolean if possible.

    Args:
        value: Raw value to coerce.

    Returns:
        Boolean value or None.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ("true", "1", "yes"):
            return True
        if value.lower() in ("false", "0", "no"):
            return False
    return None


def _coerce_level(value: object) -> LogLevel | None:
    """Coerce a level name or number into a LogLevel if possible."""
    if value is None or isinstance(value, bool) or not isinstance(value, str | int):
        return None
    try:
        return parse_level(value)
    except QuicklogError:
        return None
