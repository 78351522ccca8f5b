"""Internal diagnostics for quicklog using loguru.

quicklog is a library, so its own records are disabled by default.
Call enable_diagnostics() to see sink, rotation and archive events.
"""

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    import loguru

PACKAGE_NAME = "quicklog"

DIAGNOSTIC_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Silent until a diagnostic sink is attached
logger.disable(PACKAGE_NAME)


class _DiagnosticsState:
    """Internal state tracker for attached diagnostic sinks."""

    def __init__(self) -> None:
        """Initialize with no sinks attached."""
        self.sink_ids: set[int] = set()


_state = _DiagnosticsState()


def get_logger(name: str) -> "loguru.Logger":
    """Get a logger instance with the given name.

    Args:
        name: The name for the logger (typically __name__).

    Returns:
        A configured logger instance.
    """
    return logger.bind(name=name)


def enable_diagnostics(sink: object | None = None, level: str = "DEBUG") -> int:
    """Attach a sink that receives quicklog's internal records.

    Args:
        sink: Anything loguru accepts as a sink. Defaults to stderr.
        level: Minimum diagnostic level for the sink.

    Returns:
        The sink ID that can be used to remove the sink later.
    """
    if sink is None:
        sink = sys.stderr

    logger.enable(PACKAGE_NAME)
    sink_id = logger.add(sink, level=level, format=DIAGNOSTIC_FORMAT, filter=PACKAGE_NAME)
    _state.sink_ids.add(sink_id)
    return sink_id


def disable_diagnostics(sink_id: int) -> None:
    """Remove a diagnostic sink.

    quicklog records are disabled again once the last sink is gone.

    Args:
        sink_id: The sink ID returned by enable_diagnostics.
    """
    logger.remove(sink_id)
    _state.sink_ids.discard(sink_id)
    if not _state.sink_ids:
        logger.disable(PACKAGE_NAME)
