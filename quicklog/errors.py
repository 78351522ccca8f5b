"""Exceptions raised by quicklog."""


class QuicklogError(Exception):
    """Base class for quicklog errors."""


class SinkOpenError(QuicklogError):
    """Raised when the active log file cannot be created or inspected."""


class ArchiveError(QuicklogError):
    """Raised when the active log file cannot be archived."""


class FatalError(QuicklogError):
    """Raised by fatal-level calls after the message has been logged."""


class NotInitializedError(QuicklogError):
    """Raised when the default logger is used before quicklog.init()."""


class AlreadyInitializedError(QuicklogError):
    """Raised when quicklog.init() is called while a default logger exists."""
