"""Exceptions raised while reconciling the docs folder with the database."""


class SyncError(Exception):
    """Base class for failures that abort a sync run."""

    pass


class EnumerationError(SyncError):
    """Raised when the source directory cannot be listed."""

    pass


class ReadError(SyncError):
    """Raised when a source file cannot be read after enumeration."""

    pass


class StoreError(SyncError):
    """Raised when a destination store operation fails."""

    pass
