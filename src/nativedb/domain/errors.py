"""Error taxonomy for import and translation workflows."""

from __future__ import annotations


class NativeDbError(RuntimeError):
    """Base class for errors raised by the native catalog core."""


class FeedIOError(NativeDbError):
    """Raised when a vendor feed cannot be downloaded, read or decoded.

    Aborts the whole import: there is no partial feed to process.
    """


class RecordError(NativeDbError):
    """Raised when a single feed record cannot be parsed or merged."""

    def __init__(self, message: str, *, native_hash: str | None = None) -> None:
        super().__init__(message)
        self.native_hash = native_hash


class TranslationServiceError(NativeDbError):
    """Raised when the translation service fails or returns an unusable payload."""
