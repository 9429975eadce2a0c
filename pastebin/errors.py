"""
Paste store error types.
"""


class PasteError(Exception):
    """Base class for errors raised by the paste store."""

    status_code = 500


class ValidationError(PasteError):
    """Input has the wrong shape or is out of range."""

    status_code = 400


class NotFound(PasteError):
    """Paste is absent, expired, or out of views.

    The message is the same in every case so callers cannot tell a
    paste that expired from one that never existed.
    """

    status_code = 404

    def __init__(self, message: str = "not found"):
        super().__init__(message)


class StorageError(PasteError):
    """Storage backend failed to read or write."""

    status_code = 500
