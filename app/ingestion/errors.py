"""
app/ingestion/errors.py

Fatal ingestion errors.

Only structurally unreadable input is raised to the caller. Field and row
level problems are absorbed into record defaults and never surface here.
"""

from __future__ import annotations

from typing import Any


class IngestionError(ValueError):
    """
    Base class for errors that abort one file's ingestion run.
    """

    code = "ingestion_failed"

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class FileDecodeError(IngestionError):
    """
    Raised when file content cannot be decoded as text.
    """

    code = "file_not_decodable"


class FileTooLargeError(IngestionError):
    """
    Raised when file content exceeds the configured size limit.
    """

    code = "file_too_large"


class UnsupportedFileTypeError(IngestionError):
    """
    Raised when no tabular text can be produced for the declared file kind.
    """

    code = "unsupported_file_type"


class InsufficientDataError(IngestionError):
    """
    Raised when the text holds fewer than two non-blank lines.
    """

    code = "insufficient_data"
