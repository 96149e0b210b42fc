"""
app/ingestion package marker.
"""

from app.ingestion.errors import (
    FileDecodeError,
    FileTooLargeError,
    IngestionError,
    InsufficientDataError,
    UnsupportedFileTypeError,
)
from app.ingestion.file_reader import DataType, FileKind, RawFile

__all__ = [
    "DataType",
    "FileDecodeError",
    "FileKind",
    "FileTooLargeError",
    "IngestionError",
    "InsufficientDataError",
    "RawFile",
    "UnsupportedFileTypeError",
]
