"""
app/ingestion/file_reader.py

Raw file reader: transport decoding, file kind inference, text decoding.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath

from app.ingestion.errors import FileDecodeError, FileTooLargeError, UnsupportedFileTypeError


class FileKind(str, Enum):
    CSV = "csv"
    TSV = "tsv"
    EXCEL = "excel"
    CSS = "css"
    IMAGE = "image"


class DataType(str, Enum):
    """
    Which canonical schema a file is reconciled against.
    """

    CAMPAIGNS = "campaigns"
    EXPERIMENTS = "experiments"


TEXT_FILE_KINDS: frozenset[FileKind] = frozenset({FileKind.CSV, FileKind.TSV})

EXTENSION_KINDS: dict[str, FileKind] = {
    ".csv": FileKind.CSV,
    ".txt": FileKind.CSV,
    ".tsv": FileKind.TSV,
    ".tab": FileKind.TSV,
    ".xlsx": FileKind.EXCEL,
    ".xls": FileKind.EXCEL,
    ".xlsm": FileKind.EXCEL,
    ".css": FileKind.CSS,
    ".png": FileKind.IMAGE,
    ".jpg": FileKind.IMAGE,
    ".jpeg": FileKind.IMAGE,
    ".pdf": FileKind.IMAGE,
}

_UTF16_BOMS: tuple[bytes, ...] = (b"\xff\xfe", b"\xfe\xff")


def infer_file_kind(file_name: str | None, declared: str | FileKind | None = None) -> FileKind:
    """
    Resolve the file kind, preferring an explicitly declared value.
    """

    if declared:
        raw = declared.value if isinstance(declared, FileKind) else str(declared).strip().lower()
        try:
            return FileKind(raw)
        except ValueError as exc:
            allowed = ", ".join(kind.value for kind in FileKind)
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {declared}. Allowed values: {allowed}.",
                context={"file_name": file_name},
            ) from exc

    suffix = PurePath(file_name or "").suffix.lower()
    kind = EXTENSION_KINDS.get(suffix)
    if kind is None:
        raise UnsupportedFileTypeError(
            f"Unsupported file type for '{file_name}'.",
            context={"file_name": file_name, "extension": suffix or None},
        )
    return kind


def parse_data_type(value: str | DataType) -> DataType:
    if isinstance(value, DataType):
        return value
    normalized = str(value).strip().lower()
    try:
        return DataType(normalized)
    except ValueError as exc:
        raise ValueError(
            f"Unsupported data type '{value}'. Allowed values: campaigns, experiments."
        ) from exc


def decode_transport(payload: str | bytes) -> bytes:
    """
    Decode base64 file content, accepting an optional data URL prefix.
    """

    text = payload.decode("ascii", errors="replace") if isinstance(payload, bytes) else payload
    text = text.strip()
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FileDecodeError("File content is not valid base64.") from exc


@dataclass(frozen=True)
class RawFile:
    """
    File bytes plus the kind they should be read as.
    """

    content: bytes
    file_name: str
    kind: FileKind

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        *,
        file_name: str,
        declared_kind: str | FileKind | None = None,
        max_bytes: int | None = None,
    ) -> RawFile:
        if max_bytes is not None and len(content) > max_bytes:
            raise FileTooLargeError(
                f"File '{file_name}' exceeds the {max_bytes} byte limit.",
                context={"file_name": file_name, "size": len(content)},
            )
        return cls(
            content=content,
            file_name=file_name,
            kind=infer_file_kind(file_name, declared_kind),
        )

    @classmethod
    def from_base64(
        cls,
        payload: str | bytes,
        *,
        file_name: str,
        declared_kind: str | FileKind | None = None,
        max_bytes: int | None = None,
    ) -> RawFile:
        return cls.from_bytes(
            decode_transport(payload),
            file_name=file_name,
            declared_kind=declared_kind,
            max_bytes=max_bytes,
        )

    @property
    def is_text(self) -> bool:
        return self.kind in TEXT_FILE_KINDS

    def read_text(self) -> str:
        """
        Decode the content as UTF-8 (BOM tolerant) or BOM-marked UTF-16.
        """

        content = self.content
        try:
            if content.startswith(_UTF16_BOMS):
                text = content.decode("utf-16")
            else:
                text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FileDecodeError(
                f"File '{self.file_name}' must be UTF-8 encoded text.",
                context={"file_name": self.file_name},
            ) from exc

        if "\x00" in text:
            raise FileDecodeError(
                f"File '{self.file_name}' contains binary data and cannot be read as text.",
                context={"file_name": self.file_name},
            )
        return text
