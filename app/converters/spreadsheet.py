"""
app/converters/spreadsheet.py

Excel workbook to delimited text conversion.

Workbooks are not parsed by the ingestion pipeline itself; this converter
turns the first worksheet into comma-separated text that the tabular parser
then reads like any uploaded CSV.
"""

from __future__ import annotations

import io
import logging
import zipfile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from app.ingestion.errors import FileDecodeError

logger = logging.getLogger(__name__)


class SpreadsheetConverter:
    """
    Reads the first (or named) worksheet of an Excel file as text cells.
    """

    def __init__(self, *, sheet_name: str | int = 0, engine: str | None = "openpyxl") -> None:
        self._sheet_name = sheet_name
        self._engine = engine

    def to_delimited_text(self, content: bytes, *, file_name: str = "") -> str:
        try:
            frame = pd.read_excel(
                io.BytesIO(content),
                sheet_name=self._sheet_name,
                engine=self._engine,
                dtype=str,
                keep_default_na=False,
            )
        except (ValueError, KeyError, OSError, zipfile.BadZipFile, InvalidFileException) as exc:
            raise FileDecodeError(
                f"Workbook '{file_name}' could not be read.",
                context={"file_name": file_name},
            ) from exc

        logger.info(
            "Converted worksheet file=%r rows=%d columns=%d",
            file_name,
            len(frame.index),
            len(frame.columns),
        )
        return frame.to_csv(index=False)

    def __call__(self, content: bytes, *, file_name: str = "") -> str:
        return self.to_delimited_text(content, file_name=file_name)
