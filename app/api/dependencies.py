"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Query, UploadFile, status

from app.ingestion.file_reader import DataType, parse_data_type

HISTORIC_UPLOAD_EXTENSIONS: tuple[str, ...] = (".csv", ".tsv", ".txt", ".xlsx", ".xls")


def get_historic_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept only the spreadsheet-like extensions the import pipeline can read.
    """

    filename = (file.filename or "").strip().lower()
    if not filename.endswith(HISTORIC_UPLOAD_EXTENSIONS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only {', '.join(HISTORIC_UPLOAD_EXTENSIONS)} files are allowed.",
        )
    return file


def get_data_type(
    data_type: str = Query(..., description="campaigns or experiments"),
) -> DataType:
    try:
        return parse_data_type(data_type)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
