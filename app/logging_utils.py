"""
Structured logging for historic data imports.

Each event is one compact JSON line carrying the file it concerns, so log
lines from concurrent uploads can be grouped by ``file_name``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from app.ingestion.file_reader import DataType, RawFile

# Column lists longer than this are cut in log lines.
MAX_LOGGED_ITEMS = 25


def file_context(raw_file: RawFile, data_type: DataType) -> dict[str, Any]:
    return {
        "file_name": raw_file.file_name,
        "file_kind": raw_file.kind.value,
        "data_type": data_type.value,
    }


def _compact(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and len(value) > MAX_LOGGED_ITEMS:
        return [*value[:MAX_LOGGED_ITEMS], f"... (+{len(value) - MAX_LOGGED_ITEMS} more)"]
    return value


def log_import_event(
    logger: logging.Logger,
    level: int,
    event: str,
    *,
    raw_file: RawFile,
    data_type: DataType,
    **fields: Any,
) -> None:
    """
    Emit *event* for one imported file as a JSON line.

    File name, kind and data type are always present; long list fields are
    truncated to ``MAX_LOGGED_ITEMS`` entries.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **file_context(raw_file, data_type)}
    payload.update((key, _compact(value)) for key, value in fields.items())
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
