"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class HistoricIngestionSettings:
    """
    Runtime settings for historic campaign / experiment file ingestion.
    """

    batch_size: int = 20
    max_file_bytes: int = 10 * 1024 * 1024
    log_unmatched_columns: bool = True
    excel_sheet_name: str = "0"


@dataclass(frozen=True)
class InsightsSettings:
    """
    Thresholds used by the insight aggregators.
    """

    conversion_rate_threshold: float = 3.0
    top_channel_limit: int = 3


@lru_cache(maxsize=1)
def get_historic_ingestion_settings() -> HistoricIngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return HistoricIngestionSettings(
        batch_size=max(1, _get_int_env("HISTORIC_INGEST_BATCH_SIZE", 20)),
        max_file_bytes=max(1, _get_int_env("HISTORIC_INGEST_MAX_FILE_BYTES", 10 * 1024 * 1024)),
        log_unmatched_columns=_get_bool_env("HISTORIC_INGEST_LOG_UNMATCHED_COLUMNS", True),
        excel_sheet_name=_get_str_env("HISTORIC_INGEST_EXCEL_SHEET", "0"),
    )


@lru_cache(maxsize=1)
def get_insights_settings() -> InsightsSettings:
    """
    Return cached insight thresholds from environment variables.
    """

    return InsightsSettings(
        conversion_rate_threshold=max(0.0, _get_float_env("INSIGHTS_CONVERSION_RATE_THRESHOLD", 3.0)),
        top_channel_limit=max(1, _get_int_env("INSIGHTS_TOP_CHANNEL_LIMIT", 3)),
    )
