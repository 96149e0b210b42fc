"""
app/validators/field_coercion.py

Lenient value coercion for reconciled record fields.

Every function here returns a documented default instead of raising; a
bad cell never fails the surrounding record.
"""

from __future__ import annotations

import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation

TRUTHY_TOKENS: frozenset[str] = frozenset({"true", "yes", "1", "significant"})

# Largest value an int4 column holds.
INT_MAX = 2**31 - 1
_INT_MAX_DIGITS = len(str(INT_MAX))

_NUMERIC_NOISE = re.compile(r"[,%$\s]")
_LIST_SEPARATORS = re.compile(r"[,;]")


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _parse_decimal(value: str | None) -> Decimal | None:
    if _is_blank(value):
        return None
    cleaned = _NUMERIC_NOISE.sub("", str(value))
    try:
        parsed = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def coerce_text(value: str | None, default: str = "") -> str:
    if _is_blank(value):
        return default
    return str(value).strip()


def coerce_float(value: str | None, *, default: float = 0.0, non_negative: bool = False) -> float:
    """
    Parse a decimal number after stripping thousands separators, ``%`` and ``$``.

    Values that overflow a double fall back to *default*.
    """

    parsed = _parse_decimal(value)
    if parsed is None:
        return default
    result = float(parsed)
    if not math.isfinite(result):
        return default
    if non_negative and result < 0:
        return default
    return result


def coerce_int(value: str | None, *, default: int = 0, non_negative: bool = False) -> int:
    """
    Parse an integer; decimal input is truncated toward zero.

    Magnitudes beyond ``INT_MAX`` (the storage column range) fall back to
    *default* before any conversion happens.
    """

    parsed = _parse_decimal(value)
    if parsed is None:
        return default
    if parsed.adjusted() > _INT_MAX_DIGITS or parsed.copy_abs() > INT_MAX:
        return default
    result = int(parsed)
    if non_negative and result < 0:
        return default
    return result


def coerce_percentage(value: str | None, *, default: float = 0.0) -> float:
    """
    Parse a rate as written; ``0.75`` stays 0.75 and ``4.5%`` becomes 4.5.

    There is no upper clamp.
    """

    return coerce_float(value, default=default, non_negative=True)


def coerce_duration_seconds(value: str | None, *, default: int = 0) -> int:
    """
    Parse ``m:ss``, ``h:mm:ss`` or a plain number of seconds.
    """

    if _is_blank(value):
        return default
    raw = str(value).strip()
    if ":" not in raw:
        return coerce_int(raw, default=default, non_negative=True)

    parts = [part.strip() for part in raw.split(":")]
    if len(parts) not in (2, 3) or not all(part.isdecimal() and len(part) <= _INT_MAX_DIGITS for part in parts):
        return default
    total = 0
    for part in parts:
        total = total * 60 + int(part)
    return total if total <= INT_MAX else default


def coerce_bool(value: str | None) -> bool:
    """
    Case-insensitive match against ``TRUTHY_TOKENS``; anything else is False.
    """

    if _is_blank(value):
        return False
    return str(value).strip().lower() in TRUTHY_TOKENS


def coerce_date(value: str | None, *, today: date | None = None) -> str:
    """
    Pass a date through untouched, substituting today's ISO date when empty.
    """

    if _is_blank(value):
        return (today or date.today()).isoformat()
    return str(value).strip()


def coerce_text_list(value: str | None) -> tuple[str, ...]:
    if _is_blank(value):
        return ()
    return tuple(part.strip() for part in _LIST_SEPARATORS.split(str(value)) if part.strip())
