"""
app/validators package marker.
"""

from app.validators.field_coercion import (
    coerce_bool,
    coerce_date,
    coerce_duration_seconds,
    coerce_float,
    coerce_int,
    coerce_percentage,
    coerce_text,
    coerce_text_list,
)

__all__ = [
    "coerce_bool",
    "coerce_date",
    "coerce_duration_seconds",
    "coerce_float",
    "coerce_int",
    "coerce_percentage",
    "coerce_text",
    "coerce_text_list",
]
