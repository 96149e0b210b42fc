"""
app/mappers package marker.
"""

from app.mappers.canonical_schemas import CAMPAIGN_FIELDS, EXPERIMENT_FIELDS, FieldKind, FieldSpec, fields_for
from app.mappers.field_reconciler import FieldReconciler

__all__ = [
    "CAMPAIGN_FIELDS",
    "EXPERIMENT_FIELDS",
    "FieldKind",
    "FieldReconciler",
    "FieldSpec",
    "fields_for",
]
