"""
app/mappers/field_reconciler.py

Maps normalized-header rows onto the canonical campaign and experiment records.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from app.domain.historic_records import (
    DEFAULT_CAMPAIGN_NAME,
    DEFAULT_EXPERIMENT_NAME,
    CampaignRecord,
    ExperimentRecord,
)
from app.mappers.canonical_schemas import FieldKind, FieldSpec, fields_for
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

RECORD_TYPES: dict[str, type[CampaignRecord] | type[ExperimentRecord]] = {
    "campaign": CampaignRecord,
    "experiment": ExperimentRecord,
}

TEXT_DEFAULTS: dict[str, str] = {
    "campaign_name": DEFAULT_CAMPAIGN_NAME,
    "experiment_name": DEFAULT_EXPERIMENT_NAME,
}


class FieldReconciler:
    """
    Resolves loosely named source columns into one fully populated record.

    Synonyms are tried in the order they are declared for each canonical
    field; the first non-empty value is used and the rest are ignored.
    """

    def __init__(
        self,
        schema: str,
        *,
        fields: Sequence[FieldSpec] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        if schema not in RECORD_TYPES:
            raise ValueError(f"Unknown canonical schema '{schema}'.")
        self._schema = schema
        self._record_type = RECORD_TYPES[schema]
        self._fields: tuple[FieldSpec, ...] = tuple(fields or fields_for(schema))
        self._lookup: tuple[tuple[FieldSpec, tuple[str, ...]], ...] = tuple(
            (field_spec, field_spec.lookup_keys) for field_spec in self._fields
        )
        self._today = today

    @property
    def schema(self) -> str:
        return self._schema

    def reconcile(self, row: Mapping[str, str]) -> CampaignRecord | ExperimentRecord:
        """
        Build one canonical record from a normalized-header row.
        """

        values: dict[str, Any] = {}
        for field_spec, keys in self._lookup:
            values[field_spec.name] = self._coerce(field_spec, self._first_value(row, keys))
        return self._record_type(**values)

    def reconcile_all(
        self,
        rows: Iterable[Mapping[str, str]],
    ) -> list[CampaignRecord | ExperimentRecord]:
        return [self.reconcile(row) for row in rows]

    def resolve_sources(self, headers: Sequence[str]) -> dict[str, tuple[str, ...]]:
        """
        Return, per canonical field, the present headers it may read from.

        The first entry of each tuple is the column that takes precedence.
        """

        present = set(headers)
        return {
            field_spec.name: tuple(key for key in keys if key in present)
            for field_spec, keys in self._lookup
        }

    def unmatched_headers(self, headers: Sequence[str]) -> tuple[str, ...]:
        """
        Headers that no canonical field reads; their values are dropped.
        """

        known = {key for _, keys in self._lookup for key in keys}
        unmatched: list[str] = []
        for header in headers:
            if header and header not in known and header not in unmatched:
                unmatched.append(header)
        return tuple(unmatched)

    @staticmethod
    def _first_value(row: Mapping[str, str], keys: Sequence[str]) -> str | None:
        for key in keys:
            value = row.get(key)
            if value is not None and value.strip():
                return value
        return None

    def _coerce(self, field_spec: FieldSpec, value: str | None) -> Any:
        kind = field_spec.kind
        if kind is FieldKind.TEXT:
            return coerce_text(value, TEXT_DEFAULTS.get(field_spec.name, ""))
        if kind is FieldKind.INTEGER:
            return coerce_int(value, non_negative=True)
        if kind is FieldKind.DECIMAL:
            return coerce_float(value, non_negative=True)
        if kind is FieldKind.SIGNED_DECIMAL:
            return coerce_float(value)
        if kind is FieldKind.PERCENTAGE:
            return coerce_percentage(value)
        if kind is FieldKind.DURATION:
            return coerce_duration_seconds(value)
        if kind is FieldKind.BOOLEAN:
            return coerce_bool(value)
        if kind is FieldKind.DATE:
            return coerce_date(value, today=self._today())
        if kind is FieldKind.TEXT_LIST:
            return coerce_text_list(value)
        raise ValueError(f"Unhandled field kind '{kind}' for '{field_spec.name}'.")
