"""
app/repositories/historic_data_repository.py

Persistence layer for imported historic campaigns and experiments.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from app.domain.historic_records import CampaignRecord, ExperimentRecord
from db.models.experiment_result import DEDUPE_CONSTRAINT as EXPERIMENT_DEDUPE_CONSTRAINT
from db.models.experiment_result import ExperimentResult
from db.models.historic_campaign import DEDUPE_CONSTRAINT as CAMPAIGN_DEDUPE_CONSTRAINT
from db.models.historic_campaign import HistoricCampaign

STORAGE_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
)


def to_storage_date(value: str, *, today: Callable[[], date] = date.today) -> date:
    """
    Parse a record date for a DATE column; unparseable values become today.
    """

    text = value.strip()
    for fmt in STORAGE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return today()


class HistoricDataRepository:
    """
    Batch inserts and owner-scoped reads for the historic data tables.

    Inserts skip rows that collide with an already stored natural key, so
    importing the same file twice stores nothing the second time.
    """

    def __init__(self, session: Session, *, today: Callable[[], date] = date.today) -> None:
        self._session = session
        self._today = today

    def insert_campaigns(self, owner_id: uuid.UUID, records: Sequence[CampaignRecord]) -> int:
        if not records:
            return 0
        payloads = [self._campaign_payload(owner_id, record) for record in records]
        stmt = (
            insert(HistoricCampaign)
            .values(_dedupe(payloads, ("campaign_name", "campaign_date", "traffic_source")))
            .on_conflict_do_nothing(constraint=CAMPAIGN_DEDUPE_CONSTRAINT)
            .returning(HistoricCampaign.id)
        )
        return len(self._session.scalars(stmt).all())

    def insert_experiments(self, owner_id: uuid.UUID, records: Sequence[ExperimentRecord]) -> int:
        if not records:
            return 0
        payloads = [self._experiment_payload(owner_id, record) for record in records]
        stmt = (
            insert(ExperimentResult)
            .values(_dedupe(payloads, ("experiment_name", "start_date")))
            .on_conflict_do_nothing(constraint=EXPERIMENT_DEDUPE_CONSTRAINT)
            .returning(ExperimentResult.id)
        )
        return len(self._session.scalars(stmt).all())

    def list_campaigns(self, owner_id: uuid.UUID, *, limit: int | None = None) -> list[HistoricCampaign]:
        stmt = (
            select(HistoricCampaign)
            .where(HistoricCampaign.owner_id == owner_id)
            .order_by(HistoricCampaign.campaign_date.desc(), HistoricCampaign.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._session.scalars(stmt).all())

    def list_experiments(self, owner_id: uuid.UUID, *, limit: int | None = None) -> list[ExperimentResult]:
        stmt = (
            select(ExperimentResult)
            .where(ExperimentResult.owner_id == owner_id)
            .order_by(ExperimentResult.start_date.desc(), ExperimentResult.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._session.scalars(stmt).all())

    def _campaign_payload(self, owner_id: uuid.UUID, record: CampaignRecord) -> dict[str, Any]:
        payload = record.to_dict()
        payload["owner_id"] = owner_id
        payload["campaign_date"] = to_storage_date(record.campaign_date, today=self._today)
        return payload

    def _experiment_payload(self, owner_id: uuid.UUID, record: ExperimentRecord) -> dict[str, Any]:
        payload = record.to_dict()
        payload["owner_id"] = owner_id
        payload["start_date"] = to_storage_date(record.start_date, today=self._today)
        payload["end_date"] = to_storage_date(record.end_date, today=self._today)
        return payload


def _dedupe(payloads: Sequence[dict[str, Any]], key_fields: tuple[str, ...]) -> list[dict[str, Any]]:
    # Postgres rejects ON CONFLICT batches that hit the same key twice.
    seen: set[tuple[Any, ...]] = set()
    unique: list[dict[str, Any]] = []
    for payload in payloads:
        key = tuple(payload[name] for name in key_fields)
        if key in seen:
            continue
        seen.add(key)
        unique.append(payload)
    return unique
