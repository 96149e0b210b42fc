"""
app/services/historic_data_service.py

Service layer for historic campaign / experiment imports.

The service owns what the pure pipeline does not: transport decoding, size
limits and persistence. Records are written in fixed-size batches; a batch
that fails is rolled back, logged and counted in ``errors`` while the
remaining batches still run.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_historic_ingestion_settings, get_insights_settings
from app.converters.spreadsheet import SpreadsheetConverter
from app.domain.historic_records import CampaignRecord, ExperimentRecord, ImportSummary
from app.ingestion.file_reader import DataType, FileKind, RawFile
from app.repositories.historic_data_repository import HistoricDataRepository
from app.services.ingestion_pipeline import HistoricDataPipeline, PipelineResult
from db.models.experiment_result import ExperimentResult
from db.models.historic_campaign import HistoricCampaign
from insights.campaign import CampaignInsightsAggregator
from insights.experiment import ExperimentInsightsAggregator
from insights.readiness import is_ready_for_generation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredHistoricData:
    campaigns: list[HistoricCampaign]
    experiments: list[ExperimentResult]

    @property
    def ready_for_generation(self) -> bool:
        return is_ready_for_generation(len(self.campaigns), len(self.experiments))


class HistoricDataService:
    """
    Coordinates decoding, the ingestion pipeline and batched persistence.
    """

    def __init__(
        self,
        *,
        pipeline: HistoricDataPipeline,
        batch_size: int,
        max_file_bytes: int | None = None,
        repository_factory: Callable[[Session], HistoricDataRepository] = HistoricDataRepository,
    ) -> None:
        self._pipeline = pipeline
        self._repository_factory = repository_factory
        self._batch_size = max(1, batch_size)
        self._max_file_bytes = max_file_bytes

    def read_base64(
        self,
        *,
        file_content: str,
        file_name: str,
        file_type: str | None = None,
    ) -> RawFile:
        return RawFile.from_base64(
            file_content,
            file_name=file_name,
            declared_kind=file_type,
            max_bytes=self._max_file_bytes,
        )

    def read_bytes(self, *, content: bytes, file_name: str) -> RawFile:
        return RawFile.from_bytes(content, file_name=file_name, max_bytes=self._max_file_bytes)

    def preview(self, raw_file: RawFile, data_type: DataType) -> PipelineResult:
        """
        Run the pipeline without touching the database.
        """

        return self._pipeline.run(raw_file, data_type)

    def import_file(
        self,
        *,
        raw_file: RawFile,
        data_type: DataType,
        owner_id: uuid.UUID,
        db: Session,
    ) -> ImportSummary:
        """
        Run the pipeline on *raw_file* and persist every record for *owner_id*.

        Pipeline errors (``IngestionError`` subclasses) propagate untouched;
        nothing has been written when they are raised.
        """

        result = self._pipeline.run(raw_file, data_type)
        repository = self._repository_factory(db)

        stored = 0
        errors = 0
        records = result.records
        for start in range(0, len(records), self._batch_size):
            batch = records[start : start + self._batch_size]
            try:
                stored += self._persist_batch(repository, owner_id, data_type, batch)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                errors += len(batch)
                logger.warning(
                    "Historic data batch failed file=%r data_type=%s offset=%d size=%d: %s",
                    raw_file.file_name,
                    data_type.value,
                    start,
                    len(batch),
                    exc,
                )

        logger.info(
            "Historic data import finished file=%r data_type=%s processed=%d stored=%d errors=%d",
            raw_file.file_name,
            data_type.value,
            len(records),
            stored,
            errors,
        )
        return ImportSummary(
            data_type=data_type.value,
            processed=len(records),
            stored=stored,
            errors=errors,
            insights=result.insights,
            message=f"Successfully processed {stored} {data_type.value} records",
        )

    def load_imported_data(self, *, owner_id: uuid.UUID, db: Session) -> StoredHistoricData:
        repository = self._repository_factory(db)
        return StoredHistoricData(
            campaigns=repository.list_campaigns(owner_id),
            experiments=repository.list_experiments(owner_id),
        )

    @staticmethod
    def _persist_batch(
        repository: HistoricDataRepository,
        owner_id: uuid.UUID,
        data_type: DataType,
        batch: Sequence[CampaignRecord | ExperimentRecord],
    ) -> int:
        if data_type is DataType.CAMPAIGNS:
            return repository.insert_campaigns(owner_id, batch)  # type: ignore[arg-type]
        return repository.insert_experiments(owner_id, batch)  # type: ignore[arg-type]


def _sheet_name(value: str) -> str | int:
    return int(value) if value.isdigit() else value


@lru_cache(maxsize=1)
def get_historic_data_service() -> HistoricDataService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_historic_ingestion_settings()
    thresholds = get_insights_settings()
    pipeline = HistoricDataPipeline(
        campaign_aggregator=CampaignInsightsAggregator(
            conversion_rate_threshold=thresholds.conversion_rate_threshold,
            top_channel_limit=thresholds.top_channel_limit,
        ),
        experiment_aggregator=ExperimentInsightsAggregator(),
        converters={
            FileKind.EXCEL: SpreadsheetConverter(sheet_name=_sheet_name(settings.excel_sheet_name)),
        },
        log_unmatched_columns=settings.log_unmatched_columns,
    )
    return HistoricDataService(
        pipeline=pipeline,
        batch_size=settings.batch_size,
        max_file_bytes=settings.max_file_bytes,
    )
