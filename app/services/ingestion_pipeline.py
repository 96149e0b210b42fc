"""
app/services/ingestion_pipeline.py

Pure ingestion pipeline for historic campaign and experiment files.

Stages run strictly forward, once per file:

    1. RawFile.read_text()           bytes to text (or workbook conversion)
    2. TabularParser.parse()         delimiter detection, header normalization
    3. FieldReconciler.reconcile()   synonym lookup, typed canonical records
    4. *InsightsAggregator           batch summary

The pipeline performs no persistence and keeps no state between runs, so
one instance can process any number of files one after another.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date

from app.domain.historic_records import CampaignRecord, ExperimentRecord
from app.ingestion.errors import InsufficientDataError, UnsupportedFileTypeError
from app.ingestion.file_reader import DataType, FileKind, RawFile
from app.logging_utils import log_import_event
from app.mappers.field_reconciler import FieldReconciler
from app.parsers.tabular_parser import ParsedTable, TabularParser, non_blank_lines
from insights.base import CampaignInsights, ExperimentInsights
from insights.campaign import CampaignInsightsAggregator
from insights.experiment import ExperimentInsightsAggregator

logger = logging.getLogger(__name__)

SCHEMA_BY_DATA_TYPE: dict[DataType, str] = {
    DataType.CAMPAIGNS: "campaign",
    DataType.EXPERIMENTS: "experiment",
}

TextConverter = Callable[..., str]


@dataclass(frozen=True)
class PipelineResult:
    """
    Records and summary produced from one file.
    """

    data_type: DataType
    file_name: str
    records: tuple[CampaignRecord | ExperimentRecord, ...]
    insights: CampaignInsights | ExperimentInsights
    delimiter: str
    unmatched_columns: tuple[str, ...] = field(default_factory=tuple)

    @property
    def rows_parsed(self) -> int:
        return len(self.records)


class HistoricDataPipeline:
    """
    Reads, parses, reconciles and summarizes one file per :meth:`run` call.
    """

    def __init__(
        self,
        *,
        parser: TabularParser | None = None,
        campaign_aggregator: CampaignInsightsAggregator | None = None,
        experiment_aggregator: ExperimentInsightsAggregator | None = None,
        converters: Mapping[FileKind, TextConverter] | None = None,
        log_unmatched_columns: bool = True,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._parser = parser or TabularParser()
        self._campaign_aggregator = campaign_aggregator or CampaignInsightsAggregator()
        self._experiment_aggregator = experiment_aggregator or ExperimentInsightsAggregator()
        self._converters: dict[FileKind, TextConverter] = dict(converters or {})
        self._log_unmatched_columns = log_unmatched_columns
        self._today = today

    def run(self, raw_file: RawFile, data_type: DataType) -> PipelineResult:
        """
        Run all four stages for *raw_file* against the schema of *data_type*.

        Raises:
            FileDecodeError:          content is not readable text.
            UnsupportedFileTypeError: no text path exists for the file kind.
            InsufficientDataError:    fewer than two non-blank lines.
        """

        text = self.read_text(raw_file)
        table = self.parse(text, file_name=raw_file.file_name)

        reconciler = FieldReconciler(SCHEMA_BY_DATA_TYPE[data_type], today=self._today)
        unmatched = reconciler.unmatched_headers(table.headers)
        if unmatched and self._log_unmatched_columns:
            log_import_event(
                logger,
                logging.INFO,
                "unmatched_columns_dropped",
                raw_file=raw_file,
                data_type=data_type,
                columns=list(unmatched),
            )

        records = tuple(reconciler.reconcile(row) for row in table)
        insights = self.summarize(records, data_type)

        log_import_event(
            logger,
            logging.INFO,
            "file_ingested",
            raw_file=raw_file,
            data_type=data_type,
            delimiter=table.delimiter,
            records=len(records),
        )
        return PipelineResult(
            data_type=data_type,
            file_name=raw_file.file_name,
            records=records,
            insights=insights,
            delimiter=table.delimiter,
            unmatched_columns=unmatched,
        )

    def read_text(self, raw_file: RawFile) -> str:
        if raw_file.is_text:
            return raw_file.read_text()

        converter = self._converters.get(raw_file.kind)
        if converter is None:
            raise UnsupportedFileTypeError(
                f"File type '{raw_file.kind.value}' cannot be ingested as tabular data. "
                "Convert it to CSV or TSV first.",
                context={"file_name": raw_file.file_name, "file_type": raw_file.kind.value},
            )
        return converter(raw_file.content, file_name=raw_file.file_name)

    def parse(self, text: str, *, file_name: str = "") -> ParsedTable:
        if len(non_blank_lines(text)) < 2:
            raise InsufficientDataError(
                "File must have at least 2 lines (header + data).",
                context={"file_name": file_name},
            )
        return self._parser.parse(text)

    def summarize(
        self,
        records: tuple[CampaignRecord | ExperimentRecord, ...],
        data_type: DataType,
    ) -> CampaignInsights | ExperimentInsights:
        if data_type is DataType.CAMPAIGNS:
            return self._campaign_aggregator.summarize(records)  # type: ignore[arg-type]
        return self._experiment_aggregator.summarize(records)  # type: ignore[arg-type]
