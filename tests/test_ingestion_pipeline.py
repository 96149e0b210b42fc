"""
tests/test_ingestion_pipeline.py

End-to-end tests for HistoricDataPipeline: bytes in, records and summary out.

No database is involved; every test builds a RawFile directly.
"""

from __future__ import annotations

import io
import logging
from datetime import date

import pandas as pd
import pytest

from app.converters.spreadsheet import SpreadsheetConverter
from app.domain.historic_records import CampaignRecord, ExperimentRecord
from app.ingestion.errors import FileDecodeError, InsufficientDataError, UnsupportedFileTypeError
from app.ingestion.file_reader import DataType, FileKind, RawFile
from app.services.ingestion_pipeline import HistoricDataPipeline
from insights.base import CampaignInsights, ExperimentInsights


def _raw(text: str, file_name: str = "history.csv") -> RawFile:
    return RawFile.from_bytes(text.encode("utf-8"), file_name=file_name)


@pytest.fixture()
def pipeline() -> HistoricDataPipeline:
    return HistoricDataPipeline(
        converters={FileKind.EXCEL: SpreadsheetConverter()},
        today=lambda: date(2024, 6, 1),
    )


class TestCampaignFiles:
    def test_tsv_end_to_end(self, pipeline: HistoricDataPipeline) -> None:
        text = "Date\tCampaign Name\tSessions\tConversion Rate\n5/15/2024\tSummer Promo\t2847\t8.2\n"
        result = pipeline.run(_raw(text, "summer.tsv"), DataType.CAMPAIGNS)

        assert result.delimiter == "\t"
        assert result.rows_parsed == 1
        record = result.records[0]
        assert record == CampaignRecord(
            campaign_name="Summer Promo",
            campaign_date="5/15/2024",
            sessions=2847,
            primary_conversion_rate=8.2,
        )
        assert isinstance(result.insights, CampaignInsights)
        assert result.insights.total_campaigns == 1
        assert result.insights.average_conversion_rate == pytest.approx(8.2)
        assert result.insights.top_source == "direct"

    def test_minimal_csv(self, pipeline: HistoricDataPipeline) -> None:
        result = pipeline.run(_raw("Name,Date\nAcme,2024-01-01\n"), DataType.CAMPAIGNS)

        record = result.records[0]
        assert record.campaign_name == "Acme"
        assert record.campaign_date == "2024-01-01"
        assert record.sessions == 0
        assert record.total_spend == 0.0

    def test_blank_lines_produce_one_record(self, pipeline: HistoricDataPipeline) -> None:
        result = pipeline.run(_raw("Name,Date\nAcme,2024-01-01\n\n\n"), DataType.CAMPAIGNS)
        assert len(result.records) == 1

    def test_header_with_blank_rows_is_empty_not_fatal(self, pipeline: HistoricDataPipeline) -> None:
        result = pipeline.run(_raw("Name,Date\n , \n"), DataType.CAMPAIGNS)

        assert result.records == ()
        assert result.insights == CampaignInsights(recommendation=result.insights.recommendation)

    def test_semicolon_export_with_unmatched_columns(
        self, pipeline: HistoricDataPipeline, caplog: pytest.LogCaptureFixture
    ) -> None:
        text = "Campaign;Visits;Internal Notes\nA;10;x\nB;20;y\n"
        with caplog.at_level(logging.INFO, logger="app.services.ingestion_pipeline"):
            result = pipeline.run(_raw(text), DataType.CAMPAIGNS)

        assert [record.sessions for record in result.records] == [10, 20]
        assert result.unmatched_columns == ("internal_notes",)
        assert any("unmatched_columns_dropped" in message for message in caplog.messages)

    def test_excel_workbook_is_converted(self, pipeline: HistoricDataPipeline) -> None:
        buffer = io.BytesIO()
        pd.DataFrame(
            {"Campaign Name": ["Spring", "Fall"], "Sessions": [120, 80], "Total Spend": [50.5, 20]}
        ).to_excel(buffer, index=False, engine="openpyxl")
        raw = RawFile.from_bytes(buffer.getvalue(), file_name="history.xlsx")

        result = pipeline.run(raw, DataType.CAMPAIGNS)

        assert [record.campaign_name for record in result.records] == ["Spring", "Fall"]
        assert [record.sessions for record in result.records] == [120, 80]
        assert result.insights.total_spend == pytest.approx(70.5)

    def test_same_file_twice_gives_same_result(self, pipeline: HistoricDataPipeline) -> None:
        raw = _raw("Name,Sessions\nA,1\nB,2\n")
        assert pipeline.run(raw, DataType.CAMPAIGNS) == pipeline.run(raw, DataType.CAMPAIGNS)


class TestExperimentFiles:
    def test_experiment_csv(self, pipeline: HistoricDataPipeline) -> None:
        text = (
            "Experiment Name,Uplift (Relative %),Statistical Significance,Winning Variant\n"
            "Hero,12.5,Yes,B\n"
            "Form,-3,no,Control\n"
        )
        result = pipeline.run(_raw(text), DataType.EXPERIMENTS)

        assert all(isinstance(record, ExperimentRecord) for record in result.records)
        assert isinstance(result.insights, ExperimentInsights)
        assert result.insights.total_experiments == 2
        assert result.insights.significant_count == 1
        assert result.insights.win_rate == pytest.approx(0.5)
        assert result.insights.average_uplift == pytest.approx(4.75)


class TestFatalErrors:
    @pytest.mark.parametrize("text", ["", "Name,Date\n", "\n\n  \n"])
    def test_fewer_than_two_lines(self, pipeline: HistoricDataPipeline, text: str) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            pipeline.run(_raw(text), DataType.CAMPAIGNS)
        assert "at least 2 lines" in str(exc_info.value)

    def test_binary_content(self, pipeline: HistoricDataPipeline) -> None:
        raw = RawFile.from_bytes(b"\x89PNG\r\n\x1a\n\x00\x00", file_name="history.csv")
        with pytest.raises(FileDecodeError):
            pipeline.run(raw, DataType.CAMPAIGNS)

    @pytest.mark.parametrize("file_name", ["theme.css", "chart.png"])
    def test_non_tabular_kinds(self, pipeline: HistoricDataPipeline, file_name: str) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            pipeline.run(RawFile.from_bytes(b"body{}", file_name=file_name), DataType.CAMPAIGNS)

    def test_excel_without_converter(self) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            HistoricDataPipeline().run(RawFile.from_bytes(b"PK", file_name="a.xlsx"), DataType.CAMPAIGNS)

    def test_corrupt_workbook(self, pipeline: HistoricDataPipeline) -> None:
        raw = RawFile.from_bytes(b"definitely not a zip", file_name="broken.xlsx")
        with pytest.raises(FileDecodeError):
            pipeline.run(raw, DataType.CAMPAIGNS)
