"""
app/schemas/historic_data.py

Request and response schemas for historic data import endpoints.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from insights.base import CampaignInsights, ExperimentInsights
from insights.formatting import format_campaign_insights, format_experiment_insights


class ProcessCampaignDataRequest(BaseModel):
    """
    JSON body carrying a base64-encoded file.
    """

    file_content: str = Field(..., min_length=1, description="Base64 file content, data URL prefix allowed")
    file_name: str = Field(..., min_length=1)
    file_type: str | None = Field(default=None, description="csv, tsv, excel; inferred from file_name when omitted")
    data_type: str = Field(..., description="campaigns or experiments")


class ChannelPerformanceResponse(BaseModel):
    channel: str
    sessions: int = Field(..., ge=0)
    conversions: int = Field(..., ge=0)
    spend: float = Field(..., ge=0)
    conversion_rate: float = Field(..., ge=0)


class CampaignInsightsResponse(BaseModel):
    total_campaigns: int = Field(..., ge=0)
    average_conversion_rate: float
    total_spend: float
    average_cost_per_conversion: float
    top_source: str
    top_campaign: str
    top_performing_channels: list[ChannelPerformanceResponse] = Field(default_factory=list)
    high_performing_devices: list[ChannelPerformanceResponse] = Field(default_factory=list)
    recommendation: str
    display: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_summary(cls, summary: CampaignInsights) -> CampaignInsightsResponse:
        payload = asdict(summary)
        payload["display"] = format_campaign_insights(summary)
        return cls.model_validate(payload)


class ExperimentInsightsResponse(BaseModel):
    total_experiments: int = Field(..., ge=0)
    significant_count: int = Field(..., ge=0)
    average_uplift: float
    win_rate: float = Field(..., ge=0, le=1)
    recommendation: str
    display: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_summary(cls, summary: ExperimentInsights) -> ExperimentInsightsResponse:
        payload = asdict(summary)
        payload["display"] = format_experiment_insights(summary)
        return cls.model_validate(payload)


def insights_response(
    summary: CampaignInsights | ExperimentInsights,
) -> CampaignInsightsResponse | ExperimentInsightsResponse:
    if isinstance(summary, CampaignInsights):
        return CampaignInsightsResponse.from_summary(summary)
    return ExperimentInsightsResponse.from_summary(summary)


class HistoricImportResponse(BaseModel):
    success: bool = True
    data_type: str
    processed: int = Field(..., ge=0)
    stored: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    insights: CampaignInsightsResponse | ExperimentInsightsResponse
    message: str


class HistoricPreviewResponse(BaseModel):
    data_type: str
    file_name: str
    delimiter: str
    rows_parsed: int = Field(..., ge=0)
    unmatched_columns: list[str] = Field(default_factory=list)
    records: list[dict[str, Any]] = Field(default_factory=list)
    insights: CampaignInsightsResponse | ExperimentInsightsResponse


class StoredCampaignResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    campaign_name: str
    campaign_date: date
    traffic_source: str
    utm_source: str
    device_type: str
    sessions: int
    primary_conversions: int
    primary_conversion_rate: float
    total_spend: float
    created_at: datetime


class StoredExperimentResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    experiment_name: str
    start_date: date
    end_date: date
    primary_metric: str
    uplift_relative: float
    statistical_significance: bool
    winning_variant: str
    created_at: datetime


class HistoricDataListResponse(BaseModel):
    campaigns: list[StoredCampaignResponse] = Field(default_factory=list)
    experiments: list[StoredExperimentResponse] = Field(default_factory=list)
    ready_for_generation: bool
