"""
app/domain/historic_records.py

Canonical record shapes produced by the historic data ingestion flow.

Both record types are closed and fully defaulted: the field reconciler
builds one instance per parsed row and nothing mutates it afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

DEFAULT_CAMPAIGN_NAME = "Imported Campaign"
DEFAULT_EXPERIMENT_NAME = "Imported Experiment"


@dataclass(frozen=True)
class CampaignRecord:
    """
    One row of campaign performance data for a given date.
    """

    campaign_name: str = DEFAULT_CAMPAIGN_NAME
    campaign_date: str = ""
    campaign_id: str = ""
    landing_page_url: str = ""
    traffic_source: str = ""
    utm_source: str = ""
    utm_medium: str = ""
    device_type: str = ""
    creative_id: str = ""
    creative_name: str = ""
    creative_type: str = ""
    sessions: int = 0
    users: int = 0
    new_users: int = 0
    bounce_rate: float = 0.0
    engagement_rate: float = 0.0
    avg_time_on_page: int = 0
    scroll_depth: float = 0.0
    primary_cta_clicks: int = 0
    form_views: int = 0
    form_starters: int = 0
    form_completions: int = 0
    form_abandonment_rate: float = 0.0
    primary_conversions: int = 0
    primary_conversion_rate: float = 0.0
    secondary_conversions: int = 0
    cost_per_session: float = 0.0
    cost_per_conversion: float = 0.0
    total_spend: float = 0.0
    lead_to_sql_rate: float = 0.0
    sql_to_opportunity_rate: float = 0.0
    opportunity_to_close_rate: float = 0.0
    customer_acquisition_cost: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class ExperimentRecord:
    """
    One row summarizing an A/B test.
    """

    experiment_name: str = DEFAULT_EXPERIMENT_NAME
    experiment_id: str = ""
    owner: str = ""
    hypothesis: str = ""
    start_date: str = ""
    end_date: str = ""
    audience_targeted: str = ""
    traffic_allocation: str = ""
    sample_size_control: int = 0
    sample_size_variant: int = 0
    control_description: str = ""
    variant_description: str = ""
    primary_metric: str = ""
    secondary_metrics: tuple[str, ...] = ()
    control_result_primary: float = 0.0
    variant_result_primary: float = 0.0
    delta_absolute: float = 0.0
    uplift_relative: float = 0.0
    statistical_significance: bool = False
    p_value: float = 0.0
    winning_variant: str = ""
    decision_taken: str = ""
    key_insights: str = ""
    projected_business_impact: str = ""
    limitations_notes: str = ""
    future_recommendations: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


CanonicalRecord = CampaignRecord | ExperimentRecord


def _as_dict(record: CampaignRecord | ExperimentRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for item in fields(record):
        value = getattr(record, item.name)
        payload[item.name] = list(value) if isinstance(value, tuple) else value
    return payload


@dataclass(frozen=True)
class ImportSummary:
    """
    Outcome of importing one file: counts, batch summary and a status line.

    ``processed`` counts reconciled records, ``stored`` counts rows actually
    inserted (duplicates are skipped) and ``errors`` counts records in
    batches that failed to persist.
    """

    data_type: str
    processed: int
    stored: int
    errors: int
    insights: Any
    message: str
