"""
app/mappers/canonical_schemas.py

Declared synonym tables for the ``campaign`` and ``experiment`` schemas.

Each canonical field lists the source headers it accepts, in priority order.
Synonyms are written the way they appear in exported spreadsheets and are
normalized with the parser's header rules when the table is built, so
"Bounce Rate (%)" and "bounce_rate____" refer to the same column.

The first synonym with a non-empty value wins. Later synonyms are never
consulted once one matches, regardless of column order in the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.parsers.tabular_parser import normalize_header


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    SIGNED_DECIMAL = "signed_decimal"
    PERCENTAGE = "percentage"
    DURATION = "duration"
    BOOLEAN = "boolean"
    DATE = "date"
    TEXT_LIST = "text_list"


@dataclass(frozen=True)
class FieldSpec:
    """
    One canonical field: its coercion kind and ordered source synonyms.
    """

    name: str
    kind: FieldKind
    synonyms: tuple[str, ...]

    @property
    def lookup_keys(self) -> tuple[str, ...]:
        keys: list[str] = []
        for candidate in (self.name, *self.synonyms):
            key = normalize_header(candidate)
            if key and key not in keys:
                keys.append(key)
        return tuple(keys)


def _field(name: str, kind: FieldKind, *synonyms: str) -> FieldSpec:
    return FieldSpec(name=name, kind=kind, synonyms=synonyms)


CAMPAIGN_FIELDS: tuple[FieldSpec, ...] = (
    _field("campaign_name", FieldKind.TEXT, "Campaign Name", "campaign", "name", "campaign_title"),
    _field("campaign_date", FieldKind.DATE, "Date", "day", "report_date", "CampaignDate"),
    _field("campaign_id", FieldKind.TEXT, "Campaign ID", "CampaignId"),
    _field("landing_page_url", FieldKind.TEXT, "Landing Page URL", "landing_page", "page_url", "url"),
    _field("traffic_source", FieldKind.TEXT, "Traffic Source", "TrafficSource", "source", "channel"),
    _field("utm_source", FieldKind.TEXT, "UTM Source", "UtmSource"),
    _field("utm_medium", FieldKind.TEXT, "UTM Medium", "medium"),
    _field("device_type", FieldKind.TEXT, "Device Type", "device", "device_category"),
    _field("creative_id", FieldKind.TEXT, "Creative ID"),
    _field("creative_name", FieldKind.TEXT, "Creative Name"),
    _field("creative_type", FieldKind.TEXT, "Creative Type"),
    _field("sessions", FieldKind.INTEGER, "Sessions", "session", "visits", "page_views", "pageviews"),
    _field("users", FieldKind.INTEGER, "Users", "unique_visitors", "visitors", "total_users"),
    _field("new_users", FieldKind.INTEGER, "New Users", "new_visitors"),
    _field("bounce_rate", FieldKind.PERCENTAGE, "Bounce Rate (%)", "Bounce Rate", "BounceRate"),
    _field("engagement_rate", FieldKind.PERCENTAGE, "Engagement Rate (%)", "Engagement Rate"),
    _field(
        "avg_time_on_page",
        FieldKind.DURATION,
        "Average Time on Page",
        "Avg Time on Page",
        "AvgTimeOnPage",
        "time_on_page",
    ),
    _field("scroll_depth", FieldKind.PERCENTAGE, "Scroll Depth (%)", "Scroll Depth"),
    _field("primary_cta_clicks", FieldKind.INTEGER, "Clicks on Primary CTA", "CTA Clicks", "primary_cta"),
    _field("form_views", FieldKind.INTEGER, "Form Views"),
    _field("form_starters", FieldKind.INTEGER, "Form Starters", "form_starts"),
    _field("form_completions", FieldKind.INTEGER, "Form Completions", "form_submissions"),
    _field("form_abandonment_rate", FieldKind.PERCENTAGE, "Form Abandonment Rate (%)", "Form Abandonment Rate"),
    _field(
        "primary_conversions",
        FieldKind.INTEGER,
        "Primary Conversion Count",
        "Primary Conversions",
        "conversions",
        "goals",
        "leads",
    ),
    _field(
        "primary_conversion_rate",
        FieldKind.PERCENTAGE,
        "Primary Conversion Rate (%)",
        "Primary Conversion Rate",
        "Conversion Rate (%)",
        "conversion_rate",
        "ConversionRate",
        "cvr",
    ),
    _field("secondary_conversions", FieldKind.INTEGER, "Secondary Conversions", "micro_conversions"),
    _field("cost_per_session", FieldKind.DECIMAL, "Cost per Session", "cps"),
    _field("cost_per_conversion", FieldKind.DECIMAL, "Cost per Conversion", "CostPerConversion", "cpa"),
    _field("total_spend", FieldKind.DECIMAL, "Total Spend", "spend", "ad_spend", "cost"),
    _field("lead_to_sql_rate", FieldKind.PERCENTAGE, "Lead-to-SQL Rate (%)", "Lead to SQL Rate"),
    _field("sql_to_opportunity_rate", FieldKind.PERCENTAGE, "SQL-to-Opportunity Rate (%)", "SQL to Opportunity Rate"),
    _field(
        "opportunity_to_close_rate",
        FieldKind.PERCENTAGE,
        "Opportunity-to-Close Rate (%)",
        "Opportunity to Close Rate",
        "close_rate",
    ),
    _field(
        "customer_acquisition_cost",
        FieldKind.DECIMAL,
        "Customer Acquisition Cost (CAC)",
        "Customer Acquisition Cost",
        "cac",
    ),
)


EXPERIMENT_FIELDS: tuple[FieldSpec, ...] = (
    _field("experiment_name", FieldKind.TEXT, "Experiment Name", "Test Name", "experiment", "name"),
    _field("experiment_id", FieldKind.TEXT, "Experiment ID", "Test ID", "id"),
    _field("owner", FieldKind.TEXT, "Owner", "Experiment Owner", "creator", "created_by"),
    _field("hypothesis", FieldKind.TEXT, "Hypothesis"),
    _field("start_date", FieldKind.DATE, "Start Date", "StartDate", "start"),
    _field("end_date", FieldKind.DATE, "End Date", "EndDate", "end"),
    _field("audience_targeted", FieldKind.TEXT, "Audience Targeted", "Target Audience", "audience"),
    _field("traffic_allocation", FieldKind.TEXT, "Traffic Allocation", "Traffic Split", "split"),
    _field(
        "sample_size_control",
        FieldKind.INTEGER,
        "Sample Size - Control (A)",
        "Sample Size Control",
        "Control Sample Size",
        "control_visitors",
    ),
    _field(
        "sample_size_variant",
        FieldKind.INTEGER,
        "Sample Size - Variant (B)",
        "Sample Size Variant",
        "Variant Sample Size",
        "variant_visitors",
    ),
    _field("control_description", FieldKind.TEXT, "Control Description", "Control (A) Description"),
    _field("variant_description", FieldKind.TEXT, "Variant Description", "Variant (B) Description"),
    _field("primary_metric", FieldKind.TEXT, "Primary Metric"),
    _field("secondary_metrics", FieldKind.TEXT_LIST, "Secondary Metrics", "secondary_metric"),
    _field(
        "control_result_primary",
        FieldKind.SIGNED_DECIMAL,
        "Control Result - Primary Metric",
        "Control Result",
        "control_rate",
        "control_conversion_rate",
    ),
    _field(
        "variant_result_primary",
        FieldKind.SIGNED_DECIMAL,
        "Variant Result - Primary Metric",
        "Variant Result",
        "variant_rate",
        "variant_conversion_rate",
    ),
    _field(
        "delta_absolute",
        FieldKind.SIGNED_DECIMAL,
        "Delta (Absolute)",
        "Absolute Delta",
        "delta",
        "difference",
    ),
    _field(
        "uplift_relative",
        FieldKind.SIGNED_DECIMAL,
        "Uplift (Relative %)",
        "Relative Uplift",
        "uplift",
        "lift",
        "improvement",
    ),
    _field(
        "statistical_significance",
        FieldKind.BOOLEAN,
        "Statistical Significance",
        "significance",
        "significant",
        "is_significant",
    ),
    _field("p_value", FieldKind.DECIMAL, "pvalue", "p-val"),
    _field("winning_variant", FieldKind.TEXT, "Winning Variant", "winner", "winning"),
    _field("decision_taken", FieldKind.TEXT, "Decision Taken", "Decision"),
    _field("key_insights", FieldKind.TEXT, "Key Insights", "insights", "interpretation"),
    _field("projected_business_impact", FieldKind.TEXT, "Projected Business Impact", "Business Impact"),
    _field("limitations_notes", FieldKind.TEXT, "Limitations / Notes", "Limitations", "notes"),
    _field("future_recommendations", FieldKind.TEXT, "Future Recommendations", "recommendations", "next_steps"),
)


SCHEMAS: dict[str, tuple[FieldSpec, ...]] = {
    "campaign": CAMPAIGN_FIELDS,
    "experiment": EXPERIMENT_FIELDS,
}


def fields_for(schema: str) -> tuple[FieldSpec, ...]:
    try:
        return SCHEMAS[schema]
    except KeyError as exc:
        raise ValueError(f"Unknown canonical schema '{schema}'.") from exc
