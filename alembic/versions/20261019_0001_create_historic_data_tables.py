"""create historic_campaigns and experiment_results tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _text(name: str) -> sa.Column:
    return sa.Column(name, sa.Text(), nullable=False)


def _int(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False)


def _float(name: str) -> sa.Column:
    return sa.Column(name, sa.Float(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "historic_campaigns",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        _text("campaign_name"),
        sa.Column("campaign_date", sa.Date(), nullable=False),
        _text("campaign_id"),
        _text("landing_page_url"),
        _text("traffic_source"),
        _text("utm_source"),
        _text("utm_medium"),
        _text("device_type"),
        _text("creative_id"),
        _text("creative_name"),
        _text("creative_type"),
        _int("sessions"),
        _int("users"),
        _int("new_users"),
        _float("bounce_rate"),
        _float("engagement_rate"),
        _int("avg_time_on_page"),
        _float("scroll_depth"),
        _int("primary_cta_clicks"),
        _int("form_views"),
        _int("form_starters"),
        _int("form_completions"),
        _float("form_abandonment_rate"),
        _int("primary_conversions"),
        _float("primary_conversion_rate"),
        _int("secondary_conversions"),
        _float("cost_per_session"),
        _float("cost_per_conversion"),
        _float("total_spend"),
        _float("lead_to_sql_rate"),
        _float("sql_to_opportunity_rate"),
        _float("opportunity_to_close_rate"),
        _float("customer_acquisition_cost"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_historic_campaigns"),
        sa.UniqueConstraint(
            "owner_id",
            "campaign_name",
            "campaign_date",
            "traffic_source",
            name="uq_historic_campaigns_dedupe",
        ),
    )
    op.create_index("ix_historic_campaigns_owner_id", "historic_campaigns", ["owner_id"], unique=False)
    op.create_index(
        "ix_historic_campaigns_owner_date",
        "historic_campaigns",
        ["owner_id", "campaign_date"],
        unique=False,
    )

    op.create_table(
        "experiment_results",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        _text("experiment_name"),
        _text("experiment_id"),
        _text("owner"),
        _text("hypothesis"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        _text("audience_targeted"),
        _text("traffic_allocation"),
        _int("sample_size_control"),
        _int("sample_size_variant"),
        _text("control_description"),
        _text("variant_description"),
        _text("primary_metric"),
        sa.Column("secondary_metrics", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        _float("control_result_primary"),
        _float("variant_result_primary"),
        _float("delta_absolute"),
        _float("uplift_relative"),
        sa.Column("statistical_significance", sa.Boolean(), nullable=False),
        _float("p_value"),
        _text("winning_variant"),
        _text("decision_taken"),
        _text("key_insights"),
        _text("projected_business_impact"),
        _text("limitations_notes"),
        _text("future_recommendations"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_experiment_results"),
        sa.UniqueConstraint(
            "owner_id",
            "experiment_name",
            "start_date",
            name="uq_experiment_results_dedupe",
        ),
    )
    op.create_index("ix_experiment_results_owner_id", "experiment_results", ["owner_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_experiment_results_owner_id", table_name="experiment_results")
    op.drop_table("experiment_results")
    op.drop_index("ix_historic_campaigns_owner_date", table_name="historic_campaigns")
    op.drop_index("ix_historic_campaigns_owner_id", table_name="historic_campaigns")
    op.drop_table("historic_campaigns")
