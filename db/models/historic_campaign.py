"""
db/models/historic_campaign.py

Imported historic campaign performance rows.
One row per owner, campaign, date and traffic source.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, Float, Index, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

DEDUPE_CONSTRAINT = "uq_historic_campaigns_dedupe"


class HistoricCampaign(Base, TimestampMixin):
    """
    Persisted form of :class:`app.domain.historic_records.CampaignRecord`.

    Re-importing the same sheet is a no-op: the unique constraint on
    ``(owner_id, campaign_name, campaign_date, traffic_source)`` backs the
    repository's ``ON CONFLICT DO NOTHING`` insert.
    """

    __tablename__ = "historic_campaigns"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        comment="Account that imported the file",
    )
    campaign_name: Mapped[str] = mapped_column(Text, nullable=False)
    campaign_date: Mapped[date] = mapped_column(Date, nullable=False)
    campaign_id: Mapped[str] = mapped_column(Text, nullable=False, default="")
    landing_page_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    traffic_source: Mapped[str] = mapped_column(Text, nullable=False, default="")
    utm_source: Mapped[str] = mapped_column(Text, nullable=False, default="")
    utm_medium: Mapped[str] = mapped_column(Text, nullable=False, default="")
    device_type: Mapped[str] = mapped_column(Text, nullable=False, default="")
    creative_id: Mapped[str] = mapped_column(Text, nullable=False, default="")
    creative_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    creative_type: Mapped[str] = mapped_column(Text, nullable=False, default="")

    sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bounce_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    engagement_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    avg_time_on_page: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Seconds",
    )
    scroll_depth: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    primary_cta_clicks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    form_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    form_starters: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    form_completions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    form_abandonment_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    primary_conversions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    primary_conversion_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    secondary_conversions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_per_session: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cost_per_conversion: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_spend: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    lead_to_sql_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sql_to_opportunity_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    opportunity_to_close_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    customer_acquisition_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (
        UniqueConstraint(
            "owner_id",
            "campaign_name",
            "campaign_date",
            "traffic_source",
            name=DEDUPE_CONSTRAINT,
        ),
        Index("ix_historic_campaigns_owner_id", "owner_id"),
        Index("ix_historic_campaigns_owner_date", "owner_id", "campaign_date"),
    )
