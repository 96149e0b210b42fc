"""
db/models/experiment_result.py

Imported A/B test outcomes.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Boolean, Date, Float, Index, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

DEDUPE_CONSTRAINT = "uq_experiment_results_dedupe"


class ExperimentResult(Base, TimestampMixin):
    __tablename__ = "experiment_results"

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
    experiment_name: Mapped[str] = mapped_column(Text, nullable=False)
    experiment_id: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner: Mapped[str] = mapped_column(Text, nullable=False, default="")
    hypothesis: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    audience_targeted: Mapped[str] = mapped_column(Text, nullable=False, default="")
    traffic_allocation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sample_size_control: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sample_size_variant: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    control_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    variant_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    primary_metric: Mapped[str] = mapped_column(Text, nullable=False, default="")
    secondary_metrics: Mapped[list[str]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="Secondary metric names as listed in the source sheet",
    )
    control_result_primary: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    variant_result_primary: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    delta_absolute: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    uplift_relative: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment="Relative uplift in percent; may be negative",
    )
    statistical_significance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    p_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    winning_variant: Mapped[str] = mapped_column(Text, nullable=False, default="")
    decision_taken: Mapped[str] = mapped_column(Text, nullable=False, default="")
    key_insights: Mapped[str] = mapped_column(Text, nullable=False, default="")
    projected_business_impact: Mapped[str] = mapped_column(Text, nullable=False, default="")
    limitations_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    future_recommendations: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint(
            "owner_id",
            "experiment_name",
            "start_date",
            name=DEDUPE_CONSTRAINT,
        ),
        Index("ix_experiment_results_owner_id", "owner_id"),
    )
