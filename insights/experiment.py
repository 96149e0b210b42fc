"""
insights/experiment.py

Experiment batch insights.

Formulas
--------
Significant Count = count(statistical_significance)
Average Uplift    = mean(uplift_relative)
Win Rate          = count(winning_variant contains "B" or "Variant") / n
Recommendation    = "keep testing" when significant_count > n / 2,
                    otherwise "increase sample sizes"

An empty batch yields zeros.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.domain.historic_records import ExperimentRecord
from insights.base import BaseInsightsAggregator, ExperimentInsights, mean, safe_ratio

WINNING_VARIANT_MARKERS: tuple[str, ...] = ("B", "Variant")

RECOMMEND_CONTINUE = "Strong testing culture - continue experimenting"
RECOMMEND_LARGER_SAMPLES = "Increase sample sizes for more significant results"


class ExperimentInsightsAggregator(BaseInsightsAggregator[ExperimentRecord, ExperimentInsights]):
    record_type = ExperimentRecord

    def _summarize(self, records: Sequence[ExperimentRecord]) -> ExperimentInsights:
        total = len(records)
        significant = sum(1 for record in records if record.statistical_significance)
        winners = sum(1 for record in records if variant_won(record.winning_variant))

        return ExperimentInsights(
            total_experiments=total,
            significant_count=significant,
            average_uplift=mean([record.uplift_relative for record in records]),
            win_rate=safe_ratio(winners, total),
            recommendation=RECOMMEND_CONTINUE if significant > total / 2 else RECOMMEND_LARGER_SAMPLES,
        )


def variant_won(winning_variant: str) -> bool:
    """Case-sensitive substring test, matching how results sheets label variants."""
    return any(marker in winning_variant for marker in WINNING_VARIANT_MARKERS)
