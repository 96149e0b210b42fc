"""
tests/test_insights.py

Pytest unit tests for the campaign and experiment aggregators.

All tests are pure Python: no database, no I/O. Given the same batch,
the same summary must be produced every time.

Coverage
--------
- Empty batches produce zero summaries
- Averages, totals and top source / campaign selection
- Channel and device ranking
- Recommendation thresholds
- Experiment win rate and significance counts
- Mixed-type batches are rejected
- Readiness rule and display formatting
"""

from __future__ import annotations

import pytest

from app.domain.historic_records import CampaignRecord, ExperimentRecord
from insights.base import CampaignInsights, ExperimentInsights, safe_ratio
from insights.campaign import (
    RECOMMEND_OPTIMIZE,
    RECOMMEND_SCALE,
    CampaignInsightsAggregator,
    rank_groups,
    source_of,
)
from insights.experiment import (
    RECOMMEND_CONTINUE,
    RECOMMEND_LARGER_SAMPLES,
    ExperimentInsightsAggregator,
    variant_won,
)
from insights.formatting import format_campaign_insights, format_experiment_insights
from insights.readiness import is_ready_for_generation


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def campaign_agg() -> CampaignInsightsAggregator:
    return CampaignInsightsAggregator()


@pytest.fixture()
def experiment_agg() -> ExperimentInsightsAggregator:
    return ExperimentInsightsAggregator()


@pytest.fixture()
def campaigns() -> list[CampaignRecord]:
    return [
        CampaignRecord(
            campaign_name="Spring",
            traffic_source="google",
            device_type="mobile",
            sessions=1000,
            primary_conversions=50,
            primary_conversion_rate=5.0,
            total_spend=500.0,
            cost_per_conversion=10.0,
        ),
        CampaignRecord(
            campaign_name="Summer",
            traffic_source="facebook",
            device_type="desktop",
            sessions=400,
            primary_conversions=4,
            primary_conversion_rate=1.0,
            total_spend=300.0,
            cost_per_conversion=75.0,
        ),
        CampaignRecord(
            campaign_name="Autumn",
            traffic_source="google",
            device_type="mobile",
            sessions=1000,
            primary_conversions=30,
            primary_conversion_rate=3.0,
            total_spend=200.0,
            cost_per_conversion=5.0,
        ),
    ]


# ---------------------------------------------------------------------------
# Campaign summaries
# ---------------------------------------------------------------------------


class TestCampaignInsights:
    def test_empty_batch_is_all_zero(self, campaign_agg: CampaignInsightsAggregator) -> None:
        summary = campaign_agg.summarize([])

        assert summary.total_campaigns == 0
        assert summary.average_conversion_rate == 0.0
        assert summary.total_spend == 0.0
        assert summary.average_cost_per_conversion == 0.0
        assert summary.top_source == ""
        assert summary.top_performing_channels == ()
        assert summary.recommendation == RECOMMEND_OPTIMIZE

    def test_totals_and_averages(
        self, campaign_agg: CampaignInsightsAggregator, campaigns: list[CampaignRecord]
    ) -> None:
        summary = campaign_agg.summarize(campaigns)

        assert summary.total_campaigns == 3
        assert summary.average_conversion_rate == pytest.approx(3.0)
        assert summary.total_spend == pytest.approx(1000.0)
        assert summary.average_cost_per_conversion == pytest.approx(30.0)
        assert summary.top_source == "google"
        assert summary.top_campaign == "Spring"

    def test_channels_ranked_by_conversion_rate(
        self, campaign_agg: CampaignInsightsAggregator, campaigns: list[CampaignRecord]
    ) -> None:
        channels = campaign_agg.summarize(campaigns).top_performing_channels

        assert [channel.channel for channel in channels] == ["google", "facebook"]
        assert channels[0].sessions == 2000
        assert channels[0].conversions == 80
        assert channels[0].conversion_rate == pytest.approx(0.04)
        assert channels[0].spend == pytest.approx(700.0)

    def test_devices_ranked_by_conversion_rate(
        self, campaign_agg: CampaignInsightsAggregator, campaigns: list[CampaignRecord]
    ) -> None:
        devices = campaign_agg.summarize(campaigns).high_performing_devices
        assert [device.channel for device in devices] == ["mobile", "desktop"]

    def test_average_at_threshold_is_not_scaled(
        self, campaign_agg: CampaignInsightsAggregator, campaigns: list[CampaignRecord]
    ) -> None:
        assert campaign_agg.summarize(campaigns).recommendation == RECOMMEND_OPTIMIZE

    def test_average_above_threshold_scales(self, campaign_agg: CampaignInsightsAggregator) -> None:
        summary = campaign_agg.summarize([CampaignRecord(primary_conversion_rate=3.01)])
        assert summary.recommendation == RECOMMEND_SCALE

    def test_threshold_is_configurable(self, campaigns: list[CampaignRecord]) -> None:
        aggregator = CampaignInsightsAggregator(conversion_rate_threshold=2.0, top_channel_limit=1)
        summary = aggregator.summarize(campaigns)

        assert summary.recommendation == RECOMMEND_SCALE
        assert len(summary.top_performing_channels) == 1

    def test_source_falls_back_to_utm_then_direct(self) -> None:
        assert source_of(CampaignRecord(utm_source="newsletter")) == "newsletter"
        assert source_of(CampaignRecord()) == "direct"

    def test_top_source_tie_keeps_first_seen(self, campaign_agg: CampaignInsightsAggregator) -> None:
        records = [CampaignRecord(traffic_source="bing"), CampaignRecord(traffic_source="google")]
        assert campaign_agg.summarize(records).top_source == "bing"

    def test_zero_session_groups_rank_last(self) -> None:
        records = [
            CampaignRecord(traffic_source="empty"),
            CampaignRecord(traffic_source="paid", sessions=10, primary_conversions=1),
        ]
        ranked = rank_groups(records, source_of)
        assert [group.channel for group in ranked] == ["paid", "empty"]
        assert ranked[1].conversion_rate == 0.0

    def test_rejects_experiment_records(self, campaign_agg: CampaignInsightsAggregator) -> None:
        with pytest.raises(TypeError):
            campaign_agg.summarize([CampaignRecord(), ExperimentRecord()])  # type: ignore[list-item]


# ---------------------------------------------------------------------------
# Experiment summaries
# ---------------------------------------------------------------------------


class TestExperimentInsights:
    def test_empty_batch_is_all_zero(self, experiment_agg: ExperimentInsightsAggregator) -> None:
        summary = experiment_agg.summarize([])

        assert summary.total_experiments == 0
        assert summary.significant_count == 0
        assert summary.average_uplift == 0.0
        assert summary.win_rate == 0.0
        assert summary.recommendation == RECOMMEND_LARGER_SAMPLES

    def test_counts_and_rates(self, experiment_agg: ExperimentInsightsAggregator) -> None:
        records = [
            ExperimentRecord(uplift_relative=12.0, statistical_significance=True, winning_variant="B"),
            ExperimentRecord(uplift_relative=-4.0, statistical_significance=True, winning_variant="Variant 2"),
            ExperimentRecord(uplift_relative=1.0, statistical_significance=False, winning_variant="Control"),
            ExperimentRecord(uplift_relative=3.0, statistical_significance=False, winning_variant=""),
        ]
        summary = experiment_agg.summarize(records)

        assert summary.total_experiments == 4
        assert summary.significant_count == 2
        assert summary.average_uplift == pytest.approx(3.0)
        assert summary.win_rate == pytest.approx(0.5)
        assert summary.recommendation == RECOMMEND_LARGER_SAMPLES

    def test_majority_significant_keeps_testing(self, experiment_agg: ExperimentInsightsAggregator) -> None:
        records = [
            ExperimentRecord(statistical_significance=True),
            ExperimentRecord(statistical_significance=True),
            ExperimentRecord(statistical_significance=False),
        ]
        assert experiment_agg.summarize(records).recommendation == RECOMMEND_CONTINUE

    @pytest.mark.parametrize(
        ("label", "expected"),
        [("B", True), ("Variant", True), ("Variant C", True), ("variant", False), ("A", False), ("", False)],
    )
    def test_variant_won(self, label: str, expected: bool) -> None:
        assert variant_won(label) is expected


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_safe_ratio_zero_denominator(self) -> None:
        assert safe_ratio(5, 0) == 0.0

    @pytest.mark.parametrize(
        ("campaigns", "experiments", "expected"),
        [(5, 0, True), (2, 2, True), (4, 1, False), (1, 10, False), (0, 0, False)],
    )
    def test_readiness(self, campaigns: int, experiments: int, expected: bool) -> None:
        assert is_ready_for_generation(campaigns, experiments) is expected

    def test_campaign_display_strings(self) -> None:
        summary = CampaignInsights(
            average_conversion_rate=3.456,
            total_spend=1234.4,
            average_cost_per_conversion=12.5,
        )
        assert format_campaign_insights(summary) == {
            "average_conversion_rate": "3.46%",
            "total_spend": "$1234",
            "average_cost_per_conversion": "$12.50",
        }

    def test_experiment_display_strings(self) -> None:
        summary = ExperimentInsights(average_uplift=7.26, win_rate=0.5)
        assert format_experiment_insights(summary) == {"average_uplift": "7.3%", "win_rate": "50%"}
