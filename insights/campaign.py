"""
insights/campaign.py

Campaign batch insights.

Formulas
--------
Average Conversion Rate     = mean(primary_conversion_rate)
Total Spend                 = sum(total_spend)
Average Cost per Conversion = mean(cost_per_conversion)
Top Source                  = most frequent source, first seen wins ties
Channel Conversion Rate     = sum(primary_conversions) / sum(sessions) per source
Recommendation              = "scale" when the average conversion rate is above
                              the threshold, otherwise "optimize"

Division-by-zero cases return 0.0.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from app.domain.historic_records import CampaignRecord
from insights.base import (
    BaseInsightsAggregator,
    CampaignInsights,
    ChannelPerformance,
    mean,
    safe_ratio,
)

DEFAULT_CONVERSION_RATE_THRESHOLD = 3.0
DEFAULT_TOP_CHANNEL_LIMIT = 3
FALLBACK_SOURCE = "direct"
FALLBACK_DEVICE = "unknown"

RECOMMEND_SCALE = "Strong performance - scale successful campaigns"
RECOMMEND_OPTIMIZE = "Optimization needed - focus on conversion rate improvements"


class CampaignInsightsAggregator(BaseInsightsAggregator[CampaignRecord, CampaignInsights]):
    """
    Deterministic campaign summary with safe division-by-zero handling.
    """

    record_type = CampaignRecord

    def __init__(
        self,
        *,
        conversion_rate_threshold: float = DEFAULT_CONVERSION_RATE_THRESHOLD,
        top_channel_limit: int = DEFAULT_TOP_CHANNEL_LIMIT,
    ) -> None:
        self._threshold = conversion_rate_threshold
        self._top_limit = max(1, top_channel_limit)

    def _summarize(self, records: Sequence[CampaignRecord]) -> CampaignInsights:
        average_rate = mean([record.primary_conversion_rate for record in records])
        return CampaignInsights(
            total_campaigns=len(records),
            average_conversion_rate=average_rate,
            total_spend=sum(record.total_spend for record in records),
            average_cost_per_conversion=mean([record.cost_per_conversion for record in records]),
            top_source=_most_frequent([source_of(record) for record in records]),
            top_campaign=_top_campaign(records),
            top_performing_channels=rank_groups(records, source_of)[: self._top_limit],
            high_performing_devices=rank_groups(records, _device_of)[: self._top_limit],
            recommendation=RECOMMEND_SCALE if average_rate > self._threshold else RECOMMEND_OPTIMIZE,
        )


def source_of(record: CampaignRecord) -> str:
    return record.traffic_source or record.utm_source or FALLBACK_SOURCE


def _device_of(record: CampaignRecord) -> str:
    return record.device_type or FALLBACK_DEVICE


def _most_frequent(values: Sequence[str]) -> str:
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    best = ""
    best_count = 0
    for value, count in counts.items():
        if count > best_count:
            best = value
            best_count = count
    return best


def _top_campaign(records: Sequence[CampaignRecord]) -> str:
    if not records:
        return ""
    best = records[0]
    for record in records[1:]:
        if record.primary_conversion_rate > best.primary_conversion_rate:
            best = record
    return best.campaign_name


def rank_groups(
    records: Sequence[CampaignRecord],
    key: Callable[[CampaignRecord], str],
) -> tuple[ChannelPerformance, ...]:
    """
    Group records by *key* and sort groups by conversions per session, descending.

    Groups with equal rates keep their first-seen order.
    """

    totals: dict[str, list[float]] = {}
    for record in records:
        group = totals.setdefault(key(record), [0, 0, 0.0])
        group[0] += record.sessions
        group[1] += record.primary_conversions
        group[2] += record.total_spend

    ranked = [
        ChannelPerformance(
            channel=channel,
            sessions=int(sessions),
            conversions=int(conversions),
            spend=spend,
            conversion_rate=safe_ratio(conversions, sessions),
        )
        for channel, (sessions, conversions, spend) in totals.items()
    ]
    ranked.sort(key=lambda item: item.conversion_rate, reverse=True)
    return tuple(ranked)
