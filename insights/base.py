"""
insights/base.py

Summary shapes and the abstract contract for batch insight aggregators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

RecordT = TypeVar("RecordT")
SummaryT = TypeVar("SummaryT")


@dataclass(frozen=True)
class ChannelPerformance:
    """
    Conversion performance of one traffic source or device group.
    """

    channel: str
    sessions: int = 0
    conversions: int = 0
    spend: float = 0.0
    conversion_rate: float = 0.0


@dataclass(frozen=True)
class CampaignInsights:
    total_campaigns: int = 0
    average_conversion_rate: float = 0.0
    total_spend: float = 0.0
    average_cost_per_conversion: float = 0.0
    top_source: str = ""
    top_campaign: str = ""
    top_performing_channels: tuple[ChannelPerformance, ...] = field(default_factory=tuple)
    high_performing_devices: tuple[ChannelPerformance, ...] = field(default_factory=tuple)
    recommendation: str = ""


@dataclass(frozen=True)
class ExperimentInsights:
    total_experiments: int = 0
    significant_count: int = 0
    average_uplift: float = 0.0
    win_rate: float = 0.0
    recommendation: str = ""


InsightsSummary = CampaignInsights | ExperimentInsights


class BaseInsightsAggregator(ABC, Generic[RecordT, SummaryT]):
    """
    Contract for batch aggregators.

    Subclasses receive a finite batch of same-schema canonical records and
    return one summary. An empty batch must produce an all-zero summary
    rather than raise. No I/O and no side effects are permitted inside
    :meth:`summarize`.
    """

    record_type: type[Any]

    def summarize(self, records: Sequence[RecordT]) -> SummaryT:
        """
        Validate the batch shape, then delegate to :meth:`_summarize`.
        """

        for record in records:
            if not isinstance(record, self.record_type):
                raise TypeError(
                    f"{type(self).__name__} cannot summarize {type(record).__name__} records."
                )
        return self._summarize(records)

    @abstractmethod
    def _summarize(self, records: Sequence[RecordT]) -> SummaryT:
        """
        Compute the summary for an already validated batch.
        """


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    ``numerator / denominator``, or 0.0 when the denominator is zero.
    """

    if denominator == 0:
        return 0.0
    return numerator / denominator


def mean(values: Sequence[float]) -> float:
    return safe_ratio(sum(values), len(values))
