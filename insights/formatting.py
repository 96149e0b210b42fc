"""
insights/formatting.py

Display strings for insight summaries, as rendered by the dashboard.
"""

from __future__ import annotations

from insights.base import CampaignInsights, ExperimentInsights


def format_campaign_insights(summary: CampaignInsights) -> dict[str, str]:
    return {
        "average_conversion_rate": f"{summary.average_conversion_rate:.2f}%",
        "total_spend": f"${summary.total_spend:.0f}",
        "average_cost_per_conversion": f"${summary.average_cost_per_conversion:.2f}",
    }


def format_experiment_insights(summary: ExperimentInsights) -> dict[str, str]:
    return {
        "average_uplift": f"{summary.average_uplift:.1f}%",
        "win_rate": f"{summary.win_rate * 100:.0f}%",
    }
