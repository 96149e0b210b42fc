"""
insights/readiness.py

Whether enough history exists to drive data-informed page generation.
"""

from __future__ import annotations

MIN_CAMPAIGNS_ALONE = 5
MIN_CAMPAIGNS_WITH_EXPERIMENTS = 2
MIN_EXPERIMENTS = 2


def is_ready_for_generation(campaign_count: int, experiment_count: int) -> bool:
    """
    Ready with five campaigns, or with two campaigns plus two experiments.
    """

    if campaign_count >= MIN_CAMPAIGNS_ALONE:
        return True
    return campaign_count >= MIN_CAMPAIGNS_WITH_EXPERIMENTS and experiment_count >= MIN_EXPERIMENTS
