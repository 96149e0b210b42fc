"""
app/domain package marker.
"""

from app.domain.historic_records import CampaignRecord, ExperimentRecord, ImportSummary

__all__ = [
    "CampaignRecord",
    "ExperimentRecord",
    "ImportSummary",
]
