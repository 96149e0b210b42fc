"""
app/schemas package marker.
"""

from app.schemas.historic_data import (
    CampaignInsightsResponse,
    ExperimentInsightsResponse,
    HistoricDataListResponse,
    HistoricImportResponse,
    HistoricPreviewResponse,
    ProcessCampaignDataRequest,
)

__all__ = [
    "CampaignInsightsResponse",
    "ExperimentInsightsResponse",
    "HistoricDataListResponse",
    "HistoricImportResponse",
    "HistoricPreviewResponse",
    "ProcessCampaignDataRequest",
]
