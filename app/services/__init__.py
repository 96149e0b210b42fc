"""
app/services package marker.
"""

from app.services.historic_data_service import HistoricDataService, get_historic_data_service
from app.services.ingestion_pipeline import HistoricDataPipeline, PipelineResult

__all__ = [
    "HistoricDataPipeline",
    "HistoricDataService",
    "PipelineResult",
    "get_historic_data_service",
]
