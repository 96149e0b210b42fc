"""
app/repositories package marker.
"""

from app.repositories.historic_data_repository import HistoricDataRepository

__all__ = [
    "HistoricDataRepository",
]
