"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.experiment_result import ExperimentResult
from db.models.historic_campaign import HistoricCampaign

__all__ = [
    "HistoricCampaign",
    "ExperimentResult",
]
