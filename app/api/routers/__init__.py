"""
app/api/routers package marker.
"""

from app.api.routers.historic_data import router as historic_data_router

__all__ = [
    "historic_data_router",
]
