"""
app/converters package marker.
"""

from app.converters.spreadsheet import SpreadsheetConverter

__all__ = [
    "SpreadsheetConverter",
]
