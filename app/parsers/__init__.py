"""
app/parsers package marker.
"""

from app.parsers.tabular_parser import ParsedTable, TabularParser, normalize_header

__all__ = [
    "ParsedTable",
    "TabularParser",
    "normalize_header",
]
