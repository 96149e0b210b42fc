"""
app/parsers/tabular_parser.py

Delimited-text parsing for uploaded campaign and experiment files.

The parser accepts comma, tab, semicolon and pipe separated text, picks the
delimiter from the header line, normalizes header tokens into
``[a-z0-9_]`` keys, and yields one ordered mapping per non-blank data row.

Quoting is evaluated within a single physical line: ``"`` toggles quoted
mode, ``""`` inside quoted mode is a literal quote, and the delimiter is
inert while quoted. Multi-line quoted cells are not supported.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS: tuple[str, ...] = (",", "\t", ";", "|")

_QUOTE = '"'
_SURROUNDING_QUOTES = "\"'"
_INVALID_HEADER_CHARS = re.compile(r"[^a-z0-9_]")


def normalize_header(header: str) -> str:
    """
    Normalize one header token into a lookup key.

    ``normalize_header(normalize_header(x)) == normalize_header(x)`` holds
    for every input.
    """

    token = header.strip().lower().strip(_SURROUNDING_QUOTES)
    return _INVALID_HEADER_CHARS.sub("_", token)


def split_fields(line: str, delimiter: str) -> list[str]:
    """
    Split one line on *delimiter*, honouring double-quoted sections.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    index = 0
    length = len(line)

    while index < length:
        char = line[index]
        if char == _QUOTE:
            if in_quotes and index + 1 < length and line[index + 1] == _QUOTE:
                current.append(_QUOTE)
                index += 2
                continue
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1

    fields.append("".join(current))
    return fields


def detect_delimiter(header_line: str) -> str:
    """
    Return the candidate delimiter that yields the most header fields.

    Ties resolve to the earliest entry of ``CANDIDATE_DELIMITERS``.
    """

    best = CANDIDATE_DELIMITERS[0]
    best_count = 0
    for candidate in CANDIDATE_DELIMITERS:
        count = len(split_fields(header_line, candidate))
        if count > best_count:
            best = candidate
            best_count = count
    return best


def non_blank_lines(text: str) -> list[str]:
    """
    Split on line feeds only; a trailing carriage return is dropped from each line.
    """

    lines = (line.removesuffix("\r") for line in text.split("\n"))
    return [line for line in lines if line.strip()]


@dataclass(frozen=True)
class ParsedTable:
    """
    Restartable view over the data rows of one delimited text.

    Rows are produced lazily on every iteration; iterating twice yields
    identical sequences.
    """

    delimiter: str
    headers: tuple[str, ...]
    source_headers: tuple[str, ...]
    data_lines: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.headers or not self.data_lines

    def __iter__(self) -> Iterator[dict[str, str]]:
        for line in self.data_lines:
            row = self._build_row(split_fields(line, self.delimiter))
            if any(value for value in row.values()):
                yield row

    def _build_row(self, values: list[str]) -> dict[str, str]:
        row: dict[str, str] = {}
        for index, header in enumerate(self.headers):
            if header in row:
                continue
            row[header] = values[index].strip() if index < len(values) else ""
        return row


EMPTY_TABLE = ParsedTable(delimiter=CANDIDATE_DELIMITERS[0], headers=(), source_headers=(), data_lines=())


class TabularParser:
    """
    Converts raw delimited text into header-keyed rows.
    """

    def parse(self, text: str) -> ParsedTable:
        """
        Parse *text* using its first non-blank line as the header.

        Returns an empty table when fewer than two non-blank lines exist.
        """

        lines = non_blank_lines(text)
        if len(lines) < 2:
            logger.info("Delimited text has %d non-blank line(s); nothing to parse", len(lines))
            return EMPTY_TABLE

        header_line = lines[0]
        delimiter = detect_delimiter(header_line)
        source_headers = tuple(split_fields(header_line, delimiter))
        headers = tuple(normalize_header(header) for header in source_headers)

        duplicates = sorted({header for header in headers if headers.count(header) > 1})
        if duplicates:
            logger.warning(
                "Duplicate normalized headers %s; the first matching column is kept",
                duplicates,
            )

        return ParsedTable(
            delimiter=delimiter,
            headers=headers,
            source_headers=source_headers,
            data_lines=tuple(lines[1:]),
        )
