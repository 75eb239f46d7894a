"""
Delimited text parser: a deliberately small CSV/TSV reader.

Handles what people paste out of spreadsheets:
  - comma- or tab-separated (sniffed from the header line)
  - double-quoted fields, with "" as an escaped quote
  - Windows / old-Mac line endings, blank lines anywhere

Not handled: quoted fields that span several lines.
"""

import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

COMMA = ","
TAB   = "\t"
QUOTE = '"'


@dataclass
class ParsedTable:
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


def sniff_delimiter(line: str) -> str:
    """Tab if the line has strictly more tabs than commas, else comma."""
    return TAB if line.count(TAB) > line.count(COMMA) else COMMA


def split_line(line: str, delimiter: str) -> List[str]:
    """Split one physical line into trimmed fields, honouring double quotes."""
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return [f.strip() for f in fields]


def parse_delimited(text: str) -> ParsedTable:
    """
    Split a text blob into a header row and data rows.
    Returns an empty table (not an error) when there are no non-blank lines.
    """
    text = (text or "").lstrip("\ufeff")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return ParsedTable()

    delimiter = sniff_delimiter(lines[0])
    headers = split_line(lines[0], delimiter)
    rows = [split_line(line, delimiter) for line in lines[1:]]

    logger.debug(
        "Parsed %d column(s) × %d row(s), delimiter=%r",
        len(headers), len(rows), delimiter,
    )
    return ParsedTable(headers=headers, rows=rows)
