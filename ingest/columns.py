"""
Column resolver: finds tracker columns by header name.

Header names are compared after normalisation, so "RFS No.", "rfs no" and
"RFS  NO" all hit the same column. The first column with a given name wins,
except for "Bidding Authority", which trackers carry twice (authority name,
then its level such as State / Central) and which is resolved by position.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ingest.coercion import trim_text

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

AUTHORITY_HEADER = "bidding authority"


def normalize_header(name) -> str:
    return _NON_ALNUM.sub(" ", trim_text(name).lower()).strip()


def _cell(row: Sequence[str], pos: Optional[int]) -> str:
    if pos is None or pos >= len(row):
        return ""
    return trim_text(row[pos])


@dataclass
class ColumnIndex:
    positions: Dict[str, int] = field(default_factory=dict)
    authority_positions: List[int] = field(default_factory=list)

    @classmethod
    def from_headers(cls, headers: Sequence[str]) -> "ColumnIndex":
        positions: Dict[str, int] = {}
        authority_positions: List[int] = []
        for i, header in enumerate(headers):
            key = normalize_header(header)
            positions.setdefault(key, i)
            if key == AUTHORITY_HEADER:
                authority_positions.append(i)
        return cls(positions=positions, authority_positions=authority_positions)

    @property
    def authority_name_col(self) -> Optional[int]:
        return self.authority_positions[0] if self.authority_positions else None

    @property
    def authority_level_col(self) -> Optional[int]:
        return self.authority_positions[1] if len(self.authority_positions) > 1 else None

    def position(self, header: str) -> Optional[int]:
        return self.positions.get(normalize_header(header))

    def get(self, row: Sequence[str], header: str) -> str:
        """Trimmed cell text for the named column, or "" if absent."""
        return _cell(row, self.position(header))

    def authority_name(self, row: Sequence[str]) -> str:
        return _cell(row, self.authority_name_col)

    def authority_level(self, row: Sequence[str]) -> str:
        return _cell(row, self.authority_level_col)
