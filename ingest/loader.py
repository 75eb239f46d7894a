"""
Loader: the one place a tracker load can fail.

load_records() turns a text blob into records or raises TrackerLoadError.
TrackerState is the immutable snapshot the dashboard and CLI hold: every
load or filter change produces a new state, and a failed load keeps the
previous records and filter, only recording the error message.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Optional, Tuple

from filters.tracker_filter import RecordFilter
from ingest.models import BidRecord
from ingest.parser import parse_delimited
from ingest.records import build_records
from ingest.sources import BaseSource, SampleSource

logger = logging.getLogger(__name__)

NO_HEADER_MSG = "No header row detected."
NO_ROWS_MSG   = "Parsed 0 rows. Check delimiter and header names."


class TrackerLoadError(Exception):
    """Raised when a tracker blob yields no usable header or rows."""


def load_records(text: str) -> Tuple[BidRecord, ...]:
    table = parse_delimited(text)
    if not table.headers:
        raise TrackerLoadError(NO_HEADER_MSG)

    records = build_records(table.headers, table.rows)
    if not records:
        raise TrackerLoadError(NO_ROWS_MSG)

    logger.info("Loaded %d record(s) from %d data row(s).", len(records), len(table.rows))
    return tuple(records)


@dataclass(frozen=True)
class TrackerState:
    records: Tuple[BidRecord, ...] = ()
    record_filter: RecordFilter = field(default_factory=RecordFilter)
    error: Optional[str] = None
    source: str = ""
    loaded_at: Optional[datetime] = None

    def with_load(self, text: str, source: str = "Pasted text") -> "TrackerState":
        """New state with freshly parsed records, or this state plus an error."""
        try:
            records = load_records(text)
        except TrackerLoadError as exc:
            logger.warning("Load from %s rejected: %s", source, exc)
            return replace(self, error=str(exc))
        except Exception as exc:
            logger.error("Load from %s failed: %s", source, exc, exc_info=True)
            return replace(self, error=str(exc) or "Parse failed.")
        return self.with_records(records, source=source)

    def with_records(self, records: Iterable[BidRecord], source: str = "") -> "TrackerState":
        """New state holding already-built records; clears any earlier error."""
        return replace(
            self,
            records=tuple(records),
            error=None,
            source=source,
            loaded_at=datetime.now(),
        )

    def with_source(self, src: BaseSource) -> "TrackerState":
        """Read a source and load it; read failures are reported like parse failures."""
        try:
            text = src.run()
        except Exception as exc:
            logger.error("✗  %s could not be read: %s", src.label, exc, exc_info=True)
            return replace(self, error=str(exc) or "Read failed.")
        return self.with_load(text, source=src.label)

    def with_filter(self, record_filter: RecordFilter) -> "TrackerState":
        return replace(self, record_filter=record_filter)


def initial_state() -> TrackerState:
    """State holding the bundled sample, as shown on startup."""
    return TrackerState().with_source(SampleSource())
