"""
Input sources: where tracker text comes from.

All sources hand the loader one text blob:
  TextSource    : pasted from the clipboard / a form field
  FileSource    : a .csv / .tsv / .txt file on disk
  WorkbookSource: the first sheet of an .xlsx tracker, rendered as TSV
  SampleSource  : the bundled demo tracker
"""

import io
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from pathlib import Path
from typing import BinaryIO, Union

import openpyxl

from ingest.sample import SAMPLE_LABEL, SAMPLE_TRACKER

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = (".csv", ".tsv", ".txt")
WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")


class BaseSource(ABC):
    """All tracker sources inherit from this class."""

    label: str = "Unknown source"

    # ── Public API ────────────────────────────────────────────────────────────

    def run(self) -> str:
        """
        Entry point called by the dashboard and the CLI.
        Returns the raw tracker text; errors propagate to the load boundary.
        """
        logger.info("▶  Reading %s …", self.label)
        text = self.read()
        logger.info("✓  %s: %d character(s)", self.label, len(text))
        return text

    @abstractmethod
    def read(self) -> str:
        """Return the tracker as a delimited text blob."""
        ...


class TextSource(BaseSource):
    def __init__(self, text: str, label: str = "Pasted text") -> None:
        self.text = text or ""
        self.label = label

    def read(self) -> str:
        return self.text


class SampleSource(BaseSource):
    label = SAMPLE_LABEL

    def read(self) -> str:
        return SAMPLE_TRACKER


class FileSource(BaseSource):
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.label = self.path.name

    def read(self) -> str:
        # utf-8-sig drops the BOM Excel adds to "CSV UTF-8" exports
        return self.path.read_text(encoding="utf-8-sig")


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(text: str) -> str:
    if "\t" in text or '"' in text or "\n" in text:
        text = text.replace("\n", " ").replace('"', '""')
        return f'"{text}"'
    return text


class WorkbookSource(BaseSource):
    """
    Reads the first worksheet of an Excel tracker.

    Cells are rendered as tab-separated text so the workbook goes through
    exactly the same parser as a pasted sheet. Dates become ISO strings.
    """

    def __init__(self, workbook: Union[str, Path, BinaryIO], label: str = "") -> None:
        self.workbook = workbook
        self.label = label or (Path(workbook).name if isinstance(workbook, (str, Path)) else "Workbook")

    def read(self) -> str:
        wb = openpyxl.load_workbook(self.workbook, data_only=True, read_only=True)
        try:
            ws = wb.worksheets[0]
            lines = []
            for row in ws.iter_rows(values_only=True):
                lines.append("\t".join(_quote(_cell_text(v)) for v in row))
        finally:
            wb.close()
        return "\n".join(lines)


def source_for_upload(filename: str, data: bytes) -> BaseSource:
    """Pick a source for an uploaded file based on its extension."""
    suffix = Path(filename or "").suffix.lower()
    if suffix in WORKBOOK_EXTENSIONS:
        return WorkbookSource(io.BytesIO(data), label=filename)
    if suffix and suffix not in TEXT_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {suffix}")
    return TextSource(data.decode("utf-8-sig", errors="replace"), label=filename or "Upload")
