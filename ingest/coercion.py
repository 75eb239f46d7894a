"""
Scalar coercion: turns raw cell text into typed values.

Every function here accepts whatever the parser produced and never raises:
text that can't be understood comes back as None ("absent").
"""

import math
import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as dateparser

import config

_WHITESPACE = re.compile(r"\s+")

_TRUE_WORDS  = ("yes", "y", "true")
_FALSE_WORDS = ("no", "n", "false")

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# 25-Aug-25, 25 August 2025, 25/Aug/2025
_DAY_MONTH_NAME = re.compile(r"^(\d{1,2})[-/ ]([A-Za-z]{3,})[-/ ](\d{2}|\d{4})$")
# 13/02/25, 2/3/2025
_NUMERIC_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")
# ASCII decimals only; float() also accepts "1_000" and non-Latin digits
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Parsed twice; a date that changes with the default was incomplete in the
# text.
_DEFAULT_DT = datetime(2000, 1, 1)
_CHECK_DT = datetime(2001, 2, 2)


def _expand_year(year: int) -> int:
    if year < 100:
        year += 1900 if year >= config.TWO_DIGIT_YEAR_PIVOT else 2000
    return year


class _TrackerParserInfo(dateparser.parserinfo):
    """dateutil parser settings using the tracker's two-digit-year pivot."""

    def convertyear(self, year, century_specified=False):
        if century_specified:
            return year
        return _expand_year(year)


_PARSER_INFO = _TrackerParserInfo()


def trim_text(value) -> str:
    """Stringify, collapse whitespace runs to one space and strip."""
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def to_number(value) -> Optional[float]:
    """
    Parse numbers like "1,000", " 275 ", "1.5".
    Returns None for empty, non-numeric or non-finite input.
    """
    text = trim_text(value).replace(",", "")
    if not _DECIMAL.fullmatch(text):
        return None
    num = float(text)
    return num if math.isfinite(num) else None


def to_tri_bool(value) -> Optional[bool]:
    """yes/y/true → True, no/n/false → False, anything else → None (unknown)."""
    text = trim_text(value).lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return None


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_flexible_date(value) -> Optional[date]:
    """
    Parse the date formats seen in tracker sheets.

    Tried in order:
      1. dateutil's general parser ("2025-11-29", "29 Nov 2025", "25-Aug-25"),
         only when the text names a day, a month and a year ("March" and
         "10:30" fall through)
      2. D-Mon-YY[YY] with any month spelling that starts with a known
         three-letter abbreviation ("25-Augu-25")
      3. D/M/YY[YY], reading the first number as the month when it is 12 or
         less and as the day otherwise ("13/02/25" → 13 Feb 2025)

    Returns None when nothing produces a valid calendar date.
    """
    text = trim_text(value)
    if not text:
        return None

    try:
        parsed = dateparser.parse(text, parserinfo=_PARSER_INFO, default=_DEFAULT_DT).date()
        check = dateparser.parse(text, parserinfo=_PARSER_INFO, default=_CHECK_DT).date()
    except (ValueError, OverflowError):
        pass
    else:
        if parsed == check:
            return parsed

    m = _DAY_MONTH_NAME.match(text)
    if m:
        month = _MONTHS.get(m.group(2)[:3].lower())
        if month is not None:
            return _safe_date(_expand_year(int(m.group(3))), month, int(m.group(1)))

    m = _NUMERIC_SLASH.match(text)
    if m:
        first, second = int(m.group(1)), int(m.group(2))
        year = _expand_year(int(m.group(3)))
        if first <= 12:
            return _safe_date(year, first, second)
        return _safe_date(year, second, first)

    return None
