"""Multi-format date parsing for trip records and command-line input."""

import re
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as dateutil_parser

DateLike = Union[date, str]


def parse_date(raw: str) -> Optional[date]:
    """Parse a date string in many formats, returning a date or None.

    Handles:
      - YYYY-MM-DD (the stored format)
      - YYYY/MM/DD and other year-first numeric forms
      - DD/MM/YYYY and DD-MM-YYYY (day first, UK style)
      - "1 Jun 2024", "June 1, 2024" and similar via dateutil
    """
    if not raw or raw.strip().lower() in ("null", "none", "unknown", ""):
        return None

    raw = raw.strip()

    # 1. YYYY-MM-DD, optionally with a time part as written by JS toISOString()
    m = re.match(r'^(\d{4})-(\d{2})-(\d{2})(?:T.*)?$', raw)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    # 2. YYYY/M/D, YYYY.M.D, YYYY-M-D: year first is always followed by month
    m = re.match(r'^(\d{4})[/.-](\d{1,2})[/.-](\d{1,2})$', raw)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    # 3. DD/MM/YYYY, DD-MM-YYYY or DD.MM.YYYY
    m = re.match(r'^(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})$', raw)
    if m:
        try:
            return date(int(m.group(3)), int(m.group(2)), int(m.group(1)))
        except ValueError:
            return None

    # 4. dateutil as general fallback; a bare year or month is not a date
    if not re.search(r'\d', raw) or re.fullmatch(r'\d{4}', raw):
        return None
    # dayfirst would read "2024 1 5" as 1 May; only apply it when the year is not leading
    dayfirst = re.match(r'^\d{4}\b', raw) is None
    try:
        return dateutil_parser.parse(raw, dayfirst=dayfirst, default=datetime(1900, 1, 1)).date()
    except (ValueError, OverflowError):
        return None


def to_date(value: DateLike) -> date:
    """Coerce a date or date string to a date, raising ValueError if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(value) if isinstance(value, str) else None
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}. Use YYYY-MM-DD (e.g., 2024-06-01)")
    return parsed
