"""
Period handling - the calendar month a transaction is attributed to.

Two canonical encodings exist, one per remote schema:
- "MM/YYYY" for sheets that store a month reference
- "YYYY-MM" for sheets that store an ISO day

Raw values that cannot be read as a period are handed back unchanged so
that sorting and filtering can decide what to do with them.
"""
import math
import re
from datetime import date
from typing import Any, Optional, Tuple

import pandas as pd

# Days between the spreadsheet epoch (1899-12-30) and the Unix epoch
SERIAL_EPOCH_OFFSET = 25569

# Serials from here on are shifted by the fictitious 1900-02-29
LEAP_BUG_SERIAL = 60

# Serials a spreadsheet cell can hold, up to 9999-12-31
MIN_SERIAL = 1
MAX_SERIAL = 2958465

_MONTH_YEAR = re.compile(r"^\s*(\d{1,2})/(\d{4})\s*$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})$")
_ISO_DAY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def _as_serial(value: Any) -> Optional[float]:
    """Return the value as a spreadsheet serial number, or None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        serial = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            serial = float(text)
        except ValueError:
            return None
    if math.isnan(serial) or not MIN_SERIAL <= serial <= MAX_SERIAL:
        return None
    return serial


def _pad_month_year(value: str) -> str:
    match = _MONTH_YEAR.match(value)
    if match is None:
        return value
    month, year = match.groups()
    return f"{int(month):02d}/{year}"


def serial_to_date(serial: float) -> pd.Timestamp:
    """
    Convert a spreadsheet serial date to a calendar timestamp.

    Counts (serial - 25569) days from 1970-01-01 and adds one day for
    serials >= 60, the spreadsheet engine's 1900 leap year bug.

    Example:
        serial_to_date(45808) -> Timestamp('2025-06-01 00:00:00')
    """
    converted = pd.to_datetime(serial - SERIAL_EPOCH_OFFSET, unit="D", origin="unix").round("ms")
    if serial >= LEAP_BUG_SERIAL:
        converted += pd.Timedelta(days=1)
    return converted


def normalize_period(value: Any) -> Any:
    """
    Normalize a raw month reference to "MM/YYYY".

    Accepts:
        "6/2025" or "06/2025" -> "06/2025"
        "45808" (spreadsheet serial) -> "06/2025"

    Anything else, serials outside 1..2958465 included, is returned
    unchanged.
    """
    if value is None:
        return value

    if isinstance(value, str) and "/" in value:
        return _pad_month_year(value)

    serial = _as_serial(value)
    if serial is None:
        return value

    try:
        converted = serial_to_date(serial)
    except (OverflowError, ValueError, pd.errors.OutOfBoundsDatetime):
        return value
    return f"{converted.month:02d}/{converted.year}"


def month_of_day(value: Any) -> Any:
    """Truncate an ISO day "YYYY-MM-DD" to its "YYYY-MM" group"""
    if not isinstance(value, str):
        return value
    match = _ISO_DAY.match(value.strip())
    if match is None:
        return value
    year, month, _ = match.groups()
    return f"{year}-{month}"


def normalize_selection(value: Any) -> Any:
    """
    Normalize a user-selected period token in either canonical form.

    Serial dates only come from sheet cells, so bare numbers are
    matched verbatim.
    """
    if not isinstance(value, str):
        return value
    if _ISO_DAY.match(value.strip()):
        return month_of_day(value)
    if "/" in value:
        return _pad_month_year(value)
    return value


def parse_period(period: Any) -> Optional[Tuple[int, int]]:
    """
    Read a canonical period as (year, month).

    Returns:
        (year, month) for "MM/YYYY" or "YYYY-MM", None when unparseable
    """
    if not isinstance(period, str):
        return None

    match = _MONTH_YEAR.match(period)
    if match:
        month, year = int(match.group(1)), int(match.group(2))
    else:
        match = _YEAR_MONTH.match(period.strip())
        if match is None:
            return None
        year, month = int(match.group(1)), int(match.group(2))

    if not 1 <= month <= 12:
        return None
    return year, month


def period_number(period: Any) -> Optional[int]:
    """Numeric encoding year*100+month used for ordering"""
    parsed = parse_period(period)
    if parsed is None:
        return None
    year, month = parsed
    return year * 100 + month


def format_period(year: int, month: int, style: str = "month") -> str:
    """Render a (year, month) pair in the canonical form of a schema"""
    if style == "date":
        return f"{year:04d}-{month:02d}"
    return f"{month:02d}/{year:04d}"


def current_period(today: Optional[date] = None, style: str = "month") -> str:
    """The period containing today, e.g. "06/2025" """
    today = today or date.today()
    return format_period(today.year, today.month, style)
