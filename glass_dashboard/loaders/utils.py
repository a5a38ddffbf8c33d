"""
Shared utilities for data ingestion: numeric coercion, date and time
normalisation.
"""

import logging
import math
import re
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

_AM_MARKER = "오전"
_PM_MARKER = "오후"
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def _is_missing(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return isinstance(val, str) and not val.strip()


def safe_float(val: Any) -> float | None:
    """Coerce a value to float, returning None for non-numeric values.

    Thousands separators ("1,234.5") are accepted.
    """
    if _is_missing(val):
        return None
    if isinstance(val, str):
        val = val.strip().replace(",", "")
    try:
        result = float(val)
    except (ValueError, TypeError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(val: Any) -> int | None:
    """Coerce a value to int by flooring its float value."""
    num = safe_float(val)
    if num is None:
        return None
    return math.floor(num)


def parse_bool(val: Any) -> bool | None:
    """'TRUE' (any case) is True, any other non-empty value is False."""
    if _is_missing(val):
        return None
    if isinstance(val, bool):
        return val
    return str(val).strip().upper() == "TRUE"


def parse_time(val: Any) -> str | None:
    """Normalise a time of day to 24-hour HH:MM:SS.

    Handles the Korean AM/PM markers used by the export
    ("오후 1:05:09" -> "13:05:09"). Returns None for unparseable values.
    """
    if _is_missing(val):
        return None

    s = str(val).strip()
    is_pm = _PM_MARKER in s
    is_am = _AM_MARKER in s
    s = s.replace(_AM_MARKER, "").replace(_PM_MARKER, "").strip()

    match = _TIME_RE.match(s)
    if match is None:
        logger.warning("Could not parse time value: %s", val)
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if is_pm and hour < 12:
        hour += 12
    elif is_am and hour == 12:
        hour = 0

    if hour > 23 or minute > 59 or second > 59:
        logger.warning("Time value out of range: %s", val)
        return None
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def normalise_date(val: Any) -> str | None:
    """Convert a date-like value to an ISO 'YYYY-MM-DD' string.

    Excel serial numbers use the 1899-12-30 epoch. Returns None for
    unparseable values.
    """
    if _is_missing(val):
        return None
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        try:
            ts = pd.Timestamp("1899-12-30") + pd.Timedelta(days=int(val))
        except (ValueError, OverflowError):
            logger.warning("Could not convert serial number %s to date", val)
            return None
        return ts.strftime("%Y-%m-%d")
    try:
        ts = pd.Timestamp(str(val).strip())
    except (ValueError, TypeError):
        logger.warning("Could not parse date value: %s", val)
        return None
    if pd.isna(ts):
        return None
    return ts.strftime("%Y-%m-%d")
