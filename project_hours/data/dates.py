"""
Date parsing and month-granularity range matching for time entries.

Raw entry dates arrive as spreadsheet serials, datetimes or text. Anything
that cannot be parsed is treated as outside every range (fail-closed).
"""
import re
from datetime import date, datetime
from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd

from project_hours.logger import get_logger

logger = get_logger(__name__)

# Spreadsheet day zero (accounts for the 1900 leap-year bug)
EXCEL_EPOCH = pd.Timestamp("1899-12-30")

_NUMERIC_TEXT = re.compile(r"^-?\d+(\.\d+)?$")
_ISO_DATE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}")
_BR_DATE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}")


# =============================================================================
# PARSING
# =============================================================================

def _from_serial(serial: float) -> Optional[pd.Timestamp]:
    if np.isnan(serial) or serial <= 0:
        return None
    try:
        return EXCEL_EPOCH + pd.Timedelta(days=serial)
    except (OverflowError, ValueError):
        return None


def _strip_tz(ts: pd.Timestamp) -> Optional[pd.Timestamp]:
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def parse_excel_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a raw spreadsheet date into a naive Timestamp.

    Supports:
    - datetime / date / Timestamp / numpy datetime64
    - spreadsheet serials (int, float or numeric text)
    - ISO text (YYYY-MM-DD, optional time part)
    - Brazilian text (DD/MM/YYYY, optional time part)
    - anything else pandas can parse (day-first)

    Returns None when the value cannot be parsed.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None

    if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
        return _strip_tz(pd.Timestamp(value))

    if isinstance(value, (int, float, np.integer, np.floating)):
        return _from_serial(float(value))

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        if _NUMERIC_TEXT.match(text):
            return _from_serial(float(text))
        if _ISO_DATE.match(text):
            parsed = pd.to_datetime(text.split()[0].split("T")[0], format="%Y-%m-%d", errors="coerce")
        elif _BR_DATE.match(text):
            parsed = pd.to_datetime(text.split()[0], format="%d/%m/%Y", errors="coerce")
        else:
            parsed = pd.to_datetime(text, errors="coerce", dayfirst=True)
    except (ValueError, TypeError, OverflowError):
        return None

    return _strip_tz(parsed)


# =============================================================================
# MONTH RANGES
# =============================================================================

def _to_month(bound: Any) -> Optional[pd.Period]:
    """YYYY-MM text (or a date) → monthly Period. Empty or invalid → None."""
    if bound is None:
        return None
    if isinstance(bound, (pd.Timestamp, datetime, date)):
        period = pd.Period(bound, freq="M")
    else:
        text = str(bound).strip()
        if not text:
            return None
        try:
            period = pd.Period(text[:7], freq="M")
        except ValueError:
            period = None
    # "NaT" text parses to NaT rather than raising
    if period is None or pd.isna(period):
        logger.warning(f"Ignoring invalid period bound: {bound!r}")
        return None
    return period


def month_bounds(start: Any = None, end: Any = None) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    """
    Expand month bounds to instants.

    Returns (first instant of start month, last instant of end month);
    either side is None when that bound is absent.
    """
    start_month = _to_month(start)
    end_month = _to_month(end)
    lower = start_month.start_time if start_month is not None else None
    upper = end_month.end_time if end_month is not None else None
    return lower, upper


def is_in_range(raw_date: Any, start: Any = None, end: Any = None) -> bool:
    """
    True if raw_date falls within [start, end] (month precision, inclusive).

    No bounds → always True. Unparsable dates with any bound → False.
    """
    lower, upper = month_bounds(start, end)
    if lower is None and upper is None:
        return True

    parsed = parse_excel_date(raw_date)
    if parsed is None:
        return False
    if lower is not None and parsed < lower:
        return False
    if upper is not None and parsed > upper:
        return False
    return True


def parse_dates(values: pd.Series) -> pd.Series:
    """Vectorised parse_excel_date → datetime64 series with NaT for failures."""
    parsed = values.astype(object).map(parse_excel_date)
    return pd.to_datetime(parsed, errors="coerce")


def date_in_range_mask(values: pd.Series, start: Any = None, end: Any = None) -> pd.Series:
    """Vectorised is_in_range, index preserved."""
    lower, upper = month_bounds(start, end)
    if lower is None and upper is None:
        return pd.Series(True, index=values.index)

    parsed = parse_dates(values)
    mask = parsed.notna()
    if lower is not None:
        mask &= parsed >= lower
    if upper is not None:
        mask &= parsed <= upper
    return mask


def get_period_bounds(values: pd.Series) -> Tuple[str, str]:
    """
    Earliest and latest month (YYYY-MM) among parseable dates.

    Returns ("", "") when nothing parses.
    """
    parsed = parse_dates(values).dropna()
    if len(parsed) == 0:
        return "", ""
    return parsed.min().strftime("%Y-%m"), parsed.max().strftime("%Y-%m")
