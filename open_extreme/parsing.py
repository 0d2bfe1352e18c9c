"""Tolerant parsers for raw CSV cell text.

Every parser returns ``None`` for input it cannot interpret instead of raising,
so callers can drop a row silently when a field it needs is unreadable.
"""

from __future__ import annotations

import math
import re
import warnings
from datetime import date
from typing import Any, Mapping, Optional

import pandas as pd

DEFAULT_TOLERANCE = 1e-6

_NUMBER_TOKEN = re.compile(r"[-+]?\d*\.?\d+(?:e[-+]?\d+)?", re.IGNORECASE)
_PLAIN_NUMBER = re.compile(r"[\d,.]+")
_NUMBER_WITH_UNIT = re.compile(r"([\d,.]*\d(?:\.\d+)?)\s*([a-z]+)")
_DAY_MONTH_YEAR = re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})")
_CLOCK = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")
_TIME_OF_DAY = re.compile(r"\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?\s*(?:[ap]\.?m\.?)?", re.IGNORECASE)

# Multipliers into crores. Kept exactly as the screening desk reports them.
MARKET_CAP_UNITS: Mapping[str, float] = {
    "crore": 1.0,
    "crores": 1.0,
    "cr": 1.0,
    "crs": 1.0,
    "lakh": 0.01,
    "lakhs": 0.01,
    "lac": 0.01,
    "lacs": 0.01,
    "l": 0.01,
    "million": 0.1,
    "millions": 0.1,
    "mn": 0.1,
    "m": 0.1,
    "billion": 100.0,
    "billions": 100.0,
    "bn": 100.0,
    "b": 100.0,
    "thousand": 0.00001,
    "thousands": 0.00001,
    "k": 0.00001,
}


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def clean_number(value: Any) -> Optional[float]:
    """Extract the first signed decimal from ``value`` after dropping commas.

    >>> clean_number("1,234.50 INR")
    1234.5
    >>> clean_number("n/a") is None
    True
    """

    text = _text(value)
    if not text:
        return None
    match = _NUMBER_TOKEN.search(text.replace(",", ""))
    if not match:
        return None
    try:
        return _finite(float(match.group(0)))
    except (ValueError, OverflowError):
        return None


def parse_market_cap_crores(value: Any) -> Optional[float]:
    """Normalise a market-cap cell to crores.

    Bare numbers are taken as crores already; otherwise a leading number must be
    followed by a known unit suffix (see ``MARKET_CAP_UNITS``).
    """

    text = _text(value).lower()
    if not text:
        return None

    compact = re.sub(r"\s", "", text)
    if _PLAIN_NUMBER.fullmatch(compact):
        try:
            return _finite(float(compact.replace(",", "")))
        except ValueError:
            return None

    match = _NUMBER_WITH_UNIT.search(text)
    if not match:
        return None
    try:
        amount = float(match.group(1).replace(",", ""))
    except ValueError:
        return None
    multiplier = MARKET_CAP_UNITS.get(match.group(2))
    if multiplier is None:
        return None
    return _finite(amount * multiplier)


def approx_equal(a: Optional[float], b: Optional[float], tol: float = DEFAULT_TOLERANCE) -> bool:
    if a is None or b is None:
        return False
    if not (math.isfinite(a) and math.isfinite(b)):
        return False
    return abs(a - b) <= tol


def _general_date(text: str) -> Optional[date]:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            stamp = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if stamp is None or pd.isna(stamp):
        return None
    return stamp.date()


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date, falling back to strict ``D/M/Y`` or ``D-M-Y``."""

    text = _text(value)
    if not text:
        return None
    # Time-of-day text (with or without AM/PM) is not today's date.
    if _TIME_OF_DAY.fullmatch(text):
        return None

    parsed = _general_date(text)
    if parsed is not None:
        return parsed

    match = _DAY_MONTH_YEAR.fullmatch(text)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def date_key(value: Any) -> Optional[str]:
    """ISO ``YYYY-MM-DD`` key for grouping; sorts chronologically as text."""

    parsed = parse_date(value)
    return parsed.isoformat() if parsed is not None else None


def time_to_minutes(value: Any) -> Optional[int]:
    """Minutes since midnight for ``H:MM`` / ``H:MM:SS``; seconds are ignored."""

    text = _text(value)
    if not text:
        return None
    match = _CLOCK.fullmatch(text)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3)) if match.group(3) is not None else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return hours * 60 + minutes


__all__ = [
    "DEFAULT_TOLERANCE",
    "MARKET_CAP_UNITS",
    "clean_number",
    "parse_market_cap_crores",
    "approx_equal",
    "parse_date",
    "date_key",
    "time_to_minutes",
]
