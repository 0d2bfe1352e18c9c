"""Row-level predicates for the opening-extreme screens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import FULL_MIN_CLOSE, FULL_MIN_MARKET_CAP_CRORES, FULL_VOLUME_MULTIPLE
from ..dataset import ScreenedRow
from ..headers import HeaderMap, HeaderRole
from ..parsing import DEFAULT_TOLERANCE, approx_equal, clean_number, parse_market_cap_crores


class ScreenMode(str, Enum):
    OPEN_HIGH = "openHigh"
    OPEN_LOW = "openLow"
    OPEN_HIGH_LOW = "openHighLow"
    FULL = "full"


_MODE_ALIASES = {mode.value.lower(): mode for mode in ScreenMode}


def parse_mode(value: object) -> Optional[ScreenMode]:
    """Map user input such as ``"openHigh"`` or ``"open_high"`` to a mode."""

    if isinstance(value, ScreenMode):
        return value
    token = str(value or "").strip().lower().replace("_", "").replace("-", "")
    return _MODE_ALIASES.get(token)


@dataclass(frozen=True)
class Ohlc:
    open: float
    high: float
    low: float

    def open_is_high(self, tol: float = DEFAULT_TOLERANCE) -> bool:
        return approx_equal(self.open, self.high, tol)

    def open_is_low(self, tol: float = DEFAULT_TOLERANCE) -> bool:
        return approx_equal(self.open, self.low, tol)


def read_ohlc(record: ScreenedRow, header_map: HeaderMap) -> Optional[Ohlc]:
    """Open/High/Low of a row, or None when any of them is unreadable."""

    open_ = clean_number(record.get(header_map.get(HeaderRole.OPEN)))
    high = clean_number(record.get(header_map.get(HeaderRole.HIGH)))
    low = clean_number(record.get(header_map.get(HeaderRole.LOW)))
    if open_ is None or high is None or low is None:
        return None
    return Ohlc(open=open_, high=high, low=low)


def matches_mode(
    record: ScreenedRow,
    mode: Optional[ScreenMode],
    header_map: HeaderMap,
    tol: float = DEFAULT_TOLERANCE,
) -> bool:
    ohlc = read_ohlc(record, header_map)
    if ohlc is None:
        return False
    at_high = ohlc.open_is_high(tol)
    at_low = ohlc.open_is_low(tol)
    if mode is ScreenMode.OPEN_HIGH:
        return at_high
    if mode is ScreenMode.OPEN_LOW:
        return at_low
    if mode is ScreenMode.OPEN_HIGH_LOW:
        return at_high and at_low
    if mode is ScreenMode.FULL:
        return at_high or at_low
    return False


def passes_full_gates(
    record: ScreenedRow,
    header_map: HeaderMap,
    min_gain: float = 0.0,
    tol: float = DEFAULT_TOLERANCE,
) -> bool:
    """Volume surge, price floor, market-cap floor and optional close-vs-open gain.

    ``min_gain`` is a fraction (0.02 for 2%).
    """

    volume = clean_number(record.get(header_map.get(HeaderRole.VOLUME)))
    avg_volume = clean_number(record.get(header_map.get(HeaderRole.AVG_VOLUME)))
    close = clean_number(record.get(header_map.get(HeaderRole.CLOSE)))
    if volume is None or avg_volume is None or close is None:
        return False
    if not volume > FULL_VOLUME_MULTIPLE * avg_volume:
        return False
    if not close > FULL_MIN_CLOSE:
        return False
    market_cap = parse_market_cap_crores(record.get(header_map.get(HeaderRole.MARKET_CAP)))
    if market_cap is None or not market_cap > FULL_MIN_MARKET_CAP_CRORES:
        return False

    if min_gain > 0:
        ohlc = read_ohlc(record, header_map)
        if ohlc is None:
            return False
        if ohlc.open_is_low(tol) and not close >= ohlc.open * (1 + min_gain):
            return False
        if ohlc.open_is_high(tol) and not close <= ohlc.open * (1 - min_gain):
            return False
    return True


__all__ = ["ScreenMode", "parse_mode", "Ohlc", "read_ohlc", "matches_mode", "passes_full_gates"]
