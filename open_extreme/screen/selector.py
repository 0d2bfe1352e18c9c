"""Per-symbol candidate aggregation for the opening-extreme screens.

Each symbol is reduced to one representative candle: the earliest row by time
of day on its most recent date.  That candle is a long candidate when it opened
at its low and a short candidate when it opened at its high.  The heaviest
volume candidate of each class wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..dataset import ScreenedRow
from ..headers import HeaderMap, HeaderRole
from ..parsing import DEFAULT_TOLERANCE, clean_number, date_key, time_to_minutes
from .filters import read_ohlc

logger = logging.getLogger(__name__)

UNDATED = "nodate"


@dataclass(frozen=True)
class Candidate:
    symbol: str
    row: ScreenedRow
    volume: float


def group_by_symbol(rows: Sequence[ScreenedRow], header_map: HeaderMap) -> Dict[str, List[ScreenedRow]]:
    """Rows keyed by raw symbol value, in first-seen order; blank symbols are skipped."""

    header = header_map.get(HeaderRole.SYMBOL)
    groups: Dict[str, List[ScreenedRow]] = {}
    if header is None:
        return groups
    for record in rows:
        symbol = record.get(header)
        if not symbol:
            continue
        groups.setdefault(symbol, []).append(record)
    return groups


def pick_earliest_by_time(rows: Sequence[ScreenedRow], header_map: HeaderMap) -> Optional[ScreenedRow]:
    if not rows:
        return None
    header = header_map.get(HeaderRole.TIME)
    if header is None:
        return rows[0]
    best: Optional[ScreenedRow] = None
    best_minutes: Optional[int] = None
    for record in rows:
        minutes = time_to_minutes(record.get(header))
        if minutes is None:
            continue
        if best_minutes is None or minutes < best_minutes:
            best_minutes = minutes
            best = record
    return best if best is not None else rows[0]


def first_candle_of_latest_date(rows: Sequence[ScreenedRow], header_map: HeaderMap) -> Optional[ScreenedRow]:
    """Representative candle for one symbol.

    Undated rows take precedence: when any row lacks a readable date the
    earliest undated row is returned and dated rows are ignored.
    """

    header = header_map.get(HeaderRole.DATE)
    by_date: Dict[str, List[ScreenedRow]] = {}
    for record in rows:
        key = date_key(record.get(header)) or UNDATED
        by_date.setdefault(key, []).append(record)
    if not by_date:
        return None
    if UNDATED in by_date:
        return pick_earliest_by_time(by_date[UNDATED], header_map)
    latest = max(by_date)
    return pick_earliest_by_time(by_date[latest], header_map)


def _best_by_volume(candidates: Sequence[Candidate]) -> Optional[Candidate]:
    best: Optional[Candidate] = None
    for candidate in candidates:
        if best is None or candidate.volume > best.volume:
            best = candidate
    return best


def collect_candidates(
    rows: Sequence[ScreenedRow],
    header_map: HeaderMap,
    tol: float = DEFAULT_TOLERANCE,
) -> Tuple[List[Candidate], List[Candidate]]:
    """Long (open at low) and short (open at high) candidates, one per symbol at most."""

    longs: List[Candidate] = []
    shorts: List[Candidate] = []
    volume_header = header_map.get(HeaderRole.VOLUME)
    for symbol, group in group_by_symbol(rows, header_map).items():
        candle = first_candle_of_latest_date(group, header_map)
        if candle is None:
            continue
        ohlc = read_ohlc(candle, header_map)
        if ohlc is None:
            continue
        volume = clean_number(candle.get(volume_header))
        candidate = Candidate(symbol=symbol, row=candle, volume=volume if volume is not None else 0.0)
        if ohlc.open_is_low(tol):
            longs.append(candidate)
        if ohlc.open_is_high(tol):
            shorts.append(candidate)
    return longs, shorts


def select_candidates(
    rows: Sequence[ScreenedRow],
    header_map: HeaderMap,
    tol: float = DEFAULT_TOLERANCE,
) -> Tuple[Optional[Candidate], Optional[Candidate]]:
    """Best long and best short candidate; either may be None."""

    longs, shorts = collect_candidates(rows, header_map, tol)
    best_long = _best_by_volume(longs)
    best_short = _best_by_volume(shorts)
    logger.debug(
        "candidate selection",
        extra={
            "long_candidates": len(longs),
            "short_candidates": len(shorts),
            "best_long": best_long.symbol if best_long else None,
            "best_short": best_short.symbol if best_short else None,
        },
    )
    return best_long, best_short


__all__ = [
    "Candidate",
    "UNDATED",
    "group_by_symbol",
    "pick_earliest_by_time",
    "first_candle_of_latest_date",
    "collect_candidates",
    "select_candidates",
]
