"""Opening-extreme screening pipeline."""

from .errors import (
    EmptyDatasetError,
    InvalidGainError,
    MissingColumnsError,
    MissingFullScreenerColumnsError,
    ScreenError,
)
from .filters import Ohlc, ScreenMode, matches_mode, parse_mode, passes_full_gates, read_ohlc
from .selector import (
    Candidate,
    collect_candidates,
    first_candle_of_latest_date,
    group_by_symbol,
    pick_earliest_by_time,
    select_candidates,
)
from .engine import ScreenResult, check_preconditions, screen

__all__ = [
    "EmptyDatasetError",
    "InvalidGainError",
    "MissingColumnsError",
    "MissingFullScreenerColumnsError",
    "ScreenError",
    "Ohlc",
    "ScreenMode",
    "matches_mode",
    "parse_mode",
    "passes_full_gates",
    "read_ohlc",
    "Candidate",
    "collect_candidates",
    "first_candle_of_latest_date",
    "group_by_symbol",
    "pick_earliest_by_time",
    "select_candidates",
    "ScreenResult",
    "check_preconditions",
    "screen",
]
