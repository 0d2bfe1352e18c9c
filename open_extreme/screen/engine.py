"""Screening pipeline: preconditions, filters, candidate labelling."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from ..config import LABEL_BUY, LABEL_SELL, get_settings
from ..dataset import Dataset, ScreenedRow
from ..headers import FULL_SCREEN_ROLES, PRICE_ROLES
from ..telemetry import record_screen
from .errors import (
    EmptyDatasetError,
    InvalidGainError,
    MissingColumnsError,
    MissingFullScreenerColumnsError,
    ScreenError,
)
from .filters import ScreenMode, matches_mode, parse_mode, passes_full_gates
from .selector import Candidate, select_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreenResult:
    """Outcome of one screening pass; ``rows`` is the new filtered view."""

    mode: str
    min_gain_pct: float
    rows: Tuple[ScreenedRow, ...]
    buy: Optional[Candidate] = None
    sell: Optional[Candidate] = None
    stage1_count: int = 0
    duration_ms: float = field(default=0.0, compare=False)

    @property
    def buy_row(self) -> Optional[ScreenedRow]:
        return self._labelled(LABEL_BUY)

    @property
    def sell_row(self) -> Optional[ScreenedRow]:
        return self._labelled(LABEL_SELL)

    def _labelled(self, label: str) -> Optional[ScreenedRow]:
        for record in self.rows:
            if record.label == label:
                return record
        return None

    def summary(self) -> str:
        buy = self.buy.symbol if self.buy else "None"
        sell = self.sell.symbol if self.sell else "None"
        return f"Filter: {self.mode} — results {len(self.rows)}. Selected BUY: {buy} | SELL: {sell}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "min_gain_pct": self.min_gain_pct,
            "results": len(self.rows),
            "stage1_results": self.stage1_count,
            "buy": self.buy.symbol if self.buy else None,
            "sell": self.sell.symbol if self.sell else None,
            "summary": self.summary(),
        }


def check_preconditions(dataset: Dataset, mode: Optional[ScreenMode], min_gain_pct: float) -> None:
    """Raise a ScreenError describing the first unmet requirement."""

    if dataset is None or dataset.is_empty():
        raise EmptyDatasetError()
    header_map = dataset.header_map
    missing = header_map.missing(PRICE_ROLES)
    if missing:
        raise MissingColumnsError(missing)
    if mode is ScreenMode.FULL:
        missing_full = header_map.missing(FULL_SCREEN_ROLES)
        if missing_full:
            raise MissingFullScreenerColumnsError(missing_full)
    if min_gain_pct is None or not math.isfinite(min_gain_pct) or min_gain_pct < 0:
        raise InvalidGainError(min_gain_pct)


def _apply_labels(
    rows: List[ScreenedRow],
    buy: Optional[Candidate],
    sell: Optional[Candidate],
) -> List[ScreenedRow]:
    labels: Dict[int, str] = {}
    if buy is not None:
        labels[buy.row.index] = LABEL_BUY
    # A candle that opened at both extremes can win both sides; SELL is applied last.
    if sell is not None:
        labels[sell.row.index] = LABEL_SELL
    return [record.with_label(labels[record.index]) if record.index in labels else record for record in rows]


def screen(
    dataset: Dataset,
    mode: ScreenMode | str,
    min_gain_pct: float = 0.0,
    *,
    tolerance: Optional[float] = None,
) -> ScreenResult:
    """Run one screening pass and replace the dataset's filtered view.

    Args:
        dataset: The loaded upload.
        mode: ``openHigh``, ``openLow``, ``openHighLow`` or ``full``.  Unknown
            modes produce an empty result.
        min_gain_pct: Close-vs-open gain gate in percent for the full screen;
            0 disables it.
        tolerance: Absolute tolerance for open==high/low comparisons.

    Raises:
        ScreenError: When the dataset is empty or required columns are missing.
            The current view is left untouched.
    """

    started = time.perf_counter()
    parsed_mode = parse_mode(mode)
    mode_label = parsed_mode.value if parsed_mode else str(mode)
    metric_mode = parsed_mode.value if parsed_mode else "unknown"
    try:
        check_preconditions(dataset, parsed_mode, min_gain_pct)
    except ScreenError:
        record_screen(metric_mode, "rejected")
        raise

    tol = tolerance if tolerance is not None else get_settings().approx_tolerance
    header_map = dataset.header_map

    stage1 = [record for record in dataset.fresh_rows() if matches_mode(record, parsed_mode, header_map, tol)]
    kept = stage1
    if parsed_mode is ScreenMode.FULL:
        min_gain = float(min_gain_pct) / 100.0
        kept = [record for record in stage1 if passes_full_gates(record, header_map, min_gain, tol)]

    buy, sell = select_candidates(kept, header_map, tol)
    labelled = _apply_labels(kept, buy, sell)
    by_index = {record.index: record for record in labelled}
    if buy is not None:
        buy = replace(buy, row=by_index[buy.row.index])
    if sell is not None:
        sell = replace(sell, row=by_index[sell.row.index])

    dataset.replace_view(labelled)
    duration_ms = (time.perf_counter() - started) * 1000.0
    result = ScreenResult(
        mode=mode_label,
        min_gain_pct=float(min_gain_pct),
        rows=tuple(labelled),
        buy=buy,
        sell=sell,
        stage1_count=len(stage1),
        duration_ms=duration_ms,
    )
    record_screen(metric_mode, "ok", duration_ms=duration_ms, kept=len(labelled))
    logger.info(
        result.summary(),
        extra={
            "mode": mode_label,
            "stage1": len(stage1),
            "results": len(labelled),
            "duration_ms": round(duration_ms, 3),
        },
    )
    return result


__all__ = ["ScreenResult", "check_preconditions", "screen"]
