"""Percentage-based trade plans for the selected opening candles.

The entry is a fixed retracement into the candle's range measured from the
side's extreme; stop and target sit a fixed percentage away from the entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..dataset import ScreenedRow
from ..headers import HeaderMap, symbol_header
from ..screen.engine import ScreenResult
from ..screen.filters import read_ohlc
from ..telemetry import record_plan
from .invariants import PlanInvariantError, assert_invariants

logger = logging.getLogger(__name__)

NO_PLAN_MESSAGE = "No BUY or SELL candidate selected by the screener."


class TradeSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class PlanConfig:
    """Fractions used to derive entry, stop and target."""

    entry_retracement: float = 0.4
    risk_fraction: float = 0.01
    reward_fraction: float = 0.015


DEFAULT_PLAN_CONFIG = PlanConfig()


@dataclass(frozen=True)
class TradePlan:
    symbol: str
    side: TradeSide
    entry: float
    stop: float
    target: float
    risk_per_share: float
    reward_per_share: float
    risk_reward: Optional[float]
    risk_pct: float
    reward_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "side": self.side.value,
            "entry": self.entry,
            "stop": self.stop,
            "target": self.target,
            "risk_per_share": self.risk_per_share,
            "reward_per_share": self.reward_per_share,
            "risk_reward": self.risk_reward if self.risk_reward is not None else "N/A",
            "risk_pct": self.risk_pct,
            "reward_pct": self.reward_pct,
        }


@dataclass(frozen=True)
class PlanSummary:
    plans: Tuple[TradePlan, ...] = ()

    @property
    def available(self) -> bool:
        return bool(self.plans)

    @property
    def message(self) -> Optional[str]:
        return None if self.plans else NO_PLAN_MESSAGE

    def for_side(self, side: TradeSide) -> Optional[TradePlan]:
        for plan in self.plans:
            if plan.side is side:
                return plan
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "available": self.available,
            "message": self.message,
            "plans": [plan.to_dict() for plan in self.plans],
        }


def _pct(part: float, whole: float) -> float:
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 2)


def plan_trade(
    record: ScreenedRow,
    side: TradeSide | str,
    header_map: HeaderMap,
    config: PlanConfig = DEFAULT_PLAN_CONFIG,
) -> Optional[TradePlan]:
    """Build the plan for one candle, or None when its range is not positive."""

    side = TradeSide(str(side.value if isinstance(side, TradeSide) else side).upper())
    ohlc = read_ohlc(record, header_map)
    if ohlc is None:
        return None
    candle_range = ohlc.high - ohlc.low
    if candle_range <= 0:
        return None

    if side is TradeSide.BUY:
        entry = ohlc.high - config.entry_retracement * candle_range
        stop = entry - config.risk_fraction * entry
        target = entry + config.reward_fraction * entry
    else:
        entry = ohlc.low + config.entry_retracement * candle_range
        stop = entry + config.risk_fraction * entry
        target = entry - config.reward_fraction * entry

    try:
        assert_invariants(side.value, entry, stop, target)
    except PlanInvariantError as exc:
        logger.warning("discarding plan", extra={"side": side.value, "reason": str(exc), "row": record.index})
        return None

    risk_per_share = round(abs(entry - stop), 2)
    reward_per_share = round(abs(target - entry), 2)
    risk_reward = round(reward_per_share / risk_per_share, 2) if risk_per_share > 0 else None
    entry_rounded = round(entry, 2)

    header = symbol_header(header_map, record.row)
    plan = TradePlan(
        symbol=record.get(header),
        side=side,
        entry=entry_rounded,
        stop=round(stop, 2),
        target=round(target, 2),
        risk_per_share=risk_per_share,
        reward_per_share=reward_per_share,
        risk_reward=risk_reward,
        risk_pct=_pct(risk_per_share, entry_rounded),
        reward_pct=_pct(reward_per_share, entry_rounded),
    )
    record_plan(side.value)
    return plan


def plan_trades(
    result: ScreenResult,
    header_map: HeaderMap,
    config: PlanConfig = DEFAULT_PLAN_CONFIG,
) -> PlanSummary:
    """Plans for the chosen BUY and SELL candles of a screening pass, in that order."""

    plans = []
    for candidate, side in ((result.buy, TradeSide.BUY), (result.sell, TradeSide.SELL)):
        if candidate is None:
            continue
        plan = plan_trade(candidate.row, side, header_map, config)
        if plan is not None:
            plans.append(plan)
    summary = PlanSummary(plans=tuple(plans))
    if not summary.available:
        logger.info(NO_PLAN_MESSAGE)
    return summary


__all__ = [
    "NO_PLAN_MESSAGE",
    "TradeSide",
    "PlanConfig",
    "DEFAULT_PLAN_CONFIG",
    "TradePlan",
    "PlanSummary",
    "plan_trade",
    "plan_trades",
]
