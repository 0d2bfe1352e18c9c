"""Trade plan construction for screened candles."""

from .invariants import PlanInvariantError, assert_invariants
from .trade_plan import (
    DEFAULT_PLAN_CONFIG,
    NO_PLAN_MESSAGE,
    PlanConfig,
    PlanSummary,
    TradePlan,
    TradeSide,
    plan_trade,
    plan_trades,
)

__all__ = [
    "PlanInvariantError",
    "assert_invariants",
    "DEFAULT_PLAN_CONFIG",
    "NO_PLAN_MESSAGE",
    "PlanConfig",
    "PlanSummary",
    "TradePlan",
    "TradeSide",
    "plan_trade",
    "plan_trades",
]
