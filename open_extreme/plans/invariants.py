"""Directional sanity checks for generated trade plans."""

from __future__ import annotations


class PlanInvariantError(ValueError):
    """Raised when plan prices violate the side's ordering."""


def assert_invariants(side: str, entry: float, stop: float, target: float) -> None:
    side = (side or "").upper()
    entry_val = float(entry)
    stop_val = float(stop)
    target_val = float(target)

    if side not in {"BUY", "SELL"}:
        raise PlanInvariantError("invalid_side")
    if entry_val <= 0:
        raise PlanInvariantError("entry_not_positive")

    if side == "BUY":
        if stop_val >= entry_val:
            raise PlanInvariantError("stop_not_below_entry")
        if target_val <= entry_val:
            raise PlanInvariantError("target_not_above_entry")
        risk = entry_val - stop_val
        reward = target_val - entry_val
    else:
        if stop_val <= entry_val:
            raise PlanInvariantError("stop_not_above_entry")
        if target_val >= entry_val:
            raise PlanInvariantError("target_not_below_entry")
        risk = stop_val - entry_val
        reward = entry_val - target_val

    if risk <= 0 or reward <= 0:
        raise PlanInvariantError("invalid_risk_reward")


__all__ = ["assert_invariants", "PlanInvariantError"]
