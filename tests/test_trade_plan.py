import pytest

from open_extreme.plans import (
    NO_PLAN_MESSAGE,
    PlanConfig,
    PlanInvariantError,
    TradeSide,
    assert_invariants,
    plan_trade,
    plan_trades,
)
from open_extreme.screen import screen
from _helpers import make_dataset, make_row


def _record(row, headers=None):
    dataset = make_dataset([row]) if headers is None else make_dataset([row], headers)
    return dataset.fresh_rows()[0], dataset.header_map


def test_buy_plan_retraces_from_the_high() -> None:
    record, header_map = _record(make_row("AAA", 98, 100, 95))
    plan = plan_trade(record, TradeSide.BUY, header_map)

    assert plan.symbol == "AAA"
    assert plan.entry == pytest.approx(98.0)
    assert plan.stop == pytest.approx(97.02)
    assert plan.target == pytest.approx(99.47)
    assert plan.risk_per_share == pytest.approx(0.98)
    assert plan.reward_per_share == pytest.approx(1.47)
    assert plan.risk_reward == pytest.approx(1.5)
    assert plan.risk_pct == pytest.approx(1.0)
    assert plan.reward_pct == pytest.approx(1.5)


def test_sell_plan_retraces_from_the_low() -> None:
    record, header_map = _record(make_row("BBB", 210, 210, 200))
    plan = plan_trade(record, "sell", header_map)

    assert plan.side is TradeSide.SELL
    assert plan.entry == pytest.approx(204.0)
    assert plan.stop == pytest.approx(206.04)
    assert plan.target == pytest.approx(200.94)
    assert plan.risk_per_share == pytest.approx(2.04)
    assert plan.reward_per_share == pytest.approx(3.06)
    assert plan.risk_reward == pytest.approx(1.5)
    assert plan.risk_pct == pytest.approx(1.0)
    assert plan.reward_pct == pytest.approx(1.5)


def test_buy_stop_below_entry_and_target_above() -> None:
    record, header_map = _record(make_row("X", 1500, 1520.5, 1490.25))
    plan = plan_trade(record, TradeSide.BUY, header_map)

    assert plan.stop < plan.entry < plan.target


def test_zero_range_candle_has_no_plan() -> None:
    record, header_map = _record(make_row("FLAT", 100, 100, 100))

    assert plan_trade(record, TradeSide.BUY, header_map) is None
    assert plan_trade(record, TradeSide.SELL, header_map) is None


def test_non_positive_entry_has_no_plan() -> None:
    record, header_map = _record(make_row("NEG", -5, -5, -10))

    assert plan_trade(record, TradeSide.BUY, header_map) is None
    assert plan_trade(record, TradeSide.SELL, header_map) is None


def test_rounded_away_risk_reports_not_applicable() -> None:
    record, header_map = _record(make_row("PENNY", 0.4, 0.5, 0.4))
    plan = plan_trade(record, TradeSide.BUY, header_map)

    assert plan.risk_per_share == 0.0
    assert plan.risk_reward is None
    assert plan.to_dict()["risk_reward"] == "N/A"


def test_custom_config_changes_the_fractions() -> None:
    record, header_map = _record(make_row("AAA", 98, 100, 95))
    plan = plan_trade(record, TradeSide.BUY, header_map, PlanConfig(0.5, 0.02, 0.04))

    assert plan.entry == pytest.approx(97.5)
    assert plan.stop == pytest.approx(95.55)
    assert plan.target == pytest.approx(101.4)
    assert plan.risk_reward == pytest.approx(2.0)


def test_symbol_falls_back_to_first_field() -> None:
    headers = ["Name", "Open", "High", "Low"]
    row = {"Name": "ACME", "Open": "98", "High": "100", "Low": "95"}
    record, header_map = _record(row, headers)

    assert plan_trade(record, TradeSide.BUY, header_map).symbol == "ACME"


def test_plan_trades_follows_screen_candidates() -> None:
    rows = [
        make_row("AAA", 95, 100, 95, volume=100),
        make_row("BBB", 210, 210, 200, volume=100),
    ]
    dataset = make_dataset(rows)
    result = screen(dataset, "openHigh")
    summary = plan_trades(result, dataset.header_map)

    # openHigh keeps only BBB, which is the short candidate.
    assert [plan.side for plan in summary.plans] == [TradeSide.SELL]
    assert summary.for_side(TradeSide.SELL).symbol == "BBB"
    assert summary.for_side(TradeSide.BUY) is None
    assert summary.message is None

    result = screen(dataset, "openLow")
    summary = plan_trades(result, dataset.header_map)
    assert summary.for_side(TradeSide.BUY).symbol == "AAA"


def test_plan_trades_without_candidates() -> None:
    dataset = make_dataset([make_row("D", 20, 22, 18)])
    summary = plan_trades(screen(dataset, "openHigh"), dataset.header_map)

    assert not summary.available
    assert summary.message == NO_PLAN_MESSAGE
    assert summary.to_dict() == {"available": False, "message": NO_PLAN_MESSAGE, "plans": []}


@pytest.mark.parametrize(
    "side, entry, stop, target, reason",
    [
        ("HOLD", 10, 9, 11, "invalid_side"),
        ("BUY", 0, -1, 1, "entry_not_positive"),
        ("BUY", 10, 10, 11, "stop_not_below_entry"),
        ("BUY", 10, 9, 10, "target_not_above_entry"),
        ("SELL", 10, 9, 8, "stop_not_above_entry"),
        ("SELL", 10, 11, 12, "target_not_below_entry"),
    ],
)
def test_invariants_reject_misordered_prices(side, entry, stop, target, reason) -> None:
    with pytest.raises(PlanInvariantError) as excinfo:
        assert_invariants(side, entry, stop, target)

    assert str(excinfo.value) == reason


def test_invariants_accept_well_ordered_prices() -> None:
    assert_invariants("buy", 10, 9.9, 10.15)
    assert_invariants("SELL", 10, 10.1, 9.85)
