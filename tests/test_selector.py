from open_extreme.screen import (
    collect_candidates,
    first_candle_of_latest_date,
    group_by_symbol,
    pick_earliest_by_time,
    select_candidates,
)
from _helpers import make_dataset, make_row


def _records(rows, headers=None):
    dataset = make_dataset(rows) if headers is None else make_dataset(rows, headers)
    return dataset.fresh_rows(), dataset.header_map


def test_group_by_symbol_keeps_first_seen_order_and_skips_blanks() -> None:
    records, header_map = _records(
        [
            make_row("BBB", 1, 1, 1),
            make_row("", 1, 1, 1),
            make_row("AAA", 1, 1, 1),
            make_row("BBB", 2, 2, 2),
        ]
    )
    groups = group_by_symbol(records, header_map)

    assert list(groups) == ["BBB", "AAA"]
    assert [r.index for r in groups["BBB"]] == [0, 3]


def test_group_by_symbol_without_symbol_column() -> None:
    records, header_map = _records([make_row("X", 1, 1, 1)], ["Open", "High", "Low"])

    assert group_by_symbol(records, header_map) == {}


def test_earliest_time_wins_and_ties_keep_first() -> None:
    records, header_map = _records(
        [
            make_row("A", 1, 1, 1, time="10:00"),
            make_row("A", 1, 1, 1, time="09:15"),
            make_row("A", 1, 1, 1, time="9:15:30"),
            make_row("A", 1, 1, 1, time="bad"),
        ]
    )

    assert pick_earliest_by_time(records, header_map).index == 1


def test_unreadable_times_fall_back_to_first_row() -> None:
    records, header_map = _records(
        [make_row("A", 1, 1, 1, time=""), make_row("A", 1, 1, 1, time="later")]
    )

    assert pick_earliest_by_time(records, header_map).index == 0
    assert pick_earliest_by_time([], header_map) is None


def test_latest_date_is_used_for_the_representative_candle() -> None:
    records, header_map = _records(
        [
            make_row("A", 1, 1, 1, date="2024-03-04", time="09:15"),
            make_row("A", 1, 1, 1, date="2024-03-05", time="09:30"),
            make_row("A", 1, 1, 1, date="2024-03-05", time="09:20"),
        ]
    )

    assert first_candle_of_latest_date(records, header_map).index == 2


def test_undated_rows_take_precedence() -> None:
    records, header_map = _records(
        [
            make_row("A", 1, 1, 1, date="2024-03-05", time="09:15"),
            make_row("A", 1, 1, 1, date="", time="10:00"),
            make_row("A", 1, 1, 1, date="unknown", time="09:45"),
        ]
    )

    assert first_candle_of_latest_date(records, header_map).index == 2


def test_one_candidate_per_symbol_from_its_representative_candle() -> None:
    records, header_map = _records(
        [
            make_row("AAA", 50, 55, 50, date="2024-03-04", volume=900),  # old session, open at low
            make_row("AAA", 60, 62, 58, date="2024-03-05", volume=100),  # neither
            make_row("BBB", 70, 70, 65, volume=300),
            make_row("CCC", 40, 45, 40, volume=200),
        ]
    )
    longs, shorts = collect_candidates(records, header_map)

    assert [c.symbol for c in longs] == ["CCC"]
    assert [c.symbol for c in shorts] == ["BBB"]
    assert shorts[0].volume == 300


def test_highest_volume_candidate_wins_each_side() -> None:
    records, header_map = _records(
        [
            make_row("L1", 50, 55, 50, volume="1,000"),
            make_row("L2", 60, 65, 60, volume="2,500"),
            make_row("S1", 70, 70, 65, volume="n/a"),
            make_row("S2", 80, 80, 75, volume="10"),
        ]
    )
    buy, sell = select_candidates(records, header_map)

    assert buy.symbol == "L2"
    assert buy.volume == 2500
    assert sell.symbol == "S2"


def test_no_candidates() -> None:
    records, header_map = _records([make_row("N", 20, 22, 18)])

    assert select_candidates(records, header_map) == (None, None)


def test_clock_text_in_date_column_counts_as_undated() -> None:
    records, header_map = _records(
        [
            make_row("A", 1, 1, 1, date="2024-03-05", time="09:15"),
            make_row("A", 1, 1, 1, date="9:15 AM", time="09:30"),
        ]
    )

    assert first_candle_of_latest_date(records, header_map).index == 1
