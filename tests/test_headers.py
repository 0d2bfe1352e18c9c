from open_extreme.headers import (
    HeaderRole,
    find_header,
    resolve_headers,
    symbol_header,
)
from _helpers import HEADERS


def test_resolve_standard_headers() -> None:
    header_map = resolve_headers(HEADERS)

    assert header_map[HeaderRole.SYMBOL] == "Symbol"
    assert header_map[HeaderRole.OPEN] == "Open"
    assert header_map[HeaderRole.HIGH] == "High"
    assert header_map[HeaderRole.LOW] == "Low"
    assert header_map[HeaderRole.CLOSE] == "Close"
    assert header_map[HeaderRole.VOLUME] == "Volume"
    assert header_map[HeaderRole.AVG_VOLUME] == "Avg Volume (5d)"
    assert header_map[HeaderRole.MARKET_CAP] == "Market Cap"
    assert header_map[HeaderRole.DATE] == "Date"
    assert header_map[HeaderRole.TIME] == "Time"
    assert header_map.missing(HeaderRole) == []


def test_header_order_beats_keyword_priority() -> None:
    # "ltp" is the lowest-priority close keyword but its header comes first.
    assert find_header(["LTP", "Close Price"], ("close", "last", "ltp")) == "LTP"
    assert find_header(["Prev Close", "Close"], ("close",)) == "Prev Close"


def test_matching_is_case_and_whitespace_insensitive() -> None:
    header_map = resolve_headers(["  SCRIP ", " Opening Price", "Day HIGH", "Day Low", "MCap (Cr)"])

    assert header_map[HeaderRole.SYMBOL] == "  SCRIP "
    assert header_map[HeaderRole.OPEN] == " Opening Price"
    assert header_map[HeaderRole.HIGH] == "Day HIGH"
    assert header_map[HeaderRole.LOW] == "Day Low"
    assert header_map[HeaderRole.MARKET_CAP] == "MCap (Cr)"


def test_unmatched_roles_resolve_to_none() -> None:
    header_map = resolve_headers(["Ticker", "Open", "High"])

    assert header_map[HeaderRole.LOW] is None
    assert header_map.missing([HeaderRole.OPEN, HeaderRole.HIGH, HeaderRole.LOW]) == [HeaderRole.LOW]
    assert find_header([], ("open",)) is None


def test_resolution_is_idempotent() -> None:
    first = resolve_headers(HEADERS)
    second = resolve_headers(list(HEADERS))

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_display_columns_follow_role_order() -> None:
    header_map = resolve_headers(["Volume", "Low", "High", "Open", "Symbol", "Date"])

    assert header_map.display_columns() == ["Symbol", "Open", "High", "Low", "Volume"]


def test_symbol_header_falls_back_to_first_field() -> None:
    header_map = resolve_headers(["Name", "Open", "High", "Low"])
    row = {"Name": "INFY", "Open": "1", "High": "2", "Low": "1"}

    assert header_map[HeaderRole.SYMBOL] is None
    assert symbol_header(header_map, row) == "Name"


def test_symbol_header_prefers_resolved_role() -> None:
    header_map = resolve_headers(["Name", "Ticker", "Open"])

    assert symbol_header(header_map, {"Name": "x", "Ticker": "y"}) == "Ticker"
