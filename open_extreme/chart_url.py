"""TradingView links for screened symbols."""

from __future__ import annotations

from typing import Dict
from urllib.parse import quote, urlencode, urlunsplit

CHART_HOST = "www.tradingview.com"
CHART_PATH = "/chart/"
SYMBOL_PAGE_HOST = "in.tradingview.com"


def _clean_symbol(symbol: object) -> str:
    token = str(symbol or "").strip()
    if not token:
        raise ValueError("Symbol empty")
    return token


def qualify_symbol(symbol: object, exchange: str = "NSE") -> str:
    """Prefix the exchange unless the symbol already names one (``BSE:TCS``)."""

    token = _clean_symbol(symbol)
    if ":" in token:
        return token
    return f"{exchange.strip().upper()}:{token}"


def make_chart_url(symbol: object, *, exchange: str = "NSE") -> str:
    """Interactive chart URL, e.g. ``https://www.tradingview.com/chart/?symbol=NSE%3AINFY``."""

    query = urlencode({"symbol": qualify_symbol(symbol, exchange)}, quote_via=quote, safe="")
    return urlunsplit(("https", CHART_HOST, CHART_PATH, query, ""))


def make_symbol_page_url(symbol: object, *, exchange: str = "NSE") -> str:
    """Symbol overview page used for table links; the symbol is upper-cased."""

    token = _clean_symbol(symbol).upper()
    slug = quote(f"{exchange.strip().upper()}-", safe="-") + quote(token, safe="")
    return urlunsplit(("https", SYMBOL_PAGE_HOST, f"/symbols/{slug}/", "", ""))


def chart_links(symbol: object, *, exchange: str = "NSE") -> Dict[str, str]:
    return {
        "symbol": _clean_symbol(symbol).upper(),
        "chart_url": make_chart_url(symbol, exchange=exchange),
        "symbol_url": make_symbol_page_url(symbol, exchange=exchange),
    }


__all__ = ["qualify_symbol", "make_chart_url", "make_symbol_page_url", "chart_links"]
