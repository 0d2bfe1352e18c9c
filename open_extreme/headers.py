"""Keyword-based resolution of free-form CSV headers to semantic column roles.

Uploaded files come from many brokers and screeners, so column names are not
fixed.  Each role carries an ordered keyword list; a header matches when its
lowercased, trimmed text contains any keyword.  Headers are scanned in their
original order, keywords in priority order for each header, and the first hit
wins.  Resolution is pure: the same header list always yields the same map.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple


class HeaderRole(str, Enum):
    SYMBOL = "symbol"
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"
    VOLUME = "volume"
    AVG_VOLUME = "avg_volume"
    MARKET_CAP = "market_cap"
    DATE = "date"
    TIME = "time"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]


ROLE_KEYWORDS: Mapping[HeaderRole, Tuple[str, ...]] = {
    HeaderRole.SYMBOL: ("symbol", "ticker", "scrip", "code"),
    HeaderRole.OPEN: ("open", "opening"),
    HeaderRole.HIGH: ("high",),
    HeaderRole.LOW: ("low",),
    HeaderRole.CLOSE: ("close", "last", "ltp"),
    HeaderRole.VOLUME: ("volume", "vol"),
    HeaderRole.AVG_VOLUME: ("avg volume", "average volume", "avgvol", "5 day", "5day"),
    HeaderRole.MARKET_CAP: ("market cap", "mcap", "market capitalization", "marketcap"),
    HeaderRole.DATE: ("date",),
    HeaderRole.TIME: ("time", "datetime"),
}

_ROLE_LABELS: Mapping[HeaderRole, str] = {
    HeaderRole.SYMBOL: "Symbol",
    HeaderRole.OPEN: "Open",
    HeaderRole.HIGH: "High",
    HeaderRole.LOW: "Low",
    HeaderRole.CLOSE: "Close",
    HeaderRole.VOLUME: "Volume",
    HeaderRole.AVG_VOLUME: "Avg Volume (5d)",
    HeaderRole.MARKET_CAP: "Market Cap",
    HeaderRole.DATE: "Date",
    HeaderRole.TIME: "Time",
}

PRICE_ROLES: Tuple[HeaderRole, ...] = (HeaderRole.OPEN, HeaderRole.HIGH, HeaderRole.LOW)
FULL_SCREEN_ROLES: Tuple[HeaderRole, ...] = (
    HeaderRole.VOLUME,
    HeaderRole.AVG_VOLUME,
    HeaderRole.CLOSE,
    HeaderRole.MARKET_CAP,
)
DISPLAY_ROLES: Tuple[HeaderRole, ...] = (
    HeaderRole.SYMBOL,
    HeaderRole.OPEN,
    HeaderRole.HIGH,
    HeaderRole.LOW,
    HeaderRole.CLOSE,
    HeaderRole.VOLUME,
)


def normalize(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def find_header(headers: Iterable[str], keywords: Sequence[str]) -> Optional[str]:
    """Return the first header containing any keyword, or None."""

    for header in headers:
        token = normalize(header)
        for keyword in keywords:
            if keyword in token:
                return header
    return None


@dataclass(frozen=True)
class HeaderMap(Mapping[HeaderRole, Optional[str]]):
    """Immutable role -> header-name resolution for one header list."""

    headers: Tuple[str, ...]
    resolved: Tuple[Tuple[HeaderRole, Optional[str]], ...]

    def __getitem__(self, role: HeaderRole) -> Optional[str]:
        for key, header in self.resolved:
            if key == role:
                return header
        raise KeyError(role)

    def __iter__(self) -> Iterator[HeaderRole]:
        return (role for role, _ in self.resolved)

    def __len__(self) -> int:
        return len(self.resolved)

    def missing(self, roles: Iterable[HeaderRole]) -> List[HeaderRole]:
        return [role for role in roles if self.get(role) is None]

    def display_columns(self) -> List[str]:
        columns: List[str] = []
        for role in DISPLAY_ROLES:
            header = self.get(role)
            if header is not None and header not in columns:
                columns.append(header)
        return columns

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {role.value: header for role, header in self.resolved}


def resolve_headers(headers: Sequence[str]) -> HeaderMap:
    """Resolve every role against the original header list."""

    header_tuple = tuple(str(h) for h in headers)
    resolved = tuple((role, find_header(header_tuple, keywords)) for role, keywords in ROLE_KEYWORDS.items())
    return HeaderMap(headers=header_tuple, resolved=resolved)


def symbol_header(header_map: HeaderMap, row: Mapping[str, object]) -> Optional[str]:
    """Header used to label a row's symbol in plans and summaries.

    Prefers the resolved symbol role, then any header mentioning "symbol",
    then the row's first field.
    """

    resolved = header_map.get(HeaderRole.SYMBOL)
    if resolved:
        return resolved
    for header in header_map.headers:
        if "symbol" in normalize(header):
            return header
    for key in row:
        return key
    return None


__all__ = [
    "HeaderRole",
    "HeaderMap",
    "ROLE_KEYWORDS",
    "PRICE_ROLES",
    "FULL_SCREEN_ROLES",
    "DISPLAY_ROLES",
    "normalize",
    "find_header",
    "resolve_headers",
    "symbol_header",
]
