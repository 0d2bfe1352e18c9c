"""Precondition failures raised before a screening pass touches the view."""

from __future__ import annotations

from typing import Iterable, List

from ..headers import HeaderRole


class ScreenError(ValueError):
    """Base class for user-correctable screening failures."""

    code = "screen_error"

    def __init__(self, message: str, missing: Iterable[HeaderRole] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.missing: List[HeaderRole] = list(missing)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "missing": [role.value for role in self.missing],
        }


class EmptyDatasetError(ScreenError):
    code = "empty_dataset"

    def __init__(self) -> None:
        super().__init__("Upload CSV first")


class MissingColumnsError(ScreenError):
    code = "missing_required_columns"

    def __init__(self, missing: Iterable[HeaderRole]) -> None:
        roles = list(missing)
        names = ", ".join(role.label for role in roles)
        super().__init__(f"CSV must include Open, High and Low columns (missing: {names}).", roles)


class MissingFullScreenerColumnsError(ScreenError):
    code = "missing_full_screener_columns"

    def __init__(self, missing: Iterable[HeaderRole]) -> None:
        roles = list(missing)
        names = ", ".join(role.label for role in roles)
        super().__init__(
            "Full screener requires Volume, Avg Volume (5d), Close and Market Cap columns "
            f"(missing: {names}).",
            roles,
        )


class InvalidGainError(ScreenError):
    code = "invalid_min_gain"

    def __init__(self, value: float) -> None:
        super().__init__(f"Minimum gain must be zero or a positive percentage, got {value!r}.")


__all__ = [
    "ScreenError",
    "EmptyDatasetError",
    "MissingColumnsError",
    "MissingFullScreenerColumnsError",
    "InvalidGainError",
]
