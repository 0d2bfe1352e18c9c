"""In-memory dataset for one CSV upload and its current filtered view."""

from __future__ import annotations

import io
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from .config import LABEL_COLUMN
from .headers import HeaderMap, resolve_headers

logger = logging.getLogger(__name__)

Row = Mapping[str, str]


class DatasetError(ValueError):
    """Raised when uploaded CSV text cannot be turned into a dataset."""


@dataclass(frozen=True)
class ScreenedRow:
    """A dataset row as it appears in a view, plus its screening label.

    ``row`` is the dataset's own mapping (never copied or mutated); ``index`` is
    its stable position in the upload.
    """

    index: int
    row: Row
    label: str = ""

    def get(self, header: Optional[str], default: str = "") -> str:
        if header is None:
            return default
        value = self.row.get(header)
        return default if value is None else value

    def with_label(self, label: str) -> "ScreenedRow":
        return replace(self, label=label)

    def to_dict(self, columns: Optional[Sequence[str]] = None) -> Dict[str, str]:
        if columns is None:
            payload = {key: self.get(key) for key in self.row}
            payload[LABEL_COLUMN] = self.label
            return payload
        return {key: self.label if key == LABEL_COLUMN else self.get(key) for key in columns}


class Dataset:
    """Original rows, their header list and the currently displayed view."""

    def __init__(
        self,
        rows: Iterable[Row],
        headers: Optional[Sequence[str]] = None,
        *,
        dataset_id: Optional[str] = None,
    ) -> None:
        self._rows: Tuple[Row, ...] = tuple(rows)
        if headers is None:
            headers = list(self._rows[0].keys()) if self._rows else []
        self.headers: Tuple[str, ...] = tuple(str(h) for h in headers)
        self.header_map: HeaderMap = resolve_headers(self.headers)
        self.dataset_id = dataset_id or uuid.uuid4().hex[:12]
        self._view: Tuple[ScreenedRow, ...] = tuple(self.fresh_rows())
        self._screened = False

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._rows

    @property
    def view(self) -> Tuple[ScreenedRow, ...]:
        return self._view

    @property
    def screened(self) -> bool:
        return self._screened

    def is_empty(self) -> bool:
        return not self._rows

    def fresh_rows(self) -> List[ScreenedRow]:
        """Unlabelled view records for every row, in upload order."""

        return [ScreenedRow(index=idx, row=row) for idx, row in enumerate(self._rows)]

    def replace_view(self, rows: Iterable[ScreenedRow]) -> None:
        self._view = tuple(rows)
        self._screened = True

    def reset(self) -> None:
        """Drop any screening result and show every row again."""

        self._view = tuple(self.fresh_rows())
        self._screened = False

    def display_columns(self) -> List[str]:
        columns = self.header_map.display_columns()
        if self._screened and LABEL_COLUMN not in columns:
            columns.append(LABEL_COLUMN)
        return columns

    def labelled(self, label: str) -> Optional[ScreenedRow]:
        for record in self._view:
            if record.label == label:
                return record
        return None

    @classmethod
    def from_csv_text(cls, text: str, *, max_bytes: Optional[int] = None) -> "Dataset":
        rows, headers = read_csv_text(text, max_bytes=max_bytes)
        return cls(rows, headers)


def read_csv_text(text: str, *, max_bytes: Optional[int] = None) -> Tuple[List[Dict[str, str]], List[str]]:
    """Parse header-driven CSV text; every cell is kept as text."""

    if text is None:
        raise DatasetError("CSV text is empty")
    if max_bytes is not None and len(text.encode("utf-8")) > max_bytes:
        raise DatasetError(f"CSV exceeds the {max_bytes} byte upload limit")
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise DatasetError("CSV text is empty")

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except EmptyDataError as exc:
        raise DatasetError("CSV has no header row") from exc
    except ParserError as exc:
        raise DatasetError(f"CSV parse error: {exc}") from exc

    frame = frame.fillna("")
    headers = [str(column) for column in frame.columns]
    frame.columns = headers
    rows = frame.to_dict(orient="records")
    logger.info("parsed csv upload", extra={"rows": len(rows), "columns": len(headers)})
    return rows, headers


__all__ = ["Row", "ScreenedRow", "Dataset", "DatasetError", "read_csv_text"]
