"""Per-process screener session shared by the HTTP routes."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from ..config import get_settings
from ..dataset import Dataset
from ..logging_setup import DATASET_ID_CONTEXT
from ..plans import PlanSummary, plan_trades
from ..screen import ScreenMode, ScreenResult, screen
from ..telemetry import record_dataset_loaded

logger = logging.getLogger(__name__)


class NoDatasetError(RuntimeError):
    """Raised when an operation needs an upload that has not happened yet."""


class ScreenerSession:
    """Owns the current dataset, the last screening result and its plans.

    Every mutation replaces whole objects under the lock so readers never see a
    half-applied screen.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dataset: Optional[Dataset] = None
        self._result: Optional[ScreenResult] = None
        self._plans: Optional[PlanSummary] = None
        self._status: str = ""

    @property
    def dataset(self) -> Optional[Dataset]:
        return self._dataset

    @property
    def result(self) -> Optional[ScreenResult]:
        return self._result

    @property
    def plans(self) -> Optional[PlanSummary]:
        return self._plans

    @property
    def status(self) -> str:
        return self._status

    def require_dataset(self) -> Dataset:
        dataset = self._dataset
        if dataset is None:
            raise NoDatasetError("Upload CSV first")
        return dataset

    def load_csv(self, text: str) -> Tuple[Dataset, str]:
        """Replace the upload; returns the dataset and its load status line."""

        dataset = Dataset.from_csv_text(text, max_bytes=get_settings().max_upload_bytes)
        status = f"Loaded {len(dataset)} rows."
        with self._lock:
            self._dataset = dataset
            self._result = None
            self._plans = None
            self._status = status
        DATASET_ID_CONTEXT.set(dataset.dataset_id)
        record_dataset_loaded()
        logger.info(status, extra={"headers": list(dataset.headers)})
        return dataset, status

    def run_screen(
        self, mode: ScreenMode | str, min_gain_pct: float = 0.0
    ) -> Tuple[ScreenResult, PlanSummary, Dict[str, Any]]:
        """Screen the current upload; the returned view is taken under the same lock."""

        with self._lock:
            dataset = self.require_dataset()
            DATASET_ID_CONTEXT.set(dataset.dataset_id)
            result = screen(dataset, mode, min_gain_pct)
            plans = plan_trades(result, dataset.header_map)
            self._result = result
            self._plans = plans
            self._status = result.summary()
            return result, plans, self._snapshot(dataset)

    def clear(self) -> Dict[str, Any]:
        with self._lock:
            dataset = self.require_dataset()
            dataset.reset()
            self._result = None
            self._plans = None
            self._status = ""
            return self._snapshot(dataset)

    def snapshot(self) -> Dict[str, Any]:
        """View rows, display columns and status for rendering."""

        with self._lock:
            return self._snapshot(self.require_dataset())

    def _snapshot(self, dataset: Dataset) -> Dict[str, Any]:
        columns = dataset.display_columns()
        return {
            "dataset_id": dataset.dataset_id,
            "status": self._status,
            "total_rows": len(dataset),
            "columns": columns,
            "rows": [record.to_dict(columns) for record in dataset.view],
            "header_map": dataset.header_map.to_dict(),
        }


__all__ = ["NoDatasetError", "ScreenerSession"]
