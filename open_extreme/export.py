"""CSV and PDF downloads of the current view."""

from __future__ import annotations

import io
from typing import List, Sequence

import pandas as pd

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from .config import LABEL_COLUMN
from .dataset import Dataset

PDF_TITLE = "Filtered Stocks"
PDF_ROWS_PER_PAGE = 40
CSV_FILENAME = "filtered_stocks.csv"
PDF_FILENAME = "filtered_stocks.pdf"


class ExportError(ValueError):
    """Raised when there is nothing to export."""


def export_columns(dataset: Dataset) -> List[str]:
    """Display columns plus ``Label``, which exports always carry."""

    columns = dataset.header_map.display_columns()
    if LABEL_COLUMN not in columns:
        columns.append(LABEL_COLUMN)
    return columns


def export_frame(dataset: Dataset) -> pd.DataFrame:
    if dataset is None or not dataset.view:
        raise ExportError("No data to export")
    columns = export_columns(dataset)
    records = [record.to_dict(columns) for record in dataset.view]
    return pd.DataFrame.from_records(records, columns=columns)


def to_csv_text(dataset: Dataset) -> str:
    return export_frame(dataset).to_csv(index=False)


def _chunks(rows: Sequence[Sequence[str]], size: int) -> List[Sequence[Sequence[str]]]:
    return [rows[start : start + size] for start in range(0, len(rows), size)] or [[]]


def to_pdf_bytes(dataset: Dataset) -> bytes:
    """Render the view as a paginated table, titled "Filtered Stocks"."""

    frame = export_frame(dataset)
    columns = list(frame.columns)
    body = frame.astype(str).values.tolist()

    buf = io.BytesIO()
    with PdfPages(buf) as pdf:
        for page, rows in enumerate(_chunks(body, PDF_ROWS_PER_PAGE), start=1):
            fig, ax = plt.subplots(figsize=(8.27, 11.69))
            ax.axis("off")
            title = PDF_TITLE if page == 1 else f"{PDF_TITLE} (page {page})"
            ax.set_title(title, loc="left", fontsize=12)
            if rows:
                table = ax.table(cellText=rows, colLabels=columns, loc="upper center", cellLoc="left")
                table.auto_set_font_size(False)
                table.set_fontsize(7)
                table.scale(1.0, 1.2)
            pdf.savefig(fig)
            plt.close(fig)
    return buf.getvalue()


__all__ = [
    "CSV_FILENAME",
    "PDF_FILENAME",
    "ExportError",
    "export_columns",
    "export_frame",
    "to_csv_text",
    "to_pdf_bytes",
]
