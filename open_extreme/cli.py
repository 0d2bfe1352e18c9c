#!/usr/bin/env python3
"""
Opening-extreme screener for a CSV file -> JSON on stdout.

- Loads the CSV, resolves columns by keyword
- Applies one predefined screen (openHigh / openLow / openHighLow / full)
- Labels the heaviest-volume BUY and SELL candles
- Prints the filter summary, the labelled rows and the trade plans
- Optionally writes the filtered view to --out as CSV

Example:
  python -m open_extreme.cli intraday.csv --mode full --min_gain 2 --out filtered.csv
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_settings
from .dataset import Dataset, DatasetError
from .export import ExportError, to_csv_text
from .logging_setup import setup_logging
from .plans import plan_trades
from .screen import ScreenError, ScreenMode, screen


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Screen an intraday CSV for opening-extreme candles (JSON output).")
    p.add_argument("csv_path", help="CSV file with a header row.")
    p.add_argument(
        "--mode",
        choices=[mode.value for mode in ScreenMode],
        default=ScreenMode.FULL.value,
        help="Predefined screen to apply.",
    )
    p.add_argument("--min_gain", type=float, default=0.0, help="Full screen: minimum close-vs-open move in percent.")
    p.add_argument("--out", default="", help="Write the filtered view to this CSV path.")
    p.add_argument("--all_rows", action="store_true", help="Include every filtered row in the JSON, not only labelled ones.")
    p.add_argument("--verbose", action="store_true", help="Emit JSON logs to stderr.")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        setup_logging(get_settings().log_level, stream=sys.stderr)
    else:
        logging.getLogger().setLevel(logging.WARNING)

    path = Path(args.csv_path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        print(f"Cannot read {path}: {exc}", file=sys.stderr)
        return 2

    try:
        dataset = Dataset.from_csv_text(text)
        result = screen(dataset, args.mode, args.min_gain)
    except (DatasetError, ScreenError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    plans = plan_trades(result, dataset.header_map)
    columns = dataset.display_columns()
    rows = result.rows if args.all_rows else [record for record in result.rows if record.label]
    payload = {
        "loaded": len(dataset),
        **result.to_dict(),
        "columns": columns,
        "rows": [record.to_dict(columns) for record in rows],
        "plans": plans.to_dict(),
    }
    print(json.dumps(payload, indent=2))

    if args.out:
        try:
            Path(args.out).write_text(to_csv_text(dataset), encoding="utf-8")
        except ExportError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(f"Wrote {len(result.rows)} rows to: {args.out}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
