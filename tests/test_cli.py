import csv
import json

from open_extreme.cli import main
from _helpers import full_row, make_row, to_csv


def _write_csv(tmp_path):
    path = tmp_path / "intraday.csv"
    path.write_text(
        to_csv(
            [
                full_row("SHORT", 500, 500, 480, 490, volume=40000),
                full_row("LONG", 300, 320, 300, 310),
                full_row("ALSO", 260, 270, 260, 265, volume=20000),
                make_row("FLAT", 400, 410, 390, close=405),
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_cli_prints_labelled_rows_and_plans(tmp_path, capsys) -> None:
    exit_code = main([str(_write_csv(tmp_path)), "--mode", "full"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["loaded"] == 4
    assert payload["results"] == 3
    assert payload["buy"] == "LONG"
    assert payload["sell"] == "SHORT"
    assert [row["Symbol"] for row in payload["rows"]] == ["SHORT", "LONG"]
    assert payload["columns"][-1] == "Label"
    assert [plan["side"] for plan in payload["plans"]["plans"]] == ["BUY", "SELL"]


def test_cli_all_rows_and_out_file(tmp_path, capsys) -> None:
    out = tmp_path / "filtered.csv"
    exit_code = main([str(_write_csv(tmp_path)), "--mode", "openLow", "--all_rows", "--out", str(out)])

    assert exit_code == 0
    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert [row["Symbol"] for row in payload["rows"]] == ["LONG", "ALSO"]
    assert "Wrote 2 rows" in captured.err
    with out.open(newline="", encoding="utf-8") as handle:
        written = list(csv.DictReader(handle))
    assert [(row["Symbol"], row["Label"]) for row in written] == [("LONG", "BUY"), ("ALSO", "")]


def test_cli_reports_missing_columns(tmp_path, capsys) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("Symbol,Open,High\nAAA,1,1\n", encoding="utf-8")

    assert main([str(path), "--mode", "openHigh"]) == 1
    assert "Open, High and Low" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys) -> None:
    assert main([str(tmp_path / "nope.csv")]) == 2
    assert "Cannot read" in capsys.readouterr().err
