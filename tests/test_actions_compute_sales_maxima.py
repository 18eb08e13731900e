"""
Tests for the compute_sales_maxima command-line action.

**Purpose**: Verify argument validation, exit codes, and where each view ends
up (stdout text report vs. JSON/CSV files in the output directory).
"""

import json
import sys
from pathlib import Path

import pandas as pd
import pytest

# Add project root to path so we can import actions module
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions.compute_sales_maxima import (
    main,
    parse_args,
    validate_input_path,
    validate_output_dir,
)
from sales_stats.config.settings import ConfigurationError, SalesStatsSettings

LINES = [
    "Product,Unit Price,Quantity,Percentage Discount",
    "A,10,5,0",
    "B,20,3,10",
    "C,15,7,5",
]


def run_main(argv):
    """Run main() and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


# ============================================================================
# Argument parsing and validation
# ============================================================================

def test_parse_args_input_only():
    args = parse_args(["sales.csv"])
    assert args.input_path == "sales.csv"
    assert args.output_dir is None
    assert args.summary_csv is False
    assert args.delimiter is None


def test_parse_args_with_output_dir_and_flags():
    args = parse_args(["sales.csv", "out", "--summary-csv", "--delimiter", ";"])
    assert args.output_dir == "out"
    assert args.summary_csv is True
    assert args.delimiter == ";"


def test_validate_input_path_accepts_uppercase_extension(write_csv):
    path = write_csv(LINES, name="SALES.CSV")
    assert validate_input_path(str(path), SalesStatsSettings()) == path


def test_validate_input_path_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="does not exist"):
        validate_input_path(str(tmp_path / "missing.csv"), SalesStatsSettings())


def test_validate_input_path_wrong_extension(write_csv):
    path = write_csv(LINES, name="sales.txt")
    with pytest.raises(ConfigurationError, match="not a CSV"):
        validate_input_path(str(path), SalesStatsSettings())


def test_validate_input_path_rejects_directory(tmp_path):
    folder = tmp_path / "folder.csv"
    folder.mkdir()
    with pytest.raises(ConfigurationError, match="not a file"):
        validate_input_path(str(folder), SalesStatsSettings())


def test_validate_output_dir(tmp_path):
    assert validate_output_dir(None) is None
    assert validate_output_dir(str(tmp_path)) == tmp_path
    with pytest.raises(ConfigurationError, match="does not exist"):
        validate_output_dir(str(tmp_path / "nope"))


# ============================================================================
# main(): console output
# ============================================================================

def test_main_prints_text_view_to_stdout(write_csv, capsys):
    path = write_csv(LINES)

    assert run_main([str(path)]) == 0

    captured = capsys.readouterr()
    assert "Max quantity between all the records: 7" in captured.out
    assert "Max amount without discount: 105" in captured.out
    assert "Max difference between total amount with and without discount: 6" in captured.out
    # Status lines stay off stdout
    assert "Processed 3 data rows" in captured.err
    assert "Processed" not in captured.out


def test_main_header_only_prints_no_data(write_csv, capsys):
    path = write_csv(LINES[:1])

    assert run_main([str(path)]) == 0

    out = capsys.readouterr().out
    assert out.count("no data") == 4


# ============================================================================
# main(): file output
# ============================================================================

def test_main_writes_json_named_after_input(write_csv, tmp_path):
    path = write_csv(LINES, name="march_sales.csv")
    out_dir = tmp_path / "results"
    out_dir.mkdir()

    assert run_main([str(path), str(out_dir)]) == 0

    json_path = out_dir / "march_sales.json"
    assert json_path.exists()
    data = json.loads(json_path.read_text(encoding="utf-8"))
    assert list(data.keys()) == [
        "maxAmountWithoutDiscount",
        "maxAmountWithDiscount",
        "maxQuantity",
        "maxDiffWithDiscount",
    ]
    assert data["maxQuantity"]["value"] == 7
    assert data["maxQuantity"]["record"]["product"] == "C"
    assert data["maxDiffWithDiscount"]["record"]["product"] == "B"


def test_main_writes_nulls_for_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    out_dir = tmp_path / "results"
    out_dir.mkdir()

    assert run_main([str(path), str(out_dir)]) == 0

    data = json.loads((out_dir / "empty.json").read_text(encoding="utf-8"))
    assert all(entry == {"value": None, "record": None} for entry in data.values())


def test_main_writes_summary_csv(write_csv, tmp_path):
    path = write_csv(LINES)
    out_dir = tmp_path / "results"
    out_dir.mkdir()

    assert run_main([str(path), str(out_dir), "--summary-csv"]) == 0

    df = pd.read_csv(out_dir / "sales_summary.csv")
    assert df["metric_id"].tolist()[2] == "maxQuantity"
    assert df.set_index("metric_id").loc["maxQuantity", "value"] == 7


def test_main_delimiter_override(write_csv, tmp_path):
    path = write_csv(["unit price;quantity", "10;5", "3;8"])
    out_dir = tmp_path / "results"
    out_dir.mkdir()

    assert run_main([str(path), str(out_dir), "--delimiter", ";"]) == 0

    data = json.loads((out_dir / "sales.json").read_text(encoding="utf-8"))
    assert data["maxAmountWithoutDiscount"]["value"] == 50
    assert data["maxQuantity"]["value"] == 8


# ============================================================================
# main(): errors
# ============================================================================

def test_main_wrong_extension_exits_1(write_csv, capsys):
    path = write_csv(LINES, name="sales.txt")

    assert run_main([str(path)]) == 1

    captured = capsys.readouterr()
    assert captured.err.startswith("Error: ")
    assert captured.out == ""


def test_main_missing_output_dir_exits_1(write_csv, tmp_path, capsys):
    path = write_csv(LINES)

    assert run_main([str(path), str(tmp_path / "missing")]) == 1
    assert "output directory does not exist" in capsys.readouterr().err


def test_main_summary_without_output_dir_exits_1(write_csv, capsys):
    path = write_csv(LINES)

    assert run_main([str(path), "--summary-csv"]) == 1
    assert "--summary-csv requires an output directory" in capsys.readouterr().err


def test_main_invalid_env_setting_exits_1(write_csv, monkeypatch, capsys):
    path = write_csv(LINES)
    monkeypatch.setenv("SALES_STATS_JSON_INDENT", "wide")

    assert run_main([str(path)]) == 1
    assert "SALES_STATS_JSON_INDENT" in capsys.readouterr().err


def test_main_read_error_exits_2_without_output(tmp_path, capsys):
    path = tmp_path / "sales.csv"
    path.write_bytes(b"unit price,quantity\n\xff\xfe,1\n")
    out_dir = tmp_path / "results"
    out_dir.mkdir()

    assert run_main([str(path), str(out_dir)]) == 2

    assert "Failed to read input" in capsys.readouterr().err
    assert list(out_dir.iterdir()) == []


def test_main_missing_input_argument_exits_2():
    # argparse usage errors exit with status 2
    assert run_main([]) == 2
