"""Tests for the typer CLI: discover, process, analyze."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from banking_analytics.cli import app

runner = CliRunner()

HEADERS = [
    "Customer ID",
    "Transaction Date",
    "Transaction Type",
    "Transaction Amount",
    "Account Balance After Transaction",
    "Age",
    "Branch ID",
]


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    """The CLI reconfigures the root logger against the runner's stdout."""
    root = logging.getLogger()
    handlers, filters, level = root.handlers[:], root.filters[:], root.level
    yield
    root.handlers[:] = handlers
    root.filters[:] = filters
    root.setLevel(level)


def _write_csv(path: Path, rows: list[list[str]], headers: list[str] = HEADERS) -> Path:
    with open(path, "w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(headers)
        w.writerows(rows)
    return path


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    return _write_csv(
        tmp_path / "transactions.csv",
        [
            ["1", "2023-01-01", "Deposit", "$100.00", "100", "30", "B1"],
            ["1", "2023-01-02", "Withdrawal", "30", "70", "30", "B1"],
            ["1", "2023-01-02", "Withdrawal", "30", "70", "30", "B1"],
            ["", "2023-01-03", "Deposit", "10", "", "40", "B2"],
        ],
    )


def test_discover_shows_mapping(sample_csv: Path, config_path: str) -> None:
    result = runner.invoke(app, ["discover", str(sample_csv), "--config", config_path])
    assert result.exit_code == 0, result.output
    assert "'customer_id' -> 'Customer ID'" in result.output
    assert "'account_balance_after' -> 'Account Balance After Transaction'" in result.output


def test_discover_reports_missing_required(tmp_path: Path, config_path: str) -> None:
    path = _write_csv(tmp_path / "partial.csv", [["1", "x"]], headers=["Customer ID", "Notes"])
    result = runner.invoke(app, ["discover", str(path), "--config", config_path])
    assert result.exit_code == 1
    assert "Missing required fields: transaction_date, transaction_amount" in result.output


def test_missing_file_exits_1(tmp_path: Path) -> None:
    result = runner.invoke(app, ["process", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_non_csv_exits_1(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text("{}")
    result = runner.invoke(app, ["process", str(path)])
    assert result.exit_code == 1
    assert "File must be .csv" in result.output


def test_process_writes_reports(sample_csv: Path, config_path: str, tmp_path: Path) -> None:
    out = tmp_path / "reports"
    result = runner.invoke(
        app, ["process", str(sample_csv), "--config", config_path, "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "Read 4 rows: cleaned 3" in result.output
    assert "1 duplicates removed, 2 valid, 0 invalid" in result.output
    json_files = list(out.glob("processing_*.json"))
    csv_files = list(out.glob("processing_*.csv"))
    assert len(json_files) == 1 and len(csv_files) == 1
    payload = json.loads(json_files[0].read_text(encoding="utf-8"))
    assert payload["report"]["valid_records"] == 2
    assert payload["report"]["rows_rejected"] == 1
    assert payload["report"]["reject_reasons"] == ["missing_customer_id"]
    assert payload["duplicates"][0]["record_index"] == 2
    assert payload["report"]["correlation_id"]


def test_process_error_csv_lists_validation_errors(tmp_path: Path, config_path: str) -> None:
    path = _write_csv(
        tmp_path / "bad.csv",
        [
            ["1", "2023-01-01", "Deposit", "100", "100", "12", "B1"],
            ["2", "2023-01-01", "Deposit", "0", "", "30", "B1"],
        ],
    )
    out = tmp_path / "reports"
    result = runner.invoke(
        app, ["process", str(path), "--config", config_path, "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    csv_path = next(out.glob("processing_*.csv"))
    with open(csv_path, encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["rule_id"] for r in rows] == ["AgeRange", "DepositPositive"]
    assert rows[0]["field"] == "age"


def test_analyze_writes_analytics(sample_csv: Path, config_path: str, tmp_path: Path) -> None:
    out = tmp_path / "reports"
    result = runner.invoke(
        app, ["analyze", str(sample_csv), "--config", config_path, "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    analytics_files = list(out.glob("analytics_*.json"))
    assert len(analytics_files) == 1
    payload = json.loads(analytics_files[0].read_text(encoding="utf-8"))
    assert payload["metrics"]["total_transactions"] == 2
    assert payload["monthly_volume"][0]["branch_id"] == "B1"
    assert [s["segment_name"] for s in payload["segments"]] == ["High-Value", "Active"]
    assert "generated_at" in payload
