"""Pytest fixtures: sample config, raw-row and record factories."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from banking_analytics.schemas import CleanedTransaction, TransactionType

RAW_HEADER_DEFAULTS: dict[str, str] = {
    "Customer ID": "1",
    "TransactionID": "",
    "Transaction Date": "2023-01-01",
    "Transaction Type": "Deposit",
    "Transaction Amount": "100",
    "Account Balance After Transaction": "",
    "Age": "30",
    "Gender": "M",
    "Account Type": "Savings",
    "Branch ID": "B1",
}


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    """Return path to a temporary config dir with default.yaml."""
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    (cfg_dir / "default.yaml").write_text(
        """
app:
  log_level: INFO
cleaning:
  type_policy: lenient
  day_first: false
validation:
  min_age: 18
  max_age: 120
  balance_tolerance: 0.01
anomaly:
  signals:
    source_flag: { enabled: true, weight: 50 }
    amount_zscore: { enabled: true, weight: 30, threshold: 3.0 }
  thresholds: { low: 33, medium: 66 }
ltv:
  model: fee_margin
segments:
  high_value_share: 0.2
  active_share: 0.3
"""
    )
    return str(cfg_dir / "default.yaml")


@pytest.fixture
def make_row() -> Callable[..., dict[str, str]]:
    """Raw CSV row with canonical headers; keyword overrides use the header names."""

    def _make(**overrides: str) -> dict[str, str]:
        row = dict(RAW_HEADER_DEFAULTS)
        row.update(overrides)
        return row

    return _make


@pytest.fixture
def make_txn() -> Callable[..., CleanedTransaction]:
    """Cleaned record with sensible defaults; override any field by keyword."""

    def _make(**fields: Any) -> CleanedTransaction:
        values: dict[str, Any] = {
            "customer_id": 1,
            "transaction_date": datetime(2023, 1, 1),
            "transaction_type": TransactionType.DEPOSIT,
            "transaction_amount": 100.0,
            "age": 30,
            "branch_id": "B1",
        }
        values.update(fields)
        return CleanedTransaction(**values)

    return _make
