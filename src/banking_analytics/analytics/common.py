"""Grouping helpers shared by the analytics functions."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime

from banking_analytics.schemas import CleanedTransaction

UNKNOWN_BRANCH = "Unknown"


def month_key(ts: datetime) -> str:
    """YYYY-MM."""
    return f"{ts.year:04d}-{ts.month:02d}"


def branch_label(record: CleanedTransaction) -> str:
    return record.branch_id or UNKNOWN_BRANCH


def group_by_customer(records: list[CleanedTransaction]) -> dict[int, list[CleanedTransaction]]:
    """customer_id -> records, customers in first-appearance order."""
    out: dict[int, list[CleanedTransaction]] = defaultdict(list)
    for r in records:
        out[r.customer_id].append(r)
    return dict(out)


def mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0
