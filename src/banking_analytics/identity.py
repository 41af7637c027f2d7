"""Deterministic identity key for duplicate detection."""

from __future__ import annotations

from datetime import datetime

from banking_analytics.schemas import CleanedTransaction


def _ts_iso_ms(ts: datetime) -> str:
    """Canonical ISO string to the millisecond (naive local calendar time)."""
    return ts.replace(tzinfo=None).isoformat(timespec="milliseconds")


def compute_composite_key(
    customer_id: int,
    ts: datetime,
    transaction_type: str,
    amount: float,
    branch_id: str | None,
) -> str:
    """customer | timestamp(ms) | type | amount | branch. Stable across runs."""
    parts = (
        str(customer_id),
        _ts_iso_ms(ts),
        transaction_type,
        repr(float(amount)),
        (branch_id or "").strip(),
    )
    return "k:" + "|".join(parts)


def identity_key(record: CleanedTransaction) -> str:
    """Use the source transaction id when present, else the composite key."""
    if record.transaction_id:
        tid = record.transaction_id.strip()
        if tid:
            return f"id:{tid}"
    return compute_composite_key(
        record.customer_id,
        record.transaction_date,
        record.transaction_type.value,
        record.transaction_amount,
        record.branch_id,
    )
