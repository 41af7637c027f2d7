"""Headline metrics and record filtering for presentation layers."""

from __future__ import annotations

from banking_analytics.schemas import CleanedTransaction, DashboardMetrics, TransactionFilter


def dashboard_metrics(records: list[CleanedTransaction]) -> DashboardMetrics:
    total_volume = sum(r.transaction_amount for r in records)
    dates = [r.transaction_date for r in records]
    return DashboardMetrics(
        total_transactions=len(records),
        total_volume=total_volume,
        avg_transaction_amount=total_volume / len(records) if records else 0.0,
        unique_customers=len({r.customer_id for r in records}),
        active_branches=len({r.branch_id for r in records if r.branch_id}),
        anomaly_count=sum(1 for r in records if r.anomaly == 1),
        period_start=min(dates) if dates else None,
        period_end=max(dates) if dates else None,
    )


def _matches(r: CleanedTransaction, f: TransactionFilter) -> bool:
    if f.start_date is not None and r.transaction_date < f.start_date:
        return False
    if f.end_date is not None and r.transaction_date > f.end_date:
        return False
    if f.branch_ids is not None and r.branch_id not in f.branch_ids:
        return False
    if f.transaction_types is not None and r.transaction_type not in f.transaction_types:
        return False
    if f.min_amount is not None and r.transaction_amount < f.min_amount:
        return False
    if f.max_amount is not None and r.transaction_amount > f.max_amount:
        return False
    if f.customer_ids is not None and r.customer_id not in f.customer_ids:
        return False
    if f.account_types is not None and r.account_type not in f.account_types:
        return False
    return True


def filter_transactions(
    records: list[CleanedTransaction], filters: TransactionFilter
) -> list[CleanedTransaction]:
    """Records matching every set criterion, input order preserved."""
    return [r for r in records if _matches(r, filters)]
