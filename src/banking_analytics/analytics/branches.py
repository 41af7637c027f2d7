"""Branch performance: volume, reach, growth and a capped composite score."""

from __future__ import annotations

from datetime import datetime, timedelta

from banking_analytics.analytics.common import branch_label
from banking_analytics.schemas import BranchPerformance, CleanedTransaction


def growth_rate(recent: float, previous: float) -> float:
    """Percent change; 0 when there is no previous volume."""
    if previous == 0:
        return 0.0
    return (recent - previous) / previous * 100


def performance_score(
    total_volume: float, unique_customers: int, growth: float, transaction_count: int
) -> float:
    """Four independently capped sub-scores (30 + 30 + 20 + 20), at most 100."""
    volume_score = min(total_volume / 1_000_000 * 20, 30)
    customer_score = min(unique_customers / 100 * 20, 30)
    growth_score = min(max(growth, 0) / 2, 20)
    activity_score = min(transaction_count / 1000 * 20, 20)
    return max(0.0, volume_score + customer_score + growth_score + activity_score)


def branch_performance(
    records: list[CleanedTransaction],
    as_of: datetime | None = None,
    window_days: int = 90,
) -> list[BranchPerformance]:
    """
    Per-branch metrics sorted by performance_score descending. Growth compares
    the trailing `window_days` before `as_of` with the window preceding it;
    `as_of` defaults to the latest transaction date in `records`.
    """
    if not records:
        return []
    as_of = as_of or max(r.transaction_date for r in records)
    recent_start = as_of - timedelta(days=window_days)
    previous_start = as_of - timedelta(days=2 * window_days)

    by_branch: dict[str, list[CleanedTransaction]] = {}
    for r in records:
        by_branch.setdefault(branch_label(r), []).append(r)

    results: list[BranchPerformance] = []
    for branch, txns in by_branch.items():
        total_volume = sum(t.transaction_amount for t in txns)
        count = len(txns)
        customers = len({t.customer_id for t in txns})
        recent = sum(
            t.transaction_amount for t in txns if recent_start <= t.transaction_date <= as_of
        )
        previous = sum(
            t.transaction_amount
            for t in txns
            if previous_start <= t.transaction_date < recent_start
        )
        growth = growth_rate(recent, previous)
        results.append(
            BranchPerformance(
                branch_id=branch,
                total_volume=total_volume,
                transaction_count=count,
                customer_count=customers,
                avg_transaction_amount=total_volume / count,
                growth_rate=growth,
                performance_score=performance_score(total_volume, customers, growth, count),
            )
        )
    results.sort(key=lambda b: b.performance_score, reverse=True)
    return results
