"""Dataset-wide activity per calendar month."""

from __future__ import annotations

from banking_analytics.analytics.common import month_key
from banking_analytics.schemas import CleanedTransaction, SeasonalTrend, TransactionType


def seasonal_trends(records: list[CleanedTransaction]) -> list[SeasonalTrend]:
    """One row per YYYY-MM, chronologically sorted."""
    monthly: dict[str, SeasonalTrend] = {}
    for r in records:
        month = month_key(r.transaction_date)
        trend = monthly.get(month)
        if trend is None:
            trend = monthly[month] = SeasonalTrend(month=month)
        trend.total_volume += r.transaction_amount
        trend.transaction_count += 1
        if r.transaction_type == TransactionType.DEPOSIT:
            trend.deposits += 1
        elif r.transaction_type == TransactionType.WITHDRAWAL:
            trend.withdrawals += 1
        elif r.transaction_type == TransactionType.TRANSFER:
            trend.transfers += 1

    for trend in monthly.values():
        trend.avg_amount = trend.total_volume / trend.transaction_count
    return [monthly[m] for m in sorted(monthly)]
