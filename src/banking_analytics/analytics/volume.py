"""Monthly transaction volume per branch."""

from __future__ import annotations

from banking_analytics.analytics.common import branch_label, month_key
from banking_analytics.schemas import CleanedTransaction, MonthlyVolume


def monthly_volume_by_branch(
    records: list[CleanedTransaction], magnitude: bool = False
) -> dict[str, dict[str, MonthlyVolume]]:
    """
    branch -> month (YYYY-MM) -> summed amount and count. Amounts are summed as
    recorded; pass magnitude=True to sum absolute values instead.
    """
    result: dict[str, dict[str, MonthlyVolume]] = {}
    for r in records:
        branch = branch_label(r)
        month = month_key(r.transaction_date)
        by_month = result.setdefault(branch, {})
        entry = by_month.get(month)
        if entry is None:
            entry = by_month[month] = MonthlyVolume(branch_id=branch, month=month)
        amount = abs(r.transaction_amount) if magnitude else r.transaction_amount
        entry.total_amount += amount
        entry.transaction_count += 1
    return result


def flatten_monthly_volume(volume: dict[str, dict[str, MonthlyVolume]]) -> list[MonthlyVolume]:
    """Rows sorted by branch then month, for tabular output."""
    return [volume[b][m] for b in sorted(volume) for m in sorted(volume[b])]
