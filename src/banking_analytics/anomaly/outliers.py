"""Single-signal variant: per-customer z-score of the transaction amount."""

from __future__ import annotations

import math
from collections import defaultdict

from banking_analytics.schemas import CleanedTransaction


def detect_customer_outliers(
    records: list[CleanedTransaction], z_threshold: float = 3.0
) -> list[CleanedTransaction]:
    """
    Transactions whose amount sits at least `z_threshold` sample standard
    deviations above the customer's own mean. Customers with zero spread are
    skipped. Input order is preserved.
    """
    amounts_by_customer: dict[int, list[float]] = defaultdict(list)
    for r in records:
        amounts_by_customer[r.customer_id].append(abs(r.transaction_amount))

    stats: dict[int, tuple[float, float]] = {}
    for customer_id, amounts in amounts_by_customer.items():
        mean = sum(amounts) / len(amounts)
        variance = sum((a - mean) ** 2 for a in amounts) / max(1, len(amounts) - 1)
        stats[customer_id] = (mean, math.sqrt(variance))

    flagged: list[CleanedTransaction] = []
    for r in records:
        mean, std = stats[r.customer_id]
        if std == 0:
            continue
        if (abs(r.transaction_amount) - mean) / std >= z_threshold:
            flagged.append(r)
    return flagged
