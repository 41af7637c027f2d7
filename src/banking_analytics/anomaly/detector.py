"""Score every transaction against the enabled signals."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import datetime

from banking_analytics.anomaly import get_all_signals
from banking_analytics.anomaly.base import AnomalyContext
from banking_analytics.schemas import (
    AnomalousTransaction,
    CleanedTransaction,
    SignalHit,
    TransactionType,
)
from banking_analytics.scoring import score_band, total_score

log = logging.getLogger(__name__)


def _population_stats(amounts: list[float]) -> tuple[float, float]:
    if not amounts:
        return 0.0, 0.0
    mean = sum(amounts) / len(amounts)
    variance = sum((a - mean) ** 2 for a in amounts) / len(amounts)
    return mean, math.sqrt(variance)


def detect_anomalies(
    records: list[CleanedTransaction], config: dict | None = None
) -> list[AnomalousTransaction]:
    """
    Additive anomaly score per transaction. `config` is the `anomaly` section.
    Records with no triggered signal are omitted. Output is sorted by score
    descending; equal scores keep input order.
    """
    config = config or {}
    signals = get_all_signals(config)
    thresholds = config.get("thresholds") or {}
    low_t = float(thresholds.get("low", 33))
    med_t = float(thresholds.get("medium", 66))

    mean, std = _population_stats([r.transaction_amount for r in records])
    amounts_by_customer: dict[int, list[float]] = defaultdict(list)
    withdrawals_by_customer: dict[int, list[datetime]] = defaultdict(list)
    for r in records:
        amounts_by_customer[r.customer_id].append(r.transaction_amount)
        if r.transaction_type == TransactionType.WITHDRAWAL:
            withdrawals_by_customer[r.customer_id].append(r.transaction_date)
    for times in withdrawals_by_customer.values():
        times.sort()

    anomalies: list[AnomalousTransaction] = []
    for r in records:
        ctx = AnomalyContext(
            transaction=r,
            dataset_mean=mean,
            dataset_std=std,
            customer_amounts=amounts_by_customer[r.customer_id],
            customer_withdrawal_times=withdrawals_by_customer.get(r.customer_id, []),
        )
        hits: list[SignalHit] = []
        for signal in signals:
            hits.extend(signal.evaluate(ctx))
        if not hits:
            continue
        score = total_score(hits)
        anomalies.append(
            AnomalousTransaction(
                transaction=r,
                anomaly_score=score,
                anomaly_reasons=[h.reason for h in hits],
                band=score_band(score, low_t, med_t),
            )
        )

    anomalies.sort(key=lambda a: a.anomaly_score, reverse=True)
    log.info("anomaly detection: %s of %s transactions flagged", len(anomalies), len(records))
    return anomalies
