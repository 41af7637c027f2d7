"""Source flag: the input row already marks the transaction as anomalous."""

from __future__ import annotations

from banking_analytics.anomaly.base import AnomalyContext, BaseSignal
from banking_analytics.schemas import SignalHit


class SourceFlagSignal(BaseSignal):
    signal_id = "SourceFlag"
    default_weight = 50

    def evaluate(self, ctx: AnomalyContext) -> list[SignalHit]:
        if ctx.transaction.anomaly == 1:
            return [self.hit("Flagged as anomaly in source data")]
        return []
