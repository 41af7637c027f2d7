"""Dataset-wide z-score of the transaction amount."""

from __future__ import annotations

from banking_analytics.anomaly.base import AnomalyContext, BaseSignal
from banking_analytics.schemas import SignalHit


class AmountZScoreSignal(BaseSignal):
    signal_id = "AmountZScore"
    default_weight = 30

    def __init__(self, config: dict) -> None:
        super().__init__(config)
        self.threshold = float(config.get("threshold", 3.0))

    def evaluate(self, ctx: AnomalyContext) -> list[SignalHit]:
        if ctx.dataset_std == 0:
            return []
        z = abs((ctx.transaction.transaction_amount - ctx.dataset_mean) / ctx.dataset_std)
        if z > self.threshold:
            return [
                self.hit(
                    f"Amount is {z:.1f} standard deviations from mean",
                    z_score=round(z, 4),
                    mean=round(ctx.dataset_mean, 4),
                    std=round(ctx.dataset_std, 4),
                )
            ]
        return []
