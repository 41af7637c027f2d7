"""Post-transaction balance deep in overdraft."""

from __future__ import annotations

from banking_analytics.anomaly.base import AnomalyContext, BaseSignal
from banking_analytics.schemas import SignalHit


class NegativeBalanceSignal(BaseSignal):
    signal_id = "NegativeBalance"
    default_weight = 25

    def __init__(self, config: dict) -> None:
        super().__init__(config)
        self.threshold = float(config.get("threshold", -1000))

    def evaluate(self, ctx: AnomalyContext) -> list[SignalHit]:
        balance = ctx.transaction.account_balance_after
        if balance is not None and balance < self.threshold:
            return [
                self.hit(
                    "Results in significant negative balance",
                    balance_after=balance,
                    threshold=self.threshold,
                )
            ]
        return []
