"""Amount far above the customer's own average."""

from __future__ import annotations

from banking_analytics.anomaly.base import AnomalyContext, BaseSignal
from banking_analytics.schemas import SignalHit


class CustomerMultipleSignal(BaseSignal):
    signal_id = "CustomerMultiple"
    default_weight = 20

    def __init__(self, config: dict) -> None:
        super().__init__(config)
        self.multiple = float(config.get("multiple", 5))
        self.min_records = int(config.get("min_records", 2))

    def evaluate(self, ctx: AnomalyContext) -> list[SignalHit]:
        amounts = ctx.customer_amounts
        if len(amounts) < self.min_records:
            return []
        customer_mean = sum(amounts) / len(amounts)
        if ctx.transaction.transaction_amount > customer_mean * self.multiple:
            return [
                self.hit(
                    f"Transaction is {self.multiple:g}x customer's average",
                    customer_mean=round(customer_mean, 2),
                    multiple=self.multiple,
                )
            ]
        return []
