"""Withdrawal burst: too many withdrawals by one customer in a trailing window."""

from __future__ import annotations

from bisect import bisect_right
from datetime import timedelta

from banking_analytics.anomaly.base import AnomalyContext, BaseSignal
from banking_analytics.schemas import SignalHit


class WithdrawalBurstSignal(BaseSignal):
    signal_id = "WithdrawalBurst"
    default_weight = 15

    def __init__(self, config: dict) -> None:
        super().__init__(config)
        self.max_withdrawals = int(config.get("max_withdrawals", 5))
        self.window_hours = float(config.get("window_hours", 24))

    def evaluate(self, ctx: AnomalyContext) -> list[SignalHit]:
        times = ctx.customer_withdrawal_times
        ts = ctx.transaction.transaction_date
        window_start = ts - timedelta(hours=self.window_hours)
        # Window is (ts - window, ts]: a withdrawal exactly window_hours earlier is outside.
        count = bisect_right(times, ts) - bisect_right(times, window_start)
        if count > self.max_withdrawals:
            return [
                self.hit(
                    f"Multiple withdrawals in {self.window_hours:g} hours",
                    count=count,
                    window_hours=self.window_hours,
                )
            ]
        return []
