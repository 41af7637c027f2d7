"""
Customer lifetime value. Two named models encode different business
assumptions and are never averaged:

fee_margin
    Fee revenue on deposits, withdrawals and transfers plus a monthly margin
    on the last positive balance snapshot of each month.
net_value_projection
    Net deposits plus a 30% margin on projected activity over a 5-year
    horizon, extrapolated from the account's historical transaction rate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from banking_analytics.analytics.common import group_by_customer, month_key
from banking_analytics.schemas import CleanedTransaction, CustomerLTV, TransactionType


def _totals(records: list[CleanedTransaction]) -> tuple[float, float]:
    deposits = sum(
        r.transaction_amount for r in records if r.transaction_type == TransactionType.DEPOSIT
    )
    withdrawals = sum(
        r.transaction_amount for r in records if r.transaction_type == TransactionType.WITHDRAWAL
    )
    return deposits, withdrawals


class LTVModel(ABC):
    name: str = "base"

    @abstractmethod
    def calculate(self, customer_id: int, records: list[CleanedTransaction]) -> CustomerLTV:
        """LTV for one customer; `records` may contain other customers."""
        ...

    def calculate_all(self, records: list[CleanedTransaction]) -> list[CustomerLTV]:
        """Every customer in `records`, highest LTV first (ties keep first-appearance order)."""
        results = [self.calculate(cid, txns) for cid, txns in group_by_customer(records).items()]
        results.sort(key=lambda x: x.ltv, reverse=True)
        return results


class FeeMarginLTV(LTVModel):
    name = "fee_margin"

    def __init__(self, config: dict | None = None) -> None:
        config = config or {}
        self.deposit_fee_rate = float(config.get("deposit_fee_rate", 0.001))
        self.withdrawal_fee_rate = float(config.get("withdrawal_fee_rate", 0.001))
        self.transfer_fee_rate = float(config.get("transfer_fee_rate", 0.0005))
        self.margin_bps = float(config.get("margin_bps", 10))

    def revenue(self, records: list[CleanedTransaction]) -> float:
        fee_rates = {
            TransactionType.DEPOSIT: self.deposit_fee_rate,
            TransactionType.WITHDRAWAL: self.withdrawal_fee_rate,
            TransactionType.TRANSFER: self.transfer_fee_rate,
        }
        revenue = 0.0
        for r in records:
            revenue += abs(r.transaction_amount) * fee_rates.get(r.transaction_type, 0.0)

        last_balance_by_month: dict[str, float] = {}
        for r in sorted(records, key=lambda x: x.transaction_date):
            if r.account_balance_after is not None:
                last_balance_by_month[month_key(r.transaction_date)] = r.account_balance_after
        margin_rate = self.margin_bps / 10_000
        for balance in last_balance_by_month.values():
            revenue += max(0.0, balance) * margin_rate
        return round(revenue, 2)

    def calculate(self, customer_id: int, records: list[CleanedTransaction]) -> CustomerLTV:
        txns = [r for r in records if r.customer_id == customer_id]
        deposits, withdrawals = _totals(txns)
        return CustomerLTV(
            customer_id=customer_id,
            model=self.name,
            total_deposits=deposits,
            total_withdrawals=withdrawals,
            net_value=deposits - withdrawals,
            transaction_count=len(txns),
            avg_transaction_amount=(
                sum(r.transaction_amount for r in txns) / len(txns) if txns else 0.0
            ),
            ltv=self.revenue(txns),
        )


class NetValueProjectionLTV(LTVModel):
    name = "net_value_projection"

    def __init__(self, config: dict | None = None, now: datetime | None = None) -> None:
        config = config or {}
        self.horizon_months = float(config.get("horizon_months", 60))
        self.profit_margin = float(config.get("profit_margin", 0.3))
        self.days_per_month = float(config.get("days_per_month", 30))
        self.now = now

    def calculate(self, customer_id: int, records: list[CleanedTransaction]) -> CustomerLTV:
        txns = [r for r in records if r.customer_id == customer_id]
        if not txns:
            return CustomerLTV(customer_id=customer_id, model=self.name)

        deposits, withdrawals = _totals(txns)
        net_value = deposits - withdrawals
        count = len(txns)
        # Average deposit spread over all of the customer's transactions.
        avg_deposit = deposits / count

        opened = next((r.account_opening_date for r in txns if r.account_opening_date), None)
        if opened is None:
            opened = min(r.transaction_date for r in txns)
        now = self.now or datetime.now()
        account_age_months = (now - opened).total_seconds() / (self.days_per_month * 86_400)

        monthly_rate = count / max(account_age_months, 1)
        expected_future = monthly_rate * self.horizon_months
        ltv = net_value + avg_deposit * expected_future * self.profit_margin
        return CustomerLTV(
            customer_id=customer_id,
            model=self.name,
            total_deposits=deposits,
            total_withdrawals=withdrawals,
            net_value=net_value,
            transaction_count=count,
            avg_transaction_amount=avg_deposit,
            account_age_months=account_age_months,
            ltv=ltv,
        )


def get_ltv_model(config: dict | None = None, now: datetime | None = None) -> LTVModel:
    """Model named by `ltv.model`; `config` is the `ltv` section."""
    config = config or {}
    name = config.get("model", FeeMarginLTV.name)
    if name == FeeMarginLTV.name:
        return FeeMarginLTV(config.get(FeeMarginLTV.name) or config)
    if name == NetValueProjectionLTV.name:
        return NetValueProjectionLTV(config.get(NetValueProjectionLTV.name) or config, now=now)
    raise ValueError(f"Unknown LTV model {name!r}")
