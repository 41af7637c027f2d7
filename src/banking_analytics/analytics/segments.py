"""Customer segmentation by ranking and quantile."""

from __future__ import annotations

import math
from dataclasses import dataclass

from banking_analytics.analytics.common import group_by_customer, mean
from banking_analytics.schemas import CleanedTransaction, CustomerSegment, TransactionType


@dataclass
class _CustomerMetrics:
    customer_id: int
    total_deposits: float
    avg_balance: float | None
    avg_transaction_amount: float
    transaction_count: int
    total_volume: float


def top_share_count(population: int, share: float) -> int:
    """ceil(population * share), immune to float noise such as 10 * 0.3."""
    return math.ceil(round(population * share, 9))


def _metrics(records: list[CleanedTransaction]) -> list[_CustomerMetrics]:
    out: list[_CustomerMetrics] = []
    for customer_id, txns in group_by_customer(records).items():
        balances = [t.account_balance_after for t in txns if t.account_balance_after is not None]
        amounts = [t.transaction_amount for t in txns]
        out.append(
            _CustomerMetrics(
                customer_id=customer_id,
                total_deposits=sum(
                    t.transaction_amount
                    for t in txns
                    if t.transaction_type == TransactionType.DEPOSIT
                ),
                avg_balance=mean(balances) if balances else None,
                avg_transaction_amount=mean(amounts),
                transaction_count=len(txns),
                total_volume=sum(amounts),
            )
        )
    return out


def _segment(
    name: str, members: list[_CustomerMetrics], characteristics: list[str]
) -> CustomerSegment:
    balances = [m.avg_balance for m in members if m.avg_balance is not None]
    return CustomerSegment(
        segment_name=name,
        customer_ids=[m.customer_id for m in members],
        member_count=len(members),
        avg_balance=mean(balances),
        avg_transaction_amount=mean([m.avg_transaction_amount for m in members]),
        total_volume=sum(m.total_volume for m in members),
        characteristics=characteristics,
    )


def segment_customers(
    records: list[CleanedTransaction],
    high_value_share: float = 0.2,
    active_share: float = 0.3,
) -> list[CustomerSegment]:
    """
    High-Value: top `high_value_share` of customers by total deposits.
    Active: top `active_share` by transaction count. Segments may overlap;
    ranking ties keep first-appearance order.
    """
    metrics = _metrics(records)
    by_deposits = sorted(metrics, key=lambda m: m.total_deposits, reverse=True)
    high_value = by_deposits[: top_share_count(len(metrics), high_value_share)]
    by_activity = sorted(metrics, key=lambda m: m.transaction_count, reverse=True)
    active = by_activity[: top_share_count(len(metrics), active_share)]

    high_value_segment = _segment(
        "High-Value",
        high_value,
        [f"Top {high_value_share:.0%} by total deposits"],
    )
    high_value_segment.characteristics.append(
        f"Average balance: ${high_value_segment.avg_balance:,.2f}"
    )
    active_avg_count = mean([float(m.transaction_count) for m in active])
    active_segment = _segment(
        "Active",
        active,
        [
            f"Top {active_share:.0%} by transaction frequency",
            f"Average {active_avg_count:.0f} transactions",
        ],
    )
    return [high_value_segment, active_segment]
