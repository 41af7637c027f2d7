"""
Per-customer accumulators threaded through correction and validation passes.

Both are plain objects owned by the caller, so a dataset can be processed in
batches by handing the same ledger/tally to each batch.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from banking_analytics.schemas import CleanedTransaction, TransactionType

DEFAULT_TOLERANCE = 0.01

_DEBIT_TYPES = frozenset({TransactionType.WITHDRAWAL, TransactionType.PAYMENT, TransactionType.FEE})


def expected_balance_after(
    previous: float, transaction_type: TransactionType, amount: float
) -> float | None:
    """
    Balance implied by `previous` and one transaction. None for Transfer, whose
    direction is unknown; the reported balance is trusted instead.
    """
    if transaction_type == TransactionType.DEPOSIT:
        return previous + amount
    if transaction_type in _DEBIT_TYPES:
        return previous - amount
    if transaction_type == TransactionType.TRANSFER:
        return None
    return previous


@dataclass(frozen=True)
class BalanceMismatch:
    customer_id: int
    previous: float
    expected: float
    observed: float


class BalanceLedger:
    """Running post-transaction balance per customer."""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE) -> None:
        self.tolerance = tolerance
        self._running: dict[int, float] = {}

    def running(self, customer_id: int) -> float | None:
        return self._running.get(customer_id)

    def observe(self, record: CleanedTransaction) -> BalanceMismatch | None:
        """
        Check a record against the chain and advance it. The chain always
        continues from the observed balance so one bad row does not cascade.
        """
        observed = record.account_balance_after
        if observed is None:
            return None
        previous = self._running.get(record.customer_id)
        self._running[record.customer_id] = observed
        if previous is None:
            return None
        expected = expected_balance_after(
            previous, record.transaction_type, record.transaction_amount
        )
        if expected is None or abs(observed - expected) <= self.tolerance:
            return None
        return BalanceMismatch(record.customer_id, previous, expected, observed)


class AgeTally:
    """Age frequencies per customer, in first-encounter order."""

    def __init__(self) -> None:
        self._counts: dict[int, Counter[int]] = {}

    def observe(self, customer_id: int, age: int | None) -> None:
        if age is None:
            return
        self._counts.setdefault(customer_id, Counter())[age] += 1

    def distinct(self, customer_id: int) -> list[int]:
        return list(self._counts.get(customer_id, ()))

    def mode(self, customer_id: int) -> int | None:
        """Most frequent age; ties go to the value seen first."""
        counts = self._counts.get(customer_id)
        if not counts:
            return None
        return max(counts, key=counts.__getitem__)

    def customers(self) -> list[int]:
        return list(self._counts)
