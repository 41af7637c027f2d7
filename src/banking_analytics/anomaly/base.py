"""Base signal interface and context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from banking_analytics.schemas import CleanedTransaction, SignalHit


@dataclass
class AnomalyContext:
    """One transaction plus the dataset- and customer-level statistics signals need."""

    transaction: CleanedTransaction
    dataset_mean: float
    dataset_std: float
    customer_amounts: list[float] = field(default_factory=list)
    # Sorted timestamps of the customer's Withdrawal records.
    customer_withdrawal_times: list[datetime] = field(default_factory=list)


class BaseSignal(ABC):
    """Base class for anomaly signals. Each hit adds a fixed integer weight."""

    signal_id: str = "base"
    default_weight: int = 0

    def __init__(self, config: dict) -> None:
        self.weight = int(config.get("weight", self.default_weight))

    def hit(self, reason: str, **evidence: object) -> SignalHit:
        return SignalHit(
            signal_id=self.signal_id,
            reason=reason,
            evidence_fields=evidence or None,
            weight=self.weight,
        )

    @abstractmethod
    def evaluate(self, ctx: AnomalyContext) -> list[SignalHit]:
        """Evaluate signal; return list of SignalHit (empty if not triggered)."""
        ...
