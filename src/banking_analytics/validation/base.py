"""Base check interface and context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from banking_analytics.ledger import BalanceLedger
from banking_analytics.schemas import CleanedTransaction, ValidationError


@dataclass
class CheckContext:
    """Context passed to checks: the record, its index and the running balance chain."""

    record_index: int
    record: CleanedTransaction
    ledger: BalanceLedger | None = None


class BaseCheck(ABC):
    """Base class for business-rule checks."""

    rule_id: str = "base"
    # An error from this check removes the record from the valid set.
    excludes_record: bool = True

    def error(
        self,
        ctx: CheckContext,
        field: str,
        value: object,
        reason: str,
        severity: str = "error",
        detail: str | None = None,
    ) -> ValidationError:
        return ValidationError(
            record_index=ctx.record_index,
            source_row=ctx.record.source_row,
            field=field,
            value=value,
            reason=reason,
            severity=severity,
            rule_id=self.rule_id,
            detail=detail,
        )

    @abstractmethod
    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        """Evaluate check; return list of ValidationError (empty if the record passes)."""
        ...
