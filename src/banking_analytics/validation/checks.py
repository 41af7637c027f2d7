"""Business-rule checks, in evaluation order."""

from __future__ import annotations

from banking_analytics.corrections import BALANCE_RULE_ID, balance_mismatch_error
from banking_analytics.parsing import parse_integer
from banking_analytics.schemas import TransactionType, ValidationError
from banking_analytics.validation.base import BaseCheck, CheckContext


class DepositPositiveCheck(BaseCheck):
    rule_id = "DepositPositive"

    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        r = ctx.record
        if r.transaction_type == TransactionType.DEPOSIT and r.transaction_amount <= 0:
            return [
                self.error(
                    ctx,
                    "transaction_amount",
                    r.transaction_amount,
                    "Deposit amount must be positive",
                )
            ]
        return []


class BalanceChainCheck(BaseCheck):
    """Running-balance reconciliation. Mismatching records stay in the valid set as a signal."""

    rule_id = BALANCE_RULE_ID
    excludes_record = False

    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        if ctx.ledger is None:
            return []
        mismatch = ctx.ledger.observe(ctx.record)
        if mismatch is None:
            return []
        return [
            balance_mismatch_error(
                ctx.record_index,
                ctx.record,
                mismatch.previous,
                mismatch.expected,
                mismatch.observed,
            )
        ]


class AgeRangeCheck(BaseCheck):
    rule_id = "AgeRange"

    def __init__(self, config: dict) -> None:
        self.min_age = int(config.get("min_age", 18))
        self.max_age = int(config.get("max_age", 120))

    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        age = ctx.record.age
        if age is not None and not self.min_age <= age <= self.max_age:
            return [
                self.error(
                    ctx,
                    "age",
                    age,
                    f"Age is outside valid range ({self.min_age}-{self.max_age})",
                    detail=f"Age {age}",
                )
            ]
        return []


class RequiredIdentityCheck(BaseCheck):
    rule_id = "RequiredIdentity"

    def __init__(self, config: dict) -> None:
        self.require_transaction_id = bool(config.get("require_transaction_id", False))

    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        r = ctx.record
        errors: list[ValidationError] = []
        if r.customer_id <= 0:
            errors.append(
                self.error(
                    ctx, "customer_id", r.customer_id, "Customer ID must be a positive number"
                )
            )
        if self.require_transaction_id:
            tid = parse_integer(r.transaction_id)
            if tid is None or tid <= 0:
                errors.append(
                    self.error(
                        ctx,
                        "transaction_id",
                        r.transaction_id,
                        "Transaction ID must be a positive number",
                    )
                )
        if r.transaction_date is None:
            errors.append(self.error(ctx, "transaction_date", None, "Invalid transaction date"))
        return errors


class NonNegativeAmountCheck(BaseCheck):
    rule_id = "NonNegativeAmount"

    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        amount = ctx.record.transaction_amount
        if amount < 0:
            return [
                self.error(
                    ctx, "transaction_amount", amount, "Transaction amount cannot be negative"
                )
            ]
        return []


class NonNegativeBalanceCheck(BaseCheck):
    """Overdrafts can be legitimate, so this is a warning only."""

    rule_id = "NonNegativeBalance"
    excludes_record = False

    def evaluate(self, ctx: CheckContext) -> list[ValidationError]:
        balance = ctx.record.account_balance_after
        if balance is not None and balance < 0:
            return [
                self.error(
                    ctx,
                    "account_balance_after",
                    balance,
                    "Account balance cannot be negative after transaction",
                    severity="warning",
                )
            ]
        return []
