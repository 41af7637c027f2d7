"""Apply business-rule checks to a cleaned, corrected record set."""

from __future__ import annotations

import logging
from collections import Counter

from banking_analytics.ledger import DEFAULT_TOLERANCE, BalanceLedger
from banking_analytics.schemas import (
    CleanedTransaction,
    ValidationError,
    ValidationResult,
    ValidationSummary,
)
from banking_analytics.validation.base import BaseCheck, CheckContext
from banking_analytics.validation.checks import (
    AgeRangeCheck,
    BalanceChainCheck,
    DepositPositiveCheck,
    NonNegativeAmountCheck,
    NonNegativeBalanceCheck,
    RequiredIdentityCheck,
)

log = logging.getLogger(__name__)


def get_all_checks(config: dict, check_balances: bool = True) -> list[BaseCheck]:
    """Checks in evaluation order. `config` is the `validation` section."""
    checks: list[BaseCheck] = [DepositPositiveCheck()]
    if check_balances:
        checks.append(BalanceChainCheck())
    checks.extend(
        [
            AgeRangeCheck(config),
            RequiredIdentityCheck(config),
            NonNegativeAmountCheck(),
            NonNegativeBalanceCheck(),
        ]
    )
    return checks


def validate(
    records: list[CleanedTransaction],
    config: dict | None = None,
    ledger: BalanceLedger | None = None,
    check_balances: bool = True,
) -> ValidationResult:
    """
    Validate every record in ascending (customer_id, transaction_date) order,
    threading a running-balance ledger through the pass. Error indices refer
    to positions in `records`. The valid set comes back in that same sorted
    order. Set check_balances=False when balances were already rewritten by
    the destructive reconciliation pass.
    """
    config = config or {}
    if check_balances and ledger is None:
        ledger = BalanceLedger(float(config.get("balance_tolerance", DEFAULT_TOLERANCE)))
    checks = get_all_checks(config, check_balances=check_balances)

    order = sorted(
        range(len(records)),
        key=lambda i: (records[i].customer_id, records[i].transaction_date),
    )
    valid: list[CleanedTransaction] = []
    invalid: list[ValidationError] = []
    excluded = 0
    for idx in order:
        ctx = CheckContext(record_index=idx, record=records[idx], ledger=ledger)
        drop = False
        for check in checks:
            errors = check.evaluate(ctx)
            if not errors:
                continue
            invalid.extend(errors)
            if check.excludes_record and any(e.severity == "error" for e in errors):
                drop = True
        if drop:
            excluded += 1
        else:
            valid.append(records[idx])

    invalid.sort(key=lambda e: e.record_index)
    summary = ValidationSummary(
        total_records=len(records),
        valid_records=len(valid),
        invalid_records=excluded,
        errors_by_type=dict(Counter(e.reason for e in invalid)),
        errors_by_rule=dict(Counter(e.rule_id for e in invalid)),
    )
    log.info(
        "validation complete: %s valid, %s invalid, %s issues",
        summary.valid_records,
        summary.invalid_records,
        len(invalid),
    )
    return ValidationResult(valid=valid, invalid=invalid, summary=summary)
