"""
Dataset-wide correction passes over cleaned records.

- correct_ages: one age per customer (mode of observed ages).
- remove_duplicates: first occurrence of an identity key wins.
- check_balance_chain / reconcile_balances: the two balance-chain modes.
  The first reports mismatches and keeps reported values; the second rewrites
  balances to the recomputed chain. Run one or the other on a dataset, never both.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from banking_analytics.identity import identity_key
from banking_analytics.ledger import (
    DEFAULT_TOLERANCE,
    AgeTally,
    BalanceLedger,
    expected_balance_after,
)
from banking_analytics.schemas import (
    AgeCorrection,
    BalanceAdjustment,
    CleanedTransaction,
    DuplicateRecord,
    ValidationError,
)

log = logging.getLogger(__name__)

BALANCE_RULE_ID = "BalanceReconciliation"


def correct_ages(
    records: list[CleanedTransaction], tally: AgeTally | None = None
) -> tuple[list[CleanedTransaction], list[AgeCorrection]]:
    """
    Replace every age of a customer with more than one distinct age by the
    mode. Pass a shared `tally` to let earlier batches count toward the mode.
    Returns (records in input order, corrections).
    """
    tally = tally if tally is not None else AgeTally()
    customers_in_batch: list[int] = []
    seen: set[int] = set()
    for r in records:
        tally.observe(r.customer_id, r.age)
        if r.customer_id not in seen:
            seen.add(r.customer_id)
            customers_in_batch.append(r.customer_id)

    corrected_to: dict[int, int] = {}
    corrections: list[AgeCorrection] = []
    for customer_id in customers_in_batch:
        distinct = tally.distinct(customer_id)
        mode = tally.mode(customer_id)
        if len(distinct) > 1 and mode is not None:
            corrected_to[customer_id] = mode
            corrections.append(
                AgeCorrection(
                    customer_id=customer_id,
                    distinct_ages_observed=distinct,
                    corrected_to=mode,
                )
            )

    out = [
        r.model_copy(update={"age": corrected_to[r.customer_id]})
        if r.customer_id in corrected_to
        else r
        for r in records
    ]
    if corrections:
        log.info("age correction: %s customers had inconsistent ages", len(corrections))
    return out, corrections


def remove_duplicates(
    records: list[CleanedTransaction], seen: dict[str, int] | None = None
) -> tuple[list[CleanedTransaction], list[DuplicateRecord]]:
    """
    Keep the first record per identity key (source id, else composite key).
    `seen` maps key -> index of the kept record and may be shared across batches.
    Idempotent: running it on its own output removes nothing.
    """
    seen = seen if seen is not None else {}
    unique: list[CleanedTransaction] = []
    duplicates: list[DuplicateRecord] = []
    for idx, r in enumerate(records):
        key = identity_key(r)
        if key in seen:
            duplicates.append(
                DuplicateRecord(record_index=idx, duplicate_of=seen[key], key=key, transaction=r)
            )
            continue
        seen[key] = idx
        unique.append(r)
    if duplicates:
        log.info("deduplication: removed %s duplicate transactions", len(duplicates))
    return unique, duplicates


def _chain_order(records: list[CleanedTransaction]) -> dict[int, list[int]]:
    """customer_id -> record indices sorted by date (ties keep input order)."""
    by_customer: dict[int, list[int]] = defaultdict(list)
    for idx, r in enumerate(records):
        by_customer[r.customer_id].append(idx)
    for indices in by_customer.values():
        indices.sort(key=lambda i: records[i].transaction_date)
    return by_customer


def balance_mismatch_error(
    record_index: int, record: CleanedTransaction, previous: float, expected: float, observed: float
) -> ValidationError:
    return ValidationError(
        record_index=record_index,
        source_row=record.source_row,
        field="account_balance_after",
        value=observed,
        reason="Account balance doesn't reconcile",
        severity="error",
        rule_id=BALANCE_RULE_ID,
        detail=(
            f"Expected {expected:.2f} from previous {previous:.2f} and "
            f"{record.transaction_type.value} {record.transaction_amount:.2f}, saw {observed:.2f}"
        ),
    )


def check_balance_chain(
    records: list[CleanedTransaction], tolerance: float = DEFAULT_TOLERANCE
) -> list[ValidationError]:
    """Non-destructive mode: report mismatches, keep every reported balance."""
    errors: list[ValidationError] = []
    for indices in _chain_order(records).values():
        ledger = BalanceLedger(tolerance)
        for idx in indices:
            record = records[idx]
            mismatch = ledger.observe(record)
            if mismatch is not None:
                errors.append(
                    balance_mismatch_error(
                        idx, record, mismatch.previous, mismatch.expected, mismatch.observed
                    )
                )
    errors.sort(key=lambda e: e.record_index)
    return errors


def reconcile_balances(
    records: list[CleanedTransaction], tolerance: float = DEFAULT_TOLERANCE
) -> tuple[list[CleanedTransaction], list[BalanceAdjustment]]:
    """
    Destructive mode: seed each customer's chain from the first reported
    balance and rewrite pre/post balances that drift beyond `tolerance` (or
    are missing) to the recomputed chain. Transfers are trusted as reported.
    Returns (records in input order, adjustments).
    """
    out = list(records)
    adjustments: list[BalanceAdjustment] = []
    for customer_id, indices in _chain_order(records).items():
        running: float | None = None
        for idx in indices:
            record = records[idx]
            reported = record.account_balance_after
            if running is None:
                running = reported
                continue
            expected = expected_balance_after(
                running, record.transaction_type, record.transaction_amount
            )
            if expected is None:
                if reported is not None:
                    running = reported
                continue
            if reported is not None and abs(reported - expected) <= tolerance:
                running = reported
                continue
            out[idx] = record.model_copy(
                update={"account_balance": running, "account_balance_after": expected}
            )
            adjustments.append(
                BalanceAdjustment(
                    record_index=idx,
                    source_row=record.source_row,
                    customer_id=customer_id,
                    reported_balance_after=reported,
                    reconciled_balance_after=expected,
                )
            )
            running = expected
    if adjustments:
        log.info("balance reconciliation: rewrote %s balances", len(adjustments))
    return out, adjustments
