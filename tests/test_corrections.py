"""Tests for age correction, deduplication and the balance-chain passes."""

from datetime import datetime

import pytest

from banking_analytics.corrections import (
    BALANCE_RULE_ID,
    check_balance_chain,
    correct_ages,
    reconcile_balances,
    remove_duplicates,
)
from banking_analytics.identity import compute_composite_key, identity_key
from banking_analytics.ledger import AgeTally, BalanceLedger, expected_balance_after
from banking_analytics.schemas import TransactionType


def test_correct_ages_uses_mode(make_txn) -> None:
    records = [
        make_txn(customer_id=1, age=30),
        make_txn(customer_id=1, age=31),
        make_txn(customer_id=1, age=30),
        make_txn(customer_id=2, age=45),
    ]
    out, corrections = correct_ages(records)
    assert [r.age for r in out] == [30, 30, 30, 45]
    assert len(corrections) == 1
    assert corrections[0].customer_id == 1
    assert corrections[0].distinct_ages_observed == [30, 31]
    assert corrections[0].corrected_to == 30
    # Input records are not mutated.
    assert records[1].age == 31


def test_correct_ages_tie_goes_to_first_seen(make_txn) -> None:
    out, corrections = correct_ages([make_txn(age=40), make_txn(age=41)])
    assert [r.age for r in out] == [40, 40]
    assert corrections[0].corrected_to == 40


def test_correct_ages_fills_missing_age_for_inconsistent_customer(make_txn) -> None:
    out, _ = correct_ages([make_txn(age=30), make_txn(age=None), make_txn(age=31), make_txn(age=30)])
    assert [r.age for r in out] == [30, 30, 30, 30]


def test_correct_ages_leaves_consistent_customers_alone(make_txn) -> None:
    records = [make_txn(age=30), make_txn(age=None)]
    out, corrections = correct_ages(records)
    assert corrections == []
    assert [r.age for r in out] == [30, None]


def test_correct_ages_shared_tally_spans_batches(make_txn) -> None:
    tally = AgeTally()
    correct_ages([make_txn(age=50), make_txn(age=50)], tally)
    out, corrections = correct_ages([make_txn(age=51)], tally)
    assert out[0].age == 50
    assert corrections[0].distinct_ages_observed == [50, 51]


def test_remove_duplicates_by_transaction_id(make_txn) -> None:
    records = [
        make_txn(transaction_id="T1", transaction_amount=10.0),
        make_txn(transaction_id="T1", transaction_amount=99.0),
        make_txn(transaction_id="T2", transaction_amount=10.0),
    ]
    unique, duplicates = remove_duplicates(records)
    assert [r.transaction_id for r in unique] == ["T1", "T2"]
    assert unique[0].transaction_amount == 10.0
    assert len(duplicates) == 1
    assert duplicates[0].record_index == 1
    assert duplicates[0].duplicate_of == 0
    assert duplicates[0].key == "id:T1"


def test_remove_duplicates_by_composite_key(make_txn) -> None:
    a = make_txn(transaction_date=datetime(2023, 1, 1, 9, 0))
    b = make_txn(transaction_date=datetime(2023, 1, 1, 9, 0))
    c = make_txn(transaction_date=datetime(2023, 1, 1, 9, 0), branch_id="B2")
    unique, duplicates = remove_duplicates([a, b, c])
    assert len(unique) == 2
    assert duplicates[0].record_index == 1


def test_remove_duplicates_is_idempotent(make_txn) -> None:
    records = [make_txn(transaction_id="T1"), make_txn(transaction_id="T1"), make_txn()]
    once, _ = remove_duplicates(records)
    twice, duplicates = remove_duplicates(once)
    assert twice == once
    assert duplicates == []


def test_identity_key_prefers_transaction_id(make_txn) -> None:
    assert identity_key(make_txn(transaction_id=" T9 ")) == "id:T9"
    key = identity_key(make_txn(transaction_id=None))
    assert key == compute_composite_key(
        1, datetime(2023, 1, 1), "Deposit", 100.0, "B1"
    )
    assert key.startswith("k:1|2023-01-01T00:00:00.000|Deposit|")


@pytest.mark.parametrize(
    "ttype, expected",
    [
        (TransactionType.DEPOSIT, 150.0),
        (TransactionType.WITHDRAWAL, 50.0),
        (TransactionType.PAYMENT, 50.0),
        (TransactionType.FEE, 50.0),
        (TransactionType.OTHER, 100.0),
        (TransactionType.TRANSFER, None),
    ],
)
def test_expected_balance_after(ttype: TransactionType, expected: float | None) -> None:
    assert expected_balance_after(100.0, ttype, 50.0) == expected


def test_ledger_seeds_then_checks(make_txn) -> None:
    ledger = BalanceLedger()
    assert ledger.observe(make_txn(account_balance_after=100.0)) is None
    assert ledger.running(1) == 100.0
    assert ledger.observe(make_txn(transaction_amount=50.0, account_balance_after=150.0)) is None
    mismatch = ledger.observe(make_txn(transaction_amount=10.0, account_balance_after=999.0))
    assert mismatch is not None
    assert mismatch.expected == 160.0
    assert mismatch.observed == 999.0
    # The chain continues from the observed balance.
    assert ledger.running(1) == 999.0


def test_ledger_ignores_missing_balances_and_honours_tolerance(make_txn) -> None:
    ledger = BalanceLedger(tolerance=0.5)
    ledger.observe(make_txn(account_balance_after=100.0))
    assert ledger.observe(make_txn(account_balance_after=None)) is None
    assert ledger.running(1) == 100.0
    assert ledger.observe(make_txn(transaction_amount=10.0, account_balance_after=110.4)) is None


def _chain(make_txn):
    return [
        make_txn(transaction_date=datetime(2023, 1, 3), transaction_amount=10.0, account_balance_after=999.0),
        make_txn(transaction_date=datetime(2023, 1, 1), transaction_amount=100.0, account_balance_after=100.0),
        make_txn(
            transaction_date=datetime(2023, 1, 2),
            transaction_type=TransactionType.WITHDRAWAL,
            transaction_amount=30.0,
            account_balance_after=70.0,
        ),
    ]


def test_check_balance_chain_orders_by_date(make_txn) -> None:
    records = _chain(make_txn)
    errors = check_balance_chain(records)
    assert len(errors) == 1
    assert errors[0].record_index == 0
    assert errors[0].rule_id == BALANCE_RULE_ID
    assert errors[0].reason == "Account balance doesn't reconcile"
    assert "Expected 80.00" in (errors[0].detail or "")
    # Non-destructive.
    assert records[0].account_balance_after == 999.0


def test_reconcile_balances_rewrites_drift(make_txn) -> None:
    records = _chain(make_txn)
    out, adjustments = reconcile_balances(records)
    assert out[0].account_balance_after == 80.0
    assert out[0].account_balance == 70.0
    assert out[1] is records[1]
    assert out[2] is records[2]
    assert len(adjustments) == 1
    assert adjustments[0].record_index == 0
    assert adjustments[0].reported_balance_after == 999.0
    assert adjustments[0].reconciled_balance_after == 80.0
    assert check_balance_chain(out) == []


def test_reconcile_balances_trusts_transfers_and_fills_gaps(make_txn) -> None:
    records = [
        make_txn(transaction_date=datetime(2023, 1, 1), account_balance_after=100.0),
        make_txn(
            transaction_date=datetime(2023, 1, 2),
            transaction_type=TransactionType.TRANSFER,
            transaction_amount=40.0,
            account_balance_after=60.0,
        ),
        make_txn(transaction_date=datetime(2023, 1, 3), transaction_amount=5.0, account_balance_after=None),
    ]
    out, adjustments = reconcile_balances(records)
    assert out[1].account_balance_after == 60.0
    assert out[2].account_balance_after == 65.0
    assert [a.record_index for a in adjustments] == [2]


@pytest.mark.parametrize("reported, ok", [(150.0, True), (150.02, False), (150.009, True)])
def test_ledger_tolerance_boundary(make_txn, reported: float, ok: bool) -> None:
    ledger = BalanceLedger()
    ledger.observe(make_txn(account_balance_after=100.0))
    mismatch = ledger.observe(make_txn(transaction_amount=50.0, account_balance_after=reported))
    assert (mismatch is None) is ok
