"""Record cleaner: one raw string-keyed row -> one CleanedTransaction, or a reject reason."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from banking_analytics.cleaning.aliases import ALIASES, AliasTable, index_row, resolve_field
from banking_analytics.parsing import (
    normalize_account_type,
    normalize_gender,
    normalize_transaction_type,
    parse_account_type,
    parse_amount,
    parse_date,
    parse_email,
    parse_integer,
    parse_phone,
    parse_text,
    parse_transaction_type,
)
from banking_analytics.schemas import CleanedTransaction, CleaningReject

log = logging.getLogger(__name__)

RawRow = Mapping[str, str | None]

# Optional fields by parser. A failed optional parse leaves the field unset.
_AMOUNT_FIELDS = (
    "account_balance",
    "account_balance_after",
    "loan_amount",
    "interest_rate",
    "credit_limit",
    "credit_card_balance",
    "minimum_payment_due",
)
_INTEGER_FIELDS = (
    "age",
    "loan_id",
    "loan_term",
    "card_id",
    "rewards_points",
    "feedback_id",
    "anomaly",
)
_DATE_FIELDS = (
    "account_opening_date",
    "last_transaction_date",
    "loan_approval_date",
    "payment_due_date",
    "last_credit_card_payment_date",
    "feedback_date",
    "resolution_date",
)
_TEXT_FIELDS = (
    "branch_id",
    "first_name",
    "last_name",
    "address",
    "city",
    "loan_type",
    "loan_status",
    "card_type",
    "feedback_type",
    "resolution_status",
)


def clean_record_with_reason(
    row: RawRow,
    aliases: AliasTable = ALIASES,
    type_policy: str = "lenient",
    day_first: bool = False,
) -> tuple[CleanedTransaction | None, str | None]:
    """
    Map a raw row to a typed record. Returns (record, None) on success and
    (None, reason) when the row cannot be admitted. Never raises on bad data.
    """
    indexed = index_row(row)

    def raw(field: str) -> str | None:
        value, _ = resolve_field(indexed, aliases.get(field, ()))
        return value

    customer_id = parse_integer(raw("customer_id"))
    if customer_id is None:
        return None, "missing_customer_id"
    transaction_date = parse_date(raw("transaction_date"), day_first=day_first)
    if transaction_date is None:
        return None, "missing_transaction_date"
    transaction_amount = parse_amount(raw("transaction_amount"))
    if transaction_amount is None:
        return None, "missing_transaction_amount"

    strict = type_policy == "strict"
    if strict:
        transaction_type = parse_transaction_type(raw("transaction_type"))
        if transaction_type is None:
            return None, "unrecognized_transaction_type"
        account_type = parse_account_type(raw("account_type"))
        if account_type is None:
            return None, "unrecognized_account_type"
    else:
        transaction_type = normalize_transaction_type(raw("transaction_type"))
        account_type = normalize_account_type(raw("account_type"))

    values: dict[str, Any] = {
        "customer_id": customer_id,
        "transaction_id": parse_text(raw("transaction_id")),
        "transaction_date": transaction_date,
        "transaction_type": transaction_type,
        "transaction_amount": transaction_amount,
        "account_type": account_type,
        "gender": normalize_gender(raw("gender")),
        "contact_number": parse_phone(raw("contact_number")),
        "email": parse_email(raw("email")),
    }
    for field in _AMOUNT_FIELDS:
        values[field] = parse_amount(raw(field))
    for field in _INTEGER_FIELDS:
        values[field] = parse_integer(raw(field))
    for field in _DATE_FIELDS:
        values[field] = parse_date(raw(field), day_first=day_first)
    for field in _TEXT_FIELDS:
        values[field] = parse_text(raw(field))
    return CleanedTransaction(**values), None


def clean_record(
    row: RawRow,
    aliases: AliasTable = ALIASES,
    type_policy: str = "lenient",
    day_first: bool = False,
) -> CleanedTransaction | None:
    """Clean one row; None when a required field cannot be resolved."""
    record, _ = clean_record_with_reason(row, aliases, type_policy=type_policy, day_first=day_first)
    return record


def clean_rows(
    rows: Iterable[RawRow],
    aliases: AliasTable = ALIASES,
    type_policy: str = "lenient",
    day_first: bool = False,
) -> tuple[list[CleanedTransaction], list[CleaningReject]]:
    """Clean every row; rejected rows are reported by index and reason, never raised."""
    cleaned: list[CleanedTransaction] = []
    rejects: list[CleaningReject] = []
    for idx, row in enumerate(rows):
        record, reason = clean_record_with_reason(
            row, aliases, type_policy=type_policy, day_first=day_first
        )
        if record is None:
            log.debug("row %s rejected: %s", idx, reason)
            rejects.append(CleaningReject(row_index=idx, reason=reason or "unknown"))
            continue
        cleaned.append(record.model_copy(update={"source_row": idx}))
    return cleaned, rejects
