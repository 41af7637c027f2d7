"""
Column alias table: logical field -> ordered list of accepted column names.

Source CSVs name the same field differently ("Customer ID" vs "CustomerID",
"Branch ID" vs "Branch Code"). Headers are compared after normalization
(lowercase, spaces/underscores/dots/dashes collapsed), and for each field the
first listed alias present in a row wins, even when a later alias is also
populated with a different value.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

AliasTable = Mapping[str, tuple[str, ...]]

REQUIRED_FIELDS = ("customer_id", "transaction_date", "transaction_amount")

ALIASES: dict[str, tuple[str, ...]] = {
    "customer_id": ("Customer ID", "CustomerID", "Cust ID", "Client ID"),
    "transaction_id": ("TransactionID", "Transaction Id", "TxnID", "Transaction Ref"),
    "transaction_date": ("Transaction Date", "Txn Date", "Date"),
    "transaction_type": ("Transaction Type", "Txn Type", "Type"),
    "transaction_amount": ("Transaction Amount", "Txn Amount", "Amount"),
    "account_balance_after": (
        "Account Balance After Transaction",
        "Balance After Transaction",
        "Balance After",
    ),
    "account_balance": ("Account Balance", "Balance Before Transaction"),
    "age": ("Age",),
    "gender": ("Gender", "Sex"),
    "account_type": ("Account Type",),
    "branch_id": ("Branch ID", "Branch Code", "BranchID", "Branch"),
    "account_opening_date": ("Date Of Account Opening", "Account Opening Date"),
    "last_transaction_date": ("Last Transaction Date",),
    "first_name": ("First Name",),
    "last_name": ("Last Name", "Surname"),
    "address": ("Address",),
    "city": ("City",),
    "contact_number": ("Contact Number", "Phone", "Phone Number"),
    "email": ("Email", "Email Address"),
    "loan_id": ("Loan ID",),
    "loan_amount": ("Loan Amount",),
    "loan_type": ("Loan Type",),
    "interest_rate": ("Interest Rate",),
    "loan_term": ("Loan Term",),
    "loan_approval_date": ("Approval/Rejection Date", "Loan Approval Date"),
    "loan_status": ("Loan Status",),
    "card_id": ("CardID", "Card ID"),
    "card_type": ("Card Type",),
    "credit_limit": ("Credit Limit",),
    "credit_card_balance": ("Credit Card Balance",),
    "minimum_payment_due": ("Minimum Payment Due",),
    "payment_due_date": ("Payment Due Date",),
    "last_credit_card_payment_date": ("Last Credit Card Payment Date",),
    "rewards_points": ("Rewards Points",),
    "feedback_id": ("Feedback ID",),
    "feedback_date": ("Feedback Date",),
    "feedback_type": ("Feedback Type",),
    "resolution_status": ("Resolution Status",),
    "resolution_date": ("Resolution Date",),
    "anomaly": ("Anomaly", "Is Anomaly"),
}


def normalize_header(h: str) -> str:
    """Lowercase, collapse spaces/underscores/dots/dashes/slashes to single underscore."""
    if not h:
        return ""
    s = re.sub(r"[\s._/-]+", "_", str(h).strip().lower())
    return re.sub(r"_+", "_", s).strip("_")


def build_alias_table(
    overrides: Mapping[str, Iterable[str]] | None = None,
) -> dict[str, tuple[str, ...]]:
    """
    Default table with per-field overrides. Override aliases are tried before
    the built-in ones for that field.
    """
    table = dict(ALIASES)
    for field, extra in (overrides or {}).items():
        extra_tuple = tuple(extra)
        table[field] = extra_tuple + tuple(a for a in table.get(field, ()) if a not in extra_tuple)
    return table


def index_row(row: Mapping[str, str | None]) -> dict[str, str | None]:
    """Normalized header -> value. The first of two colliding headers wins."""
    out: dict[str, str | None] = {}
    for key, value in row.items():
        norm = normalize_header(key) if key else ""
        if norm and norm not in out:
            out[norm] = value
    return out


def resolve_field(
    indexed_row: Mapping[str, str | None], aliases: Iterable[str]
) -> tuple[str | None, bool]:
    """Return (value, present) for the first alias present in the row."""
    for alias in aliases:
        norm = normalize_header(alias)
        if norm in indexed_row:
            return indexed_row[norm], True
    return None, False


def resolve_columns(headers: list[str], aliases: AliasTable = ALIASES) -> dict[str, str]:
    """
    Logical field -> source header that the cleaner will read it from.
    Fields with no matching header are omitted.
    """
    normalized_to_original: dict[str, str] = {}
    for h in headers:
        norm = normalize_header(h)
        if norm and norm not in normalized_to_original:
            normalized_to_original[norm] = h
    result: dict[str, str] = {}
    for field, alias_list in aliases.items():
        for alias in alias_list:
            anorm = normalize_header(alias)
            if anorm in normalized_to_original:
                result[field] = normalized_to_original[anorm]
                break
    return result


def missing_required(resolved: Mapping[str, str]) -> list[str]:
    return [f for f in REQUIRED_FIELDS if f not in resolved]
