"""
Field parsers: raw CSV string -> typed value.

Every parser is total. Bad or missing input yields None (or the documented
default) and never raises; whether absence rejects a row is decided by the
cleaner.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import overload

from banking_analytics.schemas import Gender, TransactionType

PLACEHOLDER_TOKENS = frozenset({"n/a", "na", "null", "none", "undefined", "nan"})
CURRENCY_CODES = ("USD", "EUR", "GBP", "INR", "JPY")
_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹\s]")
# Commas are only accepted as thousands separators between 3-digit groups.
_GROUPED = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_INTEGER = re.compile(r"^[+-]?\d+$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MDY = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_YMD = re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$")

# Tried after ISO 8601, before the explicit numeric patterns.
NATIVE_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%d-%b-%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %B %Y",
)

GENDER_ALIASES: dict[str, Gender] = {
    "m": Gender.MALE,
    "male": Gender.MALE,
    "man": Gender.MALE,
    "f": Gender.FEMALE,
    "female": Gender.FEMALE,
    "woman": Gender.FEMALE,
}

TRANSACTION_TYPE_ALIASES: dict[str, TransactionType] = {
    "deposit": TransactionType.DEPOSIT,
    "dep": TransactionType.DEPOSIT,
    "withdrawal": TransactionType.WITHDRAWAL,
    "withdraw": TransactionType.WITHDRAWAL,
    "wd": TransactionType.WITHDRAWAL,
    "transfer": TransactionType.TRANSFER,
    "xfer": TransactionType.TRANSFER,
    "txn transfer": TransactionType.TRANSFER,
    "payment": TransactionType.PAYMENT,
    "card payment": TransactionType.PAYMENT,
    "cc payment": TransactionType.PAYMENT,
    "fee": TransactionType.FEE,
    "charges": TransactionType.FEE,
    "other": TransactionType.OTHER,
}

ACCOUNT_TYPE_ALIASES: dict[str, str] = {
    "current": "Current",
    "checking": "Current",
    "savings": "Savings",
    "saving": "Savings",
}


def _text(value: str | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_placeholder(value: str | None) -> bool:
    """True for empty strings and the usual 'no value' tokens (N/A, null, -, ...)."""
    s = _text(value)
    if not s:
        return True
    return s.lower() in PLACEHOLDER_TOKENS or set(s) == {"-"}


@overload
def parse_amount(value: str | None) -> float | None: ...


@overload
def parse_amount(value: str | None, default: float) -> float: ...


def parse_amount(value: str | None, default: float | None = None) -> float | None:
    """
    Parse a monetary string such as "$1,234.56" or "£ 1 234.56 GBP".
    Returns `default` for empty/placeholder input and for anything that is not
    a complete number once symbols and separators are removed. A decimal comma
    ("1 234,56") is not a thousands separator and yields `default`.
    """
    if is_placeholder(value):
        return default
    s = _text(value)
    for code in CURRENCY_CODES:
        if s.upper().startswith(code):
            s = s[len(code) :]
        elif s.upper().endswith(code):
            s = s[: -len(code)]
    s = _CURRENCY_SYMBOLS.sub("", s)
    if "," in s:
        if not _GROUPED.match(s):
            return default
        s = s.replace(",", "")
    if not _NUMBER.match(s):
        return default
    return float(s)


def parse_integer(value: str | None) -> int | None:
    """Strict base-10 integer; '12abc' and '3.5' are not integers."""
    s = _text(value)
    if not _INTEGER.match(s):
        return None
    return int(s, 10)


def normalize_gender(value: str | None) -> Gender:
    return GENDER_ALIASES.get(_text(value).lower(), Gender.OTHER)


def parse_transaction_type(value: str | None) -> TransactionType | None:
    """Strict: unrecognized input is None."""
    return TRANSACTION_TYPE_ALIASES.get(" ".join(_text(value).lower().split()))


def normalize_transaction_type(value: str | None) -> TransactionType:
    """Lenient: unrecognized input maps to Other."""
    return parse_transaction_type(value) or TransactionType.OTHER


def parse_account_type(value: str | None) -> str | None:
    """Strict: only known account types (Current/Savings)."""
    return ACCOUNT_TYPE_ALIASES.get(_text(value).lower())


def normalize_account_type(value: str | None) -> str | None:
    """Lenient: known types are canonicalised, anything else is kept as given."""
    s = _text(value)
    if not s or is_placeholder(s):
        return None
    return ACCOUNT_TYPE_ALIASES.get(s.lower(), s)


def _build_date(year: int, month: int, day: int) -> datetime | None:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def parse_date(value: str | None, day_first: bool = False) -> datetime | None:
    """
    Parse a date/datetime. Order: ISO 8601, a few textual forms, then the
    explicit numeric patterns MM/DD/YYYY and YYYY/MM/DD ('/' or '-').
    With day_first=True, DD/MM/YYYY is tried before MM/DD/YYYY; either way
    the other order is used only when the preferred one is not a real date.
    Timezone offsets are dropped; dates are local calendar values.
    """
    if is_placeholder(value):
        return None
    s = _text(value)
    try:
        parsed = datetime.fromisoformat(s)
        return parsed.replace(tzinfo=None)
    except ValueError:
        pass
    for fmt in NATIVE_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    m = _MDY.match(s)
    if m:
        first, second, year = (int(g) for g in m.groups())
        orders = ((first, second), (second, first))
        if day_first:
            orders = orders[::-1]
        for month, day in orders:
            built = _build_date(year, month, day)
            if built is not None:
                return built
        return None
    m = _YMD.match(s)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return _build_date(year, month, day)
    return None


def parse_email(value: str | None) -> str | None:
    s = _text(value).lower()
    return s if _EMAIL.match(s) else None


def parse_phone(value: str | None) -> str | None:
    """Keep digits and a leading '+'; None when nothing dialable remains."""
    s = _text(value)
    if not s:
        return None
    digits = re.sub(r"\D", "", s)
    if not digits:
        return None
    return ("+" if s.startswith("+") else "") + digits


def parse_text(value: str | None) -> str | None:
    s = _text(value)
    return None if is_placeholder(s) else s
