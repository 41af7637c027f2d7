"""Row cleaning: alias resolution and typed record construction."""

from banking_analytics.cleaning.aliases import ALIASES, build_alias_table, resolve_columns
from banking_analytics.cleaning.cleaner import clean_record, clean_record_with_reason, clean_rows

__all__ = [
    "ALIASES",
    "build_alias_table",
    "clean_record",
    "clean_record_with_reason",
    "clean_rows",
    "resolve_columns",
]
