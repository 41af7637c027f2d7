"""Structured logging setup - customer PII never reaches the log stream."""

from __future__ import annotations

import logging
import re
import sys

# Raw rows carry names and contact details; log only numeric ids.
PII_REDACT_KEYS = frozenset(
    {
        "first_name",
        "last_name",
        "name",
        "address",
        "city",
        "email",
        "contact_number",
        "phone",
    }
)
PII_KEY_PATTERN = re.compile(
    r"(\b" + "|".join(re.escape(k) for k in sorted(PII_REDACT_KEYS, key=len, reverse=True)) + r")"
    r"[\s=:]+[^\s,\)\]]+",
    re.IGNORECASE,
)
EMAIL_PATTERN = re.compile(r"[^\s@,;]+@[^\s@,;]+\.[^\s@,;]+")


def _redact_message(msg: str) -> str:
    """Replace PII key=value / key: value pairs and bare emails with [REDACTED]."""
    if not isinstance(msg, str):
        msg = str(msg)
    msg = PII_KEY_PATTERN.sub(r"\1=[REDACTED]", msg)
    return EMAIL_PATTERN.sub("[REDACTED]", msg)


class PIIRedactionFilter(logging.Filter):
    """Filter that redacts PII from log records (message and args)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _redact_message(record.msg)
        if getattr(record, "args", None) and isinstance(record.args, tuple | dict):
            if isinstance(record.args, tuple):
                record.args = tuple(
                    a if isinstance(a, int | float) else _redact_message(str(a))
                    for a in record.args
                )
            else:
                record.args = {
                    k: "[REDACTED]" if k.lower() in PII_REDACT_KEYS else v
                    for k, v in record.args.items()
                }
        return True


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root logger: stdout, PII redaction filter."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
        stream=sys.stdout,
        force=True,
    )
    for name in ("", "banking_analytics"):
        log = logging.getLogger(name)
        log.addFilter(PIIRedactionFilter())


def get_logger(name: str) -> logging.Logger:
    """Return a logger for module `name` (PII redaction applied at root)."""
    return logging.getLogger(name)
