"""Run context: correlation id that ties a processing report to one invocation."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("run_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation id for the current context (e.g. one CLI invocation)."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str:
    """Return current correlation id, generating and pinning one if not set."""
    cid = _correlation_id.get()
    if cid is None:
        cid = str(uuid.uuid4())
        _correlation_id.set(cid)
    return cid
