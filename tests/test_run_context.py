"""Tests for the run correlation id."""

from banking_analytics.run_context import get_correlation_id, set_correlation_id


def test_set_and_get() -> None:
    set_correlation_id("corr-123")
    assert get_correlation_id() == "corr-123"


def test_generated_when_unset_and_stable() -> None:
    set_correlation_id(None)
    cid = get_correlation_id()
    assert len(cid) == 36
    assert cid.count("-") == 4
    assert get_correlation_id() == cid
