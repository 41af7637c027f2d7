"""Unit tests for scoring."""

from banking_analytics.schemas import SignalHit
from banking_analytics.scoring import score_band, total_score


def test_score_band() -> None:
    assert score_band(20) == "low"
    assert score_band(50) == "medium"
    assert score_band(80) == "high"
    assert score_band(33, 33, 66) == "medium"
    assert score_band(32.9, 33, 66) == "low"
    assert score_band(66) == "high"


def test_total_score_is_additive() -> None:
    assert total_score([]) == 0
    hits = [
        SignalHit(signal_id="SourceFlag", reason="x", weight=50),
        SignalHit(signal_id="AmountZScore", reason="y", weight=30),
    ]
    assert total_score(hits) == 80
