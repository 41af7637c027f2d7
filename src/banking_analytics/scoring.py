"""Anomaly scoring: additive signal weights with low/medium/high bands."""

from __future__ import annotations

from banking_analytics.schemas import SignalHit


def total_score(hits: list[SignalHit]) -> int:
    """Sum of the weights of every triggered signal."""
    return sum(h.weight for h in hits)


def score_band(score: float, low: float = 33, medium: float = 66) -> str:
    """Return low / medium / high band."""
    if score < low:
        return "low"
    if score < medium:
        return "medium"
    return "high"
