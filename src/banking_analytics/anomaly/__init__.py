"""Anomaly signals and detectors."""

from banking_analytics.anomaly.amount_zscore import AmountZScoreSignal
from banking_analytics.anomaly.base import AnomalyContext, BaseSignal
from banking_analytics.anomaly.customer_multiple import CustomerMultipleSignal
from banking_analytics.anomaly.negative_balance import NegativeBalanceSignal
from banking_analytics.anomaly.source_flag import SourceFlagSignal
from banking_analytics.anomaly.withdrawal_burst import WithdrawalBurstSignal

# Evaluation order is fixed; it is also the order of anomaly_reasons.
SIGNAL_CLASSES: dict[str, type[BaseSignal]] = {
    "source_flag": SourceFlagSignal,
    "amount_zscore": AmountZScoreSignal,
    "customer_multiple": CustomerMultipleSignal,
    "negative_balance": NegativeBalanceSignal,
    "withdrawal_burst": WithdrawalBurstSignal,
}


def get_all_signals(config: dict) -> list[BaseSignal]:
    """Return enabled signal instances from the `anomaly` config section."""
    cfg = config.get("signals") or {}
    signals: list[BaseSignal] = []
    for key, cls in SIGNAL_CLASSES.items():
        signal_cfg = cfg.get(key) or {}
        if signal_cfg.get("enabled", True):
            signals.append(cls(signal_cfg))
    return signals


__all__ = [
    "AnomalyContext",
    "BaseSignal",
    "get_all_signals",
    "AmountZScoreSignal",
    "CustomerMultipleSignal",
    "NegativeBalanceSignal",
    "SourceFlagSignal",
    "WithdrawalBurstSignal",
]
