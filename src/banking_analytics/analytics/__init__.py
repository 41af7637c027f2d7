"""Business analytics over a validated record set. All functions are pure."""

from banking_analytics.analytics.branches import branch_performance
from banking_analytics.analytics.ltv import (
    FeeMarginLTV,
    LTVModel,
    NetValueProjectionLTV,
    get_ltv_model,
)
from banking_analytics.analytics.seasonal import seasonal_trends
from banking_analytics.analytics.segments import segment_customers
from banking_analytics.analytics.summary import dashboard_metrics, filter_transactions
from banking_analytics.analytics.volume import monthly_volume_by_branch

__all__ = [
    "FeeMarginLTV",
    "LTVModel",
    "NetValueProjectionLTV",
    "branch_performance",
    "dashboard_metrics",
    "filter_transactions",
    "get_ltv_model",
    "monthly_volume_by_branch",
    "seasonal_trends",
    "segment_customers",
]
