"""End-to-end pass: raw rows -> cleaned -> corrected -> validated -> analytics."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from banking_analytics import ENGINE_VERSION, RULES_VERSION
from banking_analytics.analytics import (
    branch_performance,
    dashboard_metrics,
    get_ltv_model,
    monthly_volume_by_branch,
    seasonal_trends,
    segment_customers,
)
from banking_analytics.analytics.volume import flatten_monthly_volume
from banking_analytics.anomaly.detector import detect_anomalies
from banking_analytics.anomaly.outliers import detect_customer_outliers
from banking_analytics.cleaning import build_alias_table, clean_rows
from banking_analytics.cleaning.cleaner import RawRow
from banking_analytics.config import _default_config, get_config_hash
from banking_analytics.corrections import correct_ages, reconcile_balances, remove_duplicates
from banking_analytics.ledger import DEFAULT_TOLERANCE
from banking_analytics.run_context import get_correlation_id
from banking_analytics.schemas import (
    AnalyticsReport,
    CleanedTransaction,
    ProcessingReport,
    ProcessingResult,
)
from banking_analytics.validation import validate

log = logging.getLogger(__name__)
MAX_REJECT_REASONS = 500  # cap to keep the report small


def process_dataset(
    rows: Iterable[RawRow], config: dict[str, Any] | None = None
) -> ProcessingResult:
    """
    Clean every row, correct ages, drop duplicates, then validate. When
    `corrections.reconcile_balances` is set, balances are rewritten before
    validation and the validator's balance check is skipped.
    """
    config = config or _default_config()
    start = time.perf_counter()
    cleaning_cfg = config.get("cleaning") or {}
    validation_cfg = config.get("validation") or {}
    reconcile = bool((config.get("corrections") or {}).get("reconcile_balances", False))

    rows = list(rows)
    aliases = build_alias_table(cleaning_cfg.get("aliases"))
    cleaned, rejects = clean_rows(
        rows,
        aliases,
        type_policy=cleaning_cfg.get("type_policy", "lenient"),
        day_first=bool(cleaning_cfg.get("day_first", False)),
    )
    log.info("cleaned %s records (%s failed)", len(cleaned), len(rejects))
    if rows and not cleaned:
        log.warning(
            "All rows rejected. First reject reasons: %s", [r.reason for r in rejects[:5]]
        )

    corrected, age_corrections = correct_ages(cleaned)
    deduplicated, duplicates = remove_duplicates(corrected)
    adjustments = []
    if reconcile:
        tolerance = float(validation_cfg.get("balance_tolerance", DEFAULT_TOLERANCE))
        deduplicated, adjustments = reconcile_balances(deduplicated, tolerance)

    result = validate(deduplicated, validation_cfg, check_balances=not reconcile)

    report = ProcessingReport(
        total_raw_records=len(rows),
        successfully_cleaned=len(cleaned),
        age_corrections=len(age_corrections),
        duplicates_removed=len(duplicates),
        valid_records=result.summary.valid_records,
        invalid_records=result.summary.invalid_records,
        errors_by_type=result.summary.errors_by_type,
        rows_rejected=len(rejects),
        reject_reasons=[r.reason for r in rejects[:MAX_REJECT_REASONS]],
        balances_reconciled=reconcile,
        duration_seconds=round(time.perf_counter() - start, 3),
        correlation_id=get_correlation_id(),
        config_hash=get_config_hash(config),
        rules_version=RULES_VERSION,
        engine_version=ENGINE_VERSION,
    )
    return ProcessingResult(
        valid_data=result.valid,
        invalid_records=result.invalid,
        age_corrections=age_corrections,
        duplicates=duplicates,
        balance_adjustments=adjustments,
        rejects=rejects,
        report=report,
    )


def run_analytics(
    records: list[CleanedTransaction],
    config: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> AnalyticsReport:
    """Every analytics view over a validated record set. `now` pins time-relative figures."""
    config = config or _default_config()
    anomaly_cfg = config.get("anomaly") or {}
    segments_cfg = config.get("segments") or {}
    branches_cfg = config.get("branches") or {}
    ltv_model = get_ltv_model(config.get("ltv"), now=now)

    return AnalyticsReport(
        metrics=dashboard_metrics(records),
        monthly_volume=flatten_monthly_volume(monthly_volume_by_branch(records)),
        anomalies=detect_anomalies(records, anomaly_cfg),
        customer_outliers=detect_customer_outliers(
            records, float(anomaly_cfg.get("customer_z_threshold", 3.0))
        ),
        customer_ltv=ltv_model.calculate_all(records),
        branch_performance=branch_performance(
            records, window_days=int(branches_cfg.get("window_days", 90))
        ),
        segments=segment_customers(
            records,
            high_value_share=float(segments_cfg.get("high_value_share", 0.2)),
            active_share=float(segments_cfg.get("active_share", 0.3)),
        ),
        seasonal_trends=seasonal_trends(records),
    )
