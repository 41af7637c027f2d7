"""Processing and analytics reports (JSON + CSV)."""

from __future__ import annotations

import csv
import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from banking_analytics.schemas import AnalyticsReport, ProcessingResult

log = logging.getLogger(__name__)

ERROR_FIELDNAMES = [
    "record_index",
    "source_row",
    "rule_id",
    "field",
    "value",
    "severity",
    "reason",
    "detail",
]


def _timestamped(output_dir: str | Path, prefix: str, suffix: str) -> Path:
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    ts_suffix = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    return path / f"{prefix}_{ts_suffix}.{suffix}"


def write_processing_report(
    result: ProcessingResult, output_dir: str | Path, output_prefix: str = "processing"
) -> tuple[str, str]:
    """
    Write the processing summary, corrections and rejects as JSON, and every
    validation error as one CSV row. Cleaned records are not written.
    Returns (path_json, path_csv).
    """
    json_path = _timestamped(output_dir, output_prefix, "json")
    csv_path = json_path.with_suffix(".csv")
    payload = {
        "generated_at": datetime.now(UTC).isoformat(),
        "report": result.report.model_dump(mode="json"),
        "age_corrections": [c.model_dump(mode="json") for c in result.age_corrections],
        "duplicates": [
            {
                **d.model_dump(mode="json", include={"record_index", "duplicate_of", "key"}),
                "source_row": d.transaction.source_row,
            }
            for d in result.duplicates
        ],
        "balance_adjustments": [a.model_dump(mode="json") for a in result.balance_adjustments],
        "rejects": [r.model_dump(mode="json") for r in result.rejects],
    }
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=ERROR_FIELDNAMES, extrasaction="ignore")
        w.writeheader()
        for err in result.invalid_records:
            w.writerow(err.model_dump(mode="json"))
    log.info("processing report written: %s", json_path)
    return str(json_path), str(csv_path)


def write_analytics_report(
    report: AnalyticsReport, output_dir: str | Path, output_prefix: str = "analytics"
) -> str:
    """Write every analytics view as one JSON document. Returns the path."""
    json_path = _timestamped(output_dir, output_prefix, "json")
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(
            {"generated_at": datetime.now(UTC).isoformat(), **report.model_dump(mode="json")},
            f,
            indent=2,
        )
    log.info("analytics report written: %s", json_path)
    return str(json_path)
