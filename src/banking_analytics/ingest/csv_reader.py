"""Read a transactions CSV into string-keyed rows - use standard csv."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

log = logging.getLogger(__name__)


def read_csv_headers(filepath: str | Path, encoding: str = "utf-8") -> list[str]:
    """Non-empty header names in file order."""
    with open(filepath, encoding=encoding, newline="") as f:
        reader = csv.DictReader(f)
        return [h for h in (reader.fieldnames or []) if h]


def read_csv_rows(filepath: str | Path, encoding: str = "utf-8") -> list[dict[str, str | None]]:
    """
    Every data row as header -> raw string. Values are not parsed; short rows
    yield None for the missing cells. Raises FileNotFoundError for a missing file.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(str(path))
    rows: list[dict[str, str | None]] = []
    with open(path, encoding=encoding, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            # Overflow cells land under the None key.
            rows.append({k: v for k, v in row.items() if k is not None})
    log.info("read %s rows from %s", len(rows), path.name)
    return rows
