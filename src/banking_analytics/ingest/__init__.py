"""CSV ingestion of raw transaction rows."""

from banking_analytics.ingest.csv_reader import read_csv_headers, read_csv_rows

__all__ = ["read_csv_headers", "read_csv_rows"]
