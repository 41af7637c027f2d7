"""Typer CLI: discover, process, analyze."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any

import typer

from banking_analytics.cleaning import build_alias_table, resolve_columns
from banking_analytics.cleaning.aliases import missing_required
from banking_analytics.config import get_config
from banking_analytics.ingest import read_csv_headers, read_csv_rows
from banking_analytics.logging_config import setup_logging
from banking_analytics.pipeline import process_dataset, run_analytics
from banking_analytics.reporting import write_analytics_report, write_processing_report
from banking_analytics.run_context import set_correlation_id
from banking_analytics.schemas import ProcessingResult

app = typer.Typer(help="Banking transaction cleaning and analytics CLI")


def _setup(config_path: str | None) -> dict[str, Any]:
    config = get_config(config_path)
    setup_logging(config.get("app", {}).get("log_level", "INFO"))
    set_correlation_id(str(uuid.uuid4()))
    return config


def _check_csv(path: str) -> Path:
    p = Path(path)
    if not p.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1)
    if p.suffix.lower() != ".csv":
        typer.echo("File must be .csv", err=True)
        raise typer.Exit(1)
    return p


def _process(path: Path, config: dict[str, Any], encoding: str | None) -> ProcessingResult:
    enc = encoding or config.get("ingest", {}).get("csv_encoding", "utf-8")
    result = process_dataset(read_csv_rows(path, encoding=enc), config)
    r = result.report
    typer.echo(
        f"Read {r.total_raw_records} rows: cleaned {r.successfully_cleaned}, "
        f"{r.age_corrections} age corrections, {r.duplicates_removed} duplicates removed, "
        f"{r.valid_records} valid, {r.invalid_records} invalid."
    )
    return result


@app.command()
def discover(
    path: str = typer.Argument(..., help="Path to CSV file"),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    encoding: str = typer.Option("utf-8", "--encoding", "-e", help="CSV encoding"),
) -> None:
    """Show which CSV column each logical field is read from."""
    p = _check_csv(path)
    cfg = get_config(config)
    headers = read_csv_headers(p, encoding=encoding)
    if not headers:
        typer.echo("No headers found.", err=True)
        raise typer.Exit(1)
    aliases = build_alias_table(cfg.get("cleaning", {}).get("aliases"))
    resolved = resolve_columns(headers, aliases)
    typer.echo(f"Headers ({len(headers)}): {', '.join(headers)}")
    typer.echo("Column mapping (field -> source column):")
    for field, header in sorted(resolved.items()):
        typer.echo(f"  {field!r} -> {header!r}")
    missing = missing_required(resolved)
    if missing:
        typer.echo(f"Missing required fields: {', '.join(missing)}", err=True)
        raise typer.Exit(1)


@app.command()
def process(
    path: str = typer.Argument(..., help="Path to CSV file"),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    encoding: str | None = typer.Option(None, "--encoding", "-e", help="CSV encoding"),
    output_dir: str | None = typer.Option(None, "--output", "-o", help="Output directory"),
) -> None:
    """Clean, correct and validate a CSV; write the processing report."""
    p = _check_csv(path)
    cfg = _setup(config)
    result = _process(p, cfg, encoding)
    out = output_dir or cfg.get("reporting", {}).get("output_dir", "./reports")
    jp, cp = write_processing_report(result, out)
    typer.echo(f"Reports: {jp}, {cp}")
    typer.echo(f"Correlation ID: {result.report.correlation_id}")


@app.command()
def analyze(
    path: str = typer.Argument(..., help="Path to CSV file"),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    encoding: str | None = typer.Option(None, "--encoding", "-e", help="CSV encoding"),
    output_dir: str | None = typer.Option(None, "--output", "-o", help="Output directory"),
) -> None:
    """Process a CSV, then run every analytics view over the valid records."""
    p = _check_csv(path)
    cfg = _setup(config)
    result = _process(p, cfg, encoding)
    analytics = run_analytics(result.valid_data, cfg)
    out = output_dir or cfg.get("reporting", {}).get("output_dir", "./reports")
    jp, cp = write_processing_report(result, out)
    ap = write_analytics_report(analytics, out)
    typer.echo(
        f"{len(analytics.anomalies)} anomalies, {len(analytics.customer_outliers)} customer "
        f"outliers, {len(analytics.branch_performance)} branches."
    )
    typer.echo(f"Reports: {jp}, {cp}, {ap}")


if __name__ == "__main__":
    app()
