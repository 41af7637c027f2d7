"""Tests for the end-to-end processing pass and the analytics bundle."""

from datetime import datetime

from banking_analytics.config import _deep_merge, _default_config, get_config_hash
from banking_analytics.pipeline import MAX_REJECT_REASONS, process_dataset, run_analytics
from banking_analytics.run_context import set_correlation_id


def _scenario_rows(make_row) -> list[dict[str, str]]:
    return [
        make_row(
            **{
                "Transaction Date": "2023-01-01",
                "Transaction Type": "Deposit",
                "Transaction Amount": "100",
                "Account Balance After Transaction": "100",
            }
        ),
        make_row(
            **{
                "Transaction Date": "2023-01-02",
                "Transaction Type": "Withdrawal",
                "Transaction Amount": "30",
                "Account Balance After Transaction": "70",
            }
        ),
        make_row(
            **{
                "Transaction Date": "2023-01-02",
                "Transaction Type": "Withdrawal",
                "Transaction Amount": "30",
                "Account Balance After Transaction": "70",
            }
        ),
    ]


def test_end_to_end_duplicate_scenario(make_row) -> None:
    result = process_dataset(_scenario_rows(make_row))
    report = result.report
    assert report.total_raw_records == 3
    assert report.successfully_cleaned == 3
    assert report.duplicates_removed == 1
    assert report.valid_records == 2
    assert report.invalid_records == 0
    assert result.invalid_records == []
    assert [r.account_balance_after for r in result.valid_data] == [100.0, 70.0]
    assert result.duplicates[0].record_index == 2
    assert result.duplicates[0].duplicate_of == 1


def test_report_is_stamped(make_row) -> None:
    set_correlation_id("run-123")
    config = _default_config()
    result = process_dataset(_scenario_rows(make_row), config)
    report = result.report
    assert report.correlation_id == "run-123"
    assert report.config_hash == get_config_hash(config)
    assert report.rules_version
    assert report.engine_version == "0.1.0"
    assert report.duration_seconds >= 0
    assert report.balances_reconciled is False


def test_age_correction_and_rejects_are_counted(make_row) -> None:
    rows = [
        make_row(Age="30"),
        make_row(Age="30", **{"Transaction Date": "2023-01-02"}),
        make_row(Age="31", **{"Transaction Date": "2023-01-03"}),
        make_row(**{"Customer ID": "N/A"}),
    ]
    result = process_dataset(rows)
    assert result.report.age_corrections == 1
    assert result.report.rows_rejected == 1
    assert result.report.reject_reasons == ["missing_customer_id"]
    assert {r.age for r in result.valid_data} == {30}


def test_validation_errors_reach_report(make_row) -> None:
    rows = [make_row(Age="12"), make_row(**{"Customer ID": "2", "Transaction Amount": "0"})]
    result = process_dataset(rows)
    assert result.report.valid_records == 0
    assert result.report.invalid_records == 2
    assert result.report.errors_by_type == {
        "Deposit amount must be positive": 1,
        "Age is outside valid range (18-120)": 1,
    }


def test_source_row_traces_back_to_raw_input(make_row) -> None:
    rows = [
        make_row(**{"Customer ID": ""}),
        make_row(Age="5"),
        make_row(**{"Customer ID": "2"}),
        make_row(**{"Customer ID": "2"}),
    ]
    result = process_dataset(rows)
    assert result.rejects[0].row_index == 0
    assert (result.duplicates[0].record_index, result.duplicates[0].transaction.source_row) == (2, 3)
    error = result.invalid_records[0]
    assert (error.record_index, error.source_row) == (0, 1)
    assert [r.source_row for r in result.valid_data] == [2]


def test_balance_mismatch_mode_and_reconcile_mode(make_row) -> None:
    rows = [
        make_row(**{"Transaction Date": "2023-01-01", "Account Balance After Transaction": "100"}),
        make_row(
            **{
                "Transaction Date": "2023-01-02",
                "Transaction Amount": "50",
                "Account Balance After Transaction": "999",
            }
        ),
    ]
    checked = process_dataset(rows)
    assert [e.reason for e in checked.invalid_records] == ["Account balance doesn't reconcile"]
    assert checked.report.valid_records == 2
    assert checked.balance_adjustments == []

    config = _deep_merge(_default_config(), {"corrections": {"reconcile_balances": True}})
    reconciled = process_dataset(rows, config)
    assert reconciled.invalid_records == []
    assert reconciled.report.balances_reconciled is True
    assert [r.account_balance_after for r in reconciled.valid_data] == [100.0, 150.0]
    assert reconciled.balance_adjustments[0].reported_balance_after == 999.0


def test_config_drives_cleaning(make_row) -> None:
    rows = [make_row(**{"Transaction Type": "Refund"}), make_row(Location="L1")]
    config = _deep_merge(
        _default_config(),
        {"cleaning": {"type_policy": "strict", "aliases": {"branch_id": ["Location"]}}},
    )
    result = process_dataset(rows, config)
    assert result.report.reject_reasons == ["unrecognized_transaction_type"]
    assert result.valid_data[0].branch_id == "L1"


def test_all_rows_rejected_is_logged(make_row, caplog) -> None:
    with caplog.at_level("WARNING"):
        result = process_dataset([make_row(**{"Transaction Amount": "oops"})])
    assert result.valid_data == []
    assert "All rows rejected" in caplog.text


def test_reject_reasons_are_capped(make_row) -> None:
    rows = [make_row(**{"Customer ID": ""})] * (MAX_REJECT_REASONS + 10)
    result = process_dataset(rows)
    assert result.report.rows_rejected == MAX_REJECT_REASONS + 10
    assert len(result.report.reject_reasons) == MAX_REJECT_REASONS


def test_empty_input() -> None:
    result = process_dataset([])
    assert result.report.total_raw_records == 0
    assert result.valid_data == []


def test_run_analytics_bundle(make_row) -> None:
    result = process_dataset(_scenario_rows(make_row))
    analytics = run_analytics(result.valid_data, now=datetime(2023, 6, 1))
    assert analytics.metrics.total_transactions == 2
    assert analytics.metrics.total_volume == 130.0
    assert [(v.branch_id, v.month) for v in analytics.monthly_volume] == [("B1", "2023-01")]
    assert analytics.customer_ltv[0].model == "fee_margin"
    assert [b.branch_id for b in analytics.branch_performance] == ["B1"]
    assert [s.segment_name for s in analytics.segments] == ["High-Value", "Active"]
    assert [t.month for t in analytics.seasonal_trends] == ["2023-01"]
    assert analytics.anomalies == []
    assert analytics.customer_outliers == []


def test_run_analytics_respects_ltv_model(make_row) -> None:
    result = process_dataset(_scenario_rows(make_row))
    config = _deep_merge(_default_config(), {"ltv": {"model": "net_value_projection"}})
    analytics = run_analytics(result.valid_data, config, now=datetime(2023, 6, 1))
    assert analytics.customer_ltv[0].model == "net_value_projection"
