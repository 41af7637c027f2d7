"""Pydantic v2 models for cleaned records, validation output and analytics results."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class TransactionType(str, Enum):
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    TRANSFER = "Transfer"
    PAYMENT = "Payment"
    FEE = "Fee"
    OTHER = "Other"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


SEVERITY_VALUES = frozenset({"warning", "error"})


# --- Cleaned record ---
class CleanedTransaction(BaseModel):
    """One typed transaction row. `age` and the balance fields are correctable."""

    customer_id: int
    transaction_id: str | None = None
    transaction_date: datetime
    transaction_type: TransactionType = TransactionType.OTHER
    transaction_amount: float
    account_balance: float | None = None
    account_balance_after: float | None = None
    age: int | None = None
    gender: Gender = Gender.OTHER
    account_type: str | None = None
    branch_id: str | None = None
    account_opening_date: datetime | None = None
    last_transaction_date: datetime | None = None

    # Pass-through attributes, not subject to business rules
    first_name: str | None = None
    last_name: str | None = None
    address: str | None = None
    city: str | None = None
    contact_number: str | None = None
    email: str | None = None
    loan_id: int | None = None
    loan_amount: float | None = None
    loan_type: str | None = None
    interest_rate: float | None = None
    loan_term: int | None = None
    loan_approval_date: datetime | None = None
    loan_status: str | None = None
    card_id: int | None = None
    card_type: str | None = None
    credit_limit: float | None = None
    credit_card_balance: float | None = None
    minimum_payment_due: float | None = None
    payment_due_date: datetime | None = None
    last_credit_card_payment_date: datetime | None = None
    rewards_points: int | None = None
    feedback_id: int | None = None
    feedback_date: datetime | None = None
    feedback_type: str | None = None
    resolution_status: str | None = None
    resolution_date: datetime | None = None
    anomaly: int | None = None
    # 0-based position in the raw input, set by clean_rows
    source_row: int | None = None

    @property
    def name(self) -> str | None:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None


# --- Validation ---
class ValidationError(BaseModel):
    """A business-rule violation against one record. Immutable once emitted."""

    record_index: int
    source_row: int | None = None
    field: str
    value: Any = None
    reason: str
    severity: str
    rule_id: str
    detail: str | None = None

    model_config = {"frozen": True}

    @field_validator("severity")
    @classmethod
    def severity_enum(cls, v: str) -> str:
        if v not in SEVERITY_VALUES:
            raise ValueError(f"severity must be one of {sorted(SEVERITY_VALUES)}")
        return v


class ValidationSummary(BaseModel):
    total_records: int
    valid_records: int
    invalid_records: int
    errors_by_type: dict[str, int] = {}
    errors_by_rule: dict[str, int] = {}


class ValidationResult(BaseModel):
    valid: list[CleanedTransaction]
    invalid: list[ValidationError]
    summary: ValidationSummary


# --- Corrections ---
class AgeCorrection(BaseModel):
    customer_id: int
    distinct_ages_observed: list[int]
    corrected_to: int


class DuplicateRecord(BaseModel):
    """A record removed because an earlier record carries the same identity key."""

    record_index: int
    duplicate_of: int
    key: str
    transaction: CleanedTransaction


class BalanceAdjustment(BaseModel):
    """A balance rewritten by the destructive reconciliation pass."""

    record_index: int
    source_row: int | None = None
    customer_id: int
    reported_balance_after: float | None
    reconciled_balance_after: float


class CleaningReject(BaseModel):
    row_index: int
    reason: str


class ProcessingReport(BaseModel):
    total_raw_records: int
    successfully_cleaned: int
    age_corrections: int
    duplicates_removed: int
    valid_records: int
    invalid_records: int
    errors_by_type: dict[str, int] = {}
    rows_rejected: int = 0
    reject_reasons: list[str] = []
    balances_reconciled: bool = False
    duration_seconds: float = 0.0
    correlation_id: str | None = None
    config_hash: str | None = None
    rules_version: str | None = None
    engine_version: str | None = None


# --- Analytics ---
class SignalHit(BaseModel):
    """Output of a single anomaly signal evaluation."""

    signal_id: str
    reason: str
    evidence_fields: dict[str, Any] | None = None
    weight: int


class AnomalousTransaction(BaseModel):
    transaction: CleanedTransaction
    anomaly_score: int
    anomaly_reasons: list[str]
    band: str = "low"


class MonthlyVolume(BaseModel):
    branch_id: str
    month: str
    total_amount: float = 0.0
    transaction_count: int = 0


class CustomerLTV(BaseModel):
    customer_id: int
    model: str
    total_deposits: float = 0.0
    total_withdrawals: float = 0.0
    net_value: float = 0.0
    transaction_count: int = 0
    avg_transaction_amount: float = 0.0
    account_age_months: float = 0.0
    ltv: float = 0.0


class BranchPerformance(BaseModel):
    branch_id: str
    total_volume: float
    transaction_count: int
    customer_count: int
    avg_transaction_amount: float
    growth_rate: float
    performance_score: float = Field(..., ge=0, le=100)


class CustomerSegment(BaseModel):
    segment_name: str
    customer_ids: list[int]
    member_count: int
    avg_balance: float
    avg_transaction_amount: float
    total_volume: float
    characteristics: list[str] = []


class SeasonalTrend(BaseModel):
    month: str
    total_volume: float = 0.0
    transaction_count: int = 0
    avg_amount: float = 0.0
    deposits: int = 0
    withdrawals: int = 0
    transfers: int = 0


class DashboardMetrics(BaseModel):
    total_transactions: int
    total_volume: float
    avg_transaction_amount: float
    unique_customers: int
    active_branches: int
    anomaly_count: int
    period_start: datetime | None
    period_end: datetime | None


class TransactionFilter(BaseModel):
    """Optional narrowing of a record set; unset fields do not filter."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    branch_ids: list[str] | None = None
    transaction_types: list[TransactionType] | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    customer_ids: list[int] | None = None
    account_types: list[str] | None = None


# --- Pipeline ---
class ProcessingResult(BaseModel):
    """
    Indices follow the stage that produced them: `CleaningReject.row_index` is
    the raw row, `DuplicateRecord.record_index` the position among cleaned rows,
    and `ValidationError.record_index` / `BalanceAdjustment.record_index` the
    position in the deduplicated list. `source_row` always maps back to the raw row.
    """

    valid_data: list[CleanedTransaction]
    invalid_records: list[ValidationError]
    age_corrections: list[AgeCorrection] = []
    duplicates: list[DuplicateRecord] = []
    balance_adjustments: list[BalanceAdjustment] = []
    rejects: list[CleaningReject] = []
    report: ProcessingReport


class AnalyticsReport(BaseModel):
    metrics: DashboardMetrics
    monthly_volume: list[MonthlyVolume]
    anomalies: list[AnomalousTransaction]
    customer_outliers: list[CleanedTransaction]
    customer_ltv: list[CustomerLTV]
    branch_performance: list[BranchPerformance]
    segments: list[CustomerSegment]
    seasonal_trends: list[SeasonalTrend]
