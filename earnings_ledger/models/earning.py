"""
Core Data Models for Daily Earnings Ledger

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce non-negative amounts and positive goals at runtime
2. Parse whatever the key-value store hands back (ISO strings, plain numbers)
3. Serialize back to plain JSON: ISO-8601 dates, numbers for amounts
4. Keep organic and synthetic records distinguishable without reading notes

DESIGN DECISION: Money is Decimal everywhere inside the engine.
Surplus conservation must hold exactly, which floats cannot promise.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# Legacy records carry no origin field; these mark the auto-generated ones
DEBT_PAYMENT_NOTE = "Auto-paid from surplus"
DEBT_PAYMENT_ID_PREFIX = "debt_payment_"

# Field annotations use this alias because models have a field named `date`
CalendarDay = date


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class RecordOrigin(str, Enum):
    """
    How a daily record came to exist.

    DESIGN DECISION: A first-class tag instead of sniffing the notes field,
    so "was this auto-generated?" is decidable without parsing text.
    """
    ORGANIC = "organic"            # Entered by the user
    DEBT_PAYMENT = "debt_payment"  # Synthesized from surplus


class DayStatus(str, Enum):
    """Goal status of a single calendar day."""
    MET = "met"
    PARTIAL = "partial"
    DEBT = "debt"


class ExpenseCategory(str, Enum):
    """Supported expense categories."""
    FUEL = "fuel"
    DATA = "data"
    MAINTENANCE = "maintenance"
    FOOD = "food"
    TRANSPORT = "transport"
    OTHERS = "others"


# =============================================================================
# SERIALIZATION HELPERS
# =============================================================================

def decimal_to_number(value: Decimal) -> Union[int, float]:
    """Plain JSON number for a Decimal: int when integral, float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def to_calendar_day(value: Any) -> Any:
    """
    Normalize a stored date to a calendar day.

    Stored values may be full ISO-8601 datetimes (a local midnight
    serialized in UTC, e.g. "2024-03-03T23:00:00.000Z"). Aware values are
    converted back to local time before truncation so the local day survives
    the round trip. Anything else is left for Pydantic to parse.

    Raises:
        ValueError: the value cannot be shifted into local time without
            leaving the supported date range
    """
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            try:
                value = value.astimezone()
            except OverflowError:
                raise ValueError(f"Date is out of range: {value.isoformat()}")
        return value.date()
    return value


# =============================================================================
# STORED RECORDS
# =============================================================================

class _StoredEntry(BaseModel):
    """Fields and codecs shared by everything persisted as a list."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Opaque unique identifier"
    )
    date: CalendarDay = Field(
        ...,
        description="Calendar day (no time-of-day)"
    )
    notes: str = Field(
        default="",
        max_length=500,
        description="Free-text annotation"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Older ids were millisecond timestamps stored as numbers."""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return to_calendar_day(v)

    @field_validator('notes', mode='before')
    @classmethod
    def default_notes(cls, v: Any) -> Any:
        return "" if v is None else v

    def to_storage_dict(self) -> dict:
        """
        Convert to a plain JSON-compatible dict for the key-value store.

        Dates and timestamps become ISO-8601 strings, Decimals become numbers.
        """
        data = self.model_dump(mode="json")
        for name, value in self:
            if isinstance(value, Decimal):
                data[name] = decimal_to_number(value)
        return data


class DailyEarningRecord(_StoredEntry):
    """
    One day's earning.

    The goal is captured per record so changing the configured goal
    later does not rewrite how past days are classified.
    """

    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount earned that day"
    )
    goal: Decimal = Field(
        ...,
        gt=0,
        description="Daily goal in effect when the record was created"
    )
    origin: RecordOrigin = Field(
        default=RecordOrigin.ORGANIC,
        description="Whether the user entered this or surplus paid it"
    )

    @model_validator(mode='before')
    @classmethod
    def infer_origin(cls, data: Any) -> Any:
        """Records written before `origin` existed are tagged from their id/notes."""
        if isinstance(data, dict) and not data.get("origin"):
            record_id = str(data.get("id", ""))
            notes = str(data.get("notes") or "").strip()
            synthetic = (
                record_id.startswith(DEBT_PAYMENT_ID_PREFIX)
                or notes == DEBT_PAYMENT_NOTE
            )
            data = {
                **data,
                "origin": (
                    RecordOrigin.DEBT_PAYMENT if synthetic
                    else RecordOrigin.ORGANIC
                ),
            }
        return data

    @property
    def is_synthetic(self) -> bool:
        return self.origin == RecordOrigin.DEBT_PAYMENT

    @property
    def goal_met(self) -> bool:
        return self.amount >= self.goal

    @classmethod
    def debt_payment(
        cls,
        day: CalendarDay,
        amount: Decimal,
        goal: Decimal,
        now: Optional[datetime] = None,
    ) -> "DailyEarningRecord":
        """Build a synthetic record paying down a missed day."""
        now = now or datetime.utcnow()
        return cls(
            id=f"{DEBT_PAYMENT_ID_PREFIX}{uuid4().hex}",
            date=day,
            amount=amount,
            goal=goal,
            notes=DEBT_PAYMENT_NOTE,
            origin=RecordOrigin.DEBT_PAYMENT,
            created_at=now,
            updated_at=now,
        )


class Expense(_StoredEntry):
    """A simple additive expense. Only its amount feeds the statistics."""

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.OTHERS,
        description="Expense category"
    )

    @field_validator('category', mode='before')
    @classmethod
    def lowercase_category(cls, v: Any) -> Any:
        """Older entries stored display names such as 'Fuel'."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


# =============================================================================
# DERIVED VIEWS (never persisted)
# =============================================================================

class MonthlyStatistics(BaseModel):
    """
    Statistics for one calendar month.

    Computed fresh from the full record list on every query.
    """

    year: int
    month: int = Field(ge=1, le=12)

    days_passed: int = Field(ge=0)
    days_tracked: int = Field(ge=0)
    days_missed: int = Field(ge=0)

    total_earned: Decimal = Decimal("0")
    total_goal: Decimal = Decimal("0")
    total_debt: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    total_savings: Decimal = Decimal("0")

    average_daily: Decimal = Decimal("0")
    best_day: Decimal = Decimal("0")
    worst_day: Decimal = Decimal("0")

    @property
    def progress(self) -> float:
        """Share of the month's goal earned so far (0 when nothing is due)."""
        if self.total_goal <= 0:
            return 0.0
        return float(self.total_earned / self.total_goal)


class DayView(BaseModel):
    """One row of the per-day list: a day, its record if any, and its status."""

    date: CalendarDay
    record: Optional[DailyEarningRecord] = None
    status: DayStatus
    difference: Decimal = Field(
        ...,
        description="amount - goal for a record, -daily_goal for a debt day"
    )


class EarningResult(BaseModel):
    """
    Full next state produced by recording one earning.

    The caller persists updated_records and updated_savings together.
    """

    record: DailyEarningRecord = Field(
        ...,
        description="The organic entry that was recorded"
    )
    updated_records: list[DailyEarningRecord] = Field(
        default_factory=list,
        description="Every record after the transaction, newest first"
    )
    updated_savings: Decimal = Field(ge=0)

    did_pay_debt: bool = False
    surplus_applied: Decimal = Field(
        default=Decimal("0"),
        description="Surplus that went to debt days or savings"
    )
    debt_payments: list[DailyEarningRecord] = Field(default_factory=list)
    savings_credited: Decimal = Decimal("0")
    leftover_surplus: Decimal = Field(
        default=Decimal("0"),
        description="Surplus left after every debt day was paid (dropped unless routed to savings)"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_format', 'negative', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating an entry.

    Stage 1: Schema validation (is it a number at all?)
    Stage 2: Semantic validation (negative, duplicate day, absurd value)
    """

    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Parsed amount when stage 1 succeeded"
    )
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
