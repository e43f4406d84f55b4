"""
Two-Stage Entry Validation

STAGE 1 - SCHEMA VALIDATION:
- Is the amount a finite number at all?

STAGE 2 - SEMANTIC VALIDATION:
- Negative amounts
- A second entry for a day that already has one
- Absurd amounts (warning only)

Validation runs before any state is touched. A rejected entry leaves the
ledger exactly as it was, so the caller can simply re-prompt.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the input.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from earnings_ledger.config import LedgerSettings, get_settings
from earnings_ledger.models.earning import (
    DailyEarningRecord,
    ExpenseCategory,
    ValidationIssue,
    ValidationResult,
)


MAX_NOTES_LENGTH = 500


class EarningValidationError(ValueError):
    """An entry was rejected before any state changed."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class DuplicateEntryError(EarningValidationError):
    """The day already has an entry; entries are never overwritten."""
    pass


def parse_amount(value: Any, currency_symbol: str = "") -> Decimal:
    """
    Parse user input into a Decimal amount.

    Accepts numbers and numeric strings. Thousands separators, spaces and
    the currency symbol are ignored ("₦28,000" -> 28000).

    Raises:
        EarningValidationError: value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise EarningValidationError(f"Amount is not a number: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        if currency_symbol:
            text = text.replace(currency_symbol, "")
        text = text.replace(",", "").replace(" ", "")
        raw: Any = text
    elif isinstance(value, (int, float, Decimal)):
        raw = str(value)
    else:
        raise EarningValidationError(f"Amount is not a number: {value!r}")

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise EarningValidationError(f"Amount is not a number: {value!r}")

    if not amount.is_finite():
        raise EarningValidationError(f"Amount must be a finite number: {value!r}")
    return amount


def to_category(value: Any) -> ExpenseCategory:
    """Accept a category member or its name in any case ('Fuel', 'fuel')."""
    if isinstance(value, ExpenseCategory):
        return value
    return ExpenseCategory(str(value).strip().lower())


class EarningValidator:
    """
    Validates earning and expense entries.

    Stage 1: Schema validation (parsing)
    Stage 2: Semantic validation (needs the existing records for duplicates)
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger

    def _money(self, amount: Decimal) -> str:
        return f"{self._settings.currency_symbol}{amount:,.2f}"

    def _validate_schema(
        self,
        value: Any,
        field: str,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        """
        Stage 1: Parse the amount.

        Returns: (parsed_amount_or_None, list_of_issues)
        """
        try:
            return parse_amount(value, self._settings.currency_symbol), []
        except EarningValidationError as e:
            return None, [ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=str(e),
                severity="error",
                suggested_fix="Enter the amount as a plain number, e.g. 28000",
            )]

    @staticmethod
    def _validate_notes(notes: str) -> list[ValidationIssue]:
        if notes and len(notes.strip()) > MAX_NOTES_LENGTH:
            return [ValidationIssue(
                field="notes",
                issue_type="too_long",
                message=f"Notes are limited to {MAX_NOTES_LENGTH} characters",
                severity="error",
                suggested_fix="Shorten the notes",
            )]
        return []

    def validate_earning(
        self,
        value: Any,
        records: Iterable[DailyEarningRecord],
        today: date,
        notes: str = "",
    ) -> ValidationResult:
        """
        Run full two-stage validation for today's earning.

        Args:
            value: Raw amount as entered
            records: Existing earning records (for the one-per-day rule)
            today: The day the entry is for
            notes: Optional free-text notes

        Returns:
            ValidationResult with all issues found
        """
        amount, issues = self._validate_schema(value, "amount")
        issues.extend(self._validate_notes(notes))

        # Only run stage 2 if stage 1 passes
        if amount is not None:
            if amount < 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="negative",
                    message="Amount cannot be negative",
                    severity="error",
                    suggested_fix="Enter 0 for a day with no earnings",
                ))
            elif amount > self._settings.max_daily_amount:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message=f"Amount ({self._money(amount)}) seems unusually high",
                    severity="warning",
                    suggested_fix="Please verify this amount is correct",
                ))

            if any(r.date == today for r in records):
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="duplicate",
                    message=f"An earning for {today.isoformat()} has already been recorded",
                    severity="error",
                    suggested_fix="Delete the existing entry first if it is wrong",
                ))

        return self._build_result(amount, issues)

    def validate_expense(
        self,
        value: Any,
        category: Any,
        notes: str = "",
    ) -> ValidationResult:
        """Validate an expense: positive amount and a known category."""
        amount, issues = self._validate_schema(value, "amount")
        issues.extend(self._validate_notes(notes))

        if amount is not None and amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Expense amount must be greater than zero",
                severity="error",
            ))

        try:
            to_category(category)
        except ValueError:
            allowed = ", ".join(c.value for c in ExpenseCategory)
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Unknown expense category: {category!r}",
                severity="error",
                suggested_fix=f"Use one of: {allowed}",
            ))

        return self._build_result(amount, issues)

    def ensure_valid_earning(
        self,
        value: Any,
        records: Iterable[DailyEarningRecord],
        today: date,
        notes: str = "",
    ) -> tuple[Decimal, ValidationResult]:
        """
        Validate and raise on the first blocking problem.

        Returns:
            (amount, result) - result may still carry warnings

        Raises:
            DuplicateEntryError: today already has an entry
            EarningValidationError: any other error-level issue
        """
        result = self.validate_earning(value, records, today, notes)
        self._raise_for_errors(result)
        return result.amount, result

    def ensure_valid_expense(
        self,
        value: Any,
        category: Any,
        notes: str = "",
    ) -> tuple[Decimal, ExpenseCategory]:
        result = self.validate_expense(value, category, notes)
        self._raise_for_errors(result)
        return result.amount, to_category(category)

    @staticmethod
    def _build_result(
        amount: Optional[Decimal],
        issues: list[ValidationIssue],
    ) -> ValidationResult:
        warnings = [i.message for i in issues if i.severity == "warning"]
        return ValidationResult(
            amount=amount,
            is_valid=not any(i.severity == "error" for i in issues),
            issues=issues,
            warnings=warnings,
        )

    @staticmethod
    def _raise_for_errors(result: ValidationResult) -> None:
        errors = [i for i in result.issues if i.severity == "error"]
        if not errors:
            return
        message = "; ".join(i.message for i in errors)
        if any(i.issue_type == "duplicate" for i in errors):
            raise DuplicateEntryError(message, result.issues)
        raise EarningValidationError(message, result.issues)

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Generate a short summary of validation results for the UI."""
        if result.is_valid and not result.warnings:
            return "✅ Entry looks good."

        lines = []

        if result.has_errors:
            lines.append("❌ This entry can't be saved:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
