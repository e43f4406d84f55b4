"""Validation package."""

from earnings_ledger.validation.validator import (
    DuplicateEntryError,
    EarningValidationError,
    EarningValidator,
    parse_amount,
)

__all__ = [
    "DuplicateEntryError",
    "EarningValidationError",
    "EarningValidator",
    "parse_amount",
]
