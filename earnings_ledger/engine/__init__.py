"""
Earnings Reconciliation Engine

Pure functions over an in-memory list of daily records.
Every entry point takes `today` explicitly; nothing here reads a clock
or touches storage.
"""

from earnings_ledger.engine.aggregator import (
    compute_monthly_statistics,
    days_passed,
    debt_days,
    month_days,
)
from earnings_ledger.engine.classifier import (
    classify_day,
    classify_days,
    index_by_day,
)
from earnings_ledger.engine.distributor import apply_earning_transaction
from earnings_ledger.engine.streak import compute_goal_streak

__all__ = [
    "apply_earning_transaction",
    "classify_day",
    "classify_days",
    "compute_goal_streak",
    "compute_monthly_statistics",
    "days_passed",
    "debt_days",
    "index_by_day",
    "month_days",
]
