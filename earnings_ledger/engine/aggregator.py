"""
Monthly Statistics Aggregator

DESIGN DECISION: Statistics are derived, never stored.
They are recomputed from the full in-memory record list on every query,
so there is nothing to invalidate.

Two goal figures coexist on purpose:
- Each record's own `goal` decides whether that day was MET or PARTIAL.
- The aggregate totals (total_goal, total_debt) use the goal configured now.

A day that has not happened yet cannot be missed: in the current month
only days 1..today count, while past and future months count in full.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from earnings_ledger.engine.classifier import classify_day, index_by_day
from earnings_ledger.models.earning import (
    DailyEarningRecord,
    DayStatus,
    DayView,
    Expense,
    MonthlyStatistics,
)


ZERO = Decimal("0")


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_current_month(year: int, month: int, today: date) -> bool:
    return today.year == year and today.month == month


def days_passed(year: int, month: int, today: date) -> int:
    """Days of the month that count towards the goal as of `today`."""
    if is_current_month(year, month, today):
        return today.day
    return days_in_month(year, month)


def in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def iter_days(start: date, end: date):
    """Every calendar day from start through end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def debt_days(
    records: Iterable[DailyEarningRecord],
    start: date,
    end: date,
) -> list[date]:
    """Days in [start, end] without any record, oldest first."""
    by_day = index_by_day(records)
    return [
        day for day in iter_days(start, end)
        if classify_day(day, by_day.get(day)) == DayStatus.DEBT
    ]


def compute_monthly_statistics(
    records: Iterable[DailyEarningRecord],
    expenses: Iterable[Expense],
    year: int,
    month: int,
    today: date,
    daily_goal: Decimal,
    savings: Decimal = ZERO,
) -> MonthlyStatistics:
    """
    Compute statistics for one calendar month.

    Args:
        records: Every earning record (any month)
        expenses: Every expense (any month)
        year, month: The target month
        today: The current date, injected rather than read from a clock
        daily_goal: The currently configured goal
        savings: Current savings jar balance, reported alongside

    Returns:
        MonthlyStatistics for the target month
    """
    records = list(records)
    month_records = [r for r in records if in_month(r.date, year, month)]
    month_expenses = [e for e in expenses if in_month(e.date, year, month)]

    passed = days_passed(year, month, today)
    tracked = len(month_records)

    # Counting the missing days directly keeps this non-negative even if
    # records were injected on days that have not happened yet.
    if passed > 0:
        missed = len(debt_days(
            month_records,
            date(year, month, 1),
            date(year, month, passed),
        ))
    else:
        missed = 0

    amounts = [r.amount for r in month_records]
    total_earned = sum(amounts, ZERO)
    total_expenses = sum((e.amount for e in month_expenses), ZERO)

    return MonthlyStatistics(
        year=year,
        month=month,
        days_passed=passed,
        days_tracked=tracked,
        days_missed=missed,
        total_earned=total_earned,
        total_goal=daily_goal * passed,
        total_debt=daily_goal * missed,
        total_expenses=total_expenses,
        net_profit=total_earned - total_expenses,
        total_savings=savings,
        average_daily=total_earned / tracked if tracked else ZERO,
        best_day=max(amounts) if amounts else ZERO,
        worst_day=min(amounts) if amounts else ZERO,
    )


def month_days(
    records: Iterable[DailyEarningRecord],
    year: int,
    month: int,
    today: date,
    daily_goal: Decimal,
) -> list[DayView]:
    """Per-day view of days 1..days_passed, newest first."""
    by_day = index_by_day(records)
    views = []
    for day_number in range(1, days_passed(year, month, today) + 1):
        day = date(year, month, day_number)
        record = by_day.get(day)
        views.append(DayView(
            date=day,
            record=record,
            status=classify_day(day, record),
            difference=(record.amount - record.goal) if record else -daily_goal,
        ))
    views.reverse()
    return views
