"""
Surplus Distributor

When today's entry beats the daily goal, the excess is routed:

DEBT-FIRST POLICY (current month has missed days):
    Walk the missed days from the 1st of the month through today, oldest
    first, and pay each one min(surplus, daily_goal) as a synthetic
    debt-payment record until the surplus runs out.

NO-DEBT POLICY (nothing missed this month):
    The whole surplus goes into the savings jar.

The triggering entry is always stored with its full amount; distribution
is bookkeeping on top of it, never a reduction of it.

DESIGN DECISION: This is a pure unit of work. It takes the current state
and returns the complete next state (records + savings) so the caller can
persist both as one logical write.

KNOWN LIMITATIONS (kept deliberately, see DESIGN.md):
- Only the current month's missed days are paid. Older months' debt is
  never enumerated.
- Surplus left after every missed day is paid is dropped unless
  `leftover_to_savings` is set. The amount is reported as
  `leftover_surplus` so the caller can flag it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from earnings_ledger.engine.aggregator import (
    ZERO,
    compute_monthly_statistics,
    debt_days,
)
from earnings_ledger.models.earning import (
    DailyEarningRecord,
    EarningResult,
    RecordOrigin,
)
from earnings_ledger.validation.validator import (
    DuplicateEntryError,
    EarningValidationError,
)


def apply_earning_transaction(
    records: Iterable[DailyEarningRecord],
    savings: Decimal,
    amount: Decimal,
    notes: str,
    today: date,
    daily_goal: Decimal,
    leftover_to_savings: bool = False,
    now: Optional[datetime] = None,
) -> EarningResult:
    """
    Record today's earning and distribute any surplus.

    Args:
        records: Every existing earning record
        savings: Current savings jar balance
        amount: Amount earned today (already validated)
        notes: User notes for the entry
        today: The day being recorded
        daily_goal: The currently configured goal
        leftover_to_savings: Credit surplus left after all debt is paid to savings
        now: Timestamp for created_at/updated_at

    Returns:
        EarningResult holding the full next state

    Raises:
        EarningValidationError: amount is negative
        DuplicateEntryError: today already has a record
    """
    if amount < 0:
        raise EarningValidationError("Amount cannot be negative")

    existing = list(records)
    if any(r.date == today for r in existing):
        raise DuplicateEntryError(f"An earning for {today.isoformat()} already exists")

    now = now or datetime.utcnow()
    entry = DailyEarningRecord(
        date=today,
        amount=amount,
        goal=daily_goal,
        notes=notes,
        origin=RecordOrigin.ORGANIC,
        created_at=now,
        updated_at=now,
    )

    # Today is tracked from here on, so it can never be one of its own debt days
    updated = existing + [entry]

    debt_payments: list[DailyEarningRecord] = []
    savings_credited = ZERO
    leftover = ZERO

    surplus = amount - daily_goal
    if surplus > 0:
        stats = compute_monthly_statistics(
            updated, [], today.year, today.month, today, daily_goal,
        )

        if stats.total_debt > 0:
            remaining = surplus
            for day in debt_days(updated, today.replace(day=1), today):
                if remaining <= 0:
                    break
                payment = min(remaining, daily_goal)
                debt_payments.append(
                    DailyEarningRecord.debt_payment(day, payment, daily_goal, now)
                )
                remaining -= payment

            leftover = remaining
            if leftover > 0 and leftover_to_savings:
                savings_credited = leftover
                leftover = ZERO
        else:
            savings_credited = surplus

    updated.extend(debt_payments)
    updated.sort(key=lambda r: r.date, reverse=True)

    paid = sum((p.amount for p in debt_payments), ZERO)

    return EarningResult(
        record=entry,
        updated_records=updated,
        updated_savings=savings + savings_credited,
        did_pay_debt=bool(debt_payments),
        surplus_applied=paid + savings_credited,
        debt_payments=debt_payments,
        savings_credited=savings_credited,
        leftover_surplus=leftover,
    )
