"""
Debt/Status Classifier

Every calendar day is exactly one of:
- MET:     a record exists and amount >= the record's own goal
- PARTIAL: a record exists and amount < goal
- DEBT:    no record exists for that day

The threshold is inclusive: earning exactly the goal meets it.
"""

from datetime import date
from typing import Iterable, Optional

from earnings_ledger.models.earning import DailyEarningRecord, DayStatus


def classify_day(
    day: date,
    record: Optional[DailyEarningRecord],
) -> DayStatus:
    """Classify one day given its record (or None). Pure."""
    if record is None:
        return DayStatus.DEBT
    if record.date != day:
        raise ValueError(f"Record {record.id} is dated {record.date}, not {day}")
    if record.amount >= record.goal:
        return DayStatus.MET
    return DayStatus.PARTIAL


def index_by_day(
    records: Iterable[DailyEarningRecord],
) -> dict[date, DailyEarningRecord]:
    """
    Map each calendar day to its record.

    A day should never hold more than one record, but injected or legacy
    data might. Organic records take precedence over synthetic ones;
    otherwise the first record seen wins.
    """
    by_day: dict[date, DailyEarningRecord] = {}
    for record in records:
        current = by_day.get(record.date)
        if current is None or (current.is_synthetic and not record.is_synthetic):
            by_day[record.date] = record
    return by_day


def classify_days(
    records: Iterable[DailyEarningRecord],
    days: Iterable[date],
) -> dict[date, DayStatus]:
    """Classify many days against one index of records."""
    by_day = index_by_day(records)
    return {day: classify_day(day, by_day.get(day)) for day in days}
