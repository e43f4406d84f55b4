"""
Goal Streak

Counts consecutive days, ending today, whose goal was met. The first day
walking backward that is missing or only partial ends the streak and is
not counted. Recomputed from scratch on every call.
"""

from datetime import date, timedelta
from typing import Iterable

from earnings_ledger.engine.classifier import classify_day, index_by_day
from earnings_ledger.models.earning import DailyEarningRecord, DayStatus


def compute_goal_streak(
    records: Iterable[DailyEarningRecord],
    today: date,
) -> int:
    """
    Length of the goal streak as of `today`.

    Returns 0 when today has no record or today's amount is below its goal.
    """
    by_day = index_by_day(records)
    streak = 0
    day = today
    while classify_day(day, by_day.get(day)) == DayStatus.MET:
        streak += 1
        day -= timedelta(days=1)
    return streak
