"""Tests for the goal streak."""

from datetime import date, timedelta

from earnings_ledger.engine.streak import compute_goal_streak
from earnings_ledger.models.earning import RecordOrigin

from conftest import make_record


TODAY = date(2024, 3, 10)


def met_days(count: int, end: date = TODAY):
    return [make_record(end - timedelta(days=i), 28000) for i in range(count)]


class TestGoalStreak:
    """Tests for compute_goal_streak."""

    def test_no_records(self):
        """Test an empty ledger has no streak."""
        assert compute_goal_streak([], TODAY) == 0

    def test_today_missing_breaks_streak(self):
        """Test the streak is 0 when today has no record."""
        records = met_days(5, end=TODAY - timedelta(days=1))
        assert compute_goal_streak(records, TODAY) == 0

    def test_today_partial_breaks_streak(self):
        """Test the streak is 0 when today's amount is below goal."""
        records = met_days(5, end=TODAY - timedelta(days=1))
        records.append(make_record(TODAY, 27999))
        assert compute_goal_streak(records, TODAY) == 0

    def test_counts_until_first_partial(self):
        """Test counting stops at the first partial day."""
        records = met_days(3)
        records.append(make_record(TODAY - timedelta(days=3), 100))
        records.extend(met_days(4, end=TODAY - timedelta(days=4)))
        assert compute_goal_streak(records, TODAY) == 3

    def test_counts_until_first_gap(self):
        """Test counting stops at the first day without a record."""
        records = met_days(2) + met_days(5, end=TODAY - timedelta(days=3))
        assert compute_goal_streak(records, TODAY) == 2

    def test_streak_crosses_month_boundary(self):
        """Test the walk back is not limited to the current month."""
        records = met_days(15)
        assert compute_goal_streak(records, TODAY) == 15

    def test_synthetic_full_payment_counts(self):
        """Test a debt day paid in full counts as met."""
        records = [
            make_record(TODAY, 70000),
            make_record(TODAY - timedelta(days=1), 28000, origin=RecordOrigin.DEBT_PAYMENT),
        ]
        assert compute_goal_streak(records, TODAY) == 2
