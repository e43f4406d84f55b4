"""Tests for the debt/status classifier."""

from datetime import date, timedelta

import pytest

from earnings_ledger.engine.classifier import classify_day, classify_days, index_by_day
from earnings_ledger.models.earning import DayStatus, RecordOrigin

from conftest import make_record


class TestClassifyDay:
    """Tests for single-day classification."""

    def test_no_record_is_debt(self):
        """Test a day without a record is a debt day."""
        assert classify_day(date(2024, 3, 2), None) == DayStatus.DEBT

    def test_amount_above_goal_is_met(self):
        """Test an amount above the goal meets it."""
        record = make_record(date(2024, 3, 2), 30000)
        assert classify_day(date(2024, 3, 2), record) == DayStatus.MET

    def test_amount_equal_to_goal_is_met(self):
        """Test the goal threshold is inclusive."""
        record = make_record(date(2024, 3, 2), 28000)
        assert classify_day(date(2024, 3, 2), record) == DayStatus.MET

    def test_amount_below_goal_is_partial(self):
        """Test an amount below the goal is partial."""
        record = make_record(date(2024, 3, 2), 27999)
        assert classify_day(date(2024, 3, 2), record) == DayStatus.PARTIAL

    def test_zero_amount_is_partial_not_debt(self):
        """Test a recorded zero is still a tracked day."""
        record = make_record(date(2024, 3, 2), 0)
        assert classify_day(date(2024, 3, 2), record) == DayStatus.PARTIAL

    def test_uses_record_goal_not_current_goal(self):
        """Test classification uses the goal stored on the record."""
        record = make_record(date(2024, 3, 2), 20000, goal=15000)
        assert classify_day(date(2024, 3, 2), record) == DayStatus.MET

    def test_mismatched_record_rejected(self):
        """Test a record for another day is refused."""
        record = make_record(date(2024, 3, 3), 30000)
        with pytest.raises(ValueError):
            classify_day(date(2024, 3, 2), record)

    def test_classification_is_idempotent(self):
        """Test classifying the same day twice gives the same answer."""
        record = make_record(date(2024, 3, 2), 14000)
        first = classify_day(date(2024, 3, 2), record)
        second = classify_day(date(2024, 3, 2), record)
        assert first == second == DayStatus.PARTIAL


class TestClassifyDays:
    """Tests for classifying many days at once."""

    def test_every_day_gets_exactly_one_status(self):
        """Test classification is total and DEBT iff no record."""
        records = [
            make_record(date(2024, 3, 1), 28000),
            make_record(date(2024, 3, 3), 100),
        ]
        days = [date(2024, 3, 1) + timedelta(days=i) for i in range(5)]
        statuses = classify_days(records, days)

        assert set(statuses) == set(days)
        recorded = {r.date for r in records}
        for day, status in statuses.items():
            assert status in (DayStatus.MET, DayStatus.PARTIAL, DayStatus.DEBT)
            assert (status == DayStatus.DEBT) == (day not in recorded)

    def test_index_prefers_organic_record(self):
        """Test an organic record wins over a synthetic one on the same day."""
        synthetic = make_record(date(2024, 3, 1), 5000, origin=RecordOrigin.DEBT_PAYMENT)
        organic = make_record(date(2024, 3, 1), 30000)
        by_day = index_by_day([synthetic, organic])
        assert by_day[date(2024, 3, 1)] is organic
