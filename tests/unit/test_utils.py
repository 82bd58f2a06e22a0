"""
Unit tests for utils.py module.

Tests validation, rounding, calendar helpers and the fold used by the
simulations.
"""

import pytest
from datetime import date

import pandas as pd

from fincast.utils import (
    check_non_negative,
    count_distinct_months,
    month_index,
    month_label,
    months_between,
    round2,
    shift_months,
    short_month_label,
    unfold,
)


class TestValidation:
    """Test input validation functions."""

    def test_check_non_negative_valid(self):
        check_non_negative("test", 0)
        check_non_negative("test", 1_000.5)

    def test_check_non_negative_invalid(self):
        with pytest.raises(ValueError, match="test must be non-negative"):
            check_non_negative("test", -0.01)


class TestCalendar:
    """Test month arithmetic and labels."""

    def test_shift_clamps_day(self):
        assert shift_months(date(2025, 8, 31), -6) == date(2025, 2, 28)
        assert shift_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_shift_across_year(self):
        assert shift_months(date(2025, 11, 15), 3) == date(2026, 2, 15)

    def test_month_label(self):
        assert month_label(date(2025, 6, 15)) == "2025-06"
        assert month_label(date(2025, 6, 15), 7) == "2026-01"

    def test_short_month_label(self):
        assert short_month_label(date(2026, 1, 31), 2) == "Mar 26"

    def test_months_between(self):
        assert months_between(date(2025, 1, 31), date(2025, 3, 1)) == 2
        assert months_between(date(2025, 6, 1), date(2024, 6, 30)) == -12

    def test_count_distinct_months_floor(self):
        """Never returns zero so it can be used as a divisor."""
        assert count_distinct_months([]) == 1
        assert count_distinct_months([date(2025, 5, 1), date(2025, 5, 30), date(2024, 5, 1)]) == 2


class TestMonthIndex:
    def test_first_of_month(self):
        idx = month_index(date(2025, 6, 15), 3)
        assert isinstance(idx, pd.DatetimeIndex)
        assert list(idx) == [pd.Timestamp(2025, 6, 1), pd.Timestamp(2025, 7, 1), pd.Timestamp(2025, 8, 1)]

    def test_empty(self):
        assert len(month_index(date(2025, 6, 15), 0)) == 0


def test_round2():
    assert round2(1_543.3333) == 1_543.33
    assert round2(2.675) == pytest.approx(2.67, abs=0.011)


def test_unfold_yields_initial_plus_steps():
    assert list(unfold(lambda x: x * 2, 1, 4)) == [1, 2, 4, 8, 16]
    assert list(unfold(lambda x: x + 1, 0, 0)) == [0]
