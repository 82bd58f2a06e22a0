"""
Unit tests for cashflow.py.

Tests expense totals, what-if adjustments and the cumulative net income
projection.
"""

import pandas as pd
import pytest

from fincast.cashflow import (
    ExpenseSummary,
    MonthlyFinancialSummary,
    apply_adjustment,
    build_cash_flow,
    monthly_expenses,
    project_net_income,
)
from fincast.exceptions import UnknownFrequencyError
from fincast.income import IncomeResolution
from fincast.records import Bill, Budget


@pytest.fixture
def resolution():
    return IncomeResolution(5_000.0, "manual", 5_000.0, 4_200.0)


class TestMonthlyExpenses:
    """Tests for monthly_expenses()."""

    def test_scaled_by_frequency(self, bills, budgets):
        expenses = monthly_expenses(bills, budgets)
        assert expenses.bill_total == pytest.approx(1_543.33)
        assert expenses.budget_total == 400.0
        assert expenses.total == pytest.approx(1_943.33)

    def test_inactive_ignored(self):
        expenses = monthly_expenses([Bill(50.0, is_active=False)], [Budget(20.0, is_active=False)])
        assert expenses.total == 0.0

    def test_yearly_and_quarterly(self):
        expenses = monthly_expenses([Bill(1_200.0, "yearly"), Bill(300.0, "quarterly")], [])
        assert expenses.bill_total == pytest.approx(200.0)

    def test_unknown_frequency_rejected_at_construction(self):
        with pytest.raises(UnknownFrequencyError):
            Bill(10.0, "daily")


class TestBuildCashFlow:
    """Tests for build_cash_flow() and apply_adjustment()."""

    def test_unadjusted(self, resolution):
        flow = build_cash_flow(resolution, ExpenseSummary(1_500.0, 500.0))
        assert flow.monthly_income == 5_000.0
        assert flow.monthly_expenses == 2_000.0
        assert flow.net_cash_flow == pytest.approx(3_000.0)

    def test_adjustments_are_percentages(self, resolution):
        flow = build_cash_flow(resolution, ExpenseSummary(1_500.0, 500.0), -10.0, 25.0)
        assert flow.adjusted_income == pytest.approx(4_500.0)
        assert flow.adjusted_expenses == pytest.approx(2_500.0)
        assert flow.net_cash_flow == pytest.approx(2_000.0)
        # Raw figures are kept alongside the adjusted ones
        assert flow.monthly_income == 5_000.0

    def test_apply_adjustment(self):
        assert apply_adjustment(200.0, 50.0) == pytest.approx(300.0)
        assert apply_adjustment(200.0, -50.0) == pytest.approx(100.0)


class TestProjectNetIncome:
    """Tests for project_net_income()."""

    def test_cumulative_series(self, resolution, as_of):
        flow = build_cash_flow(resolution, ExpenseSummary(1_500.0, 500.0))
        result = project_net_income(flow, 6, as_of)

        assert [p.month for p in result.projection] == [
            "2025-06", "2025-07", "2025-08", "2025-09", "2025-10", "2025-11",
        ]
        assert result.projection[0].income == 5_000.0
        assert result.projection[-1].income == 30_000.0
        assert result.projection[-1].expenses == 12_000.0
        assert result.projection[-1].net_income == 18_000.0
        assert result.manual_income == 5_000.0
        assert result.monthly_bill_total == 1_500.0
        assert result.monthly_budget_total == 500.0

    def test_to_frame(self, resolution, as_of):
        flow = build_cash_flow(resolution, ExpenseSummary(1_000.0, 0.0))
        frame = project_net_income(flow, 3, as_of).to_frame(as_of)
        assert list(frame.columns) == ["income", "expenses", "net_income"]
        assert frame.index[0] == pd.Timestamp(2025, 6, 1)
        assert frame["net_income"].iloc[-1] == pytest.approx(12_000.0)


class TestMonthlyFinancialSummary:
    def test_surplus(self):
        summary = MonthlyFinancialSummary(4_000.0, 2_750.5, 300.0, 200.0, 10_000.0)
        assert summary.monthly_surplus == pytest.approx(1_249.5)
