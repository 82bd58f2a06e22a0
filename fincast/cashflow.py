"""
Monthly cash flow for FinCast.

Purpose
-------
Turns bills, budgets and the resolved monthly income into the monthly cash
flow the projections run on, with optional what-if percentage adjustments.

Key components
--------------
- ExpenseSummary / monthly_expenses:
    Active bills and budgets scaled to monthly equivalents.
- CashFlow / build_cash_flow:
    Raw and adjusted income/expenses and the resulting net cash flow that
    drives checking-account projections.
- NetIncomeProjection / project_net_income:
    Cumulative income, expenses and net income month by month.
- MonthlyFinancialSummary:
    Snapshot-level figures (surplus, debt minimums, contributions, net
    worth) consumed by the goal calculator.

Example
-------
>>> expenses = monthly_expenses(bills, budgets)
>>> flow = build_cash_flow(resolution, expenses, income_adjustment_pct=10)
>>> flow.net_cash_flow
1250.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Tuple

import pandas as pd

from .income import DetectedIncomePattern, IncomeResolution
from .records import Bill, Budget
from .summaries import DebtAccountSummary, SavingsAccountSummary
from .utils import month_index, month_label, round2

__all__ = [
    "ExpenseSummary",
    "CashFlow",
    "NetIncomePoint",
    "NetIncomeProjection",
    "MonthlyFinancialSummary",
    "monthly_expenses",
    "apply_adjustment",
    "build_cash_flow",
    "project_net_income",
]


@dataclass(frozen=True)
class ExpenseSummary:
    bill_total: float
    budget_total: float

    @property
    def total(self) -> float:
        return round2(self.bill_total + self.budget_total)


@dataclass(frozen=True)
class CashFlow:
    """
    Monthly income and expenses before and after what-if adjustments.

    Attributes
    ----------
    monthly_income, monthly_expenses : float
        Unadjusted figures.
    adjusted_income, adjusted_expenses : float
        After applying the percentage adjustments.
    net_cash_flow : float
        ``adjusted_income - adjusted_expenses``.
    """

    monthly_income: float
    monthly_expenses: float
    adjusted_income: float
    adjusted_expenses: float
    income: IncomeResolution
    expenses: ExpenseSummary

    @property
    def net_cash_flow(self) -> float:
        return self.adjusted_income - self.adjusted_expenses


@dataclass(frozen=True)
class NetIncomePoint:
    month: str
    income: float
    expenses: float
    net_income: float


@dataclass(frozen=True)
class NetIncomeProjection:
    detected_income: Tuple[DetectedIncomePattern, ...]
    manual_income: float
    monthly_income: float
    monthly_expenses: float
    monthly_bill_total: float
    monthly_budget_total: float
    projection: Tuple[NetIncomePoint, ...]

    def to_frame(self, as_of: date) -> pd.DataFrame:
        """Cumulative series as a DataFrame indexed by first-of-month dates."""
        return pd.DataFrame(
            {
                "income": [p.income for p in self.projection],
                "expenses": [p.expenses for p in self.projection],
                "net_income": [p.net_income for p in self.projection],
            },
            index=month_index(as_of, len(self.projection)),
        )


@dataclass(frozen=True)
class MonthlyFinancialSummary:
    """Month-level figures shared by every goal calculation."""

    monthly_income: float
    monthly_expenses: float
    monthly_debt_payments: float
    monthly_savings_contributions: float
    net_worth: float
    savings_accounts: Tuple[SavingsAccountSummary, ...] = ()
    debt_accounts: Tuple[DebtAccountSummary, ...] = ()

    @property
    def monthly_surplus(self) -> float:
        return round2(self.monthly_income - self.monthly_expenses)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def monthly_expenses(bills: Iterable[Bill], budgets: Iterable[Budget]) -> ExpenseSummary:
    """Monthly totals of the active bills and budgets."""
    bill_total = sum(b.monthly_amount for b in bills if b.is_active)
    budget_total = sum(b.monthly_amount for b in budgets if b.is_active)
    return ExpenseSummary(round2(bill_total), round2(budget_total))


def apply_adjustment(value: float, pct: float) -> float:
    """Scale *value* by ``1 + pct/100``."""
    return value * (1 + pct / 100)


def build_cash_flow(
    income: IncomeResolution,
    expenses: ExpenseSummary,
    income_adjustment_pct: float = 0.0,
    expense_adjustment_pct: float = 0.0,
) -> CashFlow:
    return CashFlow(
        monthly_income=income.monthly_income,
        monthly_expenses=expenses.total,
        adjusted_income=apply_adjustment(income.monthly_income, income_adjustment_pct),
        adjusted_expenses=apply_adjustment(expenses.total, expense_adjustment_pct),
        income=income,
        expenses=expenses,
    )


def project_net_income(
    cash_flow: CashFlow,
    months: int,
    as_of: date,
    detected: Iterable[DetectedIncomePattern] = (),
) -> NetIncomeProjection:
    """
    Cumulative income, expenses and net income over *months* months.

    The point for month 0 already includes the current month's flow, so the
    cumulative totals after ``k`` points equal ``k`` months of activity.
    """
    points: List[NetIncomePoint] = []
    for i in range(months):
        n = i + 1
        income = round2(cash_flow.adjusted_income * n)
        expenses = round2(cash_flow.adjusted_expenses * n)
        points.append(
            NetIncomePoint(month_label(as_of, i), income, expenses, round2(income - expenses))
        )
    return NetIncomeProjection(
        detected_income=tuple(detected),
        manual_income=cash_flow.income.manual_income,
        monthly_income=round2(cash_flow.adjusted_income),
        monthly_expenses=round2(cash_flow.adjusted_expenses),
        monthly_bill_total=cash_flow.expenses.bill_total,
        monthly_budget_total=cash_flow.expenses.budget_total,
        projection=tuple(points),
    )
