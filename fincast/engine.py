"""
Forecast engine facade.

Purpose
-------
Single entry point that wires the income detector, cash-flow builder,
account projector, debt simulator, savings projector and goal calculator
over one ``FinancialSnapshot``. The API layer builds a snapshot per request
and calls the method matching the endpoint.

Example
-------
>>> engine = ForecastEngine(snapshot)
>>> engine.income_resolution().monthly_income
5200.0
>>> engine.account_projections(months=24).overall[-1]
>>> engine.goal_progress(months=12).goals
"""

from __future__ import annotations

import logging
from typing import AbstractSet, List, Optional, Sequence

from .cashflow import (
    CashFlow,
    MonthlyFinancialSummary,
    NetIncomeProjection,
    build_cash_flow,
    monthly_expenses,
    project_net_income,
)
from .config import IncomeDetectionConfig
from .constants import DEFAULT_DEBT_MAX_MONTHS, DEFAULT_PROJECTION_MONTHS
from .debt import DebtPayoffComparison, compare_strategies
from .goals import GoalProgressResponse, compute_goal_progress
from .income import DetectedIncomePattern, IncomeResolution, detect_income_patterns, resolve_monthly_income
from .projection import AccountProjections, ProjectionPoint, project_accounts
from .records import FinancialSnapshot
from .savings import SavingsProjection, project_savings
from .summaries import (
    DebtAccountSummary,
    NetWorthSummary,
    SavingsAccountSummary,
    compute_net_worth,
    list_debt_accounts,
    list_savings_accounts,
)

__all__ = ["ForecastEngine"]

logger = logging.getLogger(__name__)


class ForecastEngine:
    """
    Facade over one financial snapshot.

    Parameters
    ----------
    snapshot : FinancialSnapshot
        Records and ``as_of`` date; never modified.
    income_config : IncomeDetectionConfig, optional
        Detector thresholds and estimator windows.

    Notes
    -----
    Methods are pure functions of the snapshot and their arguments. Calling
    any method twice with the same arguments yields equal results.
    """

    def __init__(
        self,
        snapshot: FinancialSnapshot,
        income_config: Optional[IncomeDetectionConfig] = None,
    ) -> None:
        self.snapshot = snapshot
        self.income_config = income_config or IncomeDetectionConfig()

    @property
    def as_of(self):
        return self.snapshot.as_of

    # -- income and cash flow ---------------------------------------------

    def detected_income(self) -> List[DetectedIncomePattern]:
        cfg = self.income_config
        return detect_income_patterns(
            self.snapshot.transactions,
            self.as_of,
            lookback_months=cfg.lookback_months,
            min_amount=cfg.min_amount,
            min_occurrences=cfg.min_occurrences,
        )

    def income_resolution(self) -> IncomeResolution:
        return resolve_monthly_income(self.snapshot.income_sources, self.detected_income())

    def cash_flow(self, income_adjustment_pct: float = 0.0, expense_adjustment_pct: float = 0.0) -> CashFlow:
        return build_cash_flow(
            self.income_resolution(),
            monthly_expenses(self.snapshot.bills, self.snapshot.budgets),
            income_adjustment_pct,
            expense_adjustment_pct,
        )

    def net_income_projection(
        self,
        months: int = DEFAULT_PROJECTION_MONTHS,
        income_adjustment_pct: float = 0.0,
        expense_adjustment_pct: float = 0.0,
    ) -> NetIncomeProjection:
        flow = self.cash_flow(income_adjustment_pct, expense_adjustment_pct)
        return project_net_income(flow, months, self.as_of, detected=self.detected_income())

    # -- accounts ---------------------------------------------------------

    def account_projections(
        self,
        months: int = DEFAULT_PROJECTION_MONTHS,
        income_adjustment_pct: float = 0.0,
        expense_adjustment_pct: float = 0.0,
        excluded_account_ids: AbstractSet[str] = frozenset(),
    ) -> AccountProjections:
        flow = self.cash_flow(income_adjustment_pct, expense_adjustment_pct)
        return project_accounts(
            self.snapshot,
            flow,
            months,
            frozenset(excluded_account_ids),
            lookback_months=self.income_config.contribution_lookback_months,
        )

    def savings_accounts(self) -> List[SavingsAccountSummary]:
        return list_savings_accounts(self.snapshot, self.income_config.contribution_lookback_months)

    def savings_projection(
        self,
        account_id: str,
        months: int = DEFAULT_PROJECTION_MONTHS,
        contribution_override: Optional[float] = None,
        apy_override: Optional[float] = None,
    ) -> Optional[SavingsProjection]:
        """Projection of one savings account, or None when *account_id* is not one."""
        summary = next((s for s in self.savings_accounts() if s.account_id == account_id), None)
        if summary is None:
            logger.debug("No active savings account with id %s", account_id)
            return None
        return project_savings(summary, months, self.as_of, contribution_override, apy_override)

    def debt_accounts(self, include_mortgages: bool = True) -> List[DebtAccountSummary]:
        return list_debt_accounts(self.snapshot, include_mortgages)

    def debt_payoff(
        self,
        extra_payment: float = 0.0,
        include_mortgages: bool = True,
        account_ids: Optional[Sequence[str]] = None,
        custom_order: Sequence[str] = (),
        max_months: int = DEFAULT_DEBT_MAX_MONTHS,
        roll_over_minimums: bool = False,
    ) -> DebtPayoffComparison:
        debts = self.debt_accounts(include_mortgages)
        if account_ids is not None:
            wanted = set(account_ids)
            debts = [d for d in debts if d.account_id in wanted]
        return compare_strategies(
            debts, self.as_of, extra_payment, custom_order, max_months, roll_over_minimums
        )

    def net_worth(self) -> NetWorthSummary:
        return compute_net_worth(self.snapshot.accounts)

    # -- goals ------------------------------------------------------------

    def financial_summary(self) -> MonthlyFinancialSummary:
        flow = self.cash_flow()
        savings = tuple(self.savings_accounts())
        debts = tuple(self.debt_accounts())
        return MonthlyFinancialSummary(
            monthly_income=flow.monthly_income,
            monthly_expenses=flow.monthly_expenses,
            monthly_debt_payments=sum(d.minimum_payment for d in debts),
            monthly_savings_contributions=sum(s.estimated_monthly_contribution for s in savings),
            net_worth=self.net_worth().net_worth,
            savings_accounts=savings,
            debt_accounts=debts,
        )

    def _overall_projection(self, months: int) -> Sequence[ProjectionPoint]:
        return self.account_projections(months).overall

    def goal_progress(self, months: int = DEFAULT_PROJECTION_MONTHS) -> GoalProgressResponse:
        return compute_goal_progress(
            self.snapshot.goals,
            self.financial_summary(),
            months,
            self.as_of,
            net_worth_projection=self._overall_projection,
        )
