"""
Account balance projection for FinCast.

Purpose
-------
Projects every active account's balance month by month under a growth model
chosen by account type, and rolls the lines into an overall net-position
series (assets minus liabilities).

Key components
--------------
- BalanceState:
    Immutable ``(month, balance)`` record; one per projected month.
- BalanceModel and subclasses:
    CashFlowModel (checking), CompoundingModel (savings, high-yield savings,
    investment), CreditModel (credit), AmortizationModel (loan),
    FlatModel (other). Each exposes a pure ``step`` and the trajectory is the
    fold of ``step`` from the current balance.
- model_for_account:
    Exhaustive dispatch from ``AccountType`` to a model.
- project_accounts:
    Builds ``AccountProjections`` (per-account lines plus overall series).

Design principles
-----------------
- Month 0 is always the current balance, untouched by any model.
- Real-estate accounts are excluded from projections; callers may exclude
  further accounts by id.
- Values are rounded to cents only when emitted, never inside the fold.

Example
-------
>>> projections = project_accounts(snapshot, cash_flow, months=12)
>>> projections.overall[0].balance  # current net position
>>> projections.to_frame().tail()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Callable, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .cashflow import CashFlow
from .constants import CONTRIBUTION_LOOKBACK_MONTHS
from .records import Account, AccountProfile, AccountType, FinancialSnapshot
from .summaries import (
    estimate_monthly_contribution,
    estimate_monthly_net_change,
    resolve_apy,
    resolve_loan_rate,
    resolve_rate_of_return,
)
from .utils import month_index, month_label, round2, unfold

__all__ = [
    "BalanceState",
    "BalanceModel",
    "CashFlowModel",
    "CompoundingModel",
    "CreditModel",
    "AmortizationModel",
    "FlatModel",
    "ProjectionPoint",
    "AccountProjectionLine",
    "AccountProjections",
    "model_for_account",
    "project_accounts",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# State and models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BalanceState:
    month: int
    balance: float


class BalanceModel(ABC):
    """Pure monthly transition of an account balance."""

    @abstractmethod
    def advance(self, balance: float) -> float:
        """Balance one month after *balance*."""

    def step(self, state: BalanceState) -> BalanceState:
        return BalanceState(state.month + 1, self.advance(state.balance))

    def monthly_change(self, balance: float) -> float:
        """Change applied in the first projected month."""
        return self.advance(balance) - balance

    def trajectory(self, balance: float, months: int) -> List[BalanceState]:
        """*months* states starting with *balance* at month 0."""
        if months <= 0:
            return []
        return list(unfold(self.step, BalanceState(0, balance), months - 1))


@dataclass(frozen=True)
class CashFlowModel(BalanceModel):
    """Checking: the net monthly cash flow lands in the account every month."""

    net_cash_flow: float

    def advance(self, balance: float) -> float:
        return balance + self.net_cash_flow


@dataclass(frozen=True)
class CompoundingModel(BalanceModel):
    """Monthly compounding at ``annual_rate / 12`` plus a fixed contribution."""

    annual_rate: float
    contribution: float = 0.0

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / 100 / 12

    def advance(self, balance: float) -> float:
        return balance + balance * self.monthly_rate + self.contribution


@dataclass(frozen=True)
class CreditModel(BalanceModel):
    """Credit card: average net change applied monthly, never below zero."""

    net_change: float

    def advance(self, balance: float) -> float:
        return max(balance + self.net_change, 0.0)

    def monthly_change(self, balance: float) -> float:
        return self.net_change


@dataclass(frozen=True)
class AmortizationModel(BalanceModel):
    """
    Fixed-payment loan amortization.

    Each month ``interest = balance * rate``, the principal portion is
    ``min(payment - interest, balance)`` and the balance stops at zero. A loan
    without a known payment stays flat.
    """

    annual_rate: float
    payment: float

    def advance(self, balance: float) -> float:
        if balance <= 0 or self.payment <= 0:
            return balance
        interest = balance * self.annual_rate / 100 / 12
        principal = min(self.payment - interest, balance)
        return max(balance - principal, 0.0)

    def monthly_change(self, balance: float) -> float:
        return -self.payment if self.payment > 0 else 0.0


@dataclass(frozen=True)
class FlatModel(BalanceModel):
    def advance(self, balance: float) -> float:
        return balance


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

ModelFactory = Callable[[Account, Optional[AccountProfile], FinancialSnapshot, CashFlow, int], BalanceModel]


def _checking(account, profile, snapshot, cash_flow, lookback_months) -> BalanceModel:
    return CashFlowModel(cash_flow.net_cash_flow)


def _savings(account, profile, snapshot, cash_flow, lookback_months) -> BalanceModel:
    contribution = estimate_monthly_contribution(
        snapshot.transactions_for(account.id), snapshot.as_of, lookback_months
    )
    return CompoundingModel(resolve_apy(account, profile), contribution)


def _investment(account, profile, snapshot, cash_flow, lookback_months) -> BalanceModel:
    contribution = estimate_monthly_contribution(
        snapshot.transactions_for(account.id), snapshot.as_of, lookback_months
    )
    return CompoundingModel(resolve_rate_of_return(profile), contribution)


def _credit(account, profile, snapshot, cash_flow, lookback_months) -> BalanceModel:
    change = estimate_monthly_net_change(snapshot.transactions_for(account.id), snapshot.as_of, lookback_months)
    return CreditModel(change)


def _loan(account, profile, snapshot, cash_flow, lookback_months) -> BalanceModel:
    payment = profile.monthly_payment if profile is not None and profile.monthly_payment else 0.0
    return AmortizationModel(resolve_loan_rate(account, profile), payment)


def _flat(account, profile, snapshot, cash_flow, lookback_months) -> BalanceModel:
    return FlatModel()


_MODEL_FACTORIES: Dict[AccountType, ModelFactory] = {
    AccountType.CHECKING: _checking,
    AccountType.SAVINGS: _savings,
    AccountType.HIGH_YIELD_SAVINGS: _savings,
    AccountType.INVESTMENT: _investment,
    AccountType.CREDIT: _credit,
    AccountType.LOAN: _loan,
    AccountType.REAL_ESTATE: _flat,
    AccountType.OTHER: _flat,
}


def model_for_account(
    account: Account,
    snapshot: FinancialSnapshot,
    cash_flow: CashFlow,
    lookback_months: int = CONTRIBUTION_LOOKBACK_MONTHS,
) -> BalanceModel:
    """
    Select and parameterize the balance model for *account*.

    Contribution and net-change estimates average the account's
    transactions over the last *lookback_months* months.
    """
    factory = _MODEL_FACTORIES[account.type]
    return factory(account, snapshot.profile(account.id), snapshot, cash_flow, lookback_months)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectionPoint:
    month: str
    balance: float


@dataclass(frozen=True)
class AccountProjectionLine:
    account_id: str
    account_name: str
    account_type: AccountType
    current_balance: float
    monthly_change: float
    is_favorite: bool
    projection: Tuple[ProjectionPoint, ...]


@dataclass(frozen=True)
class AccountProjections:
    """Per-account projections plus the overall net-position series."""

    accounts: Tuple[AccountProjectionLine, ...]
    overall: Tuple[ProjectionPoint, ...]
    as_of: date

    def to_frame(self) -> pd.DataFrame:
        """One column per account id plus ``overall``, indexed by month start."""
        index = month_index(self.as_of, len(self.overall))
        data = {line.account_id: [p.balance for p in line.projection] for line in self.accounts}
        data["overall"] = [p.balance for p in self.overall]
        return pd.DataFrame(data, index=index)


# ---------------------------------------------------------------------------
# Projector
# ---------------------------------------------------------------------------

def project_accounts(
    snapshot: FinancialSnapshot,
    cash_flow: CashFlow,
    months: int,
    excluded_account_ids: AbstractSet[str] = frozenset(),
    lookback_months: int = CONTRIBUTION_LOOKBACK_MONTHS,
) -> AccountProjections:
    """
    Project every eligible account over *months* months.

    Parameters
    ----------
    snapshot : FinancialSnapshot
        Source records; ``snapshot.as_of`` anchors month 0.
    cash_flow : CashFlow
        Adjusted monthly cash flow; drives checking accounts.
    months : int
        Number of points per line, month 0 included.
    excluded_account_ids : set of str, optional
        Accounts left out of both the lines and the overall series.
    lookback_months : int, optional
        Transaction window for savings, investment and credit estimates.

    Returns
    -------
    AccountProjections
        ``overall[i]`` is the sum of asset lines minus liability lines at
        month ``i``.
    """
    as_of = snapshot.as_of
    labels = [month_label(as_of, i) for i in range(months)]
    lines: List[AccountProjectionLine] = []
    overall = np.zeros(max(months, 0))

    for account in snapshot.active_accounts:
        if account.type is AccountType.REAL_ESTATE or account.id in excluded_account_ids:
            continue
        model = model_for_account(account, snapshot, cash_flow, lookback_months)
        balances = np.array([s.balance for s in model.trajectory(account.current_balance, months)])
        sign = -1.0 if account.is_liability else 1.0
        if months > 0:
            overall += sign * balances
        lines.append(
            AccountProjectionLine(
                account_id=account.id,
                account_name=account.name,
                account_type=account.type,
                current_balance=account.current_balance,
                monthly_change=round2(model.monthly_change(account.current_balance)),
                is_favorite=account.is_favorite,
                projection=tuple(
                    ProjectionPoint(label, round2(b)) for label, b in zip(labels, balances)
                ),
            )
        )

    logger.debug("Projected %d account(s) over %d month(s)", len(lines), months)
    return AccountProjections(
        accounts=tuple(lines),
        overall=tuple(ProjectionPoint(label, round2(b)) for label, b in zip(labels, overall)),
        as_of=as_of,
    )
