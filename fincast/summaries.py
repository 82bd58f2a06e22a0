"""
Per-account summaries and activity estimators.

Purpose
-------
Derives the figures the projection models need from raw records: average
monthly contributions, average credit-card net change, effective rates, and
the savings/debt account summaries shown alongside projections. Also computes
the current net worth.

Key components
--------------
- estimate_monthly_contribution / estimate_monthly_net_change:
    Averages over the recent window, divided by the number of distinct
    calendar months with activity (never by zero).
- SavingsAccountSummary / list_savings_accounts:
    Savings and high-yield-savings accounts with APY and contribution.
- DebtAccountSummary / list_debt_accounts:
    Credit and loan accounts with a positive amount owed.
- NetWorthSummary / compute_net_worth:
    Assets minus liabilities, counting real-estate equity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .constants import CONTRIBUTION_LOOKBACK_MONTHS
from .records import (
    Account,
    AccountProfile,
    AccountType,
    FinancialSnapshot,
    LIABILITY_TYPES,
    SAVINGS_TYPES,
    Transaction,
)
from .utils import count_distinct_months, round2, shift_months

__all__ = [
    "estimate_monthly_contribution",
    "estimate_monthly_net_change",
    "resolve_apy",
    "resolve_rate_of_return",
    "resolve_loan_rate",
    "SavingsAccountSummary",
    "DebtAccountSummary",
    "NetWorthSummary",
    "build_savings_summary",
    "build_debt_summary",
    "list_savings_accounts",
    "list_debt_accounts",
    "compute_net_worth",
]


# ---------------------------------------------------------------------------
# Activity estimators
# ---------------------------------------------------------------------------

def _recent(transactions: Iterable[Transaction], as_of: date, lookback_months: int) -> List[Transaction]:
    cutoff = shift_months(as_of, -lookback_months)
    return [t for t in transactions if cutoff <= t.date <= as_of]


def estimate_monthly_contribution(
    transactions: Iterable[Transaction],
    as_of: date,
    lookback_months: int = CONTRIBUTION_LOOKBACK_MONTHS,
) -> float:
    """Average monthly deposits into an account.

    Sum of positive amounts in the window divided by the number of distinct
    months that saw a deposit (minimum 1).
    """
    deposits = [t for t in _recent(transactions, as_of, lookback_months) if t.amount > 0]
    total = sum(t.amount for t in deposits)
    return total / count_distinct_months(t.date for t in deposits)


def estimate_monthly_net_change(
    transactions: Iterable[Transaction],
    as_of: date,
    lookback_months: int = CONTRIBUTION_LOOKBACK_MONTHS,
) -> float:
    """Average signed monthly movement of an account (e.g. a credit card)."""
    recent = _recent(transactions, as_of, lookback_months)
    return sum(t.amount for t in recent) / count_distinct_months(t.date for t in recent)


# ---------------------------------------------------------------------------
# Rate resolution
# ---------------------------------------------------------------------------

def resolve_apy(account: Account, profile: Optional[AccountProfile]) -> float:
    """Profile APY, else the account's interest rate, else 0."""
    if profile is not None and profile.apy is not None:
        return profile.apy
    return account.interest_rate or 0.0


def resolve_rate_of_return(profile: Optional[AccountProfile]) -> float:
    if profile is not None and profile.rate_of_return is not None:
        return profile.rate_of_return
    return 0.0


def resolve_loan_rate(account: Account, profile: Optional[AccountProfile]) -> float:
    """Profile interest rate, else the account's, else 0."""
    if profile is not None and profile.interest_rate is not None:
        return profile.interest_rate
    return account.interest_rate or 0.0


def _minimum_payment(profile: Optional[AccountProfile]) -> float:
    if profile is None:
        return 0.0
    if profile.minimum_payment is not None:
        return profile.minimum_payment
    return profile.monthly_payment or 0.0


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SavingsAccountSummary:
    account_id: str
    account_name: str
    account_type: AccountType
    current_balance: float
    apy: float
    is_favorite: bool
    estimated_monthly_contribution: float


@dataclass(frozen=True)
class DebtAccountSummary:
    """
    A debt as seen by the payoff simulator.

    ``current_balance`` is the positive amount owed regardless of the sign
    convention of the underlying account.
    """

    account_id: str
    account_name: str
    account_type: AccountType
    current_balance: float
    interest_rate: float
    minimum_payment: float
    is_mortgage: bool = False


@dataclass(frozen=True)
class NetWorthSummary:
    total_assets: float
    total_liabilities: float
    net_worth: float


def build_savings_summary(
    account: Account,
    profile: Optional[AccountProfile],
    transactions: Iterable[Transaction],
    as_of: date,
    lookback_months: int = CONTRIBUTION_LOOKBACK_MONTHS,
) -> SavingsAccountSummary:
    return SavingsAccountSummary(
        account_id=account.id,
        account_name=account.name,
        account_type=account.type,
        current_balance=account.current_balance,
        apy=resolve_apy(account, profile),
        is_favorite=account.is_favorite,
        estimated_monthly_contribution=round2(
            estimate_monthly_contribution(transactions, as_of, lookback_months)
        ),
    )


def build_debt_summary(account: Account, profile: Optional[AccountProfile]) -> DebtAccountSummary:
    return DebtAccountSummary(
        account_id=account.id,
        account_name=account.name,
        account_type=account.type,
        current_balance=abs(account.current_balance),
        interest_rate=resolve_loan_rate(account, profile),
        minimum_payment=_minimum_payment(profile),
        is_mortgage=bool(profile is not None and profile.is_mortgage),
    )


def list_savings_accounts(
    snapshot: FinancialSnapshot,
    lookback_months: int = CONTRIBUTION_LOOKBACK_MONTHS,
) -> List[SavingsAccountSummary]:
    """Summaries of every active savings or high-yield-savings account."""
    return [
        build_savings_summary(
            account,
            snapshot.profile(account.id),
            snapshot.transactions_for(account.id),
            snapshot.as_of,
            lookback_months,
        )
        for account in snapshot.active_accounts
        if account.type in SAVINGS_TYPES
    ]


def list_debt_accounts(
    snapshot: FinancialSnapshot,
    include_mortgages: bool = True,
) -> List[DebtAccountSummary]:
    """Summaries of every active credit/loan account that still owes money."""
    debts = [
        build_debt_summary(account, snapshot.profile(account.id))
        for account in snapshot.active_accounts
        if account.type in LIABILITY_TYPES and abs(account.current_balance) > 0
    ]
    if not include_mortgages:
        debts = [d for d in debts if not d.is_mortgage]
    return debts


# ---------------------------------------------------------------------------
# Net worth
# ---------------------------------------------------------------------------

def compute_net_worth(accounts: Iterable[Account]) -> NetWorthSummary:
    """
    Current net worth of the active accounts.

    Assets add their balance. Liabilities add their absolute balance to the
    liability total. A real-estate account with an ``estimated_value``
    contributes its equity (value minus balance owed) instead of its balance.
    """
    assets = 0.0
    liabilities = 0.0
    for account in accounts:
        if not account.is_active:
            continue
        if account.is_liability:
            liabilities += abs(account.current_balance)
        elif account.type is AccountType.REAL_ESTATE and account.estimated_value is not None:
            assets += account.estimated_value - account.current_balance
        else:
            assets += account.current_balance
    return NetWorthSummary(round2(assets), round2(liabilities), round2(assets - liabilities))
