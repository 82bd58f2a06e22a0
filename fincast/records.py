"""
Input records for FinCast.

Purpose
-------
Immutable, already-decrypted records handed to the forecasting core by the
persistence layer. The core never mutates or stores them; every projection is
recomputed from a ``FinancialSnapshot``.

Key components
--------------
- AccountType / classify_account_type:
    Closed set of account kinds and their asset/liability classification.
- Account, AccountProfile, Transaction, Bill, Budget, IncomeSource:
    Plain value records mirroring the tracker's stores.
- SavingsGoal, DebtPayoffGoal, NetWorthGoal, CustomGoal (``Goal``):
    Closed tagged union of goal variants. Each variant carries only the
    fields its calculator reads; ``goal_type`` is the discriminator.
- FinancialSnapshot:
    Consistent bundle of records plus the ``as_of`` date every projection is
    anchored on.

Design principles
-----------------
- Frozen dataclasses; sequences are tuples.
- Dates are ``datetime.date``; amounts are floats in account currency.
- Interest rates and APYs are annual percentages (4.5 means 4.5%).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import ClassVar, Dict, Literal, Optional, Tuple, Union

from .frequency import Frequency, FrequencyLike, monthly_multiplier, parse_frequency

__all__ = [
    "AccountType",
    "AccountClass",
    "classify_account_type",
    "LIABILITY_TYPES",
    "SAVINGS_TYPES",
    "Account",
    "AccountProfile",
    "Transaction",
    "Bill",
    "Budget",
    "IncomeSource",
    "GoalType",
    "SavingsGoal",
    "DebtPayoffGoal",
    "NetWorthGoal",
    "CustomGoal",
    "Goal",
    "FinancialSnapshot",
]


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    HIGH_YIELD_SAVINGS = "high_yield_savings"
    INVESTMENT = "investment"
    CREDIT = "credit"
    LOAN = "loan"
    REAL_ESTATE = "real_estate"
    OTHER = "other"


AccountClass = Literal["asset", "liability"]

LIABILITY_TYPES = frozenset({AccountType.CREDIT, AccountType.LOAN})
SAVINGS_TYPES = frozenset({AccountType.SAVINGS, AccountType.HIGH_YIELD_SAVINGS})


def classify_account_type(account_type: AccountType) -> AccountClass:
    """Credit and loan accounts are liabilities; everything else is an asset."""
    return "liability" if account_type in LIABILITY_TYPES else "asset"


@dataclass(frozen=True)
class Account:
    """
    A tracked financial account.

    Parameters
    ----------
    id : str
        Stable account identifier.
    name : str
        Display name.
    type : AccountType
        Kind of account; selects the projection model.
    current_balance : float
        Signed balance as stored by the tracker.
    interest_rate : float, optional
        Annual rate in percent, used when no profile supplies one.
    is_favorite : bool, default False
    is_active : bool, default True
        Inactive accounts are ignored by every projection.
    estimated_value : float, optional
        Market value of a real-estate asset; the balance is what is owed.
    """

    id: str
    name: str
    type: AccountType
    current_balance: float
    interest_rate: Optional[float] = None
    is_favorite: bool = False
    is_active: bool = True
    estimated_value: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, AccountType):
            object.__setattr__(self, "type", AccountType(self.type))

    @property
    def classification(self) -> AccountClass:
        return classify_account_type(self.type)

    @property
    def is_liability(self) -> bool:
        return self.classification == "liability"


@dataclass(frozen=True)
class AccountProfile:
    """Latest per-account terms (savings APY, investment return, loan terms).

    Any field may be missing; the consumers fall back to the account's own
    ``interest_rate`` or to zero.
    """

    apy: Optional[float] = None
    rate_of_return: Optional[float] = None
    interest_rate: Optional[float] = None
    monthly_payment: Optional[float] = None
    minimum_payment: Optional[float] = None
    is_mortgage: bool = False


@dataclass(frozen=True)
class Transaction:
    account_id: str
    date: date
    description: str
    amount: float  # positive = inflow


# ---------------------------------------------------------------------------
# Recurring amounts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Recurring:
    amount: float
    frequency: FrequencyLike = Frequency.MONTHLY
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "frequency", parse_frequency(self.frequency))

    @property
    def monthly_amount(self) -> float:
        """Average monthly equivalent of this amount."""
        return self.amount * monthly_multiplier(self.frequency)


@dataclass(frozen=True)
class Bill(_Recurring):
    name: str = ""
    category: Optional[str] = None


@dataclass(frozen=True)
class Budget(_Recurring):
    category: Optional[str] = None


@dataclass(frozen=True)
class IncomeSource(_Recurring):
    """Manually entered income. Active sources override detected income."""

    name: str = ""


# ---------------------------------------------------------------------------
# Goals (closed tagged union)
# ---------------------------------------------------------------------------

class GoalType(str, Enum):
    SAVINGS = "savings"
    DEBT_PAYOFF = "debt_payoff"
    NET_WORTH = "net_worth"
    CUSTOM = "custom"


@dataclass(frozen=True)
class _GoalBase:
    id: str
    name: str
    target_amount: float
    target_date: Optional[date] = None
    account_ids: Tuple[str, ...] = ()
    monthly_contribution: Optional[float] = None
    start_date: Optional[date] = None
    start_amount: Optional[float] = None
    current_amount: Optional[float] = None  # manual override, always wins
    is_active: bool = True

    goal_type: ClassVar[GoalType]

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_ids", tuple(self.account_ids))


@dataclass(frozen=True)
class SavingsGoal(_GoalBase):
    goal_type: ClassVar[GoalType] = GoalType.SAVINGS


@dataclass(frozen=True)
class DebtPayoffGoal(_GoalBase):
    extra_payment: float = 0.0

    goal_type: ClassVar[GoalType] = GoalType.DEBT_PAYOFF


@dataclass(frozen=True)
class NetWorthGoal(_GoalBase):
    goal_type: ClassVar[GoalType] = GoalType.NET_WORTH


@dataclass(frozen=True)
class CustomGoal(_GoalBase):
    goal_type: ClassVar[GoalType] = GoalType.CUSTOM


Goal = Union[SavingsGoal, DebtPayoffGoal, NetWorthGoal, CustomGoal]


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FinancialSnapshot:
    """
    Consistent view of a user's records at ``as_of``.

    The boundary layer gathers this once per request; all engine operations
    read from it and none write back.

    Parameters
    ----------
    as_of : date
        Reference date. Month 0 of every projection is ``as_of``'s month.
    accounts, transactions, bills, budgets, income_sources, goals : tuple
        Records as supplied by the stores.
    profiles : dict
        Latest ``AccountProfile`` keyed by account id.
    """

    as_of: date
    accounts: Tuple[Account, ...] = ()
    transactions: Tuple[Transaction, ...] = ()
    bills: Tuple[Bill, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    income_sources: Tuple[IncomeSource, ...] = ()
    goals: Tuple[Goal, ...] = ()
    profiles: Dict[str, AccountProfile] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("accounts", "transactions", "bills", "budgets", "income_sources", "goals"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def active_accounts(self) -> Tuple[Account, ...]:
        return tuple(a for a in self.accounts if a.is_active)

    def account(self, account_id: str) -> Optional[Account]:
        """Return the account with *account_id*, or None."""
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def profile(self, account_id: str) -> Optional[AccountProfile]:
        return self.profiles.get(account_id)

    def transactions_for(self, account_id: str) -> Tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if t.account_id == account_id)
