"""
Debt payoff simulation for FinCast.

Purpose
-------
Simulates paying down several debts at once under a fixed monthly budget
(every minimum payment plus an extra amount) and reports per-account
amortization schedules, the aggregate balance path and the debt-free date.

Key components
--------------
- DebtStrategy:
    avalanche (highest rate first), snowball (lowest balance first) or
    custom (explicit account order).
- DebtState / AccountMonth:
    Immutable per-month state; ``DebtPayoffSimulator.step`` maps one state
    to the next and the run is the fold of ``step`` from month 0.
- DebtPayoffSimulator:
    Holds the debts and payment policy; ``run`` produces DebtPayoffResult.
- compare_strategies:
    Avalanche, snowball, optional custom order and the minimum-only
    baseline side by side.

Monthly transition
------------------
1. Interest accrues on every open balance at ``rate / 100 / 12``.
2. Each open account receives its minimum payment, capped at the balance
   including this month's interest.
3. The extra pool goes to one account at a time in priority order; whatever
   is left after an account reaches zero moves to the next account in the
   same month.
4. Balances below one cent are treated as paid off.

The simulator never computes its own baseline. Run it again with
``extra_payment=0`` to obtain the minimum-only path.

Example
-------
>>> sim = DebtPayoffSimulator(debts, extra_payment=200, strategy="avalanche")
>>> result = sim.run(as_of=date(2025, 6, 1))
>>> result.debt_free_date
'2027-11'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .constants import CENT, DEFAULT_DEBT_MAX_MONTHS
from .exceptions import ConfigurationError
from .summaries import DebtAccountSummary
from .utils import check_non_negative, month_index, month_label, round2

__all__ = [
    "DebtStrategy",
    "AccountMonth",
    "DebtState",
    "DebtPaymentPoint",
    "DebtTimeline",
    "AggregatePoint",
    "DebtPayoffResult",
    "DebtPayoffComparison",
    "DebtPayoffSimulator",
    "simulate_debt_payoff",
    "compare_strategies",
]

logger = logging.getLogger(__name__)


class DebtStrategy(str, Enum):
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    CUSTOM = "custom"


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccountMonth:
    """One account's activity in one month; ``balance`` is the closing balance."""

    balance: float
    payment: float = 0.0
    interest: float = 0.0
    extra_payment: float = 0.0

    @property
    def principal(self) -> float:
        return self.payment - self.interest


@dataclass(frozen=True)
class DebtState:
    month: int
    accounts: Tuple[AccountMonth, ...]

    @property
    def balances(self) -> Tuple[float, ...]:
        return tuple(a.balance for a in self.accounts)

    @property
    def total_balance(self) -> float:
        return sum(self.balances)

    @property
    def total_payment(self) -> float:
        return sum(a.payment for a in self.accounts)

    @property
    def is_debt_free(self) -> bool:
        return all(b == 0 for b in self.balances)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebtPaymentPoint:
    month: str
    payment: float
    principal: float
    interest: float
    extra_payment: float
    balance: float


@dataclass(frozen=True)
class DebtTimeline:
    account_id: str
    account_name: str
    schedule: Tuple[DebtPaymentPoint, ...]
    months_to_payoff: Optional[int]
    payoff_date: Optional[str]
    total_interest_paid: float


@dataclass(frozen=True)
class AggregatePoint:
    month: str
    total_balance: float
    total_payment: float


@dataclass(frozen=True)
class DebtPayoffResult:
    """
    Outcome of one simulation run.

    Attributes
    ----------
    strategy : DebtStrategy
    timelines : tuple of DebtTimeline
        One per debt, in input order.
    aggregate_schedule : tuple of AggregatePoint
        Month 0 holds the current total; the path is non-increasing whenever
        the minimum payments cover the interest.
    total_interest_paid, total_paid : float
    debt_free_date : str or None
        ``YYYY-MM`` of the first month with every balance at zero; None when
        the month cap was reached first.
    months_to_debt_free : int or None
    """

    strategy: DebtStrategy
    extra_payment: float
    timelines: Tuple[DebtTimeline, ...]
    aggregate_schedule: Tuple[AggregatePoint, ...]
    total_interest_paid: float
    total_paid: float
    debt_free_date: Optional[str]
    months_to_debt_free: Optional[int]
    as_of: date

    def to_frame(self) -> pd.DataFrame:
        """Per-account balances plus ``total`` indexed by month start."""
        index = month_index(self.as_of, len(self.aggregate_schedule))
        data = {t.account_id: [p.balance for p in t.schedule] for t in self.timelines}
        data["total"] = [p.total_balance for p in self.aggregate_schedule]
        return pd.DataFrame(data, index=index)


@dataclass(frozen=True)
class DebtPayoffComparison:
    debt_accounts: Tuple[DebtAccountSummary, ...]
    avalanche: DebtPayoffResult
    snowball: DebtPayoffResult
    minimum_only: DebtPayoffResult
    custom: Optional[DebtPayoffResult] = None

    def interest_saved(self, result: DebtPayoffResult) -> float:
        """Interest avoided by *result* relative to paying only minimums."""
        return round2(self.minimum_only.total_interest_paid - result.total_interest_paid)


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebtPayoffSimulator:
    """
    Multi-account payoff under a priority strategy.

    Parameters
    ----------
    debts : sequence of DebtAccountSummary
        Debts with positive balances owed.
    extra_payment : float, default 0
        Monthly amount on top of the minimums.
    strategy : DebtStrategy or str, default "avalanche"
    custom_order : sequence of str, optional
        Account ids in payoff order, required for the custom strategy.
        Accounts not listed follow in avalanche order.
    roll_over_minimums : bool, default False
        When True, minimums of accounts paid off in earlier months join the
        extra pool.
    """

    debts: Tuple[DebtAccountSummary, ...]
    extra_payment: float = 0.0
    strategy: DebtStrategy = DebtStrategy.AVALANCHE
    custom_order: Tuple[str, ...] = ()
    roll_over_minimums: bool = False
    _rank: Tuple[int, ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        check_non_negative("extra_payment", self.extra_payment)
        object.__setattr__(self, "debts", tuple(self.debts))
        object.__setattr__(self, "strategy", DebtStrategy(self.strategy))
        object.__setattr__(self, "custom_order", tuple(self.custom_order))

        ids = [d.account_id for d in self.debts]
        unknown = [a for a in self.custom_order if a not in ids]
        if unknown:
            raise ConfigurationError(f"custom_order names unknown debt account(s): {unknown}")
        if self.strategy is DebtStrategy.CUSTOM and not self.custom_order:
            raise ConfigurationError("custom strategy requires custom_order")
        position = {account_id: pos for pos, account_id in enumerate(self.custom_order)}
        rank = tuple(position.get(d.account_id, len(position)) for d in self.debts)
        object.__setattr__(self, "_rank", rank)

    # -- transition -------------------------------------------------------

    def initial_state(self) -> DebtState:
        return DebtState(0, tuple(AccountMonth(balance=d.current_balance) for d in self.debts))

    def priority(self, balances: Sequence[float]) -> List[int]:
        """Indices of open accounts in the order the extra pool is applied."""
        open_idx = [i for i, b in enumerate(balances) if b > 0]
        rates = [d.interest_rate for d in self.debts]
        if self.strategy is DebtStrategy.SNOWBALL:
            return sorted(open_idx, key=lambda i: (balances[i], -rates[i], i))
        if self.strategy is DebtStrategy.CUSTOM:
            return sorted(open_idx, key=lambda i: (self._rank[i], -rates[i], balances[i], i))
        return sorted(open_idx, key=lambda i: (-rates[i], balances[i], i))

    def step(self, state: DebtState) -> DebtState:
        """Advance the debts by one month."""
        opening = state.balances
        interest = [b * d.interest_rate / 100 / 12 if b > 0 else 0.0 for b, d in zip(opening, self.debts)]
        owed = [b + i for b, i in zip(opening, interest)]
        minimum = [
            min(d.minimum_payment, o) if b > 0 else 0.0
            for b, o, d in zip(opening, owed, self.debts)
        ]
        remaining = [o - m for o, m in zip(owed, minimum)]

        pool = self.extra_payment
        if self.roll_over_minimums:
            pool += sum(d.minimum_payment for b, d in zip(opening, self.debts) if b <= 0)

        extra = [0.0] * len(self.debts)
        for idx in self.priority(remaining):
            if pool <= 0:
                break
            applied = min(pool, remaining[idx])
            remaining[idx] -= applied
            extra[idx] += applied
            pool -= applied

        accounts = tuple(
            AccountMonth(
                balance=0.0 if r < CENT else r,
                payment=m + x,
                interest=i,
                extra_payment=x,
            )
            for r, m, x, i in zip(remaining, minimum, extra, interest)
        )
        return DebtState(state.month + 1, accounts)

    def states(self, max_months: int = DEFAULT_DEBT_MAX_MONTHS) -> Iterator[DebtState]:
        """Yield month 0 and every following month until debt-free or *max_months*."""
        state = self.initial_state()
        yield state
        while not state.is_debt_free and state.month < max_months:
            state = self.step(state)
            yield state

    # -- run --------------------------------------------------------------

    def run(self, as_of: date, max_months: int = DEFAULT_DEBT_MAX_MONTHS) -> DebtPayoffResult:
        """Simulate and assemble the result anchored on *as_of*."""
        states = list(self.states(max_months))
        labels = [month_label(as_of, s.month) for s in states]

        timelines = []
        for idx, debt in enumerate(self.debts):
            months = [s.accounts[idx] for s in states]
            payoff = next((s.month for s, a in zip(states, months) if a.balance == 0), None)
            timelines.append(
                DebtTimeline(
                    account_id=debt.account_id,
                    account_name=debt.account_name,
                    schedule=tuple(
                        DebtPaymentPoint(
                            month=label,
                            payment=round2(a.payment),
                            principal=round2(a.principal),
                            interest=round2(a.interest),
                            extra_payment=round2(a.extra_payment),
                            balance=round2(a.balance),
                        )
                        for label, a in zip(labels, months)
                    ),
                    months_to_payoff=payoff,
                    payoff_date=None if payoff is None else month_label(as_of, payoff),
                    total_interest_paid=round2(sum(a.interest for a in months)),
                )
            )

        final = states[-1]
        debt_free_month = final.month if final.is_debt_free else None
        total_interest = sum(a.interest for s in states for a in s.accounts)
        total_paid = sum(s.total_payment for s in states)
        logger.debug(
            "Debt payoff (%s, extra=%.2f): %d month(s), debt free %s",
            self.strategy.value, self.extra_payment, final.month, debt_free_month is not None,
        )
        return DebtPayoffResult(
            strategy=self.strategy,
            extra_payment=self.extra_payment,
            timelines=tuple(timelines),
            aggregate_schedule=tuple(
                AggregatePoint(label, round2(s.total_balance), round2(s.total_payment))
                for label, s in zip(labels, states)
            ),
            total_interest_paid=round2(total_interest),
            total_paid=round2(total_paid),
            debt_free_date=None if debt_free_month is None else month_label(as_of, debt_free_month),
            months_to_debt_free=debt_free_month,
            as_of=as_of,
        )


# ---------------------------------------------------------------------------
# Convenience API
# ---------------------------------------------------------------------------

def simulate_debt_payoff(
    debts: Sequence[DebtAccountSummary],
    as_of: date,
    extra_payment: float = 0.0,
    strategy: Union[DebtStrategy, str] = DebtStrategy.AVALANCHE,
    custom_order: Sequence[str] = (),
    max_months: int = DEFAULT_DEBT_MAX_MONTHS,
    roll_over_minimums: bool = False,
) -> DebtPayoffResult:
    """Build a ``DebtPayoffSimulator`` and run it once."""
    simulator = DebtPayoffSimulator(
        debts=tuple(debts),
        extra_payment=extra_payment,
        strategy=DebtStrategy(strategy),
        custom_order=tuple(custom_order),
        roll_over_minimums=roll_over_minimums,
    )
    return simulator.run(as_of, max_months)


def compare_strategies(
    debts: Sequence[DebtAccountSummary],
    as_of: date,
    extra_payment: float = 0.0,
    custom_order: Sequence[str] = (),
    max_months: int = DEFAULT_DEBT_MAX_MONTHS,
    roll_over_minimums: bool = False,
) -> DebtPayoffComparison:
    """
    Run avalanche, snowball, the minimum-only baseline and, when
    *custom_order* is given, the custom order.
    """
    def run(strategy: DebtStrategy, extra: float, order: Sequence[str] = ()) -> DebtPayoffResult:
        return simulate_debt_payoff(
            debts, as_of, extra, strategy, order, max_months, roll_over_minimums
        )

    return DebtPayoffComparison(
        debt_accounts=tuple(debts),
        avalanche=run(DebtStrategy.AVALANCHE, extra_payment),
        snowball=run(DebtStrategy.SNOWBALL, extra_payment),
        minimum_only=run(DebtStrategy.AVALANCHE, 0.0),
        custom=run(DebtStrategy.CUSTOM, extra_payment, custom_order) if custom_order else None,
    )
