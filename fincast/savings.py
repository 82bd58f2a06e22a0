"""
Savings projection with principal/interest breakdown and milestones.

Purpose
-------
Projects a single savings or high-yield-savings account forward, splitting
the balance into principal (current balance plus cumulative contributions)
and cumulative interest, and resolves round-number milestones to the first
month they are reached.

Example
-------
>>> summary = build_savings_summary(account, profile, txns, as_of)
>>> result = project_savings(summary, months=24, as_of=as_of, apy_override=4.5)
>>> [(m.target, m.month) for m in result.milestones]
[(10000.0, '2026-02'), (25000.0, None), (50000.0, None)]
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from .constants import SAVINGS_MILESTONE_TIERS
from .summaries import SavingsAccountSummary
from .utils import check_non_negative, month_index, month_label, round2, unfold

__all__ = [
    "SavingsState",
    "SavingsPoint",
    "SavingsMilestone",
    "SavingsProjection",
    "milestone_targets",
    "project_savings",
]


@dataclass(frozen=True)
class SavingsState:
    month: int
    balance: float
    principal: float
    interest: float


@dataclass(frozen=True)
class SavingsPoint:
    month: str
    balance: float
    principal: float
    interest: float


@dataclass(frozen=True)
class SavingsMilestone:
    target: float
    month: Optional[str]


@dataclass(frozen=True)
class SavingsProjection:
    """Projection of one savings account.

    ``account`` reflects any APY/contribution overrides that were applied.
    """

    account: SavingsAccountSummary
    projection: Tuple[SavingsPoint, ...]
    milestones: Tuple[SavingsMilestone, ...]
    as_of: date

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "balance": [p.balance for p in self.projection],
                "principal": [p.principal for p in self.projection],
                "interest": [p.interest for p in self.projection],
            },
            index=month_index(self.as_of, len(self.projection)),
        )


def milestone_targets(current_balance: float) -> List[float]:
    """Milestones for an account at *current_balance*, skipping those already passed."""
    for ceiling, targets in SAVINGS_MILESTONE_TIERS:
        if current_balance < ceiling:
            return [t for t in targets if t >= current_balance]
    return []


def project_savings(
    account: SavingsAccountSummary,
    months: int,
    as_of: date,
    contribution_override: Optional[float] = None,
    apy_override: Optional[float] = None,
) -> SavingsProjection:
    """
    Compound a savings balance monthly.

    Parameters
    ----------
    account : SavingsAccountSummary
        Source balance, APY and estimated contribution.
    months : int
        Number of points, month 0 (the current balance) included.
    as_of : date
    contribution_override : float, optional
        Replaces the estimated monthly contribution. Must be >= 0.
    apy_override : float, optional
        Replaces the account APY (percent). Must be in [0, 100].

    Returns
    -------
    SavingsProjection

    Notes
    -----
    Each month ``interest = balance * apy / 100 / 12`` and then
    ``balance += interest + contribution``. With a positive contribution the
    balance strictly increases; with zero contribution and zero APY it stays
    constant.
    """
    if contribution_override is not None:
        check_non_negative("contribution_override", contribution_override)
        account = replace(account, estimated_monthly_contribution=contribution_override)
    if apy_override is not None:
        if not 0 <= apy_override <= 100:
            raise ValueError(f"apy_override must be within [0, 100] (got {apy_override}).")
        account = replace(account, apy=apy_override)

    rate = account.apy / 100 / 12
    contribution = account.estimated_monthly_contribution

    def step(state: SavingsState) -> SavingsState:
        interest = state.balance * rate
        return SavingsState(
            month=state.month + 1,
            balance=state.balance + interest + contribution,
            principal=state.principal + contribution,
            interest=state.interest + interest,
        )

    start = SavingsState(0, account.current_balance, account.current_balance, 0.0)
    states = list(unfold(step, start, months - 1)) if months > 0 else []
    points = tuple(
        SavingsPoint(month_label(as_of, s.month), round2(s.balance), round2(s.principal), round2(s.interest))
        for s in states
    )

    milestones = tuple(
        SavingsMilestone(
            target=target,
            month=next((p.month for p in points if p.balance >= target), None),
        )
        for target in milestone_targets(account.current_balance)
    )
    return SavingsProjection(account=account, projection=points, milestones=milestones, as_of=as_of)
