"""
What-if decision calculators for FinCast.

Purpose
-------
Standalone calculators that answer one question each, from user-entered
figures rather than account data.

Key components
--------------
- calculate_hys_vs_debt:
    Keep cash in a high-yield savings account (HYS) while paying a loan, or
    use the cash to pay the loan down now? Simulates both scenarios month by
    month and reports the net-position gap, break-even month and
    recommendation.
- calculate_401k:
    How much employer match is being left on the table, and how do the
    current, match-maximizing and statutory-maximum contribution levels
    compound over 30 years?

Design principles
-----------------
- Each month or year of a scenario is an immutable state record produced by a
  pure step function.
- Inputs are validated on construction; the calculators themselves are total.

Example
-------
>>> result = calculate_hys_vs_debt(
...     HysVsDebtInputs(50_000, 4.5, 50_000, 7.0, 1_000), as_of=date(2025, 1, 1)
... )
>>> result.recommendation
'pay-loan'
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Literal, Optional, Tuple

from .constants import (
    BREAK_EVEN_TOLERANCE,
    CENT,
    HYS_VS_DEBT_MAX_MONTHS,
    HYS_VS_DEBT_TAIL_MONTHS,
    IRS_401K_LIMIT,
    RETIREMENT_PROJECTION_YEARS,
)
from .utils import check_non_negative, round2, short_month_label

__all__ = [
    "HysVsDebtInputs",
    "ScenarioState",
    "HysVsDebtPoint",
    "HysVsDebtResult",
    "step_scenario",
    "calculate_hys_vs_debt",
    "FourOhOneKInputs",
    "RetirementPoint",
    "FourOhOneKResult",
    "employer_match",
    "calculate_401k",
]


# ---------------------------------------------------------------------------
# HYS vs debt
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HysVsDebtInputs:
    """
    Parameters
    ----------
    hys_balance : float
        Cash currently held in the high-yield savings account.
    hys_apy : float
        Savings APY in percent.
    loan_balance : float
    loan_apr : float
        Loan APR in percent.
    monthly_payment : float
        Fixed monthly loan payment; redirected to savings once a loan is
        paid off.
    """

    hys_balance: float
    hys_apy: float
    loan_balance: float
    loan_apr: float
    monthly_payment: float

    def __post_init__(self) -> None:
        for name in ("hys_balance", "hys_apy", "loan_balance", "loan_apr", "monthly_payment"):
            check_non_negative(name, getattr(self, name))


@dataclass(frozen=True)
class ScenarioState:
    hys: float
    loan: float
    interest_earned: float = 0.0
    interest_paid: float = 0.0

    @property
    def net(self) -> float:
        return self.hys - self.loan


def step_scenario(state: ScenarioState, hys_rate: float, loan_rate: float, payment: float) -> ScenarioState:
    """
    One month of a scenario.

    Savings earn interest first. An open loan accrues interest and receives
    ``min(payment, loan)``; loans under one cent are closed. Once the loan is
    closed the payment goes to savings instead.
    """
    earned = state.hys * hys_rate
    hys = state.hys + earned
    loan = state.loan
    paid = 0.0
    if loan > 0:
        paid = loan * loan_rate
        loan += paid
        loan -= min(payment, loan)
        if loan < CENT:
            loan = 0.0
    else:
        hys += payment
    return ScenarioState(hys, loan, state.interest_earned + earned, state.interest_paid + paid)


@dataclass(frozen=True)
class HysVsDebtPoint:
    month: int
    label: str
    scenario_a_net: float
    scenario_b_net: float
    scenario_a_hys: float
    scenario_a_loan: float
    scenario_b_hys: float
    scenario_b_loan: float


@dataclass(frozen=True)
class HysVsDebtResult:
    """
    Attributes
    ----------
    points : tuple of HysVsDebtPoint
        Month 0 is the starting position of both scenarios.
    break_even_month : int or None
        First month paying the loan (scenario B) leads by more than a cent.
    net_benefit : float
        Final net position of B minus A.
    recommendation : {"pay-loan", "keep-hys"}
    """

    points: Tuple[HysVsDebtPoint, ...]
    break_even_month: Optional[int]
    net_benefit: float
    recommendation: Literal["pay-loan", "keep-hys"]
    scenario_a_interest_earned: float
    scenario_a_interest_paid: float
    scenario_b_interest_earned: float
    scenario_b_interest_paid: float


def calculate_hys_vs_debt(inputs: HysVsDebtInputs, as_of: date) -> HysVsDebtResult:
    """
    Compare keeping savings (A) against paying the loan down with them (B).

    Scenario B starts with ``loan = max(0, loan - hys)`` and
    ``hys = max(0, hys - loan)``. Both scenarios then run the same monthly
    rules until both loans have been closed for 12 months or 360 months have
    passed.
    """
    hys_rate = inputs.hys_apy / 100 / 12
    loan_rate = inputs.loan_apr / 100 / 12
    a = ScenarioState(inputs.hys_balance, inputs.loan_balance)
    b = ScenarioState(
        max(0.0, inputs.hys_balance - inputs.loan_balance),
        max(0.0, inputs.loan_balance - inputs.hys_balance),
    )

    def point(month: int) -> HysVsDebtPoint:
        return HysVsDebtPoint(
            month=month,
            label=short_month_label(as_of, month),
            scenario_a_net=round2(a.net),
            scenario_b_net=round2(b.net),
            scenario_a_hys=round2(a.hys),
            scenario_a_loan=round2(a.loan),
            scenario_b_hys=round2(b.hys),
            scenario_b_loan=round2(b.loan),
        )

    points: List[HysVsDebtPoint] = [point(0)]
    break_even: Optional[int] = None
    paid_off_month: Optional[int] = 0 if a.loan == 0 and b.loan == 0 else None

    for month in range(1, HYS_VS_DEBT_MAX_MONTHS + 1):
        a = step_scenario(a, hys_rate, loan_rate, inputs.monthly_payment)
        b = step_scenario(b, hys_rate, loan_rate, inputs.monthly_payment)
        points.append(point(month))

        if break_even is None and b.net > a.net + BREAK_EVEN_TOLERANCE:
            break_even = month
        if paid_off_month is None and a.loan == 0 and b.loan == 0:
            paid_off_month = month
        if paid_off_month is not None and month - paid_off_month >= HYS_VS_DEBT_TAIL_MONTHS:
            break

    net_benefit = round2(b.net - a.net)
    return HysVsDebtResult(
        points=tuple(points),
        break_even_month=break_even,
        net_benefit=net_benefit,
        recommendation="pay-loan" if net_benefit > 0 else "keep-hys",
        scenario_a_interest_earned=round2(a.interest_earned),
        scenario_a_interest_paid=round2(a.interest_paid),
        scenario_b_interest_earned=round2(b.interest_earned),
        scenario_b_interest_paid=round2(b.interest_paid),
    )


# ---------------------------------------------------------------------------
# 401(k)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FourOhOneKInputs:
    """
    Parameters
    ----------
    annual_salary : float
    current_contribution_pct : float
        Employee contribution as percent of salary.
    employer_match_pct : float
        Percent of each matched dollar the employer adds (50 = half).
    employer_match_cap_pct : float
        Percent of salary up to which contributions are matched.
    current_balance : float, default 0
    annual_return_pct : float, default 7
    """

    annual_salary: float
    current_contribution_pct: float
    employer_match_pct: float
    employer_match_cap_pct: float
    current_balance: float = 0.0
    annual_return_pct: float = 7.0

    def __post_init__(self) -> None:
        for name in (
            "annual_salary",
            "current_contribution_pct",
            "employer_match_pct",
            "employer_match_cap_pct",
            "current_balance",
        ):
            check_non_negative(name, getattr(self, name))


@dataclass(frozen=True)
class RetirementPoint:
    year: int
    label: str
    current: float
    optimal: float
    maximum: float


@dataclass(frozen=True)
class FourOhOneKResult:
    current_annual_contribution: float
    current_employer_match: float
    optimal_contribution_pct: float
    optimal_annual_contribution: float
    optimal_employer_match: float
    max_annual_contribution: float
    max_employer_match: float
    money_left_on_table: float
    projection: Tuple[RetirementPoint, ...]


def employer_match(contribution: float, salary: float, match_pct: float, cap_pct: float) -> float:
    """Employer match on *contribution*: the matched portion is capped at ``salary * cap``."""
    return min(contribution, salary * cap_pct / 100) * match_pct / 100


def calculate_401k(inputs: FourOhOneKInputs, limit: float = IRS_401K_LIMIT) -> FourOhOneKResult:
    """
    Compare current, match-maximizing and maximum 401(k) contributions.

    Every contribution is clamped to the statutory *limit*. Balances grow
    yearly as ``(balance + contribution + match) * (1 + return)``.
    """
    salary = inputs.annual_salary

    def contribution(pct: float) -> float:
        return min(salary * pct / 100, limit)

    def match(amount: float) -> float:
        return employer_match(amount, salary, inputs.employer_match_pct, inputs.employer_match_cap_pct)

    current = contribution(inputs.current_contribution_pct)
    optimal = contribution(inputs.employer_match_cap_pct)
    maximum = limit
    current_match, optimal_match, max_match = match(current), match(optimal), match(maximum)

    growth = 1 + inputs.annual_return_pct / 100
    balances = [inputs.current_balance] * 3
    yearly = [(current, current_match), (optimal, optimal_match), (maximum, max_match)]
    points = [RetirementPoint(0, "Now", *(round2(b) for b in balances))]
    for year in range(1, RETIREMENT_PROJECTION_YEARS + 1):
        balances = [(bal + c + m) * growth for bal, (c, m) in zip(balances, yearly)]
        points.append(RetirementPoint(year, f"Year {year}", *(round2(b) for b in balances)))

    return FourOhOneKResult(
        current_annual_contribution=round2(current),
        current_employer_match=round2(current_match),
        optimal_contribution_pct=inputs.employer_match_cap_pct,
        optimal_annual_contribution=round2(optimal),
        optimal_employer_match=round2(optimal_match),
        max_annual_contribution=round2(maximum),
        max_employer_match=round2(max_match),
        money_left_on_table=round2(max(optimal_match - current_match, 0.0)),
        projection=tuple(points),
    )
