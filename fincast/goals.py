"""
Goal progress tracking for FinCast.

Purpose
-------
Measures each goal's current value against its target, projects a monthly
trajectory toward it, and reports the projected completion month and whether
the goal is on track for its target date.

Key components
--------------
- GoalContext:
    Inputs shared by every calculator: the monthly financial summary, the
    horizon, ``as_of`` and the (optional) net-worth trajectory provider.
- One calculator per goal variant:
    savings    -> linked savings accounts compounded per account, else linear
    debt_payoff-> debt simulator with and without the extra payment
    net_worth  -> account projector overall series, linear fallback
    custom     -> linear growth from the goal's own contribution
- compute_goal_progress:
    Dispatches every active goal and assembles GoalProgressResponse.

Design principles
-----------------
- Dispatch is closed over the ``Goal`` union; an unsupported object raises
  ``TypeError`` instead of being silently skipped.
- A manual ``current_amount`` on the goal always wins.
- Goals with a past ``start_date`` get interpolated history points prepended
  so charts can show progress from the start.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type

from .cashflow import MonthlyFinancialSummary
from .debt import DebtStrategy, simulate_debt_payoff
from .projection import CompoundingModel, ProjectionPoint
from .records import (
    CustomGoal,
    DebtPayoffGoal,
    Goal,
    GoalType,
    NetWorthGoal,
    SavingsGoal,
)
from .utils import month_label, month_start, months_between, round2, shift_months

__all__ = [
    "GoalProgressPoint",
    "GoalProgress",
    "GoalProgressResponse",
    "GoalContext",
    "NetWorthProjector",
    "percent_complete",
    "goal_progress",
    "compute_goal_progress",
    "prepend_history",
]

logger = logging.getLogger(__name__)

NetWorthProjector = Callable[[int], Sequence[ProjectionPoint]]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GoalProgressPoint:
    month: str
    projected: float
    target: float
    actual: Optional[float] = None
    minimum_only: Optional[float] = None


@dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    goal_name: str
    goal_type: GoalType
    target_amount: float
    current_amount: float
    percent_complete: float
    monthly_contribution: float
    target_date: Optional[str]
    projected_completion_date: Optional[str]
    on_track: bool
    projection: Tuple[GoalProgressPoint, ...]


@dataclass(frozen=True)
class GoalProgressResponse:
    goals: Tuple[GoalProgress, ...]
    monthly_surplus: float
    monthly_income: float
    monthly_expenses: float
    monthly_debt_payments: float


@dataclass(frozen=True)
class GoalContext:
    """
    Inputs shared by the goal calculators.

    ``net_worth_projection`` maps a horizon to the overall account
    projection. It is the primary trajectory for net-worth goals; when it
    raises, or returns no points, the goal falls back to
    ``current + surplus * month`` and a warning is logged.
    """

    summary: MonthlyFinancialSummary
    months: int
    as_of: date
    net_worth_projection: Optional[NetWorthProjector] = None


@dataclass(frozen=True)
class _Forecast:
    """What a variant calculator hands to the shared post-processing."""

    target_amount: float
    current_amount: float
    contribution: float
    projection: Tuple[GoalProgressPoint, ...]
    completion: Optional[str]
    history_value: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _points(values: Sequence[float], target: float, as_of: date) -> Tuple[GoalProgressPoint, ...]:
    return tuple(
        GoalProgressPoint(month_label(as_of, i), round2(v), target) for i, v in enumerate(values)
    )


def _first_reaching(points: Sequence[GoalProgressPoint], target: float) -> Optional[str]:
    return next((p.month for p in points if p.projected >= target), None)


def _linear(start: float, contribution: float, months: int) -> List[float]:
    return [start + contribution * i for i in range(months)]


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def _accrued_current(goal: Goal, contribution: float, as_of: date) -> float:
    """Current value of an unlinked goal: override, accrual since start, or start amount."""
    if goal.current_amount is not None:
        return goal.current_amount
    if goal.start_date is not None and goal.start_amount is not None and contribution > 0:
        elapsed = max(months_between(goal.start_date, as_of), 0)
        return goal.start_amount + contribution * elapsed
    return goal.start_amount or 0.0


def prepend_history(
    projection: Sequence[GoalProgressPoint],
    goal: Goal,
    current_value: float,
    as_of: date,
) -> Tuple[GoalProgressPoint, ...]:
    """
    Prepend interpolated history from ``goal.start_date`` up to *as_of*.

    Historical points move linearly from ``start_amount`` toward
    *current_value* and carry ``actual == projected``. The first forward point
    is pinned to *current_value* so history and projection join without a gap.
    Goals without a start date, or starting this month or later, are returned
    unchanged.
    """
    if goal.start_date is None or not projection:
        return tuple(projection)
    months_diff = months_between(goal.start_date, as_of)
    if months_diff <= 0:
        return tuple(projection)

    start_amount = goal.start_amount or 0.0
    target = projection[0].target
    first_month = month_start(goal.start_date)
    history = []
    for i in range(months_diff):
        value = round2(start_amount + (current_value - start_amount) * i / months_diff)
        history.append(
            GoalProgressPoint(shift_months(first_month, i).strftime("%Y-%m"), value, target, actual=value)
        )
    now = replace(projection[0], projected=round2(current_value), actual=round2(current_value))
    return (*history, now, *projection[1:])


# ---------------------------------------------------------------------------
# Variant calculators
# ---------------------------------------------------------------------------

def _savings(goal: SavingsGoal, ctx: GoalContext) -> _Forecast:
    linked = [a for a in ctx.summary.savings_accounts if a.account_id in goal.account_ids]
    estimated = sum(a.estimated_monthly_contribution for a in linked)
    override = goal.monthly_contribution if _positive(goal.monthly_contribution) else None
    contribution = override if override is not None else estimated

    if goal.current_amount is not None:
        current = goal.current_amount
    elif linked:
        current = sum(a.current_balance for a in linked)
    else:
        current = _accrued_current(goal, contribution, ctx.as_of)

    if linked:
        totals = [0.0] * ctx.months
        for account in linked:
            if override is None:
                share = account.estimated_monthly_contribution
            elif estimated > 0:
                share = override * account.estimated_monthly_contribution / estimated
            else:
                share = override / len(linked)
            model = CompoundingModel(account.apy, share)
            for i, state in enumerate(model.trajectory(account.current_balance, ctx.months)):
                totals[i] += state.balance
        values = totals
    else:
        values = _linear(current, contribution, ctx.months)

    points = _points(values, goal.target_amount, ctx.as_of)
    return _Forecast(
        goal.target_amount, current, contribution, points,
        _first_reaching(points, goal.target_amount), current,
    )


def _debt_payoff(goal: DebtPayoffGoal, ctx: GoalContext) -> _Forecast:
    linked = [d for d in ctx.summary.debt_accounts if d.account_id in goal.account_ids]
    remaining = sum(d.current_balance for d in linked)
    if _positive(goal.start_amount):
        target = goal.start_amount
    elif goal.target_amount > 0:
        target = goal.target_amount
    else:
        target = remaining
    current = goal.current_amount if goal.current_amount is not None else max(target - remaining, 0.0)
    contribution = sum(d.minimum_payment for d in linked) + goal.extra_payment

    if linked:
        with_extra = simulate_debt_payoff(
            linked, ctx.as_of, goal.extra_payment, DebtStrategy.AVALANCHE, max_months=ctx.months
        )
        minimum_only = simulate_debt_payoff(
            linked, ctx.as_of, 0.0, DebtStrategy.AVALANCHE, max_months=ctx.months
        )

        def padded(result) -> List[float]:
            totals = [p.total_balance for p in result.aggregate_schedule][: ctx.months]
            return totals + [0.0] * (ctx.months - len(totals))

        projection = tuple(
            GoalProgressPoint(month_label(ctx.as_of, i), round2(p), 0.0, minimum_only=round2(m))
            for i, (p, m) in enumerate(zip(padded(with_extra), padded(minimum_only)))
        )
        completion = with_extra.debt_free_date
    else:
        projection = _points([remaining] * ctx.months, 0.0, ctx.as_of)
        completion = month_label(ctx.as_of) if remaining <= 0 and ctx.months > 0 else None

    return _Forecast(target, current, contribution, projection, completion, remaining)


def _net_worth_values(ctx: GoalContext, current: float, contribution: float) -> List[float]:
    """Account-projector trajectory, or a linear path when it is unavailable."""
    if ctx.net_worth_projection is not None:
        try:
            overall = list(ctx.net_worth_projection(ctx.months))
        except Exception as exc:
            logger.warning("Net worth projection failed, using linear trajectory: %r", exc)
        else:
            if overall:
                return [p.balance for p in overall]
            logger.warning("Net worth projection returned no points, using linear trajectory")
    return _linear(current, contribution, ctx.months)


def _net_worth(goal: NetWorthGoal, ctx: GoalContext) -> _Forecast:
    current = goal.current_amount if goal.current_amount is not None else ctx.summary.net_worth
    contribution = ctx.summary.monthly_surplus
    points = _points(_net_worth_values(ctx, current, contribution), goal.target_amount, ctx.as_of)
    return _Forecast(
        goal.target_amount, current, contribution, points,
        _first_reaching(points, goal.target_amount), current,
    )


def _custom(goal: CustomGoal, ctx: GoalContext) -> _Forecast:
    contribution = goal.monthly_contribution if _positive(goal.monthly_contribution) else 0.0
    current = _accrued_current(goal, contribution, ctx.as_of)
    points = _points(_linear(current, contribution, ctx.months), goal.target_amount, ctx.as_of)
    return _Forecast(
        goal.target_amount, current, contribution, points,
        _first_reaching(points, goal.target_amount), current,
    )


_CALCULATORS: Dict[Type, Callable[..., _Forecast]] = {
    SavingsGoal: _savings,
    DebtPayoffGoal: _debt_payoff,
    NetWorthGoal: _net_worth,
    CustomGoal: _custom,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def percent_complete(current: float, target: float) -> float:
    """``current / target`` as a percentage clamped to [0, 100]; 0 for non-positive targets."""
    if target <= 0:
        return 0.0
    return round2(min(max(current / target * 100, 0.0), 100.0))


def goal_progress(goal: Goal, ctx: GoalContext) -> GoalProgress:
    """
    Compute progress for a single goal.

    Raises
    ------
    TypeError
        If *goal* is not one of the four goal variants.
    """
    calculator = _CALCULATORS.get(type(goal))
    if calculator is None:
        raise TypeError(f"Unsupported goal type: {type(goal).__name__}")
    forecast = calculator(goal, ctx)

    target_month = goal.target_date.strftime("%Y-%m") if goal.target_date else None
    on_track = forecast.completion is not None and (
        target_month is None or forecast.completion <= target_month
    )
    return GoalProgress(
        goal_id=goal.id,
        goal_name=goal.name,
        goal_type=goal.goal_type,
        target_amount=forecast.target_amount,
        current_amount=round2(forecast.current_amount),
        percent_complete=percent_complete(forecast.current_amount, forecast.target_amount),
        monthly_contribution=round2(forecast.contribution),
        target_date=goal.target_date.isoformat() if goal.target_date else None,
        projected_completion_date=forecast.completion,
        on_track=on_track,
        projection=prepend_history(forecast.projection, goal, forecast.history_value, ctx.as_of),
    )


def compute_goal_progress(
    goals: Sequence[Goal],
    summary: MonthlyFinancialSummary,
    months: int,
    as_of: date,
    net_worth_projection: Optional[NetWorthProjector] = None,
) -> GoalProgressResponse:
    """
    Progress for every active goal.

    Parameters
    ----------
    goals : sequence of Goal
    summary : MonthlyFinancialSummary
        Income, expenses, debt minimums, net worth and account summaries.
    months : int
        Forward horizon, month 0 included.
    as_of : date
    net_worth_projection : callable, optional
        ``months -> overall projection points``; primary trajectory for
        net-worth goals.
    """
    ctx = GoalContext(summary, months, as_of, net_worth_projection)
    progress = tuple(goal_progress(goal, ctx) for goal in goals if goal.is_active)
    return GoalProgressResponse(
        goals=progress,
        monthly_surplus=summary.monthly_surplus,
        monthly_income=round2(summary.monthly_income),
        monthly_expenses=round2(summary.monthly_expenses),
        monthly_debt_payments=round2(summary.monthly_debt_payments),
    )
