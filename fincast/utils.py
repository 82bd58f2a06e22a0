"""General utilities for FinCast

Contents
--------
- Validation helpers
- Rounding
- Calendar helpers (month shifting, labels, month differences)
- Index helpers (first-of-month DatetimeIndex for pandas outputs)
- Fold helper for step-wise simulations

Every calendar helper takes an explicit reference date; nothing here reads
the wall clock.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Iterator, TypeVar

import pandas as pd

__all__ = [
    # Validation
    "check_non_negative",
    # Rounding
    "round2",
    # Calendar
    "month_start",
    "shift_months",
    "month_label",
    "short_month_label",
    "months_between",
    "count_distinct_months",
    # Index
    "month_index",
    # Folds
    "unfold",
]

S = TypeVar("S")

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValueError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round2(value: float) -> float:
    """Round a currency amount to cents."""
    return round(float(value), 2)


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def month_start(d: date) -> date:
    """First day of the month containing *d*."""
    return date(d.year, d.month, 1)


def shift_months(d: date, months: int) -> date:
    """Shift *d* by whole calendar months, clamping the day to month end.

    >>> shift_months(date(2025, 8, 31), -6)
    datetime.date(2025, 2, 28)
    """
    return (pd.Timestamp(d) + pd.DateOffset(months=months)).date()


def month_label(as_of: date, offset: int = 0) -> str:
    """``YYYY-MM`` label of the month *offset* months after *as_of*."""
    return shift_months(month_start(as_of), offset).strftime("%Y-%m")


def short_month_label(as_of: date, offset: int = 0) -> str:
    """Compact ``Mon YY`` label (e.g. ``Mar 26``) used by the decision calculators."""
    return shift_months(month_start(as_of), offset).strftime("%b %y")


def months_between(start: date, end: date) -> int:
    """Whole calendar months from *start*'s month to *end*'s month (may be negative)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def count_distinct_months(dates: Iterable[date]) -> int:
    """Number of distinct calendar months in *dates*, floored at 1.

    Used as a divisor when averaging activity per month, so it never
    returns zero.
    """
    return max(len({(d.year, d.month) for d in dates}), 1)


# ---------------------------------------------------------------------------
# Index helpers
# ---------------------------------------------------------------------------

def month_index(start: date, months: int) -> pd.DatetimeIndex:
    """Construct a first-of-month DatetimeIndex for *months* periods from *start*."""
    if months <= 0:
        return pd.DatetimeIndex([], dtype="datetime64[ns]")
    first = pd.Timestamp(start.year, start.month, 1)
    return pd.date_range(start=first, periods=months, freq="MS")


# ---------------------------------------------------------------------------
# Folds
# ---------------------------------------------------------------------------

def unfold(step: Callable[[S], S], initial: S, steps: int) -> Iterator[S]:
    """Yield *initial* followed by *steps* successive applications of *step*.

    The simulations in this package are expressed as pure transitions over
    immutable state records; ``list(unfold(step, s0, n))`` is the full
    trajectory of ``n + 1`` states.
    """
    state = initial
    yield state
    for _ in range(steps):
        state = step(state)
        yield state
