"""
Global constants for FinCast.

Purpose
-------
Centralizes thresholds, horizons and statutory limits used throughout the
forecasting engine. Detection thresholds are exact: changing them changes
which transactions count as income.

Usage
-----
>>> from fincast.constants import INCOME_MIN_AMOUNT, IRS_401K_LIMIT
>>> INCOME_MIN_AMOUNT
25.0

Categories
----------
- Income detection: amount floor, occurrence count, lookback windows
- Frequency classification: average-gap boundaries in days
- Horizons: projection and simulation caps
- Savings: milestone tiers
- Decision calculators: IRS limit, comparison horizons
"""

from typing import Tuple

__all__ = [
    # Income detection
    "INCOME_MIN_AMOUNT",
    "INCOME_MIN_OCCURRENCES",
    "INCOME_LOOKBACK_MONTHS",
    "CONTRIBUTION_LOOKBACK_MONTHS",
    "TRANSFER_PATTERN",
    # Frequency classification
    "WEEKLY_MAX_GAP_DAYS",
    "BIWEEKLY_MAX_GAP_DAYS",
    "MONTHLY_MAX_GAP_DAYS",
    "QUARTERLY_MAX_GAP_DAYS",
    # Horizons
    "DEFAULT_PROJECTION_MONTHS",
    "MAX_PROJECTION_MONTHS",
    "DEFAULT_DEBT_MAX_MONTHS",
    "MAX_ADJUSTMENT_PCT",
    "MAX_EXTRA_PAYMENT",
    # Savings
    "SAVINGS_MILESTONE_TIERS",
    # Decisions
    "IRS_401K_LIMIT",
    "HYS_VS_DEBT_MAX_MONTHS",
    "HYS_VS_DEBT_TAIL_MONTHS",
    "BREAK_EVEN_TOLERANCE",
    "RETIREMENT_PROJECTION_YEARS",
    # Rounding
    "CENT",
]


# =============================================================================
# Income Detection
# =============================================================================

INCOME_MIN_AMOUNT: float = 25.0
"""Deposits must be strictly greater than this to count as income."""

INCOME_MIN_OCCURRENCES: int = 3
"""Minimum occurrences of a normalized description to form a pattern."""

INCOME_LOOKBACK_MONTHS: int = 6
"""Transaction window (months before as-of date) scanned for income."""

CONTRIBUTION_LOOKBACK_MONTHS: int = 3
"""Window used to estimate savings contributions and credit net change."""

TRANSFER_PATTERN: str = (
    r"transfer|xfer|zelle|venmo|cashapp|paypal.*transfer"
    r"|ach.*(?:from|to) (?:savings|checking)|internal"
)
"""Case-insensitive pattern of descriptions treated as internal transfers."""


# =============================================================================
# Frequency Classification
# =============================================================================

WEEKLY_MAX_GAP_DAYS: float = 10.0
"""Average gaps up to this many days classify as weekly."""

BIWEEKLY_MAX_GAP_DAYS: float = 18.0
"""Average gaps up to this many days classify as biweekly."""

MONTHLY_MAX_GAP_DAYS: float = 45.0
"""Average gaps up to this many days classify as monthly."""

QUARTERLY_MAX_GAP_DAYS: float = 100.0
"""Average gaps up to this many days classify as quarterly; above is yearly."""


# =============================================================================
# Horizons
# =============================================================================

DEFAULT_PROJECTION_MONTHS: int = 12
"""Default horizon for account, net-income and goal projections."""

MAX_PROJECTION_MONTHS: int = 120
"""Largest projection horizon accepted by the request models (10 years)."""

DEFAULT_DEBT_MAX_MONTHS: int = 360
"""Default month cap for the debt payoff simulator (30 years)."""

MAX_ADJUSTMENT_PCT: float = 50.0
"""Income/expense what-if adjustments are clamped to +/- this percentage."""

MAX_EXTRA_PAYMENT: float = 50_000.0
"""Largest monthly extra debt payment accepted by the request models."""


# =============================================================================
# Savings
# =============================================================================

SAVINGS_MILESTONE_TIERS: Tuple[Tuple[float, Tuple[float, ...]], ...] = (
    (1_000.0, (1_000.0, 5_000.0, 10_000.0)),
    (10_000.0, (10_000.0, 25_000.0, 50_000.0)),
    (100_000.0, (25_000.0, 50_000.0, 100_000.0)),
    (float("inf"), (250_000.0, 500_000.0, 1_000_000.0)),
)
"""(balance ceiling, milestone targets) pairs, scanned in order.

The first tier whose ceiling exceeds the current balance supplies the targets.
"""


# =============================================================================
# Decision Calculators
# =============================================================================

IRS_401K_LIMIT: float = 23_500.0
"""Annual employee elective-deferral limit for 401(k) plans (2025)."""

HYS_VS_DEBT_MAX_MONTHS: int = 360
"""Longest horizon of the HYS-vs-debt comparison."""

HYS_VS_DEBT_TAIL_MONTHS: int = 12
"""Months simulated after both loans are paid off before stopping."""

BREAK_EVEN_TOLERANCE: float = 0.01
"""Margin by which paying the loan must lead before it counts as break-even."""

RETIREMENT_PROJECTION_YEARS: int = 30
"""Length of the 401(k) balance projection in years."""


# =============================================================================
# Rounding
# =============================================================================

CENT: float = 0.01
"""Balances below one cent are treated as paid off."""
