"""
Income detection and income precedence for FinCast.

Purpose
-------
Infers recurring income from raw transaction history and decides which
monthly income figure the rest of the engine uses.

Key components
--------------
- detect_income_patterns:
    Groups deposits by normalized description, discards transfers and small
    amounts, and classifies each surviving group's cadence from the average
    gap between occurrences.

- resolve_monthly_income:
    The single precedence rule for monthly income. Active manual income
    sources replace detected income entirely; they are never added to it.

Design principles
-----------------
- Deterministic: the output depends only on the transactions and ``as_of``,
  never on input order or the wall clock.
- Thresholds (amount floor, occurrence count, lookback window) come from
  ``constants`` and can be overridden per call.

Example
-------
>>> from datetime import date
>>> from fincast.income import detect_income_patterns, resolve_monthly_income
>>> patterns = detect_income_patterns(transactions, as_of=date(2025, 6, 15))
>>> resolution = resolve_monthly_income(manual_sources=(), detected=patterns)
>>> resolution.source
'detected'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Literal, Sequence, Tuple

import numpy as np

from .constants import (
    BIWEEKLY_MAX_GAP_DAYS,
    INCOME_LOOKBACK_MONTHS,
    INCOME_MIN_AMOUNT,
    INCOME_MIN_OCCURRENCES,
    MONTHLY_MAX_GAP_DAYS,
    QUARTERLY_MAX_GAP_DAYS,
    TRANSFER_PATTERN,
    WEEKLY_MAX_GAP_DAYS,
)
from .frequency import Frequency, monthly_multiplier
from .records import IncomeSource, Transaction
from .utils import round2, shift_months

__all__ = [
    "DetectedIncomePattern",
    "IncomeResolution",
    "normalize_description",
    "is_transfer",
    "classify_gap",
    "detect_income_patterns",
    "resolve_monthly_income",
]

logger = logging.getLogger(__name__)

_TRANSFER_RE = re.compile(TRANSFER_PATTERN, re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^A-Z0-9 ]")


@dataclass(frozen=True)
class DetectedIncomePattern:
    """A recurring deposit inferred from transaction history."""

    description: str
    average_amount: float
    frequency: Frequency
    monthly_equivalent: float
    occurrences: int
    last_seen: date


@dataclass(frozen=True)
class IncomeResolution:
    """
    Monthly income chosen by the precedence rule.

    Attributes
    ----------
    monthly_income : float
        Figure every downstream consumer uses.
    source : {"manual", "detected"}
        Which input produced ``monthly_income``.
    manual_income : float
        Sum of active manual sources (0 when there are none).
    detected_income : float
        Sum of detected monthly equivalents; informational when manual wins.
    """

    monthly_income: float
    source: Literal["manual", "detected"]
    manual_income: float
    detected_income: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_description(description: str) -> str:
    """Uppercase, trim, collapse whitespace and drop non-alphanumerics.

    >>> normalize_description("  Acme  Corp. Payroll #123 ")
    'ACME CORP PAYROLL 123'
    """
    text = _WHITESPACE_RE.sub(" ", description.upper().strip())
    return _NON_ALNUM_RE.sub("", text)


def is_transfer(description: str) -> bool:
    """True if *description* looks like a movement between the user's own accounts."""
    return _TRANSFER_RE.search(description) is not None


def classify_gap(average_gap_days: float) -> Frequency:
    """Map the average days between occurrences to a frequency bucket."""
    if average_gap_days <= WEEKLY_MAX_GAP_DAYS:
        return Frequency.WEEKLY
    if average_gap_days <= BIWEEKLY_MAX_GAP_DAYS:
        return Frequency.BIWEEKLY
    if average_gap_days <= MONTHLY_MAX_GAP_DAYS:
        return Frequency.MONTHLY
    if average_gap_days <= QUARTERLY_MAX_GAP_DAYS:
        return Frequency.QUARTERLY
    return Frequency.YEARLY


def _pattern_from_group(group: Sequence[Transaction]) -> DetectedIncomePattern:
    ordinals = np.array([t.date.toordinal() for t in group], dtype=float)
    average_gap = float(np.diff(ordinals).mean())
    average_amount = float(np.mean([t.amount for t in group]))
    frequency = classify_gap(average_gap)
    return DetectedIncomePattern(
        description=group[0].description,
        average_amount=round2(average_amount),
        frequency=frequency,
        monthly_equivalent=round2(average_amount * monthly_multiplier(frequency)),
        occurrences=len(group),
        last_seen=group[-1].date,
    )


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------

def detect_income_patterns(
    transactions: Iterable[Transaction],
    as_of: date,
    *,
    lookback_months: int = INCOME_LOOKBACK_MONTHS,
    min_amount: float = INCOME_MIN_AMOUNT,
    min_occurrences: int = INCOME_MIN_OCCURRENCES,
) -> List[DetectedIncomePattern]:
    """
    Detect recurring income deposits.

    Parameters
    ----------
    transactions : iterable of Transaction
        Raw history across all accounts.
    as_of : date
        Reference date; only transactions in
        ``[as_of - lookback_months, as_of]`` are considered.
    lookback_months : int, default 6
    min_amount : float, default 25
        Deposits must be strictly greater than this.
    min_occurrences : int, default 3
        Groups with fewer occurrences are discarded.

    Returns
    -------
    list of DetectedIncomePattern
        Sorted by ``monthly_equivalent`` descending, ties by description.

    Notes
    -----
    Frequency is classified from the mean gap in days between consecutive
    occurrences: <=10 weekly, <=18 biweekly, <=45 monthly, <=100 quarterly,
    otherwise yearly. Amounts are rounded to cents.
    """
    cutoff = shift_months(as_of, -lookback_months)
    candidates = sorted(
        (
            t for t in transactions
            if cutoff <= t.date <= as_of
            and t.amount > min_amount
            and not is_transfer(t.description)
        ),
        key=lambda t: (t.date, t.description, t.amount),
    )

    groups: Dict[str, List[Transaction]] = {}
    for txn in candidates:
        groups.setdefault(normalize_description(txn.description), []).append(txn)

    patterns = [
        _pattern_from_group(group)
        for group in groups.values()
        if len(group) >= min_occurrences
    ]
    patterns.sort(key=lambda p: (-p.monthly_equivalent, p.description))
    logger.debug(
        "Detected %d income pattern(s) from %d candidate deposit(s)",
        len(patterns), len(candidates),
    )
    return patterns


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------

def resolve_monthly_income(
    manual_sources: Iterable[IncomeSource],
    detected: Iterable[DetectedIncomePattern],
) -> IncomeResolution:
    """
    Choose the monthly income figure.

    When at least one active manual source exists its total is used and
    detected income is reported for information only. Otherwise the sum of
    detected monthly equivalents is used.
    """
    active: Tuple[IncomeSource, ...] = tuple(s for s in manual_sources if s.is_active)
    manual_total = round2(sum(s.monthly_amount for s in active))
    detected_total = round2(sum(p.monthly_equivalent for p in detected))
    if active:
        return IncomeResolution(manual_total, "manual", manual_total, detected_total)
    return IncomeResolution(detected_total, "detected", manual_total, detected_total)
