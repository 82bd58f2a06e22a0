"""
Recurrence frequencies and monthly-equivalent conversion.

Every recurring amount in FinCast (detected income, manual income sources,
bills, budgets) is normalized to an average per-month figure through
``monthly_multiplier``. The mapping is closed: a value outside the five known
frequencies raises ``UnknownFrequencyError``.

Example
-------
>>> from fincast.frequency import Frequency, monthly_multiplier
>>> monthly_multiplier(Frequency.BIWEEKLY) * 12
26.0
>>> monthly_multiplier("quarterly")
0.3333333333333333
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Union

from .exceptions import UnknownFrequencyError

__all__ = [
    "Frequency",
    "FrequencyLike",
    "parse_frequency",
    "monthly_multiplier",
    "annual_occurrences",
]


class Frequency(str, Enum):
    """Recurrence of an income, bill or budget amount."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


FrequencyLike = Union[Frequency, str]

_ANNUAL_OCCURRENCES: Dict[Frequency, int] = {
    Frequency.WEEKLY: 52,
    Frequency.BIWEEKLY: 26,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.YEARLY: 1,
}


def parse_frequency(value: FrequencyLike) -> Frequency:
    """Coerce a string (case-insensitive) or ``Frequency`` to ``Frequency``.

    Raises
    ------
    UnknownFrequencyError
        If *value* is not one of the five supported frequencies.
    """
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(str(value).strip().lower())
    except ValueError:
        raise UnknownFrequencyError(value) from None


def annual_occurrences(frequency: FrequencyLike) -> int:
    """Number of occurrences per year (52, 26, 12, 4 or 1)."""
    return _ANNUAL_OCCURRENCES[parse_frequency(frequency)]


def monthly_multiplier(frequency: FrequencyLike) -> float:
    """
    Factor converting one occurrence into its average monthly amount.

    Parameters
    ----------
    frequency : Frequency or str
        Recurrence of the amount.

    Returns
    -------
    float
        weekly 52/12, biweekly 26/12, monthly 1, quarterly 1/3, yearly 1/12.

    Raises
    ------
    UnknownFrequencyError
        If *frequency* is not recognized.
    """
    return annual_occurrences(frequency) / 12
