"""
Custom exceptions for FinCast.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling across
all FinCast modules. All exceptions inherit from FinCastError, enabling
catch-all handling at the API boundary.

Exception Hierarchy
-------------------
FinCastError (base)
├── ConfigurationError - Invalid configuration or parameters
├── ValidationError - Data validation failures
│   └── UnknownFrequencyError - Frequency value outside the known set
└── SnapshotError - Malformed snapshot payload

Usage
-----
>>> from fincast.exceptions import FinCastError, UnknownFrequencyError
>>>
>>> try:
...     monthly_multiplier("fortnightly")
... except FinCastError as e:
...     print(f"FinCast error: {e}")
"""

__all__ = [
    "FinCastError",
    "ConfigurationError",
    "ValidationError",
    "UnknownFrequencyError",
    "SnapshotError",
]


class FinCastError(Exception):
    """
    Base exception for all FinCast errors.

    Examples
    --------
    >>> try:
    ...     engine.account_projections(months=12)
    ... except FinCastError as e:
    ...     logger.error("Projection failed: %s", e)
    """
    pass


class ConfigurationError(FinCastError):
    """
    Invalid configuration or parameters.

    Raised when a request cannot be honored as configured, such as a custom
    debt order naming an account that is not part of the simulation.
    """
    pass


class ValidationError(FinCastError):
    """
    Data validation failures.

    Raised when input records carry values the engine cannot interpret.
    """
    pass


class UnknownFrequencyError(ValidationError):
    """
    Frequency value outside weekly/biweekly/monthly/quarterly/yearly.

    Unknown frequencies raise instead of being treated as monthly.

    Examples
    --------
    >>> raise UnknownFrequencyError("daily")
    """

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Unknown frequency {value!r}; expected one of "
            "weekly, biweekly, monthly, quarterly, yearly."
        )


class SnapshotError(FinCastError):
    """
    Malformed snapshot payload.

    Raised by the serialization layer when a JSON snapshot is missing
    required fields or carries values of the wrong type.
    """
    pass
