"""
Configuration management module for FinCast.

Purpose
-------
Type-safe request parameters and application settings. The request models
are the boundary where user-supplied ranges are enforced (horizons, what-if
percentages, extra payments, calculator inputs); the core trusts what they
produce.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for request payloads
- Environment-aware: AppSettings reads FINCAST_* variables and .env files

Example
-------
>>> from fincast.config import ProjectionConfig, DebtPayoffConfig
>>> ProjectionConfig(months=24, income_adjustment_pct=-10).months
24
>>> DebtPayoffConfig(extra_payment=250).strategy
'avalanche'
>>> DebtPayoffConfig.model_validate({"extra_payment": 100, "max_months": 120})
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CONTRIBUTION_LOOKBACK_MONTHS,
    DEFAULT_DEBT_MAX_MONTHS,
    DEFAULT_PROJECTION_MONTHS,
    INCOME_LOOKBACK_MONTHS,
    INCOME_MIN_AMOUNT,
    INCOME_MIN_OCCURRENCES,
    MAX_ADJUSTMENT_PCT,
    MAX_EXTRA_PAYMENT,
    MAX_PROJECTION_MONTHS,
)
from .decisions import FourOhOneKInputs, HysVsDebtInputs

__all__ = [
    "IncomeDetectionConfig",
    "ProjectionConfig",
    "SavingsProjectionConfig",
    "DebtPayoffConfig",
    "HysVsDebtConfig",
    "FourOhOneKConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Income detection
# ---------------------------------------------------------------------------

class IncomeDetectionConfig(BaseModel):
    """
    Thresholds for the income pattern detector and activity estimators.

    Attributes
    ----------
    min_amount : float
        Deposits must exceed this amount (default 25).
    min_occurrences : int
        Minimum deposits per pattern (default 3).
    lookback_months : int
        Income detection window in months (default 6).
    contribution_lookback_months : int
        Window for savings contribution estimates (default 3).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_amount: float = Field(default=INCOME_MIN_AMOUNT, ge=0.0)
    min_occurrences: int = Field(default=INCOME_MIN_OCCURRENCES, ge=2)
    lookback_months: int = Field(default=INCOME_LOOKBACK_MONTHS, ge=1, le=24)
    contribution_lookback_months: int = Field(default=CONTRIBUTION_LOOKBACK_MONTHS, ge=1, le=24)


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------

class ProjectionConfig(BaseModel):
    """
    Account projection request.

    Adjustments are what-if percentages applied to monthly income and
    expenses before checking accounts are projected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    months: int = Field(default=DEFAULT_PROJECTION_MONTHS, ge=1, le=MAX_PROJECTION_MONTHS)
    income_adjustment_pct: float = Field(
        default=0.0,
        ge=-MAX_ADJUSTMENT_PCT,
        le=MAX_ADJUSTMENT_PCT,
        description="Percent change applied to monthly income",
    )
    expense_adjustment_pct: float = Field(
        default=0.0,
        ge=-MAX_ADJUSTMENT_PCT,
        le=MAX_ADJUSTMENT_PCT,
        description="Percent change applied to monthly expenses",
    )
    excluded_account_ids: List[str] = Field(default_factory=list)


class SavingsProjectionConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    months: int = Field(default=DEFAULT_PROJECTION_MONTHS, ge=1, le=MAX_PROJECTION_MONTHS)
    contribution_override: Optional[float] = Field(default=None, ge=0.0)
    apy_override: Optional[float] = Field(default=None, ge=0.0, le=100.0)


# ---------------------------------------------------------------------------
# Debt payoff
# ---------------------------------------------------------------------------

class DebtPayoffConfig(BaseModel):
    """
    Debt payoff request.

    Attributes
    ----------
    extra_payment : float
        Monthly amount on top of all minimums, 0 to 50,000.
    strategy : {"avalanche", "snowball", "custom"}
    custom_order : list of str
        Account ids in payoff order; required by the custom strategy.
    account_ids : list of str, optional
        Restrict the simulation to these debts.
    include_mortgages : bool
    max_months : int
        Simulation cap (default 360).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    extra_payment: float = Field(default=0.0, ge=0.0, le=MAX_EXTRA_PAYMENT)
    strategy: Literal["avalanche", "snowball", "custom"] = "avalanche"
    custom_order: List[str] = Field(default_factory=list)
    account_ids: Optional[List[str]] = None
    include_mortgages: bool = True
    max_months: int = Field(default=DEFAULT_DEBT_MAX_MONTHS, ge=1, le=600)
    roll_over_minimums: bool = False

    @model_validator(mode="after")
    def check_custom_order(self) -> "DebtPayoffConfig":
        if self.strategy == "custom" and not self.custom_order:
            raise ValueError("strategy 'custom' requires custom_order")
        return self

    @field_validator("custom_order")
    @classmethod
    def check_unique(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("custom_order must not repeat account ids")
        return v


# ---------------------------------------------------------------------------
# Decision calculators
# ---------------------------------------------------------------------------

class HysVsDebtConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    hys_balance: float = Field(ge=0.0)
    hys_apy: float = Field(ge=0.0, le=100.0)
    loan_balance: float = Field(ge=0.0)
    loan_apr: float = Field(ge=0.0, le=100.0)
    monthly_payment: float = Field(ge=0.0)

    def to_inputs(self) -> HysVsDebtInputs:
        return HysVsDebtInputs(**self.model_dump())


class FourOhOneKConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    annual_salary: float = Field(ge=0.0)
    current_contribution_pct: float = Field(ge=0.0, le=100.0)
    employer_match_pct: float = Field(ge=0.0, le=200.0)
    employer_match_cap_pct: float = Field(ge=0.0, le=100.0)
    current_balance: float = Field(default=0.0, ge=0.0)
    annual_return_pct: float = Field(default=7.0, ge=-50.0, le=50.0)

    def to_inputs(self) -> FourOhOneKInputs:
        return FourOhOneKInputs(**self.model_dump())


# ---------------------------------------------------------------------------
# Application Settings
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with FINCAST_ (e.g., FINCAST_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    json_logs : bool
        Emit JSON log lines
    default_months : int
        Horizon used when a command does not specify one

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="FINCAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    default_months: int = Field(
        default=DEFAULT_PROJECTION_MONTHS,
        ge=1,
        le=MAX_PROJECTION_MONTHS,
        description="Default projection horizon in months",
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level
