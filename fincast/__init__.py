"""
FinCast - personal finance forecasting engine.

Modules
-------
- frequency: recurrence frequencies and monthly multipliers
- records: input records, goal variants and the financial snapshot
- income: income pattern detection and income precedence
- cashflow: expense totals, adjusted cash flow, net income projection
- summaries: contribution estimators, savings/debt summaries, net worth
- projection: per-account balance projection
- debt: multi-account debt payoff simulation
- savings: savings projection with milestones
- goals: goal progress tracking
- decisions: HYS-vs-debt and 401(k) calculators
- engine: ForecastEngine facade over a snapshot
- config / serialization / cli: request models, JSON I/O, command line
"""

__version__ = "0.1.0"

from .decisions import (
    FourOhOneKInputs,
    HysVsDebtInputs,
    calculate_401k,
    calculate_hys_vs_debt,
)
from .debt import DebtPayoffSimulator, DebtStrategy, compare_strategies, simulate_debt_payoff
from .engine import ForecastEngine
from .exceptions import (
    ConfigurationError,
    FinCastError,
    SnapshotError,
    UnknownFrequencyError,
    ValidationError,
)
from .frequency import Frequency, monthly_multiplier
from .income import detect_income_patterns, resolve_monthly_income
from .records import (
    Account,
    AccountProfile,
    AccountType,
    Bill,
    Budget,
    CustomGoal,
    DebtPayoffGoal,
    FinancialSnapshot,
    IncomeSource,
    NetWorthGoal,
    SavingsGoal,
    Transaction,
)
from .savings import project_savings

__all__ = [
    "__version__",
    "ForecastEngine",
    "FinancialSnapshot",
    "Account",
    "AccountProfile",
    "AccountType",
    "Transaction",
    "Bill",
    "Budget",
    "IncomeSource",
    "SavingsGoal",
    "DebtPayoffGoal",
    "NetWorthGoal",
    "CustomGoal",
    "Frequency",
    "monthly_multiplier",
    "detect_income_patterns",
    "resolve_monthly_income",
    "DebtStrategy",
    "DebtPayoffSimulator",
    "simulate_debt_payoff",
    "compare_strategies",
    "project_savings",
    "HysVsDebtInputs",
    "FourOhOneKInputs",
    "calculate_hys_vs_debt",
    "calculate_401k",
    "FinCastError",
    "ConfigurationError",
    "ValidationError",
    "UnknownFrequencyError",
    "SnapshotError",
]
