"""
Type definitions for FinCast.

Purpose
-------
TypedDict definitions for the JSON payloads exchanged with the API layer:
snapshot records coming in, projection points going out.

Type Definitions
----------------
AccountDict, ProfileDict, TransactionDict, RecurringDict, GoalDict
    Snapshot records as they appear in a JSON snapshot file.

SnapshotDict
    Top-level snapshot document.

ProjectionPointDict, GoalProgressPointDict
    Serialized projection points. Optional keys are omitted when absent.
"""

from typing import Dict, List, Union

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "AccountDict",
    "ProfileDict",
    "TransactionDict",
    "RecurringDict",
    "GoalDict",
    "SnapshotDict",
    "ProjectionPointDict",
    "GoalProgressPointDict",
    "JSONValue",
]

JSONValue = Union[None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]]


class AccountDict(TypedDict):
    id: str
    name: str
    type: str
    current_balance: float
    interest_rate: NotRequired[float]
    is_favorite: NotRequired[bool]
    is_active: NotRequired[bool]
    estimated_value: NotRequired[float]


class ProfileDict(TypedDict, total=False):
    apy: float
    rate_of_return: float
    interest_rate: float
    monthly_payment: float
    minimum_payment: float
    is_mortgage: bool


class TransactionDict(TypedDict):
    account_id: str
    date: str
    description: str
    amount: float


class RecurringDict(TypedDict):
    """Bill, budget or manual income source."""

    amount: float
    frequency: NotRequired[str]
    is_active: NotRequired[bool]
    name: NotRequired[str]
    category: NotRequired[str]


class GoalDict(TypedDict):
    """
    Goal record; ``type`` selects the variant.

    Valid types: "savings", "debt_payoff", "net_worth", "custom".
    """

    type: str
    id: str
    name: str
    target_amount: float
    target_date: NotRequired[str]
    account_ids: NotRequired[List[str]]
    monthly_contribution: NotRequired[float]
    start_date: NotRequired[str]
    start_amount: NotRequired[float]
    current_amount: NotRequired[float]
    extra_payment: NotRequired[float]
    is_active: NotRequired[bool]


class SnapshotDict(TypedDict):
    schema_version: NotRequired[str]
    as_of: NotRequired[str]
    accounts: NotRequired[List[AccountDict]]
    profiles: NotRequired[Dict[str, ProfileDict]]
    transactions: NotRequired[List[TransactionDict]]
    bills: NotRequired[List[RecurringDict]]
    budgets: NotRequired[List[RecurringDict]]
    income_sources: NotRequired[List[RecurringDict]]
    goals: NotRequired[List[GoalDict]]


class ProjectionPointDict(TypedDict):
    month: str
    balance: float


class GoalProgressPointDict(TypedDict):
    month: str
    projected: float
    target: float
    actual: NotRequired[float]
    minimumOnly: NotRequired[float]
