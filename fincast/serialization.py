"""
Serialization module for FinCast.

Purpose
-------
Reads financial snapshots from JSON documents and turns result dataclasses
into JSON-ready dictionaries for the API layer.

Design Principles
-----------------
- Input keys may be snake_case or camelCase; both map to the same fields.
- Output keys are camelCase, matching what the web and mobile clients read.
- Optional projection fields (``actual``, ``minimumOnly``) are omitted when
  absent rather than emitted as null.
- Backward compatible: snapshots carry a schema version, mismatches warn.

Example
-------
>>> from pathlib import Path
>>> from fincast.serialization import load_snapshot, to_jsonable
>>> snapshot = load_snapshot(Path("snapshot.json"))
>>> payload = to_jsonable(ForecastEngine(snapshot).goal_progress())
>>> payload["goals"][0]["percentComplete"]
"""

from __future__ import annotations

import dataclasses
import json
import re
import warnings
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .exceptions import FinCastError, SnapshotError
from .records import (
    Account,
    AccountProfile,
    Bill,
    Budget,
    CustomGoal,
    DebtPayoffGoal,
    FinancialSnapshot,
    Goal,
    GoalType,
    IncomeSource,
    NetWorthGoal,
    SavingsGoal,
    Transaction,
)
from .types import GoalDict, JSONValue, SnapshotDict

__all__ = [
    "SCHEMA_VERSION",
    "to_jsonable",
    "save_result",
    "account_from_dict",
    "profile_from_dict",
    "transaction_from_dict",
    "goal_from_dict",
    "snapshot_from_dict",
    "snapshot_to_dict",
    "load_snapshot",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")
_OMIT_IF_NONE = frozenset({"actual", "minimum_only"})

_GOAL_CLASSES = {
    GoalType.SAVINGS: SavingsGoal,
    GoalType.DEBT_PAYOFF: DebtPayoffGoal,
    GoalType.NET_WORTH: NetWorthGoal,
    GoalType.CUSTOM: CustomGoal,
}


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _normalize(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_snake(k): v for k, v in data.items()}


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise SnapshotError(f"Invalid date {value!r}; expected YYYY-MM-DD") from None


def _build(cls, data: Mapping[str, Any], **overrides: Any):
    """Instantiate dataclass *cls* from *data*, ignoring unknown keys."""
    fields = {f.name for f in dataclasses.fields(cls) if f.init}
    kwargs = {k: v for k, v in _normalize(data).items() if k in fields}
    kwargs.update(overrides)
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid {cls.__name__} record {dict(data)!r}: {exc}") from exc


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def to_jsonable(obj: Any) -> JSONValue:
    """
    Convert a result object to JSON-compatible data.

    Dataclasses become dicts with camelCase keys, enums their values, dates
    ISO strings, tuples lists.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out: Dict[str, JSONValue] = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if value is None and f.name in _OMIT_IF_NONE:
                continue
            out[_camel(f.name)] = to_jsonable(value)
        return out
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, float):
        return float(obj)
    return obj


def save_result(result: Any, path: Path) -> None:
    """Write ``to_jsonable(result)`` to *path* as indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(to_jsonable(result), f, indent=2)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def account_from_dict(data: Mapping[str, Any]) -> Account:
    return _build(Account, data)


def profile_from_dict(data: Mapping[str, Any]) -> AccountProfile:
    return _build(AccountProfile, data)


def transaction_from_dict(data: Mapping[str, Any]) -> Transaction:
    return _build(Transaction, data, date=_parse_date(_normalize(data).get("date")))


def goal_from_dict(data: GoalDict) -> Goal:
    """
    Build the goal variant named by ``data["type"]``.

    Raises
    ------
    SnapshotError
        If the type is missing or unknown.
    """
    values = _normalize(data)
    try:
        cls = _GOAL_CLASSES[GoalType(values.get("type"))]
    except ValueError:
        raise SnapshotError(f"Unknown goal type {values.get('type')!r}") from None
    return _build(
        cls,
        values,
        target_date=_parse_date(values.get("target_date")),
        start_date=_parse_date(values.get("start_date")),
        account_ids=tuple(values.get("account_ids") or ()),
    )


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

def snapshot_from_dict(
    data: SnapshotDict,
    as_of: Optional[date] = None,
    default_as_of: Optional[date] = None,
) -> FinancialSnapshot:
    """
    Build a ``FinancialSnapshot`` from a JSON document.

    Parameters
    ----------
    data : dict
        Snapshot document (see ``fincast.types.SnapshotDict``).
    as_of : date, optional
        Overrides the document's ``as_of``.
    default_as_of : date, optional
        Used when neither *as_of* nor the document supplies a date.

    Raises
    ------
    SnapshotError
        If records are malformed or no reference date is available.
    """
    doc = _normalize(data)
    schema_version = doc.get("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"Snapshot schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )

    reference = as_of or _parse_date(doc.get("as_of")) or default_as_of
    if reference is None:
        raise SnapshotError("Snapshot has no as_of date and none was supplied")

    try:
        return FinancialSnapshot(
            as_of=reference,
            accounts=tuple(account_from_dict(a) for a in doc.get("accounts", [])),
            transactions=tuple(transaction_from_dict(t) for t in doc.get("transactions", [])),
            bills=tuple(_build(Bill, b) for b in doc.get("bills", [])),
            budgets=tuple(_build(Budget, b) for b in doc.get("budgets", [])),
            income_sources=tuple(_build(IncomeSource, s) for s in doc.get("income_sources", [])),
            goals=tuple(goal_from_dict(g) for g in doc.get("goals", [])),
            profiles={k: profile_from_dict(v) for k, v in (doc.get("profiles") or {}).items()},
        )
    except FinCastError:
        raise
    except (AttributeError, TypeError) as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc


def snapshot_to_dict(snapshot: FinancialSnapshot) -> Dict[str, Any]:
    """Inverse of ``snapshot_from_dict`` (snake_case keys, goal ``type`` tags)."""

    def record(obj: Any) -> Dict[str, Any]:
        out = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if value is None:
                continue
            out[f.name] = to_jsonable(value)
        return out

    def goal(g: Goal) -> Dict[str, Any]:
        return {"type": g.goal_type.value, **record(g)}

    return {
        "schema_version": SCHEMA_VERSION,
        "as_of": snapshot.as_of.isoformat(),
        "accounts": [record(a) for a in snapshot.accounts],
        "profiles": {k: record(v) for k, v in snapshot.profiles.items()},
        "transactions": [record(t) for t in snapshot.transactions],
        "bills": [record(b) for b in snapshot.bills],
        "budgets": [record(b) for b in snapshot.budgets],
        "income_sources": [record(s) for s in snapshot.income_sources],
        "goals": [goal(g) for g in snapshot.goals],
    }


def load_snapshot(
    path: Path,
    as_of: Optional[date] = None,
    default_as_of: Optional[date] = None,
) -> FinancialSnapshot:
    """Load a snapshot JSON file; see ``snapshot_from_dict``."""
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"{path} is not valid JSON: {exc}") from exc
    return snapshot_from_dict(data, as_of=as_of, default_as_of=default_as_of)
