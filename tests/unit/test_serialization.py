"""
Unit tests for serialization.py.

Tests snapshot loading (snake_case and camelCase input), error reporting,
schema version warnings and JSON output of result objects.
"""

import json
import warnings
from datetime import date

import pytest

from fincast.exceptions import FinCastError, SnapshotError
from fincast.frequency import Frequency
from fincast.goals import GoalProgressPoint
from fincast.records import AccountType, CustomGoal, DebtPayoffGoal
from fincast.serialization import (
    SCHEMA_VERSION,
    account_from_dict,
    goal_from_dict,
    load_snapshot,
    save_result,
    snapshot_from_dict,
    snapshot_to_dict,
    to_jsonable,
    transaction_from_dict,
)


@pytest.fixture
def document():
    return {
        "schemaVersion": SCHEMA_VERSION,
        "asOf": "2025-06-15",
        "accounts": [
            {"id": "chk", "name": "Checking", "type": "checking", "currentBalance": 1200.0},
            {"id": "cc", "name": "Card", "type": "credit", "current_balance": 800.0, "interestRate": 21.0},
        ],
        "profiles": {"cc": {"minimumPayment": 35.0}},
        "transactions": [
            {"accountId": "chk", "date": "2025-06-01T08:00:00Z", "description": "Payroll", "amount": 2500.0},
        ],
        "bills": [{"amount": 900.0, "frequency": "monthly", "name": "Rent"}],
        "budgets": [{"amount": 50.0, "frequency": "weekly", "category": "dining"}],
        "incomeSources": [{"amount": 5000.0, "frequency": "monthly", "name": "Salary"}],
        "goals": [
            {"type": "debt_payoff", "id": "g1", "name": "Card", "targetAmount": 0, "accountIds": ["cc"],
             "extraPayment": 100},
        ],
    }


class TestRecords:
    """Tests for the per-record builders."""

    def test_account_camel_and_snake(self):
        a = account_from_dict({"id": "s", "name": "S", "type": "savings", "currentBalance": 10.0})
        b = account_from_dict({"id": "s", "name": "S", "type": "savings", "current_balance": 10.0})
        assert a == b
        assert a.type is AccountType.SAVINGS

    def test_unknown_keys_ignored(self):
        account = account_from_dict(
            {"id": "s", "name": "S", "type": "savings", "currentBalance": 1.0, "color": "#fff"}
        )
        assert account.id == "s"

    def test_unknown_account_type(self):
        with pytest.raises(SnapshotError, match="Account"):
            account_from_dict({"id": "s", "name": "S", "type": "crypto", "currentBalance": 1.0})

    def test_missing_field(self):
        with pytest.raises(SnapshotError):
            account_from_dict({"id": "s", "type": "savings"})

    def test_transaction_date_truncated_to_day(self):
        t = transaction_from_dict(
            {"accountId": "a", "date": "2025-03-04T23:59:59", "description": "x", "amount": 1.0}
        )
        assert t.date == date(2025, 3, 4)

    def test_invalid_date(self):
        with pytest.raises(SnapshotError, match="Invalid date"):
            transaction_from_dict({"accountId": "a", "date": "04/03/2025", "description": "x", "amount": 1.0})

    def test_goal_variant_selected_by_type(self):
        goal = goal_from_dict(
            {"type": "custom", "id": "g", "name": "Trip", "targetAmount": 3000, "startDate": "2025-01-01"}
        )
        assert isinstance(goal, CustomGoal)
        assert goal.start_date == date(2025, 1, 1)

    def test_unknown_goal_type(self):
        with pytest.raises(SnapshotError, match="Unknown goal type"):
            goal_from_dict({"type": "retirement", "id": "g", "name": "R", "targetAmount": 1})


class TestSnapshotFromDict:
    """Tests for snapshot_from_dict()."""

    def test_full_document(self, document):
        snapshot = snapshot_from_dict(document)

        assert snapshot.as_of == date(2025, 6, 15)
        assert [a.id for a in snapshot.accounts] == ["chk", "cc"]
        assert snapshot.profile("cc").minimum_payment == 35.0
        assert snapshot.budgets[0].frequency is Frequency.WEEKLY
        assert snapshot.income_sources[0].name == "Salary"
        goal = snapshot.goals[0]
        assert isinstance(goal, DebtPayoffGoal)
        assert goal.account_ids == ("cc",)
        assert goal.extra_payment == 100

    def test_as_of_override(self, document):
        snapshot = snapshot_from_dict(document, as_of=date(2025, 1, 1))
        assert snapshot.as_of == date(2025, 1, 1)

    def test_default_as_of_only_when_missing(self, document):
        assert snapshot_from_dict(document, default_as_of=date(2000, 1, 1)).as_of == date(2025, 6, 15)
        del document["asOf"]
        assert snapshot_from_dict(document, default_as_of=date(2000, 1, 1)).as_of == date(2000, 1, 1)

    def test_missing_as_of(self, document):
        del document["asOf"]
        with pytest.raises(SnapshotError, match="as_of"):
            snapshot_from_dict(document)

    def test_unknown_frequency_propagates(self, document):
        document["bills"][0]["frequency"] = "fortnightly"
        with pytest.raises(FinCastError):
            snapshot_from_dict(document)

    def test_schema_version_warning(self, document):
        document["schemaVersion"] = "0.0.1"
        with pytest.warns(UserWarning, match="schema version"):
            snapshot_from_dict(document)

    def test_current_version_does_not_warn(self, document):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            snapshot_from_dict(document)

    def test_round_trip(self, snapshot):
        data = json.loads(json.dumps(snapshot_to_dict(snapshot)))
        assert snapshot_from_dict(data) == snapshot


class TestLoadSnapshot:
    def test_load(self, tmp_path, document):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(document))
        assert len(load_snapshot(path).accounts) == 2

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="not valid JSON"):
            load_snapshot(path)


class TestToJsonable:
    """Tests for to_jsonable() and save_result()."""

    def test_camel_case_keys(self, engine):
        payload = to_jsonable(engine.net_worth())
        assert payload == {"totalAssets": 158_000.0, "totalLiabilities": 11_500.0, "netWorth": 146_500.0}

    def test_optional_point_fields_omitted(self):
        assert to_jsonable(GoalProgressPoint("2025-06", 10.0, 20.0)) == {
            "month": "2025-06", "projected": 10.0, "target": 20.0,
        }
        assert to_jsonable(GoalProgressPoint("2025-06", 10.0, 0.0, minimum_only=12.0))["minimumOnly"] == 12.0

    def test_enums_and_dates(self, engine):
        payload = to_jsonable(engine.goal_progress(months=3))
        first = payload["goals"][0]
        assert first["goalType"] == "savings"
        assert first["targetDate"] == "2026-12-01"
        json.dumps(payload)

    def test_save_result(self, tmp_path, engine):
        path = tmp_path / "out" / "debt.json"
        save_result(engine.debt_payoff(extra_payment=50.0), path)
        data = json.loads(path.read_text())
        assert set(data) == {"debtAccounts", "avalanche", "snowball", "minimumOnly", "custom"}
        assert data["custom"] is None
