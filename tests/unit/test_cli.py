"""
Unit tests for CLI module.

Tests command-line interface functionality using Click's testing utilities.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from fincast import __version__
from fincast.cli import main
from fincast.constants import DEFAULT_DEBT_MAX_MONTHS
from fincast.serialization import snapshot_to_dict


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def runner(monkeypatch):
    """Create CLI test runner with default settings."""
    for name in ("FINCAST_DEBUG", "FINCAST_LOG_LEVEL", "FINCAST_JSON_LOGS", "FINCAST_DEFAULT_MONTHS"):
        monkeypatch.delenv(name, raising=False)
    yield CliRunner()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def snapshot_file(tmp_path, snapshot):
    """Write the household snapshot to a temporary JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_to_dict(snapshot)))
    return path


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# ============================================================================
# GROUP
# ============================================================================

class TestMain:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("income", "cashflow", "project", "savings", "debt", "goals", "hys-vs-debt", "401k"):
            assert command in result.output

    def test_info_quiet(self, runner):
        result = runner.invoke(main, ["--quiet", "info"])
        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_info_table(self, runner):
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0
        assert "default_months" in result.output


# ============================================================================
# SNAPSHOT COMMANDS
# ============================================================================

class TestSnapshotCommands:
    """Tests for the commands that read a snapshot file."""

    def test_income_json(self, runner, snapshot_file):
        data = _json(runner.invoke(main, ["income", str(snapshot_file), "--json"]))
        assert data["resolution"]["source"] == "detected"
        assert data["resolution"]["monthlyIncome"] == pytest.approx(4_333.33)
        assert data["patterns"][0]["frequency"] == "biweekly"

    def test_income_table(self, runner, snapshot_file):
        result = runner.invoke(main, ["income", str(snapshot_file)])
        assert result.exit_code == 0
        assert "ACME Corp Payroll" in result.output

    def test_cashflow_months(self, runner, snapshot_file):
        data = _json(runner.invoke(main, ["cashflow", str(snapshot_file), "--months", "3", "--json"]))
        assert len(data["projection"]) == 3
        assert data["projection"][0]["month"] == "2025-06"

    def test_project_default_months(self, runner, snapshot_file):
        data = _json(runner.invoke(main, ["project", str(snapshot_file), "--json"]))
        assert len(data["overall"]) == 12
        assert data["overall"][0]["balance"] == pytest.approx(-3_500.0)

    def test_project_exclude(self, runner, snapshot_file):
        data = _json(runner.invoke(main, ["project", str(snapshot_file), "--exclude", "chk", "--json"]))
        assert [a["accountId"] for a in data["accounts"]] == ["sav", "cc", "car"]

    def test_project_as_of_override(self, runner, snapshot_file):
        data = _json(
            runner.invoke(main, ["project", str(snapshot_file), "--as-of", "2025-09-02", "-m", "2", "--json"])
        )
        assert data["overall"][0]["month"] == "2025-09"

    def test_project_rejects_large_adjustment(self, runner, snapshot_file):
        result = runner.invoke(main, ["project", str(snapshot_file), "--income-adj", "80"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_savings(self, runner, snapshot_file):
        data = _json(runner.invoke(main, ["savings", str(snapshot_file), "sav", "--apy", "5", "--json"]))
        assert data["account"]["apy"] == 5.0
        assert data["projection"][0]["balance"] == 5_000.0

    def test_savings_unknown_account(self, runner, snapshot_file):
        result = runner.invoke(main, ["savings", str(snapshot_file), "chk"])
        assert result.exit_code == 1
        assert "not an active savings account" in result.output

    def test_debt_custom_order(self, runner, snapshot_file):
        data = _json(
            runner.invoke(main, ["debt", str(snapshot_file), "--extra", "200", "--order", "car", "--json"])
        )
        assert data["custom"]["strategy"] == "custom"
        assert data["avalanche"]["extraPayment"] == 200.0

    def test_debt_unknown_order_id(self, runner, snapshot_file):
        result = runner.invoke(main, ["debt", str(snapshot_file), "--order", "boat"])
        assert result.exit_code == 1
        assert "unknown" in result.output

    def test_debt_max_months_default(self, runner):
        result = runner.invoke(main, ["debt", "--help"])
        assert result.exit_code == 0
        assert f"default: {DEFAULT_DEBT_MAX_MONTHS}" in result.output

    def test_debt_table(self, runner, snapshot_file):
        result = runner.invoke(main, ["debt", str(snapshot_file), "--extra", "100"])
        assert result.exit_code == 0
        assert "avalanche" in result.output

    def test_goals(self, runner, snapshot_file):
        data = _json(runner.invoke(main, ["goals", str(snapshot_file), "--json"]))
        assert [g["goalId"] for g in data["goals"]] == ["g-emergency", "g-debt", "g-worth", "g-trip"]

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["goals", str(tmp_path / "missing.json")])
        assert result.exit_code == 2

    def test_malformed_snapshot(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"asOf": "2025-06-15", "accounts": [{"id": "x"}]}))
        result = runner.invoke(main, ["goals", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output


# ============================================================================
# CALCULATORS
# ============================================================================

class TestCalculatorCommands:
    def test_hys_vs_debt(self, runner):
        args = [
            "hys-vs-debt", "--hys-balance", "50000", "--hys-apy", "4.5", "--loan-balance", "50000",
            "--loan-apr", "7", "--payment", "1000", "--as-of", "2025-01-01", "--json",
        ]
        data = _json(runner.invoke(main, args))
        assert data["recommendation"] == "pay-loan"
        assert data["breakEvenMonth"] == 1
        assert data["points"][0]["label"] == "Jan 25"

    def test_hys_vs_debt_validation(self, runner):
        args = [
            "hys-vs-debt", "--hys-balance", "-1", "--hys-apy", "4.5", "--loan-balance", "1",
            "--loan-apr", "7", "--payment", "10",
        ]
        result = runner.invoke(main, args)
        assert result.exit_code == 1

    def test_401k(self, runner):
        args = ["401k", "--salary", "100000", "--contribution-pct", "3", "--match-pct", "50",
                "--match-cap-pct", "6", "--json"]
        data = _json(runner.invoke(main, args))
        assert data["moneyLeftOnTable"] == 1_500.0
        assert len(data["projection"]) == 31

    def test_401k_table(self, runner):
        args = ["401k", "--salary", "100000", "--contribution-pct", "3", "--match-pct", "50",
                "--match-cap-pct", "6"]
        result = runner.invoke(main, args)
        assert result.exit_code == 0
        assert "Money left on the table" in result.output
