"""
Unit tests for projection.py.

Tests the per-type balance models, dispatch and the overall net-position
series produced by project_accounts().
"""

from datetime import date

import pytest

from fincast import ForecastEngine
from fincast.config import IncomeDetectionConfig
from fincast.projection import (
    AmortizationModel,
    CashFlowModel,
    CompoundingModel,
    CreditModel,
    FlatModel,
    model_for_account,
)
from fincast.records import Account, AccountType, FinancialSnapshot, Transaction


class TestBalanceModels:
    """Tests for the monthly transitions."""

    def test_trajectory_starts_at_current_balance(self):
        states = CompoundingModel(12.0, 100.0).trajectory(1_000.0, 3)
        assert [s.month for s in states] == [0, 1, 2]
        assert states[0].balance == 1_000.0
        assert states[1].balance == pytest.approx(1_110.0)
        assert states[2].balance == pytest.approx(1_110.0 * 1.01 + 100.0)

    def test_trajectory_of_zero_months(self):
        assert FlatModel().trajectory(50.0, 0) == []

    def test_cash_flow_model_can_go_negative(self):
        states = CashFlowModel(-400.0).trajectory(500.0, 3)
        assert [s.balance for s in states] == [500.0, 100.0, -300.0]

    def test_credit_floors_at_zero(self):
        model = CreditModel(-150.0)
        balances = [s.balance for s in model.trajectory(200.0, 4)]
        assert balances == [200.0, 50.0, 0.0, 0.0]
        assert model.monthly_change(200.0) == -150.0

    def test_credit_balance_grows_with_spending(self):
        assert CreditModel(75.0).advance(100.0) == 175.0

    def test_amortization(self):
        model = AmortizationModel(6.0, 300.0)
        assert model.advance(10_000.0) == pytest.approx(9_750.0)
        assert model.monthly_change(10_000.0) == -300.0

    def test_amortization_final_payment_stops_at_zero(self):
        model = AmortizationModel(12.0, 500.0)
        assert model.advance(100.0) == 0.0
        assert model.advance(0.0) == 0.0

    def test_amortization_without_payment_is_flat(self):
        model = AmortizationModel(6.0, 0.0)
        assert model.advance(5_000.0) == 5_000.0
        assert model.monthly_change(5_000.0) == 0.0


class TestModelDispatch:
    def test_every_account_type_has_a_model(self, snapshot, engine):
        flow = engine.cash_flow()
        for account_type in AccountType:
            account = Account("x", "X", account_type, 100.0)
            assert model_for_account(account, snapshot, flow) is not None

    def test_investment_uses_rate_of_return(self, snapshot, engine):
        account = Account("inv", "Brokerage", AccountType.INVESTMENT, 1_000.0, interest_rate=9.0)
        model = model_for_account(account, snapshot, engine.cash_flow())
        assert isinstance(model, CompoundingModel)
        assert model.annual_rate == 0.0


class TestProjectAccounts:
    """Tests for project_accounts() through the engine."""

    def test_lines_and_lengths(self, engine):
        result = engine.account_projections(months=12)
        assert [line.account_id for line in result.accounts] == ["chk", "sav", "cc", "car"]
        for line in result.accounts:
            assert len(line.projection) == 12
            assert line.projection[0].balance == line.current_balance
        assert len(result.overall) == 12
        assert result.overall[0].month == "2025-06"
        assert result.overall[-1].month == "2026-05"

    def test_first_month_values(self, engine):
        lines = {line.account_id: line for line in engine.account_projections(months=2).accounts}
        assert lines["chk"].projection[1].balance == pytest.approx(5_390.0)
        assert lines["sav"].projection[1].balance == pytest.approx(5_318.75)
        assert lines["cc"].projection[1].balance == pytest.approx(1_350.0)
        assert lines["car"].projection[1].balance == pytest.approx(9_750.0)
        assert lines["car"].monthly_change == -300.0

    def test_credit_card_paid_down_to_zero(self, engine):
        lines = {line.account_id: line for line in engine.account_projections(months=12).accounts}
        card = [p.balance for p in lines["cc"].projection]
        assert card[10] == 0.0
        assert min(card) == 0.0

    def test_overall_is_assets_minus_liabilities(self, engine):
        result = engine.account_projections(months=12)
        assert result.overall[0].balance == pytest.approx(-3_500.0)
        assert result.overall[1].balance == pytest.approx(-391.25)
        for i, point in enumerate(result.overall):
            total = 0.0
            for line in result.accounts:
                sign = -1 if line.account_type in (AccountType.CREDIT, AccountType.LOAN) else 1
                total += sign * line.projection[i].balance
            assert point.balance == pytest.approx(total, abs=0.02)

    def test_excluded_accounts(self, engine):
        result = engine.account_projections(months=3, excluded_account_ids={"chk", "car"})
        assert [line.account_id for line in result.accounts] == ["sav", "cc"]
        assert result.overall[0].balance == pytest.approx(3_500.0)

    def test_income_adjustment_changes_checking_only(self, engine):
        base = {l.account_id: l for l in engine.account_projections(months=2).accounts}
        raised = {l.account_id: l for l in engine.account_projections(months=2, income_adjustment_pct=10).accounts}
        assert raised["chk"].projection[1].balance > base["chk"].projection[1].balance
        assert raised["sav"].projection == base["sav"].projection

    def test_to_frame(self, engine):
        frame = engine.account_projections(months=6).to_frame()
        assert list(frame.columns) == ["chk", "sav", "cc", "car", "overall"]
        assert len(frame) == 6

    def test_same_inputs_same_output(self, engine):
        assert engine.account_projections(months=6) == engine.account_projections(months=6)


class TestContributionLookback:
    """The contribution window configured on the engine reaches the projector."""

    @pytest.fixture
    def sparse_snapshot(self):
        return FinancialSnapshot(
            as_of=date(2025, 6, 15),
            accounts=(
                Account("sav", "Savings", AccountType.SAVINGS, 1_000.0, interest_rate=0.0),
                Account("cc", "Card", AccountType.CREDIT, 500.0),
            ),
            transactions=(
                Transaction("sav", date(2025, 1, 10), "Transfer in", 600.0),
                Transaction("sav", date(2025, 5, 10), "Transfer in", 100.0),
                Transaction("cc", date(2025, 1, 20), "Groceries", 300.0),
                Transaction("cc", date(2025, 5, 20), "Payment", -100.0),
            ),
        )

    def test_default_window(self, sparse_snapshot):
        lines = {l.account_id: l for l in ForecastEngine(sparse_snapshot).account_projections(months=2).accounts}
        assert lines["sav"].projection[1].balance == pytest.approx(1_100.0)
        assert lines["cc"].monthly_change == -100.0

    def test_configured_window(self, sparse_snapshot):
        engine = ForecastEngine(sparse_snapshot, IncomeDetectionConfig(contribution_lookback_months=6))
        lines = {l.account_id: l for l in engine.account_projections(months=2).accounts}
        sav = lines["sav"].projection

        assert sav[1].balance - sav[0].balance == pytest.approx(350.0)
        assert lines["cc"].monthly_change == 100.0

    def test_projection_agrees_with_savings_summary(self, sparse_snapshot):
        engine = ForecastEngine(sparse_snapshot, IncomeDetectionConfig(contribution_lookback_months=6))
        summary = engine.savings_accounts()[0]
        line = engine.account_projections(months=2).accounts[0]
        assert summary.estimated_monthly_contribution == pytest.approx(350.0)
        assert line.projection[1].balance - line.projection[0].balance == pytest.approx(
            summary.estimated_monthly_contribution
        )
        assert engine.savings_projection("sav", months=2).projection[1].balance == line.projection[1].balance

    def test_model_for_account_window(self, sparse_snapshot, engine):
        account = sparse_snapshot.accounts[0]
        flow = engine.cash_flow()
        assert model_for_account(account, sparse_snapshot, flow).contribution == 100.0
        assert model_for_account(account, sparse_snapshot, flow, lookback_months=6).contribution == 350.0
