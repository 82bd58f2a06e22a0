"""
Pytest configuration and fixtures for FinCast test suite.

The fixtures describe one household as of 2025-06-15:

- checking (3,000) receiving a biweekly 2,000 paycheck
- high-yield savings (5,000 at 4.5% APY) receiving 300/month
- credit card (1,500 owed at 24%, minimum 50)
- car loan (10,000 at 6%, 300/month)
- home (real estate, 200,000 owed on a 350,000 estimate)
- rent 1,500/month, gym 10/week, groceries budget 400/month
"""

from datetime import date, timedelta
from typing import List

import pytest

from fincast.engine import ForecastEngine
from fincast.records import (
    Account,
    AccountProfile,
    AccountType,
    Bill,
    Budget,
    CustomGoal,
    DebtPayoffGoal,
    FinancialSnapshot,
    NetWorthGoal,
    SavingsGoal,
    Transaction,
)
from fincast.summaries import DebtAccountSummary, SavingsAccountSummary


# ---------------------------------------------------------------------------
# Date Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def as_of() -> date:
    """Reference date for every projection in the suite."""
    return date(2025, 6, 15)


# ---------------------------------------------------------------------------
# Record Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def accounts() -> List[Account]:
    return [
        Account("chk", "Everyday Checking", AccountType.CHECKING, 3_000.0, is_favorite=True),
        Account("sav", "High Yield Savings", AccountType.HIGH_YIELD_SAVINGS, 5_000.0),
        Account("cc", "Rewards Card", AccountType.CREDIT, 1_500.0),
        Account("car", "Car Loan", AccountType.LOAN, 10_000.0),
        Account("home", "Home", AccountType.REAL_ESTATE, 200_000.0, estimated_value=350_000.0),
        Account("old", "Closed Savings", AccountType.SAVINGS, 999.0, is_active=False),
    ]


@pytest.fixture
def profiles() -> dict:
    return {
        "sav": AccountProfile(apy=4.5),
        "cc": AccountProfile(interest_rate=24.0, minimum_payment=50.0),
        "car": AccountProfile(interest_rate=6.0, monthly_payment=300.0),
    }


@pytest.fixture
def payroll() -> List[Transaction]:
    """Twelve biweekly paychecks from 2025-01-03 to 2025-06-06."""
    first = date(2025, 1, 3)
    return [
        Transaction("chk", first + timedelta(days=14 * i), "ACME Corp Payroll", 2_000.0)
        for i in range(12)
    ]


@pytest.fixture
def transactions(payroll) -> List[Transaction]:
    noise = [
        Transaction("chk", date(2025, 3, 1), "Zelle from Sam", 500.0),
        Transaction("chk", date(2025, 4, 1), "Zelle from Sam", 500.0),
        Transaction("chk", date(2025, 5, 1), "Zelle from Sam", 500.0),
        Transaction("chk", date(2025, 3, 5), "Cashback reward", 10.0),
        Transaction("chk", date(2025, 4, 5), "Cashback reward", 10.0),
        Transaction("chk", date(2025, 5, 5), "Cashback reward", 10.0),
    ]
    savings = [
        Transaction("sav", date(2025, 4, 1), "Transfer from checking", 300.0),
        Transaction("sav", date(2025, 5, 1), "Transfer from checking", 300.0),
        Transaction("sav", date(2025, 6, 1), "Transfer from checking", 300.0),
    ]
    card = [
        Transaction("cc", date(2025, 4, 10), "Grocery Store", -200.0),
        Transaction("cc", date(2025, 5, 10), "Grocery Store", -200.0),
        Transaction("cc", date(2025, 6, 10), "Grocery Store", -200.0),
        Transaction("cc", date(2025, 5, 20), "Payment received", 150.0),
    ]
    return payroll + noise + savings + card


@pytest.fixture
def bills() -> List[Bill]:
    return [
        Bill(1_500.0, "monthly", name="Rent"),
        Bill(10.0, "weekly", name="Gym"),
        Bill(99.0, "monthly", name="Old subscription", is_active=False),
    ]


@pytest.fixture
def budgets() -> List[Budget]:
    return [Budget(400.0, "monthly", category="groceries")]


@pytest.fixture
def goals() -> list:
    return [
        SavingsGoal(
            "g-emergency", "Emergency fund", 10_000.0,
            target_date=date(2026, 12, 1), account_ids=("sav",),
        ),
        DebtPayoffGoal(
            "g-debt", "Debt free", 0.0,
            account_ids=("cc", "car"), extra_payment=200.0,
        ),
        NetWorthGoal("g-worth", "Net worth 200k", 200_000.0),
        CustomGoal(
            "g-trip", "Japan trip", 6_000.0,
            monthly_contribution=250.0, start_amount=1_000.0,
            start_date=date(2025, 1, 1), target_date=date(2026, 6, 1),
        ),
        CustomGoal("g-archived", "Archived", 1.0, is_active=False),
    ]


@pytest.fixture
def snapshot(as_of, accounts, profiles, transactions, bills, budgets, goals) -> FinancialSnapshot:
    return FinancialSnapshot(
        as_of=as_of,
        accounts=accounts,
        transactions=transactions,
        bills=bills,
        budgets=budgets,
        goals=goals,
        profiles=profiles,
    )


@pytest.fixture
def engine(snapshot) -> ForecastEngine:
    return ForecastEngine(snapshot)


# ---------------------------------------------------------------------------
# Summary Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def savings_summary() -> SavingsAccountSummary:
    return SavingsAccountSummary(
        account_id="sav",
        account_name="High Yield Savings",
        account_type=AccountType.HIGH_YIELD_SAVINGS,
        current_balance=5_000.0,
        apy=4.5,
        is_favorite=False,
        estimated_monthly_contribution=300.0,
    )


@pytest.fixture
def debts() -> List[DebtAccountSummary]:
    """Three debts whose minimums comfortably cover interest."""
    return [
        DebtAccountSummary("card", "Card", AccountType.CREDIT, 3_000.0, 22.0, 90.0),
        DebtAccountSummary("car", "Car", AccountType.LOAN, 8_000.0, 6.0, 250.0),
        DebtAccountSummary("store", "Store card", AccountType.CREDIT, 600.0, 18.0, 30.0),
    ]
