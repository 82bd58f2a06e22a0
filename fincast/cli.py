"""
Command-Line Interface for FinCast.

Purpose
-------
Runs the forecasting engine against a JSON snapshot (or, for the decision
calculators, against figures given on the command line) and prints either a
rich table or the JSON payload the API layer would return.

Commands
--------
- income: Detected income patterns and the resolved monthly income
- cashflow: Cumulative income/expense projection
- project: Account balance projections and overall net position
- savings: Savings projection with milestones for one account
- debt: Avalanche / snowball / custom debt payoff comparison
- goals: Progress for every active goal
- hys-vs-debt: Keep savings or pay the loan down?
- 401k: Employer match and contribution comparison
- info: Version and effective settings

Example Usage
-------------
    $ fincast project snapshot.json --months 24 --income-adj -10
    $ fincast debt snapshot.json --extra 300 --order card-1 --order loan-2
    $ fincast goals snapshot.json --as-of 2025-06-15 --json
    $ fincast hys-vs-debt --hys-balance 50000 --hys-apy 4.5 \\
          --loan-balance 50000 --loan-apr 7 --payment 1000
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Tuple

import click
import pydantic
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import (
    AppSettings,
    DebtPayoffConfig,
    FourOhOneKConfig,
    HysVsDebtConfig,
    ProjectionConfig,
    SavingsProjectionConfig,
)
from .constants import DEFAULT_DEBT_MAX_MONTHS
from .decisions import calculate_401k, calculate_hys_vs_debt
from .engine import ForecastEngine
from .exceptions import FinCastError
from .log import setup_logging
from .serialization import load_snapshot, to_jsonable

logger = logging.getLogger(__name__)

_ERRORS = (FinCastError, pydantic.ValidationError, OSError, ValueError)

snapshot_argument = click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
as_of_option = click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date (default: snapshot as_of, else today)",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_engine(snapshot: Path, as_of: Optional[datetime]) -> ForecastEngine:
    reference: Optional[date] = as_of.date() if as_of is not None else None
    snap = load_snapshot(snapshot, as_of=reference, default_as_of=date.today())
    logger.info("Loaded snapshot %s as of %s", snapshot, snap.as_of)
    return ForecastEngine(snap)


def _emit(ctx: click.Context, result: Any, as_json: bool, table: Optional[Table]) -> None:
    if as_json or table is None:
        click.echo(json.dumps(to_jsonable(result), indent=2))
        return
    console: Console = ctx.obj["console"]
    console.print(table)


def _money(value: Optional[float]) -> str:
    return "-" if value is None else f"${value:,.2f}"


@click.group()
@click.version_option(version=__version__, prog_name="fincast")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    FinCast - Personal finance forecasting engine.

    Projects account balances, debt payoff and goal progress from a JSON
    snapshot of accounts, transactions, bills, budgets and goals.

    Use 'fincast COMMAND --help' for command-specific help.
    """
    settings = AppSettings()
    setup_logging(settings.effective_log_level, json_logs=settings.json_logs)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = settings
    ctx.obj["console"] = Console()


# ---------------------------------------------------------------------------
# Snapshot commands
# ---------------------------------------------------------------------------

@main.command()
@snapshot_argument
@as_of_option
@json_option
@click.pass_context
def income(ctx: click.Context, snapshot: Path, as_of: Optional[datetime], as_json: bool) -> None:
    """Show detected income patterns and the monthly income in use."""
    try:
        engine = _load_engine(snapshot, as_of)
        patterns = engine.detected_income()
        resolution = engine.income_resolution()
    except _ERRORS as e:
        _fail(str(e))

    table = Table(title=f"Income ({resolution.source}): {_money(resolution.monthly_income)}/month")
    table.add_column("Description", style="cyan")
    table.add_column("Frequency")
    table.add_column("Average", justify="right")
    table.add_column("Monthly", style="green", justify="right")
    table.add_column("Seen", justify="right")
    for p in patterns:
        table.add_row(p.description, p.frequency.value, _money(p.average_amount),
                      _money(p.monthly_equivalent), str(p.occurrences))
    _emit(ctx, {"patterns": patterns, "resolution": resolution}, as_json, table)


@main.command()
@snapshot_argument
@as_of_option
@json_option
@click.option("--months", "-m", type=int, default=None, help="Horizon in months")
@click.option("--income-adj", type=float, default=0.0, help="Income adjustment in percent")
@click.option("--expense-adj", type=float, default=0.0, help="Expense adjustment in percent")
@click.pass_context
def cashflow(ctx, snapshot, as_of, as_json, months, income_adj, expense_adj) -> None:
    """Cumulative income, expenses and net income."""
    try:
        cfg = ProjectionConfig(
            months=months or ctx.obj["settings"].default_months,
            income_adjustment_pct=income_adj,
            expense_adjustment_pct=expense_adj,
        )
        result = _load_engine(snapshot, as_of).net_income_projection(
            cfg.months, cfg.income_adjustment_pct, cfg.expense_adjustment_pct
        )
    except _ERRORS as e:
        _fail(str(e))

    table = Table(title=f"Net income: {_money(result.monthly_income - result.monthly_expenses)}/month")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("Net", style="green", justify="right")
    for p in result.projection:
        table.add_row(p.month, _money(p.income), _money(p.expenses), _money(p.net_income))
    _emit(ctx, result, as_json, table)


@main.command()
@snapshot_argument
@as_of_option
@json_option
@click.option("--months", "-m", type=int, default=None, help="Horizon in months")
@click.option("--income-adj", type=float, default=0.0, help="Income adjustment in percent")
@click.option("--expense-adj", type=float, default=0.0, help="Expense adjustment in percent")
@click.option("--exclude", multiple=True, help="Account id to leave out (repeatable)")
@click.pass_context
def project(ctx, snapshot, as_of, as_json, months, income_adj, expense_adj, exclude: Tuple[str, ...]) -> None:
    """Project account balances and the overall net position."""
    try:
        cfg = ProjectionConfig(
            months=months or ctx.obj["settings"].default_months,
            income_adjustment_pct=income_adj,
            expense_adjustment_pct=expense_adj,
            excluded_account_ids=list(exclude),
        )
        result = _load_engine(snapshot, as_of).account_projections(
            cfg.months,
            cfg.income_adjustment_pct,
            cfg.expense_adjustment_pct,
            frozenset(cfg.excluded_account_ids),
        )
    except _ERRORS as e:
        _fail(str(e))

    table = Table(title="Account projections")
    table.add_column("Account", style="cyan")
    table.add_column("Type")
    table.add_column("Now", justify="right")
    table.add_column("Monthly change", justify="right")
    table.add_column(f"In {cfg.months - 1} months", style="green", justify="right")
    for line in result.accounts:
        end = line.projection[-1].balance if line.projection else None
        table.add_row(line.account_name, line.account_type.value, _money(line.current_balance),
                      _money(line.monthly_change), _money(end))
    if result.overall:
        table.add_row("[bold]Overall[/bold]", "", _money(result.overall[0].balance), "",
                      _money(result.overall[-1].balance))
    _emit(ctx, result, as_json, table)


@main.command()
@snapshot_argument
@click.argument("account_id")
@as_of_option
@json_option
@click.option("--months", "-m", type=int, default=None, help="Horizon in months")
@click.option("--contribution", type=float, default=None, help="Override monthly contribution")
@click.option("--apy", type=float, default=None, help="Override APY in percent")
@click.pass_context
def savings(ctx, snapshot, account_id, as_of, as_json, months, contribution, apy) -> None:
    """Project one savings account with milestones."""
    try:
        cfg = SavingsProjectionConfig(
            months=months or ctx.obj["settings"].default_months,
            contribution_override=contribution,
            apy_override=apy,
        )
        result = _load_engine(snapshot, as_of).savings_projection(
            account_id, cfg.months, cfg.contribution_override, cfg.apy_override
        )
    except _ERRORS as e:
        _fail(str(e))
    if result is None:
        _fail(f"{account_id} is not an active savings account")

    table = Table(title=f"{result.account.account_name} at {result.account.apy}% APY")
    table.add_column("Milestone", style="cyan", justify="right")
    table.add_column("Reached")
    for m in result.milestones:
        table.add_row(_money(m.target), m.month or "beyond horizon")
    _emit(ctx, result, as_json, table)


@main.command()
@snapshot_argument
@as_of_option
@json_option
@click.option("--extra", type=float, default=0.0, help="Extra monthly payment")
@click.option("--order", multiple=True, help="Account id in custom payoff order (repeatable)")
@click.option(
    "--max-months", type=int, default=DEFAULT_DEBT_MAX_MONTHS, show_default=True, help="Simulation cap in months"
)
@click.option("--no-mortgages", is_flag=True, help="Leave mortgages out")
@click.option("--rollover", is_flag=True, help="Add minimums of paid-off debts to the extra pool")
@click.pass_context
def debt(ctx, snapshot, as_of, as_json, extra, order, max_months, no_mortgages, rollover) -> None:
    """Compare avalanche, snowball and custom payoff orders."""
    try:
        cfg = DebtPayoffConfig(
            extra_payment=extra,
            custom_order=list(order),
            include_mortgages=not no_mortgages,
            max_months=max_months,
            roll_over_minimums=rollover,
        )
        result = _load_engine(snapshot, as_of).debt_payoff(
            cfg.extra_payment,
            cfg.include_mortgages,
            cfg.account_ids,
            cfg.custom_order,
            cfg.max_months,
            cfg.roll_over_minimums,
        )
    except _ERRORS as e:
        _fail(str(e))

    table = Table(title=f"Debt payoff with {_money(cfg.extra_payment)} extra/month")
    table.add_column("Strategy", style="cyan")
    table.add_column("Debt free")
    table.add_column("Interest", justify="right")
    table.add_column("Saved vs minimums", style="green", justify="right")
    runs = [("avalanche", result.avalanche), ("snowball", result.snowball)]
    if result.custom is not None:
        runs.append(("custom", result.custom))
    for name, run in runs:
        table.add_row(name, run.debt_free_date or "not within cap",
                      _money(run.total_interest_paid), _money(result.interest_saved(run)))
    table.add_row("minimum only", result.minimum_only.debt_free_date or "not within cap",
                  _money(result.minimum_only.total_interest_paid), "")
    _emit(ctx, result, as_json, table)


@main.command()
@snapshot_argument
@as_of_option
@json_option
@click.option("--months", "-m", type=int, default=None, help="Horizon in months")
@click.pass_context
def goals(ctx, snapshot, as_of, as_json, months) -> None:
    """Progress toward every active goal."""
    try:
        cfg = ProjectionConfig(months=months or ctx.obj["settings"].default_months)
        result = _load_engine(snapshot, as_of).goal_progress(cfg.months)
    except _ERRORS as e:
        _fail(str(e))

    table = Table(title=f"Goals (surplus {_money(result.monthly_surplus)}/month)")
    table.add_column("Goal", style="cyan")
    table.add_column("Type")
    table.add_column("Progress", justify="right")
    table.add_column("Completion")
    table.add_column("On track")
    for g in result.goals:
        table.add_row(g.goal_name, g.goal_type.value, f"{g.percent_complete:.1f}%",
                      g.projected_completion_date or "-", "yes" if g.on_track else "no")
    _emit(ctx, result, as_json, table)


# ---------------------------------------------------------------------------
# Decision calculators
# ---------------------------------------------------------------------------

@main.command("hys-vs-debt")
@click.option("--hys-balance", type=float, required=True)
@click.option("--hys-apy", type=float, required=True)
@click.option("--loan-balance", type=float, required=True)
@click.option("--loan-apr", type=float, required=True)
@click.option("--payment", type=float, required=True, help="Monthly loan payment")
@click.option("--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@json_option
@click.pass_context
def hys_vs_debt(ctx, hys_balance, hys_apy, loan_balance, loan_apr, payment, as_of, as_json) -> None:
    """Keep savings in a high-yield account, or pay the loan down now?"""
    try:
        cfg = HysVsDebtConfig(
            hys_balance=hys_balance,
            hys_apy=hys_apy,
            loan_balance=loan_balance,
            loan_apr=loan_apr,
            monthly_payment=payment,
        )
        result = calculate_hys_vs_debt(cfg.to_inputs(), as_of.date() if as_of else date.today())
    except _ERRORS as e:
        _fail(str(e))

    table = Table(title=f"Recommendation: {result.recommendation}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Net benefit of paying the loan", _money(result.net_benefit))
    table.add_row("Break-even month", str(result.break_even_month or "-"))
    table.add_row("Interest paid (keep savings)", _money(result.scenario_a_interest_paid))
    table.add_row("Interest paid (pay loan)", _money(result.scenario_b_interest_paid))
    _emit(ctx, result, as_json, table)


@main.command("401k")
@click.option("--salary", type=float, required=True, help="Annual salary")
@click.option("--contribution-pct", type=float, required=True, help="Current contribution, % of salary")
@click.option("--match-pct", type=float, required=True, help="Employer match, % of matched dollars")
@click.option("--match-cap-pct", type=float, required=True, help="Match cap, % of salary")
@click.option("--balance", type=float, default=0.0, help="Current 401(k) balance")
@click.option("--return-pct", type=float, default=7.0, help="Expected annual return in percent")
@json_option
@click.pass_context
def four_oh_one_k(ctx, salary, contribution_pct, match_pct, match_cap_pct, balance, return_pct, as_json) -> None:
    """Employer match left on the table and 30-year balance comparison."""
    try:
        cfg = FourOhOneKConfig(
            annual_salary=salary,
            current_contribution_pct=contribution_pct,
            employer_match_pct=match_pct,
            employer_match_cap_pct=match_cap_pct,
            current_balance=balance,
            annual_return_pct=return_pct,
        )
        result = calculate_401k(cfg.to_inputs())
    except _ERRORS as e:
        _fail(str(e))

    final = result.projection[-1]
    table = Table(title=f"Money left on the table: {_money(result.money_left_on_table)}/year")
    table.add_column("Plan", style="cyan")
    table.add_column("Contribution", justify="right")
    table.add_column("Match", justify="right")
    table.add_column(final.label, style="green", justify="right")
    table.add_row("Current", _money(result.current_annual_contribution),
                  _money(result.current_employer_match), _money(final.current))
    table.add_row(f"Match cap ({result.optimal_contribution_pct}%)", _money(result.optimal_annual_contribution),
                  _money(result.optimal_employer_match), _money(final.optimal))
    table.add_row("Maximum", _money(result.max_annual_contribution),
                  _money(result.max_employer_match), _money(final.maximum))
    _emit(ctx, result, as_json, table)


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show version and effective settings."""
    settings: AppSettings = ctx.obj["settings"]
    if ctx.obj["quiet"]:
        click.echo(__version__)
        return
    table = Table(title=f"FinCast {__version__}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    ctx.obj["console"].print(table)


if __name__ == "__main__":
    main()
