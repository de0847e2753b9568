"""Command-line front end for the PocketPlan calculators."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click

from .config import BaseConfig, DevConfig
from .infra.database import bootstrap_database
from .infra.repositories.key_value import InMemoryKeyValueStore, SQLModelKeyValueStore
from .logging_config import get_logger, setup_logging
from .models.budget import GROUP_TYPES, BudgetGroup
from .services import advisory, annuity, budget_overlay, budgeting, settlement
from .services.budget_overlay import BudgetOverlayStore, period_key
from .services.debts import DebtListStore, PayoffStatus, simulate, summarize_debts
from .services.export_csv import export_trajectory_csv
from .validation import InvalidInputError, parse_amount, parse_payment_day, parse_rate

logger = get_logger(__name__)


class _ParsedParam(click.ParamType):
    """Click parameter backed by one of the validation parsers."""

    def __init__(self, name: str, parser):
        self.name = name
        self._parser = parser

    def convert(self, value, param, ctx):
        if isinstance(value, float):
            return value
        try:
            return self._parser(value, field=param.name if param else self.name)
        except InvalidInputError as exc:
            self.fail(str(exc), param, ctx)


AMOUNT = _ParsedParam("amount", parse_amount)
RATE = _ParsedParam("rate", parse_rate)
DAY = _ParsedParam("day", parse_payment_day)


class _AppState:
    def __init__(self, config: BaseConfig, ephemeral: bool):
        self.config = config
        self.ephemeral = ephemeral
        self._store = None

    @property
    def store(self):
        if self._store is None:
            if self.ephemeral:
                self._store = InMemoryKeyValueStore()
            else:
                _engine, session_factory = bootstrap_database(self.config)
                self._store = SQLModelKeyValueStore(session_factory)
        return self._store

    def budget_store(self) -> BudgetOverlayStore:
        return BudgetOverlayStore(self.store, key=self.config.BUDGET_STORE_KEY)

    def debt_store(self) -> DebtListStore:
        return DebtListStore(self.store, key=self.config.DEBT_STORE_KEY)


def context_options(func):
    """Add ``--context``/``--question`` for printing the advisory request."""

    func = click.option("--question", default=None, help="Question to pair with the context.")(func)
    return click.option("--context", "show_context", is_flag=True, help="Print the advisory request text.")(func)


def _echo_context(show_context: bool, context: str, question: str | None) -> None:
    if show_context:
        click.echo(advisory.build_prompt(context, question))


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for the SQLite store and logs.",
)
@click.option("--ephemeral", is_flag=True, default=False, help="Keep data in memory only.")
@click.option("--dev", is_flag=True, default=False, help="Verbose console logging.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, ephemeral: bool, dev: bool) -> None:
    """PocketPlan budgeting and debt projection tools."""

    config_cls = DevConfig if dev else BaseConfig
    config = config_cls(data_dir=data_dir)
    setup_logging(config)
    ctx.obj = _AppState(config, ephemeral)


@cli.command()
@click.option("--principal", type=AMOUNT, required=True, help="Outstanding mortgage debt.")
@click.option("--rate", type=RATE, required=True, help="Annual interest rate in percent.")
@click.option("--years", type=click.FloatRange(min=0, min_open=True), required=True, help="Remaining term in years.")
@click.option("--extra", type=AMOUNT, default=0.0, show_default=True, help="Extra repayment per month.")
@context_options
def mortgage(principal: float, rate: float, years: float, extra: float, show_context: bool, question) -> None:
    """Compare the scheduled mortgage with extra monthly repayments."""

    try:
        result = annuity.compare_extra_payment(principal, rate, years, extra)
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc), param_hint="--years") from exc
    click.echo(f"Monthly payment: {result.base_payment:.2f}")
    if result.converges:
        click.echo(f"New term: {result.new_term_years:.1f} years (-{result.years_saved:.1f})")
        click.echo(f"Interest saved: {result.savings:.2f}")
    else:
        click.echo("New term: does not converge")
    _echo_context(show_context, advisory.extra_payment_context(principal, rate, extra, result), question)


@cli.command("simulate")
@click.option("--budget", type=AMOUNT, required=True, help="Monthly amount available for debts.")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@context_options
@click.pass_obj
def simulate_command(state: _AppState, budget: float, csv_path: Path | None, show_context: bool, question) -> None:
    """Project the debt dossier's payoff with the avalanche method."""

    debts = state.debt_store().debts()
    today = date.today()
    result = simulate(debts, budget, today=today)
    logger.info(
        "Simulation finished",
        extra={"status": result.status.value, "months": result.months_simulated},
    )

    if result.status is PayoffStatus.PAID_OFF:
        click.echo(f"Debt-free in {result.payoff_month} months ({result.estimated_payoff_date.isoformat()})")
    elif result.status is PayoffStatus.DIVERGING:
        click.echo(f"Balance keeps growing; stopped at month {result.months_simulated}")
    else:
        click.echo(f"Not debt-free within {result.months_simulated} months")
    click.echo(f"Total interest: {result.total_interest_accrued:.2f}")
    if result.shortfall:
        click.echo("Warning: budget is below the sum of minimum payments")
    if csv_path is not None:
        export_trajectory_csv(result=result, output_path=csv_path, start=today)
        click.echo(f"Trajectory written: {csv_path}")
    _echo_context(show_context, advisory.simulation_context(result, budget), question)


@cli.command()
@click.option("--budget", type=AMOUNT, required=True, help="Monthly amount set aside.")
@click.option("--horizon", type=click.IntRange(min=1), default=None, help="Saving horizon in months.")
@context_options
@click.pass_obj
def settle(state: _AppState, budget: float, horizon: int | None, show_context: bool, question) -> None:
    """Estimate a settlement offer for the debt dossier."""

    months = horizon or state.config.SETTLEMENT_HORIZON_MONTHS
    total_debt = summarize_debts(state.debt_store().debts()).total_debt
    result = settlement.estimate(total_debt, budget, months)
    click.echo(f"Pot: {result.pot:.2f}")
    click.echo(f"Percentage: {result.percentage:.2f}%")
    _echo_context(show_context, advisory.settlement_context(total_debt, budget, months, result), question)


@cli.group(invoke_without_command=True)
@click.option("--period", default=None, help="Period as YYYY-MM (defaults to the current month).")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--items", "show_items", is_flag=True, help="List groups and items with their ids.")
@context_options
@click.pass_context
def budget(ctx: click.Context, period: str | None, today, show_items: bool, show_context: bool, question) -> None:
    """Show totals and the next payment for a budget period.

    Subcommands edit a period's groups (committing an override) or, with
    --template, the template every period without an override follows.
    """

    if ctx.invoked_subcommand is not None:
        return
    state: _AppState = ctx.obj
    current = today.date() if today else date.today()
    key = period or period_key(current)
    try:
        groups = state.budget_store().resolve(key)
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc), param_hint="--period") from exc

    summary = budgeting.totals(groups)
    click.echo(f"Period: {key}")
    click.echo(f"Income: {summary.income:.2f}")
    click.echo(f"Expenses: {summary.expenses:.2f}")
    click.echo(f"Net: {summary.net:.2f}")
    upcoming = budgeting.next_upcoming_payment(budgeting.expense_items(groups), current)
    if upcoming is not None:
        click.echo(f"Next payment: {upcoming.name} {upcoming.amount:.2f} in {upcoming.days_left} days")
    if show_items:
        for group in groups:
            click.echo(f"{group.id}\t{group.type}\t{group.name}\t{group.total:.2f}")
            for item in group.items:
                day = f"\tday {item.payment_day}" if item.payment_day is not None else ""
                click.echo(f"  {item.id}\t{item.name}\t{item.amount:.2f}{day}")
    _echo_context(show_context, advisory.budget_context(key, groups), question)


def target_options(func):
    """Add ``--period``/``--template`` to choose what a budget edit changes."""

    func = click.option("--template", "to_template", is_flag=True, help="Edit the template instead of a period.")(func)
    return click.option("--period", default=None, help="Period to edit as YYYY-MM (defaults to the current month).")(func)


def _find_group(groups: list[BudgetGroup], group_id: str) -> BudgetGroup:
    for group in groups:
        if group.id == group_id:
            return group
    raise click.BadParameter(f"unknown group {group_id!r}", param_hint="GROUP_ID")


def _edit_budget(state: _AppState, period: str | None, to_template: bool, edit, *, group_id=None, item_id=None):
    """Apply *edit* to the template or to a period and store the result.

    Returns the label of what changed and the new groups.
    """

    store = state.budget_store()
    if to_template:
        label, groups = "template", store.template()
    else:
        label = period or period_key(date.today())
        try:
            groups = store.resolve(label)
        except InvalidInputError as exc:
            raise click.BadParameter(str(exc), param_hint="--period") from exc

    if group_id is not None:
        group = _find_group(groups, group_id)
        if item_id is not None and all(item.id != item_id for item in group.items):
            raise click.BadParameter(f"unknown item {item_id!r}", param_hint="ITEM_ID")

    try:
        updated = edit(groups)
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc)) from exc
    if to_template:
        store.edit_template(updated)
    else:
        store.commit(label, updated)
    return label, updated


@budget.command("add-group")
@click.option("--type", "group_type", type=click.Choice(GROUP_TYPES), default="expense", show_default=True)
@click.option("--name", default=None)
@target_options
@click.pass_obj
def add_group(state: _AppState, group_type: str, name: str | None, period: str | None, to_template: bool) -> None:
    label, updated = _edit_budget(
        state, period, to_template, lambda groups: budget_overlay.add_group(groups, group_type, name)
    )
    click.echo(f"Added group {updated[-1].id} to {label}")


@budget.command("rename-group")
@click.argument("group_id")
@click.argument("name")
@target_options
@click.pass_obj
def rename_group(state: _AppState, group_id: str, name: str, period: str | None, to_template: bool) -> None:
    label, _ = _edit_budget(
        state, period, to_template,
        lambda groups: budget_overlay.rename_group(groups, group_id, name),
        group_id=group_id,
    )
    click.echo(f"Renamed group {group_id} in {label}")


@budget.command("remove-group")
@click.argument("group_id")
@target_options
@click.pass_obj
def remove_group(state: _AppState, group_id: str, period: str | None, to_template: bool) -> None:
    label, _ = _edit_budget(
        state, period, to_template,
        lambda groups: budget_overlay.remove_group(groups, group_id),
        group_id=group_id,
    )
    click.echo(f"Removed group {group_id} from {label}")


@budget.command("add-item")
@click.argument("group_id")
@click.option("--name", required=True)
@click.option("--amount", type=AMOUNT, default=0.0)
@click.option("--day", type=DAY, default=None, help="Day of the month the item is paid (1-31).")
@target_options
@click.pass_obj
def add_item(
    state: _AppState,
    group_id: str,
    name: str,
    amount: float,
    day: int | None,
    period: str | None,
    to_template: bool,
) -> None:
    label, updated = _edit_budget(
        state, period, to_template,
        lambda groups: budget_overlay.add_item(groups, group_id, name=name, amount=amount, payment_day=day),
        group_id=group_id,
    )
    item = _find_group(updated, group_id).items[-1]
    click.echo(f"Added item {item.id} to {label}")


@budget.command("set-item")
@click.argument("group_id")
@click.argument("item_id")
@click.option("--name", default=None)
@click.option("--amount", type=AMOUNT, default=None)
@click.option("--day", type=DAY, default=None)
@click.option("--no-day", is_flag=True, help="Clear the payment day.")
@target_options
@click.pass_obj
def set_item(
    state: _AppState,
    group_id: str,
    item_id: str,
    name: str | None,
    amount: float | None,
    day: int | None,
    no_day: bool,
    period: str | None,
    to_template: bool,
) -> None:
    changes = {}
    if name is not None:
        changes["name"] = name
    if amount is not None:
        changes["amount"] = amount
    if no_day:
        changes["payment_day"] = None
    elif day is not None:
        changes["payment_day"] = day
    if not changes:
        raise click.UsageError("Nothing to change; pass --name, --amount, --day or --no-day.")

    label, _ = _edit_budget(
        state, period, to_template,
        lambda groups: budget_overlay.update_item(groups, group_id, item_id, **changes),
        group_id=group_id,
        item_id=item_id,
    )
    click.echo(f"Updated item {item_id} in {label}")


@budget.command("remove-item")
@click.argument("group_id")
@click.argument("item_id")
@target_options
@click.pass_obj
def remove_item(state: _AppState, group_id: str, item_id: str, period: str | None, to_template: bool) -> None:
    label, _ = _edit_budget(
        state, period, to_template,
        lambda groups: budget_overlay.remove_item(groups, group_id, item_id),
        group_id=group_id,
        item_id=item_id,
    )
    click.echo(f"Removed item {item_id} from {label}")


@cli.command("reset-period")
@click.argument("period")
@click.pass_obj
def reset_period(state: _AppState, period: str) -> None:
    """Drop a period's override so it follows the template again."""

    store = state.budget_store()
    if not store.has_override(period):
        click.echo(f"Period {period} already follows the template")
        return
    store.reset_period(period)
    click.echo(f"Period {period} reset to template")


@cli.group()
def debts() -> None:
    """Manage the debt dossier."""


@debts.command("list")
@context_options
@click.pass_obj
def list_debts(state: _AppState, show_context: bool, question) -> None:
    items = state.debt_store().debts()
    for item in items:
        click.echo(
            f"{item.id}\t{item.creditor}\t{item.total_amount:.2f}\t"
            f"{item.interest_rate}%\t{item.monthly_payment:.2f}"
        )
    summary = summarize_debts(items)
    click.echo(
        f"Total: {summary.total_debt:.2f}  Monthly: {summary.total_monthly:.2f}  "
        f"Avg rate: {summary.weighted_interest:.1f}%"
    )
    _echo_context(show_context, advisory.debt_context(items), question)


@debts.command("add")
@click.option("--creditor", required=True)
@click.option("--amount", type=AMOUNT, required=True)
@click.option("--rate", type=RATE, default=0.0)
@click.option("--payment", type=AMOUNT, default=0.0)
@click.pass_obj
def add_debt(state: _AppState, creditor: str, amount: float, rate: float, payment: float) -> None:
    item = state.debt_store().add(creditor, amount, rate, payment)
    click.echo(f"Added {item.id}")


@debts.command("update")
@click.argument("debt_id")
@click.option("--creditor", default=None)
@click.option("--amount", type=AMOUNT, default=None)
@click.option("--rate", type=RATE, default=None)
@click.option("--payment", type=AMOUNT, default=None)
@click.pass_obj
def update_debt(
    state: _AppState,
    debt_id: str,
    creditor: str | None,
    amount: float | None,
    rate: float | None,
    payment: float | None,
) -> None:
    changes = {
        name: value
        for name, value in (
            ("creditor", creditor),
            ("total_amount", amount),
            ("interest_rate", rate),
            ("monthly_payment", payment),
        )
        if value is not None
    }
    if not changes:
        raise click.UsageError("Nothing to change; pass --creditor, --amount, --rate or --payment.")
    try:
        item = state.debt_store().update(debt_id, **changes)
    except KeyError as exc:
        raise click.BadParameter(f"unknown debt {debt_id!r}", param_hint="DEBT_ID") from exc
    click.echo(f"Updated {item.id}: {item.creditor} {item.total_amount:.2f}")


@debts.command("remove")
@click.argument("debt_id")
@click.pass_obj
def remove_debt(state: _AppState, debt_id: str) -> None:
    state.debt_store().remove(debt_id)
    click.echo(f"Removed {debt_id}")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
