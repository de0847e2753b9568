"""Budgeting service tests."""

from __future__ import annotations

from datetime import date

from pocketplan.models.budget import BudgetGroup, SubItem
from pocketplan.services import budgeting


def test_totals_partition_by_group_type(sample_groups):
    summary = budgeting.totals(sample_groups)

    assert summary.income == 2500.0
    assert summary.expenses == 1370.0
    assert summary.net == 1130.0
    assert summary.free_budget == 1130.0


def test_free_budget_never_negative():
    groups = [
        BudgetGroup(id="i", name="Income", type="income", items=[SubItem(id="a", name="Pay", amount=1000.0)]),
        BudgetGroup(id="e", name="Costs", type="expense", items=[SubItem(id="b", name="Rent", amount=1500.0)]),
    ]

    summary = budgeting.totals(groups)

    assert summary.net == -500.0
    assert summary.free_budget == 0.0
    assert summary.savings_rate == 0.0


def test_totals_of_empty_budget():
    summary = budgeting.totals([])
    assert (summary.income, summary.expenses, summary.net) == (0.0, 0.0, 0.0)
    assert summary.savings_rate == 0.0


def test_savings_rate(sample_groups):
    summary = budgeting.totals(sample_groups)
    assert round(summary.savings_rate, 2) == 45.2


def test_next_payment_later_this_month(sample_groups):
    items = budgeting.expense_items(sample_groups)

    upcoming = budgeting.next_upcoming_payment(items, date(2024, 3, 10))

    assert upcoming is not None
    assert upcoming.name == "Power"
    assert upcoming.amount == 120.0
    assert upcoming.days_left == 8


def test_passed_days_wrap_by_fixed_cycle(sample_groups):
    items = budgeting.expense_items(sample_groups)

    upcoming = budgeting.next_upcoming_payment(items, date(2024, 2, 28))

    # Rent on the 1st: 1 - 28 + 30, regardless of February's real length.
    assert upcoming.name == "Rent"
    assert upcoming.days_left == 1 - 28 + budgeting.PAYMENT_CYCLE_DAYS


def test_payment_due_today_has_zero_days_left(sample_groups):
    items = budgeting.expense_items(sample_groups)
    upcoming = budgeting.next_upcoming_payment(items, date(2024, 3, 18))
    assert upcoming.name == "Power"
    assert upcoming.days_left == 0


def test_ties_keep_first_item():
    items = [
        SubItem(id="a", name="First", amount=10.0, payment_day=5),
        SubItem(id="b", name="Second", amount=20.0, payment_day=5),
    ]
    upcoming = budgeting.next_upcoming_payment(items, date(2024, 3, 1))
    assert upcoming.item.id == "a"


def test_items_without_payment_day_are_ignored():
    items = [SubItem(id="a", name="Groceries", amount=300.0)]
    assert budgeting.next_upcoming_payment(items, date(2024, 3, 1)) is None


def test_expense_items_skip_income(sample_groups):
    names = [item.name for item in budgeting.expense_items(sample_groups)]
    assert names == ["Rent", "Power", "Groceries"]


def test_group_breakdown_drops_empty_groups(sample_groups):
    groups = sample_groups + [BudgetGroup(id="empty", name="Empty", type="expense")]

    assert budgeting.group_breakdown(groups) == [("Housing", 1020.0), ("Food", 350.0)]
    assert budgeting.group_breakdown(groups, "income") == [("Income", 2500.0)]
