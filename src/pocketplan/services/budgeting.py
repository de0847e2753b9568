"""Budgeting domain services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ..models.budget import BudgetGroup, GroupType, SubItem

# Negative day deltas wrap by a fixed cycle rather than the real month length.
PAYMENT_CYCLE_DAYS = 30


@dataclass(slots=True, frozen=True)
class BudgetTotals:
    """Income and expense sums for one resolved period."""

    income: float
    expenses: float

    @property
    def net(self) -> float:
        return self.income - self.expenses

    @property
    def free_budget(self) -> float:
        """Money left after expenses, never negative."""
        return max(0.0, self.net)

    @property
    def savings_rate(self) -> float:
        """Free budget as a percentage of income (0 when there is no income)."""
        if self.income <= 0:
            return 0.0
        return self.free_budget / self.income * 100.0


@dataclass(slots=True, frozen=True)
class UpcomingPayment:
    item: SubItem
    days_left: int

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def amount(self) -> float:
        return self.item.amount


def totals(groups: Iterable[BudgetGroup]) -> BudgetTotals:
    """Sum item amounts per group type."""

    income = 0.0
    expenses = 0.0
    for group in groups:
        if group.type == "income":
            income += group.total
        else:
            expenses += group.total
    return BudgetTotals(income=income, expenses=expenses)


def expense_items(groups: Iterable[BudgetGroup]) -> list[SubItem]:
    """Flatten the items of every expense group, preserving order."""

    return [item for group in groups if group.type == "expense" for item in group.items]


def group_breakdown(groups: Iterable[BudgetGroup], group_type: GroupType = "expense") -> list[tuple[str, float]]:
    """Return (group name, total) pairs for one type, skipping empty totals."""

    return [
        (group.name, group.total)
        for group in groups
        if group.type == group_type and group.total > 0
    ]


def next_upcoming_payment(items: Iterable[SubItem], today: date) -> UpcomingPayment | None:
    """Return the item whose payment day comes up soonest.

    Days already passed this month wrap forward by ``PAYMENT_CYCLE_DAYS``.
    On ties the first item encountered wins. Items without a payment day
    are ignored.
    """

    best: UpcomingPayment | None = None
    for item in items:
        if item.payment_day is None:
            continue
        delta = item.payment_day - today.day
        if delta < 0:
            delta += PAYMENT_CYCLE_DAYS
        if best is None or delta < best.days_left:
            best = UpcomingPayment(item=item, days_left=delta)
    return best


__all__ = [
    "PAYMENT_CYCLE_DAYS",
    "BudgetTotals",
    "UpcomingPayment",
    "expense_items",
    "group_breakdown",
    "next_upcoming_payment",
    "totals",
]
