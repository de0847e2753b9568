"""Domain model exports."""

from .budget import DEFAULT_TEMPLATE, BudgetData, BudgetGroup, SubItem
from .debt import DEFAULT_DEBTS, DebtItem
from .key_value import KeyValueEntry

__all__ = [
    "BudgetData",
    "BudgetGroup",
    "SubItem",
    "DebtItem",
    "KeyValueEntry",
    "DEFAULT_TEMPLATE",
    "DEFAULT_DEBTS",
]
