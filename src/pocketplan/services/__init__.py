"""Service module exports."""

from . import (
    advisory,
    annuity,
    budget_overlay,
    budgeting,
    debts,
    export_csv,
    settlement,
)

__all__ = [
    "advisory",
    "annuity",
    "budget_overlay",
    "budgeting",
    "debts",
    "export_csv",
    "settlement",
]
