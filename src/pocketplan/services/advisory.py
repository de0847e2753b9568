"""Context text handed to the external advisory service.

The advisory service itself (a remote language model) lives outside this
package. Builders here only turn computed results into a stable plain-text
summary; identical inputs always produce identical text.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ..models.budget import BudgetGroup
from ..models.debt import DebtItem
from .annuity import ExtraPaymentComparison
from .budgeting import totals
from .debts import PayoffStatus, SimulationResult, summarize_debts
from .settlement import SettlementEstimate

DEFAULT_QUESTION = "Give a short analysis and three practical tips to improve my situation."


class AdvisoryService(Protocol):
    """Returns markdown advice, or a fallback message when the request fails."""

    def get_advice(self, context: str, question: Optional[str] = None) -> str:  # pragma: no cover - interface
        ...


def build_prompt(context: str, question: Optional[str] = None) -> str:
    """Wrap a context block and the user's question into the advisory request text."""

    return "\n".join(
        [
            "You are an experienced personal-finance adviser.",
            "Use the following context (data from a calculator):",
            context,
            "",
            f"Question: {question or DEFAULT_QUESTION}",
            "",
            "Answer in markdown. Keep it short and action-oriented.",
        ]
    )


def _money(amount: float) -> str:
    return f"{amount:.2f}"


def budget_context(label: str, groups: Iterable[BudgetGroup]) -> str:
    group_list = list(groups)
    summary = totals(group_list)
    lines = [
        f"Budget analysis ({label}):",
        f"Total income: {_money(summary.income)}",
        f"Total expenses: {_money(summary.expenses)}",
        f"Free to spend: {_money(summary.net)}",
        "",
        "Expenses per category:",
    ]
    for group in group_list:
        if group.type != "expense":
            continue
        details = ", ".join(f"{item.name}: {_money(item.amount)}" for item in group.items)
        lines.append(f"{group.name}: {_money(group.total)} (Details: {details})")
    return "\n".join(lines)


def debt_context(debts: Iterable[DebtItem]) -> str:
    items = list(debts)
    summary = summarize_debts(items)
    lines = [
        "Debt overview:",
        f"Total debt: {_money(summary.total_debt)}",
        f"Current monthly repayment: {_money(summary.total_monthly)}",
        f"Average interest: {summary.weighted_interest:.1f}%",
        "",
        "Creditors:",
    ]
    lines.extend(
        f"- {item.creditor}: {_money(item.total_amount)} "
        f"({item.interest_rate}%, {_money(item.monthly_payment)}/month)"
        for item in items
    )
    return "\n".join(lines)


def extra_payment_context(
    principal: float,
    annual_rate_percent: float,
    extra_payment: float,
    comparison: ExtraPaymentComparison,
) -> str:
    if comparison.converges:
        outcome = [
            f"Estimated interest saved: {comparison.savings:.0f}",
            f"Term reduction: {comparison.years_saved:.1f} years",
        ]
    else:
        outcome = ["The payment does not cover the monthly interest; the loan never amortizes."]
    return "\n".join(
        [
            "Extra mortgage repayment:",
            f"Current debt: {_money(principal)}",
            f"Interest rate: {annual_rate_percent}%",
            f"Extra repayment: {_money(extra_payment)} per month",
            "",
            "Result:",
            *outcome,
        ]
    )


def simulation_context(result: SimulationResult, monthly_budget: float) -> str:
    lines = [
        "Debt payoff projection (avalanche):",
        f"Monthly budget: {_money(monthly_budget)}",
        f"Starting balance: {_money(result.trajectory[0][1])}",
        f"Interest accrued: {_money(result.total_interest_accrued)}",
    ]
    if result.status is PayoffStatus.PAID_OFF:
        lines.append(f"Debt-free after {result.payoff_month} months")
        if result.estimated_payoff_date is not None:
            lines.append(f"Estimated payoff date: {result.estimated_payoff_date.isoformat()}")
    elif result.status is PayoffStatus.DIVERGING:
        lines.append(f"Balance keeps growing; projection stopped at month {result.months_simulated}")
    else:
        lines.append(
            f"Not debt-free within {result.months_simulated} months; "
            f"remaining balance {_money(result.trajectory[-1][1])}"
        )
    if result.shortfall:
        lines.append("Budget is below the sum of minimum payments.")
    return "\n".join(lines)


def settlement_context(total_debt: float, monthly_budget: float, horizon_months: int, result: SettlementEstimate) -> str:
    return "\n".join(
        [
            "Debt settlement estimate:",
            f"Total debt: {_money(total_debt)}",
            f"Monthly budget: {_money(monthly_budget)} for {horizon_months} months",
            f"Settlement pot: {_money(result.pot)}",
            f"Offer percentage: {result.percentage:.2f}%",
        ]
    )


__all__ = [
    "AdvisoryService",
    "DEFAULT_QUESTION",
    "budget_context",
    "build_prompt",
    "debt_context",
    "extra_payment_context",
    "settlement_context",
    "simulation_context",
]
