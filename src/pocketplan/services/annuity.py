"""Closed-form annuity (fixed-rate loan) calculations."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..validation import InvalidInputError

UNBOUNDED_TERM = math.inf  # payment never covers the monthly interest


def _monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 100.0 / 12.0


def monthly_payment(principal: float, annual_rate_percent: float, term_months: int) -> float:
    """Return the fixed monthly payment that amortizes *principal* over *term_months*.

    A zero rate is special-cased to straight division since the closed form
    divides by ``(1 + r)^n - 1``.
    """

    if term_months <= 0:
        raise InvalidInputError("term_months", term_months, "must be positive")
    if principal <= 0:
        return 0.0
    if annual_rate_percent == 0:
        return principal / term_months

    r = _monthly_rate(annual_rate_percent)
    growth = (1 + r) ** term_months
    return principal * (r * growth) / (growth - 1)


def term_given_extra_payment(
    principal: float,
    annual_rate_percent: float,
    base_payment: float,
    extra_payment: float,
) -> float:
    """Return the number of months needed to repay *principal*.

    The result is fractional (the final month is a partial payment). When the
    combined payment does not cover the monthly interest the loan never
    amortizes and ``UNBOUNDED_TERM`` is returned.
    """

    if principal <= 0:
        return 0.0
    payment = base_payment + extra_payment
    if payment <= 0:
        return UNBOUNDED_TERM
    if annual_rate_percent == 0:
        return principal / payment

    r = _monthly_rate(annual_rate_percent)
    if payment <= principal * r:
        return UNBOUNDED_TERM
    return -math.log(1 - r * principal / payment) / math.log(1 + r)


def interest_saved(original_total_paid: float, revised_total_paid: float) -> float:
    return max(0.0, original_total_paid - revised_total_paid)


@dataclass(slots=True, frozen=True)
class ExtraPaymentComparison:
    """Outcome of paying a fixed extra amount on top of the annuity payment."""

    base_payment: float
    original_term_months: int
    new_term_months: float
    original_total_paid: float
    new_total_paid: float
    savings: float

    @property
    def converges(self) -> bool:
        return not math.isinf(self.new_term_months)

    @property
    def new_term_years(self) -> float:
        return self.new_term_months / 12.0

    @property
    def years_saved(self) -> float:
        if not self.converges:
            return 0.0
        return (self.original_term_months - self.new_term_months) / 12.0


def compare_extra_payment(
    principal: float,
    annual_rate_percent: float,
    remaining_years: float,
    extra_payment: float,
) -> ExtraPaymentComparison:
    """Compare the scheduled annuity with one that adds *extra_payment* monthly."""

    term_months = int(round(remaining_years * 12))
    base = monthly_payment(principal, annual_rate_percent, term_months)
    original_total = base * term_months

    new_term = term_given_extra_payment(principal, annual_rate_percent, base, extra_payment)
    if math.isinf(new_term):
        new_total = math.inf
        savings = 0.0
    else:
        new_total = (base + extra_payment) * new_term
        savings = interest_saved(original_total, new_total)

    return ExtraPaymentComparison(
        base_payment=base,
        original_term_months=term_months,
        new_term_months=new_term,
        original_total_paid=original_total,
        new_total_paid=new_total,
        savings=savings,
    )


__all__ = [
    "UNBOUNDED_TERM",
    "ExtraPaymentComparison",
    "compare_extra_payment",
    "interest_saved",
    "monthly_payment",
    "term_given_extra_payment",
]
