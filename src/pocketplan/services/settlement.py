"""Debt settlement (buyout) estimate over a fixed saving horizon."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HORIZON_MONTHS = 36


@dataclass(slots=True, frozen=True)
class SettlementEstimate:
    pot: float
    percentage: float  # share of the total debt creditors receive; may exceed 100

    @property
    def display_percentage(self) -> float:
        """Percentage capped at 100 for presentation only."""
        return min(self.percentage, 100.0)

    @property
    def covers_debt(self) -> bool:
        return self.percentage >= 100.0


def estimate(
    total_debt: float,
    monthly_budget: float,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> SettlementEstimate:
    """Return the amount saved over the horizon and its share of *total_debt*."""

    if total_debt <= 0:
        return SettlementEstimate(pot=0.0, percentage=0.0)
    pot = monthly_budget * horizon_months
    return SettlementEstimate(pot=pot, percentage=pot / total_debt * 100.0)


__all__ = ["DEFAULT_HORIZON_MONTHS", "SettlementEstimate", "estimate"]
