"""Debt entries tracked in the debt dossier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..validation import InvalidInputError, parse_amount, parse_rate


@dataclass(slots=True)
class DebtItem:
    """Outstanding debt with its contractual minimum payment."""

    id: str
    creditor: str
    total_amount: float
    interest_rate: float  # annual percentage
    monthly_payment: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "creditor": self.creditor,
            "totalAmount": self.total_amount,
            "interestRate": self.interest_rate,
            "monthlyPayment": self.monthly_payment,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DebtItem":
        if not isinstance(data, dict):
            raise InvalidInputError("debt", data, "expected an object")
        return cls(
            id=str(data["id"]),
            creditor=str(data.get("creditor", "")),
            total_amount=parse_amount(data.get("totalAmount", 0), field="totalAmount"),
            interest_rate=parse_rate(data.get("interestRate", 0), field="interestRate"),
            monthly_payment=parse_amount(data.get("monthlyPayment", 0), field="monthlyPayment"),
        )


DEFAULT_DEBTS: tuple[DebtItem, ...] = (
    DebtItem(id="1", creditor="Store credit", total_amount=1850.50, interest_rate=14.0, monthly_payment=45.0),
    DebtItem(id="2", creditor="Traffic fine", total_amount=340.0, interest_rate=0.0, monthly_payment=50.0),
    DebtItem(id="3", creditor="Benefits reclaim", total_amount=850.0, interest_rate=4.0, monthly_payment=100.0),
    DebtItem(id="4", creditor="Bank overdraft", total_amount=1200.0, interest_rate=12.5, monthly_payment=50.0),
)
