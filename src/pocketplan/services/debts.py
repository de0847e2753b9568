"""Debt payoff projection and the persisted debt dossier."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from ..domain.repositories.key_value import KeyValueStore
from ..logging_config import get_logger
from ..models.debt import DEFAULT_DEBTS, DebtItem
from ..validation import InvalidInputError, parse_amount, parse_rate

logger = get_logger(__name__)

HORIZON_MONTHS = 360
RUNAWAY_FACTOR = 2.0
SETTLED_EPSILON = 0.01
DEFAULT_STORE_KEY = "debts_data"


class PayoffStatus(str, Enum):
    PAID_OFF = "paid_off"
    EXCEEDS_HORIZON = "exceeds_horizon"
    DIVERGING = "diverging"


@dataclass(slots=True, frozen=True)
class SimulationResult:
    """Month-by-month aggregate balance for one payoff projection.

    ``trajectory`` starts with month 0 (the opening balance). ``payoff_month``
    is only set when the balance reached zero; otherwise ``status`` says
    whether the run hit the horizon or was stopped for runaway growth.
    """

    trajectory: tuple[tuple[int, float], ...]
    status: PayoffStatus
    payoff_month: int | None
    total_interest_accrued: float
    estimated_payoff_date: date | None
    shortfall: bool
    debt_payoff_months: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def months_simulated(self) -> int:
        return self.trajectory[-1][0] if self.trajectory else 0

    @property
    def paid_off(self) -> bool:
        return self.status is PayoffStatus.PAID_OFF


def add_months(value: date, months: int) -> date:
    """Return the first day of the month *months* after *value*."""

    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def allocation_order(debts: Sequence[DebtItem], balances: Sequence[float]) -> list[int]:
    """Indices of open debts, highest interest rate first.

    ``sorted`` is stable, so equal rates keep their list order.
    """

    open_indices = [index for index, balance in enumerate(balances) if balance > 0]
    return sorted(open_indices, key=lambda index: -debts[index].interest_rate)


def simulate(
    debts: Iterable[DebtItem],
    monthly_budget: float,
    *,
    today: date | None = None,
) -> SimulationResult:
    """Project payoff of *debts* with a fixed *monthly_budget*.

    Each month interest accrues, contractual minimums are paid in list order
    while budget remains, then the rest of the budget goes to the open
    debts in descending interest-rate order (avalanche). The inputs are not
    modified.
    """

    items = list(debts)
    balances = [item.total_amount for item in items]
    initial_total = sum(balances)
    shortfall = monthly_budget < sum(item.monthly_payment for item in items)

    trajectory: list[tuple[int, float]] = [(0, initial_total)]
    payoff_months: dict[str, int] = {
        item.id: 0 for item, balance in zip(items, balances) if balance <= 0
    }
    total_interest = 0.0
    aggregate = initial_total
    month = 0
    status = PayoffStatus.PAID_OFF if initial_total <= 0 else PayoffStatus.EXCEEDS_HORIZON

    while aggregate > 0 and month < HORIZON_MONTHS:
        month += 1

        for index, item in enumerate(items):
            interest = balances[index] * (item.interest_rate / 100.0) / 12.0
            balances[index] += interest
            total_interest += interest

        remaining = monthly_budget
        for index, item in enumerate(items):
            if remaining <= 0:
                break
            payment = min(balances[index], item.monthly_payment, remaining)
            balances[index] -= payment
            remaining -= payment

        for index in allocation_order(items, balances):
            if remaining <= 0:
                break
            payment = min(balances[index], remaining)
            balances[index] -= payment
            remaining -= payment

        for index, item in enumerate(items):
            if balances[index] < SETTLED_EPSILON:
                balances[index] = 0.0
                payoff_months.setdefault(item.id, month)

        aggregate = sum(balances)
        trajectory.append((month, aggregate))

        if aggregate <= 0:
            status = PayoffStatus.PAID_OFF
            break
        if aggregate > initial_total * RUNAWAY_FACTOR:
            status = PayoffStatus.DIVERGING
            logger.warning(
                "Debt projection diverging; stopping",
                extra={"month": month, "balance": round(aggregate, 2)},
            )
            break

    payoff_month = month if status is PayoffStatus.PAID_OFF else None
    payoff_date = None
    if payoff_month is not None:
        payoff_date = add_months(today or date.today(), payoff_month)

    return SimulationResult(
        trajectory=tuple(trajectory),
        status=status,
        payoff_month=payoff_month,
        total_interest_accrued=total_interest,
        estimated_payoff_date=payoff_date,
        shortfall=shortfall,
        debt_payoff_months=MappingProxyType(payoff_months),
    )


@dataclass(slots=True, frozen=True)
class DebtSummary:
    total_debt: float
    total_monthly: float
    weighted_interest: float
    count: int


def summarize_debts(debts: Iterable[DebtItem]) -> DebtSummary:
    """Totals and balance-weighted average interest rate for a debt list."""

    items = list(debts)
    total_debt = sum(item.total_amount for item in items)
    total_monthly = sum(item.monthly_payment for item in items)
    weighted = 0.0
    if total_debt > 0:
        weighted = sum(item.interest_rate * item.total_amount for item in items) / total_debt
    return DebtSummary(
        total_debt=total_debt,
        total_monthly=total_monthly,
        weighted_interest=weighted,
        count=len(items),
    )


class DebtListStore:
    """Holds the debt dossier and writes every change to the key-value store."""

    _EDITABLE = {"creditor", "total_amount", "interest_rate", "monthly_payment"}

    def __init__(self, store: KeyValueStore, *, key: str = DEFAULT_STORE_KEY):
        self._store = store
        self._key = key
        self._debts = self._load()

    def _load(self) -> list[DebtItem]:
        try:
            raw = self._store.get(self._key)
        except Exception:  # noqa: BLE001 - any store failure falls back to defaults
            logger.warning("Debt store read failed; using default debts", exc_info=True)
            return list(DEFAULT_DEBTS)
        if raw is None:
            return list(DEFAULT_DEBTS)
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise InvalidInputError("debts", data, "expected a list")
            return [DebtItem.from_dict(entry) for entry in data]
        except (ValueError, KeyError, TypeError):
            logger.warning(
                "Stored debt list is malformed; using default debts",
                extra={"store_key": self._key},
                exc_info=True,
            )
            return list(DEFAULT_DEBTS)

    def _save(self, debts: list[DebtItem]) -> None:
        self._store.set(self._key, json.dumps([item.to_dict() for item in debts]))
        self._debts = debts

    def debts(self) -> list[DebtItem]:
        return [replace(item) for item in self._debts]

    def add(
        self,
        creditor: str = "New creditor",
        total_amount: float = 0.0,
        interest_rate: float = 0.0,
        monthly_payment: float = 0.0,
    ) -> DebtItem:
        item = DebtItem(
            id=uuid.uuid4().hex,
            creditor=creditor,
            total_amount=parse_amount(total_amount, field="total_amount"),
            interest_rate=parse_rate(interest_rate),
            monthly_payment=parse_amount(monthly_payment, field="monthly_payment"),
        )
        self._save(self._debts + [item])
        logger.info("Debt added", extra={"debt_id": item.id})
        return replace(item)

    def update(self, debt_id: str, **changes) -> DebtItem:
        unknown = set(changes) - self._EDITABLE
        if unknown:
            raise InvalidInputError("changes", sorted(unknown), "unknown debt fields")
        for field_name in ("total_amount", "monthly_payment"):
            if field_name in changes:
                changes[field_name] = parse_amount(changes[field_name], field=field_name)
        if "interest_rate" in changes:
            changes["interest_rate"] = parse_rate(changes["interest_rate"])

        for position, item in enumerate(self._debts):
            if item.id == debt_id:
                updated = replace(item, **changes)
                self._save(self._debts[:position] + [updated] + self._debts[position + 1 :])
                return replace(updated)
        raise KeyError(debt_id)

    def remove(self, debt_id: str) -> None:
        remaining = [item for item in self._debts if item.id != debt_id]
        if len(remaining) != len(self._debts):
            self._save(remaining)
            logger.info("Debt removed", extra={"debt_id": debt_id})

    def replace_all(self, debts: Iterable[DebtItem]) -> None:
        self._save([replace(item) for item in debts])


__all__ = [
    "HORIZON_MONTHS",
    "RUNAWAY_FACTOR",
    "SETTLED_EPSILON",
    "DebtListStore",
    "DebtSummary",
    "PayoffStatus",
    "SimulationResult",
    "add_months",
    "allocation_order",
    "simulate",
    "summarize_debts",
]
