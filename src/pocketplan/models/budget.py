"""Budget groups, their line items and the template/override container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from ..validation import InvalidInputError, parse_amount, parse_payment_day

GroupType = Literal["income", "expense"]
GROUP_TYPES: tuple[str, ...] = ("income", "expense")


@dataclass(slots=True)
class SubItem:
    """A single budget line owned by a group."""

    id: str
    name: str
    amount: float
    payment_day: int | None = None  # Day of the month the item clears (1-31)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name, "amount": self.amount}
        if self.payment_day is not None:
            data["paymentDay"] = self.payment_day
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubItem":
        if not isinstance(data, dict):
            raise InvalidInputError("item", data, "expected an object")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            amount=parse_amount(data.get("amount", 0), field="amount"),
            payment_day=parse_payment_day(data.get("paymentDay"), field="paymentDay"),
        )


@dataclass(slots=True)
class BudgetGroup:
    """Named collection of items tagged as income or expense."""

    id: str
    name: str
    type: GroupType
    items: list[SubItem] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.amount for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BudgetGroup":
        if not isinstance(data, dict):
            raise InvalidInputError("group", data, "expected an object")
        group_type = data.get("type")
        if group_type not in GROUP_TYPES:
            raise InvalidInputError("type", group_type, "must be 'income' or 'expense'")
        items = data.get("items", [])
        if not isinstance(items, list):
            raise InvalidInputError("items", items, "expected a list")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            type=group_type,
            items=[SubItem.from_dict(item) for item in items],
        )


def groups_to_list(groups: list[BudgetGroup]) -> list[dict[str, Any]]:
    return [group.to_dict() for group in groups]


def groups_from_list(data: Any) -> list[BudgetGroup]:
    if not isinstance(data, list):
        raise InvalidInputError("groups", data, "expected a list")
    return [BudgetGroup.from_dict(entry) for entry in data]


@dataclass(slots=True)
class BudgetData:
    """Standing template plus per-period overrides keyed by ``YYYY-MM``."""

    template: list[BudgetGroup] = field(default_factory=list)
    overrides: dict[str, list[BudgetGroup]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "template": groups_to_list(self.template),
            "overrides": {
                period: groups_to_list(groups) for period, groups in self.overrides.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> "BudgetData":
        if not isinstance(data, dict):
            raise InvalidInputError("budget_data", data, "expected an object")
        overrides = data.get("overrides", {})
        if not isinstance(overrides, dict):
            raise InvalidInputError("overrides", overrides, "expected an object")
        return cls(
            template=groups_from_list(data.get("template")),
            overrides={str(period): groups_from_list(groups) for period, groups in overrides.items()},
        )


DEFAULT_TEMPLATE: tuple[BudgetGroup, ...] = (
    BudgetGroup(
        id="inc-1",
        name="Income",
        type="income",
        items=[
            SubItem(id="1", name="Salary", amount=3200.0, payment_day=24),
            SubItem(id="2", name="Healthcare allowance", amount=120.0, payment_day=20),
        ],
    ),
    BudgetGroup(
        id="exp-1",
        name="Housing",
        type="expense",
        items=[
            SubItem(id="3", name="Rent/Mortgage", amount=1100.0, payment_day=1),
            SubItem(id="4", name="Energy & Water", amount=150.0, payment_day=15),
            SubItem(id="5", name="Internet & TV", amount=60.0, payment_day=28),
        ],
    ),
    BudgetGroup(
        id="exp-2",
        name="Groceries",
        type="expense",
        items=[
            SubItem(id="6", name="Supermarket", amount=400.0),
            SubItem(id="7", name="Drugstore", amount=50.0),
        ],
    ),
)
