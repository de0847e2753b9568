"""Template and per-period budget overrides.

A period (``YYYY-MM``) either has its own override or shows a fresh copy of
the template. Every value handed out or stored here is a private copy, so
editing the template never leaks into a committed period and vice versa.
"""

from __future__ import annotations

import copy
import json
import uuid
from datetime import date
from typing import Iterable

from ..domain.repositories.key_value import KeyValueStore
from ..logging_config import get_logger
from ..models.budget import DEFAULT_TEMPLATE, BudgetData, BudgetGroup, GroupType, SubItem
from ..validation import InvalidInputError

logger = get_logger(__name__)

DEFAULT_STORE_KEY = "budget_data_v2"


def period_key(value: date) -> str:
    """Return the ``YYYY-MM`` key for the month containing *value*."""

    return f"{value.year:04d}-{value.month:02d}"


def shift_period(period: str, months: int) -> str:
    """Return the period *months* before (negative) or after *period*."""

    year, month = _parse_period(period)
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def _parse_period(period: str) -> tuple[int, int]:
    try:
        year_text, month_text = period.split("-")
        year, month = int(year_text), int(month_text)
    except (AttributeError, ValueError) as exc:
        raise InvalidInputError("period", period, "expected YYYY-MM") from exc
    if not 1 <= month <= 12:
        raise InvalidInputError("period", period, "month must be 01..12")
    return year, month


def _copy_groups(groups: Iterable[BudgetGroup]) -> list[BudgetGroup]:
    return [copy.deepcopy(group) for group in groups]


class BudgetOverlayStore:
    """Resolve and persist budget groups per period on top of a template."""

    def __init__(self, store: KeyValueStore, *, key: str = DEFAULT_STORE_KEY):
        self._store = store
        self._key = key
        self._data = self._load()

    def _load(self) -> BudgetData:
        try:
            raw = self._store.get(self._key)
        except Exception:  # noqa: BLE001 - any store failure falls back to defaults
            logger.warning("Budget store read failed; using default template", exc_info=True)
            return self._defaults()
        if raw is None:
            return self._defaults()
        try:
            return BudgetData.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning(
                "Stored budget data is malformed; using default template",
                extra={"store_key": self._key},
                exc_info=True,
            )
            return self._defaults()

    @staticmethod
    def _defaults() -> BudgetData:
        return BudgetData(template=_copy_groups(DEFAULT_TEMPLATE), overrides={})

    def _save(self, data: BudgetData) -> None:
        """Persist *data*, then adopt it; a failed write leaves state unchanged."""

        self._store.set(self._key, json.dumps(data.to_dict()))
        self._data = data

    def resolve(self, period: str) -> list[BudgetGroup]:
        """Return the groups active for *period* as an independent copy."""

        _parse_period(period)
        override = self._data.overrides.get(period)
        if override is not None:
            return _copy_groups(override)
        return _copy_groups(self._data.template)

    def commit(self, period: str, groups: Iterable[BudgetGroup]) -> None:
        """Store *groups* as the override for *period*, replacing any prior one."""

        _parse_period(period)
        overrides = dict(self._data.overrides)
        overrides[period] = _copy_groups(groups)
        self._save(BudgetData(template=self._data.template, overrides=overrides))
        logger.info("Committed budget override", extra={"period": period})

    def edit_template(self, groups: Iterable[BudgetGroup]) -> None:
        """Replace the template; existing overrides are left untouched."""

        self._save(BudgetData(template=_copy_groups(groups), overrides=self._data.overrides))
        logger.info("Budget template updated")

    def reset_period(self, period: str) -> None:
        """Drop the override for *period* so it follows the template again."""

        if period not in self._data.overrides:
            return
        overrides = {key: groups for key, groups in self._data.overrides.items() if key != period}
        self._save(BudgetData(template=self._data.template, overrides=overrides))
        logger.info("Reset budget override", extra={"period": period})

    def template(self) -> list[BudgetGroup]:
        return _copy_groups(self._data.template)

    def has_override(self, period: str) -> bool:
        return period in self._data.overrides

    def periods(self) -> list[str]:
        return sorted(self._data.overrides)


# Editing helpers. Each returns a new list and leaves its input untouched.


def _new_id() -> str:
    return uuid.uuid4().hex


def add_group(groups: list[BudgetGroup], group_type: GroupType, name: str | None = None) -> list[BudgetGroup]:
    if name is None:
        name = "New income" if group_type == "income" else "New group"
    return _copy_groups(groups) + [BudgetGroup(id=_new_id(), name=name, type=group_type, items=[])]


def rename_group(groups: list[BudgetGroup], group_id: str, name: str) -> list[BudgetGroup]:
    updated = _copy_groups(groups)
    for group in updated:
        if group.id == group_id:
            group.name = name
    return updated


def remove_group(groups: list[BudgetGroup], group_id: str) -> list[BudgetGroup]:
    return [copy.deepcopy(group) for group in groups if group.id != group_id]


def add_item(
    groups: list[BudgetGroup],
    group_id: str,
    *,
    name: str = "",
    amount: float = 0.0,
    payment_day: int | None = None,
) -> list[BudgetGroup]:
    updated = _copy_groups(groups)
    for group in updated:
        if group.id == group_id:
            group.items.append(SubItem(id=_new_id(), name=name, amount=amount, payment_day=payment_day))
    return updated


def update_item(groups: list[BudgetGroup], group_id: str, item_id: str, **changes) -> list[BudgetGroup]:
    """Apply field *changes* (``name``, ``amount``, ``payment_day``) to one item."""

    unknown = set(changes) - {"name", "amount", "payment_day"}
    if unknown:
        raise InvalidInputError("changes", sorted(unknown), "unknown item fields")
    updated = _copy_groups(groups)
    for group in updated:
        if group.id != group_id:
            continue
        for item in group.items:
            if item.id == item_id:
                for field_name, value in changes.items():
                    setattr(item, field_name, value)
    return updated


def remove_item(groups: list[BudgetGroup], group_id: str, item_id: str) -> list[BudgetGroup]:
    updated = _copy_groups(groups)
    for group in updated:
        if group.id == group_id:
            group.items = [item for item in group.items if item.id != item_id]
    return updated


__all__ = [
    "BudgetOverlayStore",
    "DEFAULT_STORE_KEY",
    "add_group",
    "add_item",
    "period_key",
    "remove_group",
    "remove_item",
    "rename_group",
    "shift_period",
    "update_item",
]
