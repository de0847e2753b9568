"""Debt dossier store tests."""

from __future__ import annotations

import json

import pytest

from pocketplan.infra.repositories.key_value import InMemoryKeyValueStore
from pocketplan.models.debt import DEFAULT_DEBTS, DebtItem
from pocketplan.services.debts import DebtListStore, summarize_debts
from pocketplan.validation import InvalidInputError


def test_empty_store_starts_with_default_dossier(memory_store):
    store = DebtListStore(memory_store)
    assert store.debts() == list(DEFAULT_DEBTS)


def test_add_persists_and_assigns_unique_ids(memory_store):
    store = DebtListStore(memory_store)

    first = store.add("Phone plan", 300.0, 0.0, 25.0)
    second = store.add("Gym", "120", "0", "20")

    assert first.id != second.id
    reloaded = DebtListStore(memory_store).debts()
    assert reloaded[-2:] == [first, second]
    assert reloaded[-1].total_amount == 120.0


def test_update_changes_one_debt(memory_store):
    store = DebtListStore(memory_store)

    updated = store.update("2", total_amount="290", creditor="Traffic fine (reduced)")

    assert updated.total_amount == 290.0
    stored = {item.id: item for item in DebtListStore(memory_store).debts()}
    assert stored["2"].creditor == "Traffic fine (reduced)"
    assert stored["1"] == DEFAULT_DEBTS[0]


def test_update_validates_values(memory_store):
    store = DebtListStore(memory_store)
    with pytest.raises(InvalidInputError):
        store.update("1", interest_rate=-2)
    with pytest.raises(InvalidInputError):
        store.update("1", id="other")


def test_update_unknown_debt(memory_store):
    with pytest.raises(KeyError):
        DebtListStore(memory_store).update("missing", creditor="x")


def test_remove(memory_store):
    store = DebtListStore(memory_store)
    store.remove("3")
    store.remove("not-there")

    ids = [item.id for item in DebtListStore(memory_store).debts()]
    assert ids == ["1", "2", "4"]


def test_returned_debts_are_copies(memory_store):
    store = DebtListStore(memory_store)
    items = store.debts()
    items[0].total_amount = 0.0
    assert store.debts()[0].total_amount == DEFAULT_DEBTS[0].total_amount


def test_replace_all(memory_store):
    store = DebtListStore(memory_store)
    store.replace_all([DebtItem(id="x", creditor="Only", total_amount=10.0, interest_rate=1.0, monthly_payment=1.0)])
    assert [item.id for item in DebtListStore(memory_store).debts()] == ["x"]


def test_stored_json_uses_wire_names(memory_store):
    store = DebtListStore(memory_store, key="debts")
    store.remove("2")

    data = json.loads(memory_store.get("debts"))

    assert data[0] == {
        "id": "1",
        "creditor": "Store credit",
        "totalAmount": 1850.5,
        "interestRate": 14.0,
        "monthlyPayment": 45.0,
    }


@pytest.mark.parametrize(
    "raw",
    ["oops", "{}", json.dumps([{"id": "1", "totalAmount": -10}]), json.dumps([{"creditor": "no id"}])],
)
def test_malformed_data_falls_back_to_defaults(memory_store, raw):
    memory_store.set("debts_data", raw)
    assert DebtListStore(memory_store).debts() == list(DEFAULT_DEBTS)


def test_summarize_debts(sample_debts):
    summary = summarize_debts(sample_debts)

    assert summary.total_debt == pytest.approx(4240.50)
    assert summary.total_monthly == 245.0
    assert summary.count == 4
    expected = (14.0 * 1850.50 + 4.0 * 850.0 + 12.5 * 1200.0) / 4240.50
    assert summary.weighted_interest == pytest.approx(expected)


def test_summarize_empty_list():
    summary = summarize_debts([])
    assert summary.weighted_interest == 0.0
    assert summary.total_debt == 0.0


class _ReadOnlyStore(InMemoryKeyValueStore):
    def set(self, key: str, value: str) -> None:
        raise RuntimeError("disk full")


def test_failed_write_keeps_previous_dossier():
    store = DebtListStore(_ReadOnlyStore())

    with pytest.raises(RuntimeError):
        store.add("Gym", 120, 0, 20)
    with pytest.raises(RuntimeError):
        store.update("1", total_amount=10)
    with pytest.raises(RuntimeError):
        store.remove("2")

    assert store.debts() == list(DEFAULT_DEBTS)
