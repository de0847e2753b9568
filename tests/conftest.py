"""Pytest configuration and shared fixtures for PocketPlan tests.

Provides a throwaway SQLite engine, session factories for the key-value
repository, an in-memory store, sample domain data and float helpers.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from pocketplan.models import BudgetGroup, DebtItem, KeyValueEntry, SubItem  # noqa: F401
from pocketplan.infra.repositories.key_value import InMemoryKeyValueStore

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Return a callable producing sessions, as repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture(autouse=True)
def _reset_pocketplan_logger():
    """Drop handlers installed by setup_logging so streams don't leak between tests."""
    yield
    logger = logging.getLogger("pocketplan")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


# =============================================================================
# Sample Data
# =============================================================================


@pytest.fixture
def sample_debts() -> list[DebtItem]:
    """Four-debt dossier with a 500/month budget in mind (minimums sum to 245)."""
    return [
        DebtItem(id="1", creditor="Store credit", total_amount=1850.50, interest_rate=14.0, monthly_payment=45.0),
        DebtItem(id="2", creditor="Traffic fine", total_amount=340.0, interest_rate=0.0, monthly_payment=50.0),
        DebtItem(id="3", creditor="Benefits reclaim", total_amount=850.0, interest_rate=4.0, monthly_payment=100.0),
        DebtItem(id="4", creditor="Bank overdraft", total_amount=1200.0, interest_rate=12.5, monthly_payment=50.0),
    ]


@pytest.fixture
def sample_groups() -> list[BudgetGroup]:
    return [
        BudgetGroup(
            id="inc",
            name="Income",
            type="income",
            items=[SubItem(id="salary", name="Salary", amount=2500.0, payment_day=25)],
        ),
        BudgetGroup(
            id="home",
            name="Housing",
            type="expense",
            items=[
                SubItem(id="rent", name="Rent", amount=900.0, payment_day=1),
                SubItem(id="power", name="Power", amount=120.0, payment_day=18),
            ],
        ),
        BudgetGroup(
            id="food",
            name="Food",
            type="expense",
            items=[SubItem(id="groceries", name="Groceries", amount=350.0)],
        ),
    ]


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance (default one cent)."""
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
