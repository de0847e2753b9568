"""Settlement estimate tests."""

from __future__ import annotations

import pytest

from pocketplan.services.settlement import DEFAULT_HORIZON_MONTHS, estimate


def test_dossier_example_is_not_capped():
    result = estimate(4240.50, 500.0, 36)

    assert result.pot == 18000.0
    assert result.percentage == pytest.approx(18000.0 / 4240.50 * 100)
    assert round(result.percentage, 2) == 424.48
    assert result.covers_debt
    assert result.display_percentage == 100.0


def test_default_horizon_is_three_years():
    assert DEFAULT_HORIZON_MONTHS == 36
    assert estimate(3600.0, 50.0).pot == 1800.0


def test_partial_settlement():
    result = estimate(10_000.0, 100.0, 36)
    assert result.percentage == pytest.approx(36.0)
    assert result.display_percentage == pytest.approx(36.0)
    assert not result.covers_debt


def test_no_debt_means_nothing_to_settle():
    result = estimate(0.0, 500.0)
    assert result.pot == 0.0
    assert result.percentage == 0.0
