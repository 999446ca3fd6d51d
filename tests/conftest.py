"""
Pytest configuration and fixtures for the riseplan test suite.

Fixtures cover the reference projection used across modules (7% nominal,
2% inflation, 10 000 initial capital, one 10-year phase of 200/month), an
exact-arithmetic projection whose goal is met in a known month, and
isolated run-store / settings objects rooted in ``tmp_path``.
"""

from typing import Callable

import pytest

from riseplan.config import AppSettings
from riseplan.engine import SimulationInput, SimulationResult, project
from riseplan.periods import DepositPeriod
from riseplan.store import RunStore
from riseplan.tax import TaxOption


# ---------------------------------------------------------------------------
# Input Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def make_inputs() -> Callable[..., SimulationInput]:
    """
    Factory for SimulationInput with the form defaults.

    Any field can be overridden by keyword.
    """
    def _make(**overrides) -> SimulationInput:
        fields = dict(
            nominal_interest=0.07,
            inflation_rate=0.02,
            withdrawal_rate=0.04,
            tax_rate=0.15,
            initial_capital=10_000.0,
            desired_monthly_income=1_000.0,
            tax_option=TaxOption.WHOLE_CAPITAL,
            periods=(DepositPeriod(years=10, monthly_deposit=200.0),),
        )
        fields.update(overrides)
        return SimulationInput(**fields)
    return _make


@pytest.fixture
def worked_inputs(make_inputs) -> SimulationInput:
    """Reference inputs: the form defaults."""
    return make_inputs()


@pytest.fixture
def worked_result(worked_inputs) -> SimulationResult:
    return project(worked_inputs)


@pytest.fixture
def goal_inputs(make_inputs) -> SimulationInput:
    """
    Zero rates, no tax, 50% withdrawal, 1 000/month from zero.

    Threshold = 500 * 12 / 0.5 = 12 000, so the goal is first met in
    month 12 (1 year and 0 months). Every value is exact in binary.
    """
    return make_inputs(
        nominal_interest=0.0,
        inflation_rate=0.0,
        withdrawal_rate=0.5,
        tax_rate=0.0,
        initial_capital=0.0,
        desired_monthly_income=500.0,
        periods=(DepositPeriod(years=2, monthly_deposit=1_000.0),),
    )


@pytest.fixture
def goal_result(goal_inputs) -> SimulationResult:
    return project(goal_inputs)


# ---------------------------------------------------------------------------
# Persistence Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path) -> AppSettings:
    """Settings with data and export directories inside tmp_path."""
    return AppSettings(
        data_dir=tmp_path / "data",
        export_dir=tmp_path / "exports",
    )


@pytest.fixture
def store(settings) -> RunStore:
    return RunStore(settings.runs_path)
