"""
Projection engine for riseplan.

Purpose
-------
Projects compounding growth across sequential deposit phases, adjusts for
inflation, applies one of two tax policies, and detects the first month in
which projected after-tax capital can fund the desired monthly income.

Monthly Recurrence
------------------
Starting from C_0 = D_0 = initial_capital, for t = 1..T:

    C_t' = C_{t-1} + d_t              (deposit lands first)
    D_t  = D_{t-1} + d_t
    C_t  = C_t' · (1 + r_m)           (then the month compounds)

where d_t is the deposit of the phase active in month t and r_m is the
effective monthly real rate. Each month also evaluates the provisional
after-tax capital for goal detection (``tax.provisional_after_tax``).

The loop state (C, D, goal) is an explicit immutable AccumulatorState
threaded through ``accumulate_month``; nothing is shared between calls and
``project`` has no side effects beyond logging.

Example
-------
>>> inputs = SimulationInput(
...     nominal_interest=0.07, inflation_rate=0.02,
...     withdrawal_rate=0.04, tax_rate=0.15,
...     initial_capital=10_000, desired_monthly_income=1_000,
...     tax_option=TaxOption.WHOLE_CAPITAL,
...     periods=(DepositPeriod(years=10, monthly_deposit=200),),
... )
>>> result = project(inputs)
>>> len(result.timeline), result.total_deposits
(120, 34000.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from .exceptions import ValidationError
from .goals import GoalReachedAt, update_goal
from .periods import DepositPeriod, PeriodSchedule, declared_deposits
from .rates import normalize_rates
from .tax import TaxOption, final_tax_summary, provisional_after_tax, rise_threshold
from .utils import check_non_negative, check_number, to_series

__all__ = [
    "SimulationInput",
    "TimelinePoint",
    "SimulationResult",
    "AccumulatorState",
    "accumulate_month",
    "project",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationInput:
    """
    Engine inputs. All rates are decimal fractions (0.07 for 7%).

    Percent-style form values are converted once, at the input boundary
    (``config.SimulationInputConfig.to_input``).

    Parameters
    ----------
    nominal_interest : float
        Nominal annual return, > -1.
    inflation_rate : float
        Expected annual inflation, > -1.
    withdrawal_rate : float
        Planned annual withdrawal rate, >= 0.
    tax_rate : float
        Tax rate in [0, 1].
    initial_capital : float
        Starting capital, >= 0.
    desired_monthly_income : float
        Target monthly income after tax, >= 0.
    tax_option : TaxOption
        Taxable base. Strings ("whole_capital", "interest_only", "1", "2")
        are parsed.
    periods : sequence of DepositPeriod
        Deposit phases in execution order. Must not be empty.

    Raises
    ------
    ValidationError
        On non-numeric or out-of-domain fields.
    """
    nominal_interest: float
    inflation_rate: float
    withdrawal_rate: float
    tax_rate: float
    initial_capital: float
    desired_monthly_income: float
    tax_option: TaxOption
    periods: Tuple[DepositPeriod, ...]

    def __post_init__(self):
        for name in (
            "nominal_interest",
            "inflation_rate",
            "withdrawal_rate",
            "tax_rate",
            "initial_capital",
            "desired_monthly_income",
        ):
            object.__setattr__(self, name, check_number(name, getattr(self, name)))

        if self.nominal_interest <= -1:
            raise ValidationError(
                f"nominal_interest must be > -1 (got {self.nominal_interest})."
            )
        if self.inflation_rate <= -1:
            raise ValidationError(
                f"inflation_rate must be > -1 (got {self.inflation_rate}). "
                f"A value <= -1 makes the real rate undefined."
            )
        check_non_negative("withdrawal_rate", self.withdrawal_rate)
        if not 0.0 <= self.tax_rate <= 1.0:
            raise ValidationError(f"tax_rate must be in [0, 1] (got {self.tax_rate}).")
        check_non_negative("initial_capital", self.initial_capital)
        check_non_negative("desired_monthly_income", self.desired_monthly_income)

        object.__setattr__(self, "tax_option", TaxOption.parse(self.tax_option))

        if not isinstance(self.periods, (list, tuple)):
            raise ValidationError(
                f"periods must be a sequence of DepositPeriod (got {type(self.periods).__name__})."
            )
        periods = tuple(self.periods)
        if not periods:
            raise ValidationError("periods must contain at least one deposit period.")
        for i, period in enumerate(periods):
            if not isinstance(period, DepositPeriod):
                raise ValidationError(
                    f"periods[{i}] must be a DepositPeriod (got {type(period).__name__})."
                )
        object.__setattr__(self, "periods", periods)

    @property
    def total_months(self) -> int:
        return PeriodSchedule(self.periods).total_months


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimelinePoint:
    """Capital at the end of one month, before and after provisional tax."""
    month: int
    capital: float
    capital_after_tax: float

    @property
    def capital_before_tax(self) -> float:
        """Alias used by the CSV export header."""
        return self.capital


@dataclass(frozen=True)
class SimulationResult:
    """
    Complete projection output.

    Attributes
    ----------
    real_interest_rate : float
        Inflation-adjusted annual rate (Fisher).
    final_capital : float
        Capital before tax after the last month.
    total_deposits : float
        Initial capital plus all declared deposits.
    interest_earned : float
        final_capital - total_deposits.
    tax_amount : float
        Tax under the selected policy.
    capital_after_tax : float
        final_capital - tax_amount.
    monthly_income_after_tax : float
        capital_after_tax · withdrawal_rate / 12.
    goal_reached_at : GoalReachedAt or None
        First month meeting the income goal, if any.
    timeline : tuple of TimelinePoint
        One point per month, strictly increasing month.
    periods : tuple of DepositPeriod
        The deposit phases the projection ran with.
    """
    real_interest_rate: float
    final_capital: float
    total_deposits: float
    interest_earned: float
    tax_amount: float
    capital_after_tax: float
    monthly_income_after_tax: float
    goal_reached_at: Optional[GoalReachedAt]
    timeline: Tuple[TimelinePoint, ...]
    periods: Tuple[DepositPeriod, ...]

    @property
    def total_months(self) -> int:
        return len(self.timeline)

    @property
    def goal_reached(self) -> bool:
        return self.goal_reached_at is not None

    @property
    def capital_path(self) -> np.ndarray:
        """Capital before tax per month, shape (T,)."""
        return np.array([p.capital for p in self.timeline], dtype=float)

    @property
    def capital_after_tax_path(self) -> np.ndarray:
        """Provisional capital after tax per month, shape (T,)."""
        return np.array([p.capital_after_tax for p in self.timeline], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """Timeline as a DataFrame indexed by month."""
        index = pd.Index([p.month for p in self.timeline], name="month", dtype="int64")
        return pd.concat(
            [
                to_series(self.capital_path, index, name="capital"),
                to_series(self.capital_after_tax_path, index, name="capital_after_tax"),
            ],
            axis=1,
        )


# ---------------------------------------------------------------------------
# Monthly Accumulator
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccumulatorState:
    """Loop state threaded from one month to the next."""
    capital: float
    deposits_so_far: float
    goal_reached_at: Optional[GoalReachedAt] = None

    @classmethod
    def initial(cls, initial_capital: float) -> "AccumulatorState":
        return cls(capital=initial_capital, deposits_so_far=initial_capital)


def accumulate_month(
    state: AccumulatorState,
    month: int,
    deposit: float,
    *,
    monthly_rate: float,
    tax_rate: float,
    tax_option: TaxOption,
    threshold: float,
) -> Tuple[AccumulatorState, TimelinePoint]:
    """
    Advance *state* by one month.

    Deposit precedes growth. The provisional after-tax capital uses the
    running deposits of this month, not the declared totals.
    """
    capital = (state.capital + deposit) * (1.0 + monthly_rate)
    deposits = state.deposits_so_far + deposit
    after_tax = provisional_after_tax(capital, deposits, tax_rate, tax_option)
    goal = update_goal(state.goal_reached_at, month, after_tax, threshold)
    return (
        AccumulatorState(capital=capital, deposits_so_far=deposits, goal_reached_at=goal),
        TimelinePoint(month=month, capital=capital, capital_after_tax=after_tax),
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def project(inputs: SimulationInput) -> SimulationResult:
    """
    Run one projection.

    Parameters
    ----------
    inputs : SimulationInput
        Validated inputs (decimal-fraction rates).

    Returns
    -------
    SimulationResult

    Raises
    ------
    ValidationError
        If *inputs* is not a SimulationInput.
    PeriodExhaustedError
        If the schedule cannot cover the requested months.

    Warns
    -----
    DivisionHazardWarning
        If withdrawal_rate == 0 or tax_rate == 1 (goal never reached).
    """
    if not isinstance(inputs, SimulationInput):
        raise ValidationError(
            f"project() expects a SimulationInput (got {type(inputs).__name__})."
        )

    rates = normalize_rates(inputs.nominal_interest, inputs.inflation_rate)
    threshold = rise_threshold(
        inputs.desired_monthly_income, inputs.withdrawal_rate, inputs.tax_rate
    )
    schedule = PeriodSchedule(inputs.periods)
    logger.debug(
        "Projecting %d months: real_rate=%.6f monthly_rate=%.8f threshold=%s",
        schedule.total_months, rates.real_rate, rates.monthly_rate, threshold,
    )

    state = AccumulatorState.initial(inputs.initial_capital)
    timeline: List[TimelinePoint] = []
    for month, period in schedule.iter_months():
        state, point = accumulate_month(
            state,
            month,
            period.monthly_deposit,
            monthly_rate=rates.monthly_rate,
            tax_rate=inputs.tax_rate,
            tax_option=inputs.tax_option,
            threshold=threshold,
        )
        timeline.append(point)

    summary = final_tax_summary(
        final_capital=state.capital,
        total_deposits=declared_deposits(inputs.initial_capital, inputs.periods),
        tax_rate=inputs.tax_rate,
        withdrawal_rate=inputs.withdrawal_rate,
        tax_option=inputs.tax_option,
    )
    if state.goal_reached_at is not None:
        logger.debug("Income goal first met in month %d", state.goal_reached_at.month)

    return SimulationResult(
        real_interest_rate=rates.real_rate,
        final_capital=state.capital,
        total_deposits=summary.total_deposits,
        interest_earned=summary.interest_earned,
        tax_amount=summary.tax_amount,
        capital_after_tax=summary.capital_after_tax,
        monthly_income_after_tax=summary.monthly_income_after_tax,
        goal_reached_at=state.goal_reached_at,
        timeline=tuple(timeline),
        periods=inputs.periods,
    )
