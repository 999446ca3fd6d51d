"""
Type definitions for riseplan.

Purpose
-------
Provides TypedDict definitions for the serialized (JSON) forms of riseplan
objects. Field names here are the stable names consumed by persistence,
export and plotting collaborators.

Usage
-----
>>> from riseplan.types import TimelinePointDict
>>>
>>> point: TimelinePointDict = {"month": 1, "capital": 10250.4, "capital_after_tax": 8712.8}

Type Definitions
----------------
DepositPeriodDict
    One deposit phase: {"years", "monthly_deposit"}

SimulationInputDict
    Engine inputs with decimal-fraction rates

TimelinePointDict
    One month of the timeline: {"month", "capital", "capital_after_tax"}

GoalReachedDict
    First month meeting the income goal: {"years", "months", "month"}

SimulationResultDict
    Full projection output

RunRecordDict
    Stored run: {"id", "name", "inputs", "results", "timestamp"}
"""

from typing import List, Optional

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "DepositPeriodDict",
    "SimulationInputDict",
    "TimelinePointDict",
    "GoalReachedDict",
    "SimulationResultDict",
    "RunRecordDict",
]


class DepositPeriodDict(TypedDict):
    """
    One deposit phase.

    Attributes
    ----------
    years : int
        Phase length in years.
    monthly_deposit : float
        Monthly deposit during the phase.
    """

    years: int
    monthly_deposit: float


class SimulationInputDict(TypedDict):
    """
    Engine inputs (rates as decimal fractions).

    Notes
    -----
    ``tax_option`` holds the enum value: "whole_capital" or "interest_only".
    """

    nominal_interest: float
    inflation_rate: float
    withdrawal_rate: float
    tax_rate: float
    initial_capital: float
    desired_monthly_income: float
    tax_option: str
    periods: List[DepositPeriodDict]


class TimelinePointDict(TypedDict):
    """One month of the projection timeline."""

    month: int
    capital: float
    capital_after_tax: float


class GoalReachedDict(TypedDict):
    """
    Elapsed time until the income goal is first met.

    Attributes
    ----------
    years : int
        month // 12
    months : int
        month % 12
    month : int
        Absolute 1-based month. Optional when reading older documents;
        reconstructed from years and months.
    """

    years: int
    months: int
    month: NotRequired[int]


class SimulationResultDict(TypedDict):
    """Serialized SimulationResult."""

    real_interest_rate: float
    final_capital: float
    total_deposits: float
    interest_earned: float
    tax_amount: float
    capital_after_tax: float
    monthly_income_after_tax: float
    goal_reached_at: Optional[GoalReachedDict]
    timeline: List[TimelinePointDict]
    periods: List[DepositPeriodDict]


class RunRecordDict(TypedDict):
    """Serialized stored run (timestamp in ISO 8601, UTC)."""

    id: str
    name: str
    inputs: SimulationInputDict
    results: SimulationResultDict
    timestamp: str
