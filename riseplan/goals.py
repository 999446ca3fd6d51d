"""
Income-goal detection.

Purpose
-------
The income goal is met in the first month whose provisional after-tax
capital reaches the rise threshold (see ``tax.rise_threshold``). That month
is recorded once and never overwritten by later months, even if capital
later falls back below the threshold.

Example
-------
>>> goal = None
>>> for month, after_tax in [(1, 90.0), (2, 110.0), (3, 95.0), (4, 120.0)]:
...     goal = update_goal(goal, month, after_tax, threshold=100.0)
>>> goal
GoalReachedAt(years=0, months=2, month=2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .utils import months_to_years_months

if TYPE_CHECKING:
    from .engine import SimulationInput, SimulationResult

__all__ = [
    "GoalReachedAt",
    "update_goal",
    "target_met",
    "goal_progress",
    "goal_status",
]


@dataclass(frozen=True)
class GoalReachedAt:
    """
    Elapsed time until the income goal is first met.

    Attributes
    ----------
    years : int
        Whole years elapsed (month // 12).
    months : int
        Remaining months (month % 12).
    month : int
        Absolute 1-based month of the first match.
    """
    years: int
    months: int
    month: int

    @classmethod
    def from_month(cls, month: int) -> "GoalReachedAt":
        years, months = months_to_years_months(month)
        return cls(years=years, months=months, month=month)

    def __str__(self) -> str:
        return f"{self.years} years and {self.months} months"


def update_goal(
    current: Optional[GoalReachedAt],
    month: int,
    capital_after_tax: float,
    threshold: float,
) -> Optional[GoalReachedAt]:
    """Return *current* if already set, else the goal for *month* if met."""
    if current is not None:
        return current
    if capital_after_tax >= threshold:
        return GoalReachedAt.from_month(month)
    return None


def target_met(inputs: SimulationInput, result: SimulationResult) -> bool:
    """Whether the final after-tax income covers the desired monthly income."""
    return result.monthly_income_after_tax >= inputs.desired_monthly_income


def goal_progress(inputs: SimulationInput, result: SimulationResult) -> float:
    """
    Final monthly income after tax as a fraction of the desired income.

    Returns ``inf`` for a desired income of zero with positive income,
    and 1.0 when both are zero.
    """
    desired = inputs.desired_monthly_income
    if desired == 0:
        return 1.0 if result.monthly_income_after_tax <= 0 else float("inf")
    return result.monthly_income_after_tax / desired


def goal_status(inputs: SimulationInput, result: SimulationResult) -> str:
    """One-line verdict, e.g. ``SUCCESS: Target met! Achieved after 9 years and 4 months.``"""
    if target_met(inputs, result):
        text = "SUCCESS: Target met!"
        if result.goal_reached_at is not None:
            text += f" Achieved after {result.goal_reached_at}."
        return text
    return "SHORTFALL: Target not met."
