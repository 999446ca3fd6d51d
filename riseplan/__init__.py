"""
riseplan: Savings projection toward financial independence

Projects compounding capital across sequential deposit phases, adjusts the
return for inflation, applies a tax policy, and finds the first month in
which the after-tax capital can fund a desired monthly income.

Modules
-------
- engine        : SimulationInput, monthly accumulator, project()
- rates         : Fisher real rate and monthly rate conversion
- periods       : Deposit phases and the month-by-month schedule
- tax           : Tax policies, rise threshold, final tax summary
- goals         : Goal detection and target verdict
- config        : Percent-style input models and application settings
- serialization : JSON persistence of inputs and results
- store         : Local run store
- export        : CSV export
- plotting      : Timeline and comparison plots
- cli           : Command-line interface
"""

__version__ = "0.1.0"

from .engine import SimulationInput, SimulationResult, TimelinePoint, project
from .exceptions import (
    ConfigurationError,
    DivisionHazardWarning,
    PeriodExhaustedError,
    RisePlanError,
    RunNotFoundError,
    ValidationError,
)
from .goals import GoalReachedAt
from .periods import DepositPeriod
from .tax import TaxOption
from . import utils

__all__ = [
    "__version__",
    "project",
    "SimulationInput",
    "SimulationResult",
    "TimelinePoint",
    "DepositPeriod",
    "TaxOption",
    "GoalReachedAt",
    "RisePlanError",
    "ValidationError",
    "PeriodExhaustedError",
    "ConfigurationError",
    "RunNotFoundError",
    "DivisionHazardWarning",
    "utils",
]
