"""
Serialization module for riseplan persistence.

Purpose
-------
Provides JSON serialization and deserialization for simulation inputs and
results, enabling run persistence, sharing, and export.

Supports serialization of:
- SimulationInput (decimal-fraction rates)
- SimulationResult (every field, including the full timeline and the
  nullable goal)
- Percent-style input config files (SimulationInputConfig)

Design Principles
-----------------
- Lossless: result_from_dict(result_to_dict(r)) == r
- Stable names: the dict keys are the public field names
- Human-readable: JSON with indentation
- Versioned: documents carry SCHEMA_VERSION; mismatches warn

Example
-------
>>> from riseplan import project
>>> from riseplan.serialization import save_result, load_result
>>> from pathlib import Path
>>>
>>> result = project(inputs)
>>> save_result(result, Path("result.json"), inputs=inputs)
>>> loaded_result, loaded_inputs = load_result(Path("result.json"))
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, TYPE_CHECKING

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from .config import SimulationInputConfig
from .exceptions import ConfigurationError, RisePlanError
from .goals import GoalReachedAt
from .periods import DepositPeriod
from .types import (
    DepositPeriodDict,
    GoalReachedDict,
    SimulationInputDict,
    SimulationResultDict,
    TimelinePointDict,
)

if TYPE_CHECKING:
    from .engine import SimulationInput, SimulationResult, TimelinePoint

__all__ = [
    "SCHEMA_VERSION",
    "period_to_dict",
    "period_from_dict",
    "input_to_dict",
    "input_from_dict",
    "result_to_dict",
    "result_from_dict",
    "result_to_frame",
    "save_result",
    "load_result",
    "save_input_config",
    "load_input_config",
    "check_schema_version",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "1.0.0"


def check_schema_version(document: Mapping[str, Any], source: object = "document") -> None:
    """Warn if *document* was written with a different schema version."""
    schema_version = document.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"{source} schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )


# ---------------------------------------------------------------------------
# Deposit Period Serialization
# ---------------------------------------------------------------------------

def period_to_dict(period: DepositPeriod) -> DepositPeriodDict:
    return {"years": period.years, "monthly_deposit": period.monthly_deposit}


def period_from_dict(data: Mapping[str, Any]) -> DepositPeriod:
    """Build a DepositPeriod; the legacy key ``deposit`` is accepted."""
    deposit = data["monthly_deposit"] if "monthly_deposit" in data else data["deposit"]
    return DepositPeriod(years=data["years"], monthly_deposit=deposit)


# ---------------------------------------------------------------------------
# SimulationInput Serialization
# ---------------------------------------------------------------------------

def input_to_dict(inputs: SimulationInput) -> SimulationInputDict:
    """
    Convert SimulationInput to dictionary representation.

    Parameters
    ----------
    inputs : SimulationInput
        Inputs to serialize

    Returns
    -------
    dict
        Dictionary with decimal-fraction rates and the tax option value
    """
    return {
        "nominal_interest": inputs.nominal_interest,
        "inflation_rate": inputs.inflation_rate,
        "withdrawal_rate": inputs.withdrawal_rate,
        "tax_rate": inputs.tax_rate,
        "initial_capital": inputs.initial_capital,
        "desired_monthly_income": inputs.desired_monthly_income,
        "tax_option": inputs.tax_option.value,
        "periods": [period_to_dict(p) for p in inputs.periods],
    }


def input_from_dict(data: Mapping[str, Any]) -> SimulationInput:
    """
    Create SimulationInput from dictionary representation.

    Raises
    ------
    ConfigurationError
        If a required key is missing.
    ValidationError
        If a value is out of its domain.
    """
    from .engine import SimulationInput

    try:
        return SimulationInput(
            nominal_interest=data["nominal_interest"],
            inflation_rate=data["inflation_rate"],
            withdrawal_rate=data["withdrawal_rate"],
            tax_rate=data["tax_rate"],
            initial_capital=data["initial_capital"],
            desired_monthly_income=data["desired_monthly_income"],
            tax_option=data["tax_option"],
            periods=tuple(period_from_dict(p) for p in data["periods"]),
        )
    except KeyError as e:
        raise ConfigurationError(f"Simulation input is missing field {e}") from e


# ---------------------------------------------------------------------------
# SimulationResult Serialization
# ---------------------------------------------------------------------------

def _goal_to_dict(goal: Optional[GoalReachedAt]) -> Optional[GoalReachedDict]:
    if goal is None:
        return None
    return {"years": goal.years, "months": goal.months, "month": goal.month}


def _goal_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[GoalReachedAt]:
    if data is None:
        return None
    years, months = int(data["years"]), int(data["months"])
    month = int(data.get("month", years * 12 + months))
    return GoalReachedAt(years=years, months=months, month=month)


def _point_to_dict(point: TimelinePoint) -> TimelinePointDict:
    return {
        "month": point.month,
        "capital": point.capital,
        "capital_after_tax": point.capital_after_tax,
    }


def result_to_dict(result: SimulationResult) -> SimulationResultDict:
    """
    Convert SimulationResult to dictionary representation.

    Every field is kept, including the full timeline and the nullable
    ``goal_reached_at``.
    """
    return {
        "real_interest_rate": result.real_interest_rate,
        "final_capital": result.final_capital,
        "total_deposits": result.total_deposits,
        "interest_earned": result.interest_earned,
        "tax_amount": result.tax_amount,
        "capital_after_tax": result.capital_after_tax,
        "monthly_income_after_tax": result.monthly_income_after_tax,
        "goal_reached_at": _goal_to_dict(result.goal_reached_at),
        "timeline": [_point_to_dict(p) for p in result.timeline],
        "periods": [period_to_dict(p) for p in result.periods],
    }


def result_from_dict(data: Mapping[str, Any]) -> SimulationResult:
    """
    Create SimulationResult from dictionary representation.

    Raises
    ------
    ConfigurationError
        If a required key is missing or the timeline is out of order.
    """
    from .engine import SimulationResult, TimelinePoint

    try:
        timeline = tuple(
            TimelinePoint(
                month=int(p["month"]),
                capital=float(p["capital"]),
                capital_after_tax=float(p["capital_after_tax"]),
            )
            for p in data["timeline"]
        )
        result = SimulationResult(
            real_interest_rate=float(data["real_interest_rate"]),
            final_capital=float(data["final_capital"]),
            total_deposits=float(data["total_deposits"]),
            interest_earned=float(data["interest_earned"]),
            tax_amount=float(data["tax_amount"]),
            capital_after_tax=float(data["capital_after_tax"]),
            monthly_income_after_tax=float(data["monthly_income_after_tax"]),
            goal_reached_at=_goal_from_dict(data.get("goal_reached_at")),
            timeline=timeline,
            periods=tuple(period_from_dict(p) for p in data["periods"]),
        )
    except KeyError as e:
        raise ConfigurationError(f"Simulation result is missing field {e}") from e

    months = [p.month for p in timeline]
    if months != list(range(1, len(months) + 1)):
        raise ConfigurationError(
            "Simulation result timeline must list months 1..T in order."
        )
    return result


def result_to_frame(result: SimulationResult) -> pd.DataFrame:
    """Timeline as a DataFrame indexed by month (columns: capital, capital_after_tax)."""
    return result.to_frame()


# ---------------------------------------------------------------------------
# Result Files
# ---------------------------------------------------------------------------

def save_result(
    result: SimulationResult,
    path: Path,
    inputs: Optional[SimulationInput] = None,
) -> None:
    """
    Save SimulationResult (and optionally its inputs) to a JSON file.

    Parameters
    ----------
    result : SimulationResult
        Result to save
    path : Path
        Output file path
    inputs : SimulationInput, optional
        Inputs that produced the result, stored alongside it

    Examples
    --------
    >>> save_result(result, Path("result.json"), inputs=inputs)
    """
    document: Dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "results": result_to_dict(result),
    }
    if inputs is not None:
        document["inputs"] = input_to_dict(inputs)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(document, f, indent=2)


def load_result(path: Path) -> Tuple[SimulationResult, Optional[SimulationInput]]:
    """
    Load a result file written by ``save_result``.

    Returns
    -------
    (SimulationResult, SimulationInput or None)
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(document, dict) or "results" not in document:
        raise ConfigurationError(f"{path} does not contain a 'results' object.")
    check_schema_version(document, source=path.name)

    result = result_from_dict(document["results"])
    inputs = input_from_dict(document["inputs"]) if "inputs" in document else None
    return result, inputs


# ---------------------------------------------------------------------------
# Input Config Files (percent-style)
# ---------------------------------------------------------------------------

def save_input_config(config: SimulationInputConfig, path: Path) -> None:
    """Write a percent-style input config as JSON."""
    document = {"schema_version": SCHEMA_VERSION, **config.model_dump(mode="json")}
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(document, f, indent=2)


def load_input_config(path: Path) -> SimulationInputConfig:
    """
    Load and validate a percent-style input config file.

    Raises
    ------
    ConfigurationError
        If the file is not valid JSON or fails validation.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ConfigurationError(f"{path} must contain a JSON object.")
    if "schema_version" in document:
        check_schema_version(document, source=path.name)
        document = {k: v for k, v in document.items() if k != "schema_version"}

    try:
        return SimulationInputConfig.model_validate(document)
    except (PydanticValidationError, RisePlanError) as e:
        raise ConfigurationError(f"Invalid input config {path}:\n{e}") from e
