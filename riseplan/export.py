"""
CSV export of a projection.

The file holds two tables separated by a blank line:

1. ``Parameter,Value`` rows: the inputs (rates shown as percentages, as the
   input form shows them), each deposit period, and the final figures.
2. ``month,capital_before_tax,capital_after_tax`` rows, one per month.

Example
-------
>>> from pathlib import Path
>>> write_csv(inputs, result, Path("projection.csv"))
"""

from __future__ import annotations

import csv
import io
import math
import logging
from pathlib import Path
from typing import IO, List, Tuple, Union, TYPE_CHECKING

from .goals import goal_progress, goal_status
from .utils import format_percent

if TYPE_CHECKING:
    from .engine import SimulationInput, SimulationResult

__all__ = [
    "TIMELINE_HEADER",
    "summary_rows",
    "timeline_rows",
    "write_csv",
    "to_csv_string",
]

logger = logging.getLogger(__name__)

TIMELINE_HEADER: Tuple[str, str, str] = ("month", "capital_before_tax", "capital_after_tax")


def _money(value: float) -> str:
    return f"{value:.2f}"


def _progress(inputs: SimulationInput, result: SimulationResult) -> str:
    progress = goal_progress(inputs, result)
    if math.isinf(progress):
        return "n/a"
    return format_percent(progress)


def summary_rows(inputs: SimulationInput, result: SimulationResult) -> List[Tuple[str, str]]:
    """Parameter/value table for *inputs* and *result*."""
    rows: List[Tuple[str, str]] = [
        ("Nominal annual interest rate", format_percent(inputs.nominal_interest)),
        ("Expected annual inflation rate", format_percent(inputs.inflation_rate)),
        ("Real annual interest rate", format_percent(result.real_interest_rate)),
        ("Initial capital", _money(inputs.initial_capital)),
        ("Desired monthly income after tax", _money(inputs.desired_monthly_income)),
        ("Planned withdrawal rate", format_percent(inputs.withdrawal_rate)),
        ("Tax rate", format_percent(inputs.tax_rate)),
        ("Tax applied to", inputs.tax_option.label),
    ]
    for i, period in enumerate(result.periods, start=1):
        rows.append((
            f"Period {i}",
            f"{_money(period.monthly_deposit)} per month for {period.years} years",
        ))
    rows.extend([
        ("Capital before tax", _money(result.final_capital)),
        ("Total deposits", _money(result.total_deposits)),
        ("Interest earned before tax", _money(result.interest_earned)),
        ("Tax amount", _money(result.tax_amount)),
        ("Capital after tax", _money(result.capital_after_tax)),
        ("Monthly income after tax", _money(result.monthly_income_after_tax)),
        ("Progress toward target", _progress(inputs, result)),
        ("Goal reached after", str(result.goal_reached_at) if result.goal_reached_at else "not reached"),
        ("Status", goal_status(inputs, result)),
    ])
    return rows


def timeline_rows(result: SimulationResult) -> List[Tuple[int, str, str]]:
    """Per-month rows matching TIMELINE_HEADER."""
    return [
        (p.month, f"{p.capital_before_tax:.2f}", f"{p.capital_after_tax:.2f}")
        for p in result.timeline
    ]


def _write(inputs: SimulationInput, result: SimulationResult, f: IO[str]) -> None:
    writer = csv.writer(f)
    writer.writerow(["Parameter", "Value"])
    writer.writerows(summary_rows(inputs, result))
    writer.writerow([])
    writer.writerow(TIMELINE_HEADER)
    writer.writerows(timeline_rows(result))


def write_csv(
    inputs: SimulationInput,
    result: SimulationResult,
    target: Union[Path, str, IO[str]],
) -> None:
    """
    Write the two-table CSV export to a path or an open text stream.

    Parameters
    ----------
    inputs : SimulationInput
        Inputs the projection ran with.
    result : SimulationResult
        The projection to export.
    target : Path, str or text stream
        Destination file (parent directories are created) or stream.
    """
    if isinstance(target, (str, Path)):
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            _write(inputs, result, f)
        logger.info("Exported %d months to %s", result.total_months, path)
    else:
        _write(inputs, result, target)


def to_csv_string(inputs: SimulationInput, result: SimulationResult) -> str:
    """The CSV export as a string."""
    buffer = io.StringIO()
    _write(inputs, result, buffer)
    return buffer.getvalue()
