"""
Global constants for riseplan.

Purpose
-------
Centralizes default values and magic numbers used throughout the riseplan
codebase: calendar constants, the percent/fraction scale of the input form,
the defaults the input form starts from, and plotting defaults.

Usage
-----
>>> from riseplan.constants import MONTHS_PER_YEAR, DEFAULT_FIGSIZE
>>>
>>> total_months = years * MONTHS_PER_YEAR
>>> fig, ax = plt.subplots(figsize=DEFAULT_FIGSIZE)

Categories
----------
- Time: months per year
- Input form: percent scale and form defaults
- Plotting: figure sizes, colors, line widths
"""

from typing import Tuple

__all__ = [
    # Time
    "MONTHS_PER_YEAR",
    # Input form
    "PERCENT_SCALE",
    "DEFAULT_NOMINAL_INTEREST_PCT",
    "DEFAULT_INFLATION_RATE_PCT",
    "DEFAULT_INITIAL_CAPITAL",
    "DEFAULT_DESIRED_MONTHLY_INCOME",
    "DEFAULT_WITHDRAWAL_RATE_PCT",
    "DEFAULT_TAX_RATE_PCT",
    "DEFAULT_PERIOD_YEARS",
    "DEFAULT_PERIOD_DEPOSIT",
    # Plotting
    "DEFAULT_FIGSIZE",
    "DEFAULT_FIGSIZE_WIDE",
    "DEFAULT_LINEWIDTH",
    "DEFAULT_LINEWIDTH_THICK",
    "COLOR_BEFORE_TAX",
    "COLOR_AFTER_TAX",
    "COLOR_THRESHOLD",
]


# =============================================================================
# Time
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of months in a year (used for horizon sizing and rate conversion)."""


# =============================================================================
# Input Form Defaults
# =============================================================================

PERCENT_SCALE: float = 100.0
"""Divisor applied once at the input boundary: 7 (percent) -> 0.07 (fraction)."""

DEFAULT_NOMINAL_INTEREST_PCT: float = 7.0
"""Default nominal annual interest rate, in percent."""

DEFAULT_INFLATION_RATE_PCT: float = 2.0
"""Default expected annual inflation, in percent."""

DEFAULT_INITIAL_CAPITAL: float = 10_000.0
"""Default starting capital."""

DEFAULT_DESIRED_MONTHLY_INCOME: float = 1_000.0
"""Default desired monthly income after tax."""

DEFAULT_WITHDRAWAL_RATE_PCT: float = 4.0
"""Default planned annual withdrawal rate, in percent."""

DEFAULT_TAX_RATE_PCT: float = 15.0
"""Default tax rate, in percent."""

DEFAULT_PERIOD_YEARS: int = 10
"""Length of the single deposit phase the form starts with."""

DEFAULT_PERIOD_DEPOSIT: float = 200.0
"""Monthly deposit of the single deposit phase the form starts with."""


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE: Tuple[int, int] = (12, 6)
"""Default figure size (width, height) in inches for timeline plots."""

DEFAULT_FIGSIZE_WIDE: Tuple[int, int] = (14, 6)
"""Figure size for multi-run comparison plots."""

DEFAULT_LINEWIDTH: float = 1.5
"""Default line width for comparison lines."""

DEFAULT_LINEWIDTH_THICK: float = 2.5
"""Line width for the main capital curves."""

COLOR_BEFORE_TAX: str = "#3B82F6"
"""Line color for capital before tax."""

COLOR_AFTER_TAX: str = "#10B981"
"""Line color for capital after tax."""

COLOR_THRESHOLD: str = "#EF4444"
"""Line color for the goal threshold."""
