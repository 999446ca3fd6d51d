"""General utilities for riseplan

Contents
--------
- Validation helpers
- Rate conversion (annual → monthly, compounded)
- Calendar helpers (month counts ↔ years + months)
- Series helpers (to_series)
- Matplotlib formatters (thousands_formatter, format_currency, format_percent)
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .constants import MONTHS_PER_YEAR
from .exceptions import ValidationError

__all__ = [
    # Validation
    "check_number",
    "check_non_negative",
    # Rates
    "annual_to_monthly",
    # Calendar
    "months_to_years_months",
    # Series
    "to_series",
    # Matplotlib formatters
    "thousands_formatter",
    "format_currency",
    "format_percent",
]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_number(name: str, value: object) -> float:
    """Return *value* as float; raise if it is not a finite real number.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        raise ValidationError(
            f"{name} must be a number (got {type(value).__name__}: {value!r})."
        )
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite (got {value}).")
    return value


def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Rate conversion (compounded)
# ---------------------------------------------------------------------------

def annual_to_monthly(r_annual: float) -> float:
    """Convert an annual rate to the equivalent compounded monthly rate.

    Uses: (1 + r_a) ** (1/12) - 1. Accepts negative values as well.
    """
    return float((1.0 + r_annual) ** (1.0 / MONTHS_PER_YEAR) - 1.0)


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def months_to_years_months(month: int) -> Tuple[int, int]:
    """Split an absolute month count into (whole years, remaining months).

    >>> months_to_years_months(30)
    (2, 6)
    """
    return month // MONTHS_PER_YEAR, month % MONTHS_PER_YEAR


# ---------------------------------------------------------------------------
# Series helpers
# ---------------------------------------------------------------------------

def to_series(
    values: Sequence[float] | np.ndarray,
    index: Optional[Sequence[int] | pd.Index] = None,
    *,
    name: str = "value",
) -> pd.Series:
    """Return a float Pandas Series from *values* with an optional index."""
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D, got shape {arr.shape}.")
    if index is None:
        return pd.Series(arr, name=name)
    if len(index) != arr.shape[0]:
        raise ValueError("index length must match data length.")
    return pd.Series(arr, index=index, name=name)


# ---------------------------------------------------------------------------
# Matplotlib formatters
# ---------------------------------------------------------------------------

def thousands_formatter(x, pos):
    """
    Format axis values as thousands for matplotlib FuncFormatter.

    - 25_000 → "$25k"
    - 12_500 → "$12.5k"
    - 2_500_000 → "$2.5M"
    - 0 → "$0"

    Parameters
    ----------
    x : float
        Value to format (in currency units).
    pos : int
        Tick position (unused, required by FuncFormatter signature).

    Returns
    -------
    str
        Compact currency string.

    Examples
    --------
    >>> from matplotlib.ticker import FuncFormatter
    >>> ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    """
    if x == 0:
        return "$0"
    sign = "-" if x < 0 else ""
    x = abs(x)
    if x >= 1e6:
        val, unit = x / 1e6, "M"
    elif x >= 1e3:
        val, unit = x / 1e3, "k"
    else:
        return f"{sign}${x:.0f}"
    return f"{sign}${val:.0f}{unit}" if val == int(val) else f"{sign}${val:.1f}{unit}"


def format_currency(value: float, decimals: int = 2, symbol: str = "$") -> str:
    """
    Format a currency amount with thousand separators.

    Examples
    --------
    >>> format_currency(34000)
    '$34,000.00'
    >>> format_currency(1234.5, decimals=0)
    '$1,234'
    >>> format_currency(-50)
    '-$50.00'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(fraction: float, decimals: int = 2) -> str:
    """Format a decimal fraction as a percentage string (0.04902 → '4.90%')."""
    return f"{fraction * 100:.{decimals}f}%"
