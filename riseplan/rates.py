"""
Rate normalization for riseplan.

Converts the nominal annual interest rate and the expected annual inflation
into the real annual rate (Fisher relation) and the effective compounded
monthly rate used by the monthly accumulator:

    real_rate    = (1 + r_nominal) / (1 + r_inflation) - 1
    monthly_rate = (1 + real_rate) ** (1/12) - 1

Both inputs are decimal fractions and may be negative (deflation, negative
real growth). Domain checks (rates > -1) belong to SimulationInput.
"""

from __future__ import annotations

from dataclasses import dataclass

from .utils import annual_to_monthly

__all__ = [
    "RateNormalization",
    "real_rate",
    "normalize_rates",
]


@dataclass(frozen=True)
class RateNormalization:
    """Real annual rate and its effective monthly equivalent."""
    real_rate: float
    monthly_rate: float


def real_rate(nominal_interest: float, inflation_rate: float) -> float:
    """Inflation-adjusted annual rate via the Fisher relation."""
    return (1.0 + nominal_interest) / (1.0 + inflation_rate) - 1.0


def normalize_rates(nominal_interest: float, inflation_rate: float) -> RateNormalization:
    """
    Normalize nominal/inflation inputs into real annual and monthly rates.

    Parameters
    ----------
    nominal_interest : float
        Nominal annual rate as a decimal fraction (0.07 for 7%).
    inflation_rate : float
        Expected annual inflation as a decimal fraction.

    Returns
    -------
    RateNormalization

    Examples
    --------
    >>> rates = normalize_rates(0.07, 0.02)
    >>> round(rates.real_rate, 5)
    0.04902
    """
    r = real_rate(nominal_interest, inflation_rate)
    return RateNormalization(real_rate=r, monthly_rate=annual_to_monthly(r))
