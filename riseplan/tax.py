"""
Tax model for riseplan.

Purpose
-------
Two taxable-base policies:

- WHOLE_CAPITAL : the whole balance is taxed.
- INTEREST_ONLY : only the accrued interest (balance minus deposits) is taxed.

Two evaluations use them:

Per month (goal detection), with the running deposits as of that month::

    WHOLE_CAPITAL : after_tax(t) = C(t) · (1 - τ)
    INTEREST_ONLY : after_tax(t) = D(t) + (C(t) - D(t)) · (1 - τ)

Final aggregate, once, with the declared total deposits D_total::

    interest  = C_T - D_total
    tax       = C_T · τ            (WHOLE_CAPITAL)
              = interest · τ       (INTEREST_ONLY)
    after_tax = C_T - tax
    income    = after_tax · w / 12

The two formulas differ on purpose; goal-detection timing depends on the
per-month variant.

The goal threshold (rise number) is the after-tax capital whose withdrawal
income covers the desired monthly income::

    threshold = income · 12 / (w · (1 - τ))

It is infinite when w == 0 or τ == 1.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from enum import Enum

from .constants import MONTHS_PER_YEAR
from .exceptions import DivisionHazardWarning, ValidationError

__all__ = [
    "TaxOption",
    "TaxSummary",
    "provisional_after_tax",
    "rise_threshold",
    "final_tax_summary",
]

logger = logging.getLogger(__name__)


class TaxOption(str, Enum):
    """Taxable-base policy."""
    WHOLE_CAPITAL = "whole_capital"
    INTEREST_ONLY = "interest_only"

    @classmethod
    def parse(cls, value: "TaxOption | str | int") -> "TaxOption":
        """
        Resolve a policy from its enum value, name, or legacy form code.

        The input form sends ``"1"`` (entire capital) and ``"2"``
        (interest only).

        Examples
        --------
        >>> TaxOption.parse("1")
        <TaxOption.WHOLE_CAPITAL: 'whole_capital'>
        >>> TaxOption.parse("INTEREST_ONLY")
        <TaxOption.INTEREST_ONLY: 'interest_only'>
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        legacy = {"1": cls.WHOLE_CAPITAL, "2": cls.INTEREST_ONLY}
        if key in legacy:
            return legacy[key]
        for option in cls:
            if key.lower() in (option.value, option.name.lower()):
                return option
        valid = ", ".join(f"'{o.value}'" for o in cls)
        raise ValidationError(
            f"Unknown tax option {value!r}. Valid options: {valid} (or '1', '2')."
        )

    @property
    def label(self) -> str:
        """Human-readable label used in summaries and exports."""
        return "Entire capital" if self is TaxOption.WHOLE_CAPITAL else "Interest only"


@dataclass(frozen=True)
class TaxSummary:
    """Final aggregate tax and income figures."""
    total_deposits: float
    interest_earned: float
    tax_amount: float
    capital_after_tax: float
    monthly_income_after_tax: float


def provisional_after_tax(
    capital: float,
    deposits_so_far: float,
    tax_rate: float,
    tax_option: TaxOption,
) -> float:
    """After-tax capital for one month, from the running totals of that month."""
    if tax_option is TaxOption.WHOLE_CAPITAL:
        return capital * (1.0 - tax_rate)
    interest = capital - deposits_so_far
    return deposits_so_far + interest * (1.0 - tax_rate)


def rise_threshold(
    desired_monthly_income: float,
    withdrawal_rate: float,
    tax_rate: float,
    *,
    warn: bool = True,
) -> float:
    """
    After-tax capital needed to fund *desired_monthly_income*.

    Returns ``math.inf`` instead of dividing by zero when the withdrawal
    rate is zero or the tax rate is one; the goal can then never be met.
    A DivisionHazardWarning is emitted in that case unless *warn* is False.
    """
    denominator = withdrawal_rate * (1.0 - tax_rate)
    if denominator == 0.0:
        message = (
            f"Goal threshold is not finite (withdrawal_rate={withdrawal_rate}, "
            f"tax_rate={tax_rate}); the income goal will never be reached."
        )
        logger.warning(message)
        if warn:
            warnings.warn(message, DivisionHazardWarning, stacklevel=2)
        return math.inf
    threshold = desired_monthly_income * MONTHS_PER_YEAR / denominator
    if not math.isfinite(threshold):
        logger.warning("Goal threshold overflowed to %r", threshold)
        return math.inf
    return threshold


def final_tax_summary(
    final_capital: float,
    total_deposits: float,
    tax_rate: float,
    withdrawal_rate: float,
    tax_option: TaxOption,
) -> TaxSummary:
    """
    Final aggregate from terminal capital and declared total deposits.

    Examples
    --------
    >>> s = final_tax_summary(1000.0, 800.0, 0.25, 0.04, TaxOption.INTEREST_ONLY)
    >>> s.tax_amount, s.capital_after_tax
    (50.0, 950.0)
    """
    interest = final_capital - total_deposits
    if tax_option is TaxOption.WHOLE_CAPITAL:
        tax = final_capital * tax_rate
    else:
        tax = interest * tax_rate
    after_tax = final_capital - tax
    return TaxSummary(
        total_deposits=total_deposits,
        interest_earned=interest,
        tax_amount=tax,
        capital_after_tax=after_tax,
        monthly_income_after_tax=after_tax * withdrawal_rate / MONTHS_PER_YEAR,
    )
