"""
Deposit periods and the period scheduler.

Purpose
-------
A deposit period (phase) is a contiguous run of months sharing one fixed
monthly deposit. Phases execute strictly in the order they are listed.
The scheduler maps (phase index, months elapsed within the phase) to the
active phase, and advances to the next phase once ``years * 12`` months of
the current one are consumed.

Asking for a month beyond the last configured phase is an explicit
PeriodExhaustedError, never an out-of-range access.

Example
-------
>>> schedule = PeriodSchedule([DepositPeriod(years=1, monthly_deposit=200),
...                            DepositPeriod(years=2, monthly_deposit=50)])
>>> schedule.total_months
36
>>> [p.monthly_deposit for _, p in schedule.iter_months()][11:13]
[200.0, 50.0]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from .constants import MONTHS_PER_YEAR
from .exceptions import PeriodExhaustedError, ValidationError
from .utils import check_non_negative, check_number

__all__ = [
    "DepositPeriod",
    "SchedulePosition",
    "PeriodSchedule",
    "total_months",
    "declared_deposits",
]


# ---------------------------------------------------------------------------
# Deposit Period
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DepositPeriod:
    """
    One deposit phase.

    Parameters
    ----------
    years : int
        Length of the phase in whole years (non-negative integer).
        A zero-length phase contributes no months and is skipped.
    monthly_deposit : float
        Amount deposited at the start of every month of the phase.
        Negative values model a withdrawal phase.
    """
    years: int
    monthly_deposit: float

    def __post_init__(self):
        if isinstance(self.years, bool) or not isinstance(self.years, int):
            # Accept integral floats coming from JSON (10.0), reject 2.5
            if isinstance(self.years, float) and self.years.is_integer():
                object.__setattr__(self, "years", int(self.years))
            else:
                raise ValidationError(
                    f"years must be an integer (got {self.years!r})."
                )
        check_non_negative("years", self.years)

        deposit = check_number("monthly_deposit", self.monthly_deposit)
        object.__setattr__(self, "monthly_deposit", deposit)

    @property
    def months(self) -> int:
        """Number of months covered by this phase."""
        return self.years * MONTHS_PER_YEAR

    @property
    def total_deposit(self) -> float:
        """Sum deposited over the whole phase."""
        return self.monthly_deposit * self.months


def total_months(periods: Sequence[DepositPeriod]) -> int:
    """Months covered by all phases: Σ years × 12."""
    return sum(p.months for p in periods)


def declared_deposits(initial_capital: float, periods: Sequence[DepositPeriod]) -> float:
    """Initial capital plus every configured deposit (path independent)."""
    return initial_capital + sum(p.total_deposit for p in periods)


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchedulePosition:
    """Cursor into the schedule: active phase index and months used in it."""
    phase_index: int = 0
    elapsed: int = 0


class PeriodSchedule:
    """
    Stateless resolver from schedule positions to deposit periods.

    The schedule never mutates; callers thread a SchedulePosition value
    through ``advance`` to walk the months in order.
    """

    def __init__(self, periods: Sequence[DepositPeriod]):
        self.periods: Tuple[DepositPeriod, ...] = tuple(periods)

    @property
    def total_months(self) -> int:
        return total_months(self.periods)

    def __len__(self) -> int:
        return len(self.periods)

    def active(self, position: SchedulePosition) -> DepositPeriod:
        """Return the phase active at *position*."""
        if not 0 <= position.phase_index < len(self.periods):
            raise PeriodExhaustedError(
                f"Phase index {position.phase_index} is outside the "
                f"{len(self.periods)} configured deposit period(s)."
            )
        return self.periods[position.phase_index]

    def locate(self, position: Optional[SchedulePosition] = None) -> SchedulePosition:
        """
        Normalize *position* so it points at a phase with months left.

        Moves forward over exhausted and zero-length phases, resetting the
        elapsed counter each time. Raises PeriodExhaustedError if no phase
        with remaining months follows.
        """
        position = position or SchedulePosition()
        index, elapsed = position.phase_index, position.elapsed
        while index < len(self.periods) and elapsed >= self.periods[index].months:
            index += 1
            elapsed = 0
        if index >= len(self.periods):
            raise PeriodExhaustedError(
                f"Simulation requested more months than the {self.total_months} "
                f"covered by {len(self.periods)} deposit period(s)."
            )
        return SchedulePosition(phase_index=index, elapsed=elapsed)

    def advance(self, position: SchedulePosition) -> SchedulePosition:
        """Consume one month at *position* and return the raw next position."""
        return SchedulePosition(position.phase_index, position.elapsed + 1)

    def iter_months(self, months: Optional[int] = None) -> Iterator[Tuple[int, DepositPeriod]]:
        """
        Yield ``(month, period)`` for months 1..*months* in schedule order.

        Parameters
        ----------
        months : int, optional
            Number of months to walk. Defaults to the full coverage
            ``total_months``. Larger values raise PeriodExhaustedError
            when the walk passes the last phase.
        """
        months = self.total_months if months is None else months
        position = SchedulePosition()
        for month in range(1, months + 1):
            try:
                position = self.locate(position)
            except PeriodExhaustedError:
                raise PeriodExhaustedError(
                    f"Month {month} is beyond the {self.total_months} months "
                    f"covered by {len(self.periods)} deposit period(s)."
                ) from None
            yield month, self.active(position)
            position = self.advance(position)
