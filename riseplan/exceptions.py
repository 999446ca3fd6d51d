"""
Custom exceptions for riseplan.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all riseplan modules. All exceptions inherit from RisePlanError,
enabling catch-all handling when needed.

Exception Hierarchy
-------------------
RisePlanError (base)
├── ValidationError - Invalid simulation inputs
│   └── PeriodExhaustedError - Months requested beyond configured phases
├── ConfigurationError - Invalid config files, settings or schemas
└── RunNotFoundError - Unknown run id in the run store

DivisionHazardWarning (UserWarning)
    Non-finite goal threshold (withdrawal_rate = 0 or tax_rate = 1).
    Non-fatal: the projection completes and the goal is never reached.

Usage
-----
>>> from riseplan.exceptions import ValidationError, PeriodExhaustedError
>>>
>>> # Raise specific exception
>>> raise ValidationError("periods must not be empty")
>>>
>>> # Catch all riseplan exceptions
>>> try:
...     result = project(inputs)
>>> except RisePlanError as e:
...     print(f"riseplan error: {e}")
"""

__all__ = [
    "RisePlanError",
    "ValidationError",
    "PeriodExhaustedError",
    "ConfigurationError",
    "RunNotFoundError",
    "DivisionHazardWarning",
]


class RisePlanError(Exception):
    """
    Base exception for all riseplan errors.

    Examples
    --------
    >>> try:
    ...     project(inputs)
    ... except RisePlanError as e:
    ...     logger.error("Projection failed: %s", e)
    """
    pass


class ValidationError(RisePlanError, ValueError):
    """
    Simulation input failed validation.

    Raised when a field is non-numeric or out of its domain, such as:
    - Empty periods list
    - Negative or non-integer years
    - Negative initial capital or desired income
    - Tax rate outside [0, 1]
    - NaN or infinite values

    Inherits from ValueError so callers catching plain ValueError still work.

    Examples
    --------
    >>> raise ValidationError(
    ...     "initial_capital must be non-negative (got -10.0)."
    ... )
    """
    pass


class PeriodExhaustedError(ValidationError):
    """
    Requested simulation length exceeds the configured deposit phases.

    Raised by the period scheduler when it would have to advance past the
    last configured phase. Never surfaces as an IndexError.

    Examples
    --------
    >>> raise PeriodExhaustedError(
    ...     "Month 121 is beyond the 120 months covered by 1 deposit period(s)."
    ... )
    """
    pass


class ConfigurationError(RisePlanError):
    """
    Invalid configuration or persisted data.

    Raised when a config or result file cannot be parsed or validated,
    or when a stored document has an unexpected structure.

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Run store runs.json is not a JSON object with a 'runs' list."
    ... )
    """
    pass


class RunNotFoundError(RisePlanError, KeyError):
    """
    No stored run matches the requested id.

    Examples
    --------
    >>> raise RunNotFoundError("No run with id '3f2a...'")
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class DivisionHazardWarning(UserWarning):
    """
    Goal threshold is not finite.

    Emitted when withdrawal_rate == 0 or tax_rate == 1, which makes the
    rise threshold divide by zero. The projection still completes and the
    goal is reported as never reached.
    """
    pass
