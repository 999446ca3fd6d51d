"""
Configuration management module for riseplan.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter management,
validation, and serialization. Supports environment variables, JSON configs,
and programmatic defaults.

The input form speaks percentages (7 for 7%); the engine speaks decimal
fractions (0.07). SimulationInputConfig is the single place where that
conversion happens: ``to_input()`` divides every rate by PERCENT_SCALE once.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for config files
- Environment-aware: Supports .env files via AppSettings
- Defaults: The same starting values as the input form

Example
-------
>>> from riseplan.config import SimulationInputConfig
>>> config = SimulationInputConfig(nominal_interest_pct=7, inflation_rate_pct=2)
>>> inputs = config.to_input()
>>> inputs.nominal_interest
0.07
>>>
>>> # Serialize to dict/JSON
>>> config_dict = config.model_dump()
>>> json_str = config.model_dump_json()
>>>
>>> # Load from dict/JSON
>>> loaded = SimulationInputConfig.model_validate(config_dict)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_DESIRED_MONTHLY_INCOME,
    DEFAULT_INFLATION_RATE_PCT,
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_NOMINAL_INTEREST_PCT,
    DEFAULT_PERIOD_DEPOSIT,
    DEFAULT_PERIOD_YEARS,
    DEFAULT_TAX_RATE_PCT,
    DEFAULT_WITHDRAWAL_RATE_PCT,
    PERCENT_SCALE,
)
from .tax import TaxOption

if TYPE_CHECKING:
    from .engine import SimulationInput

__all__ = [
    "DepositPeriodConfig",
    "SimulationInputConfig",
    "AppSettings",
    "configure_logging",
]


# ---------------------------------------------------------------------------
# Deposit Period Configuration
# ---------------------------------------------------------------------------

class DepositPeriodConfig(BaseModel):
    """
    Configuration for one deposit phase.

    Attributes
    ----------
    years : int
        Length of the phase in whole years (>= 0).
    monthly_deposit : float
        Deposit made every month of the phase. The key ``deposit`` is
        accepted as an alias.

    Examples
    --------
    >>> DepositPeriodConfig(years=10, deposit=200).monthly_deposit
    200.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    years: int = Field(
        ge=0,
        le=200,
        description="Length of the phase in years"
    )
    monthly_deposit: float = Field(
        allow_inf_nan=False,
        validation_alias=AliasChoices("monthly_deposit", "deposit"),
        description="Monthly deposit during the phase"
    )


def _default_periods() -> List[DepositPeriodConfig]:
    return [DepositPeriodConfig(years=DEFAULT_PERIOD_YEARS, monthly_deposit=DEFAULT_PERIOD_DEPOSIT)]


# ---------------------------------------------------------------------------
# Simulation Input Configuration
# ---------------------------------------------------------------------------

class SimulationInputConfig(BaseModel):
    """
    Percent-style simulation inputs, as collected by a form or config file.

    Attributes
    ----------
    nominal_interest_pct : float
        Nominal annual interest rate in percent (> -100).
    inflation_rate_pct : float
        Expected annual inflation in percent (> -100).
    initial_capital : float
        Starting capital (>= 0).
    desired_monthly_income : float
        Desired monthly income after tax (>= 0).
    withdrawal_rate_pct : float
        Planned annual withdrawal rate in percent (>= 0).
    tax_rate_pct : float
        Tax rate in percent (0-100).
    tax_option : TaxOption
        ``"whole_capital"`` or ``"interest_only"``; the form codes
        ``"1"`` and ``"2"`` are accepted too.
    periods : List[DepositPeriodConfig]
        Deposit phases in execution order (at least one).

    Examples
    --------
    >>> config = SimulationInputConfig(
    ...     nominal_interest_pct=6.5,
    ...     tax_option="2",
    ...     periods=[{"years": 5, "deposit": 300}, {"years": 5, "deposit": 500}],
    ... )
    >>> config.to_input().tax_option
    <TaxOption.INTEREST_ONLY: 'interest_only'>
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    nominal_interest_pct: float = Field(
        default=DEFAULT_NOMINAL_INTEREST_PCT,
        gt=-100,
        description="Nominal annual interest rate (%)"
    )
    inflation_rate_pct: float = Field(
        default=DEFAULT_INFLATION_RATE_PCT,
        gt=-100,
        description="Expected annual inflation rate (%)"
    )
    initial_capital: float = Field(
        default=DEFAULT_INITIAL_CAPITAL,
        ge=0,
        description="Initial capital"
    )
    desired_monthly_income: float = Field(
        default=DEFAULT_DESIRED_MONTHLY_INCOME,
        ge=0,
        description="Desired monthly income after tax"
    )
    withdrawal_rate_pct: float = Field(
        default=DEFAULT_WITHDRAWAL_RATE_PCT,
        ge=0,
        description="Planned annual withdrawal rate (%)"
    )
    tax_rate_pct: float = Field(
        default=DEFAULT_TAX_RATE_PCT,
        ge=0,
        le=100,
        description="Tax rate (%)"
    )
    tax_option: TaxOption = Field(
        default=TaxOption.WHOLE_CAPITAL,
        description="Taxable base: whole capital or interest only"
    )
    periods: List[DepositPeriodConfig] = Field(
        default_factory=_default_periods,
        min_length=1,
        description="Deposit phases in execution order"
    )

    @field_validator("tax_option", mode="before")
    @classmethod
    def parse_tax_option(cls, v):
        """Accept enum values, names and the form codes '1'/'2'."""
        return TaxOption.parse(v)

    def to_input(self) -> SimulationInput:
        """Convert to engine inputs (percentages become decimal fractions)."""
        from .engine import SimulationInput
        from .periods import DepositPeriod

        return SimulationInput(
            nominal_interest=self.nominal_interest_pct / PERCENT_SCALE,
            inflation_rate=self.inflation_rate_pct / PERCENT_SCALE,
            withdrawal_rate=self.withdrawal_rate_pct / PERCENT_SCALE,
            tax_rate=self.tax_rate_pct / PERCENT_SCALE,
            initial_capital=self.initial_capital,
            desired_monthly_income=self.desired_monthly_income,
            tax_option=self.tax_option,
            periods=tuple(
                DepositPeriod(years=p.years, monthly_deposit=p.monthly_deposit)
                for p in self.periods
            ),
        )

    @classmethod
    def from_input(cls, inputs: SimulationInput) -> "SimulationInputConfig":
        """Inverse of ``to_input`` (decimal fractions become percentages)."""
        return cls(
            nominal_interest_pct=_to_percent(inputs.nominal_interest),
            inflation_rate_pct=_to_percent(inputs.inflation_rate),
            initial_capital=inputs.initial_capital,
            desired_monthly_income=inputs.desired_monthly_income,
            withdrawal_rate_pct=_to_percent(inputs.withdrawal_rate),
            tax_rate_pct=_to_percent(inputs.tax_rate),
            tax_option=inputs.tax_option,
            periods=[
                DepositPeriodConfig(years=p.years, monthly_deposit=p.monthly_deposit)
                for p in inputs.periods
            ],
        )


def _to_percent(fraction: float) -> float:
    # 0.07 * 100 is 7.000000000000001 in binary floating point
    return round(fraction * PERCENT_SCALE, 10)


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with RISEPLAN_ (e.g., RISEPLAN_DEBUG=true).

    Attributes
    ----------
    debug : bool
        Enable debug mode with verbose logging
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    data_dir : Path
        Directory holding the run store
    runs_file : str
        File name of the run store inside data_dir
    export_dir : Path
        Default directory for CSV exports and plots

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.debug
    False

    # With .env file:
    # RISEPLAN_DATA_DIR=/tmp/riseplan
    >>> settings = AppSettings(_env_file=".env")
    >>> settings.runs_path
    PosixPath('/tmp/riseplan/runs.json')
    """

    model_config = SettingsConfigDict(
        env_prefix="RISEPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    data_dir: Path = Field(
        default=Path.home() / ".local" / "share" / "riseplan",
        description="Directory for stored runs"
    )
    runs_file: str = Field(
        default="runs.json",
        min_length=1,
        description="Run store file name"
    )
    export_dir: Path = Field(
        default=Path("exports"),
        description="Default output directory for exports"
    )

    @property
    def runs_path(self) -> Path:
        """Full path of the run store document."""
        return self.data_dir / self.runs_file


def configure_logging(settings: AppSettings) -> None:
    """Install a basic stderr handler at the configured level."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("riseplan").setLevel(level)
