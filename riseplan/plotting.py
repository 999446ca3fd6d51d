"""
Plotting utilities for riseplan projections.

Purpose
-------
Visualizes SimulationResult timelines with matplotlib. The timeline is read
only through its public fields (month, capital, capital_after_tax), so any
result loaded from the run store or a result file plots the same way.

Unified interface
-----------------
    plot("timeline", result=result, threshold=250_000)
    plot("decomposition", result=result, inputs=inputs)
    plot("comparison", results={"A": r1, "B": r2})

Available Modes
---------------
- "timeline": Capital before and after tax by month, with optional goal
  threshold line and a marker at the month the goal is first met
- "decomposition": Capital split into cumulative deposits and growth
- "comparison": Capital before tax of several runs overlaid

Common keyword arguments: figsize, title, save_path, return_fig_ax.
If save_path is given the figure is written with
``fig.savefig(save_path, bbox_inches='tight', dpi=150)``.
Unless return_fig_ax is set the figure is closed afterwards, and shown first
when it was not saved.
"""

from __future__ import annotations

from typing import Dict, Optional, TYPE_CHECKING

import numpy as np

from .constants import (
    COLOR_AFTER_TAX,
    COLOR_BEFORE_TAX,
    COLOR_THRESHOLD,
    DEFAULT_FIGSIZE,
    DEFAULT_FIGSIZE_WIDE,
    DEFAULT_LINEWIDTH,
    DEFAULT_LINEWIDTH_THICK,
    MONTHS_PER_YEAR,
)
from .utils import format_currency, thousands_formatter

if TYPE_CHECKING:
    from .engine import SimulationInput, SimulationResult

__all__ = [
    "plot",
    "plot_timeline",
    "plot_decomposition",
    "plot_comparison",
    "cumulative_deposits",
]


# ---------------------------------------------------------------------------
# Unified plotting interface
# ---------------------------------------------------------------------------

def plot(mode: str, **kwargs):
    """
    Dispatch to the plotting function for *mode*.

    Parameters
    ----------
    mode : str
        "timeline", "decomposition" or "comparison".
    **kwargs
        Forwarded to the mode's function.

    Raises
    ------
    ValueError
        If *mode* is unknown.
    """
    _dispatch = {
        "timeline": plot_timeline,
        "decomposition": plot_decomposition,
        "comparison": plot_comparison,
    }
    if mode not in _dispatch:
        valid = ", ".join(f"'{m}'" for m in _dispatch.keys())
        raise ValueError(f"Invalid mode '{mode}'. Valid modes: {valid}")
    return _dispatch[mode](**kwargs)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_timeline(result: SimulationResult) -> None:
    if not result.timeline:
        raise ValueError("Cannot plot an empty timeline (total months is 0).")


def _year_ticks(ax, total_months: int) -> None:
    """Tick every year (or every 5 years on long horizons)."""
    years = total_months / MONTHS_PER_YEAR
    step = MONTHS_PER_YEAR * (5 if years > 20 else 1)
    ax.set_xticks(np.arange(0, total_months + 1, step))
    ax.set_xlim(0, total_months)


def _finish(fig, title: Optional[str], save_path: Optional[str], return_fig_ax: bool, axes):
    from matplotlib import pyplot as plt

    if title:
        fig.suptitle(title, fontsize=14, fontweight='bold')
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
    if return_fig_ax:
        return fig, axes
    if not save_path:
        plt.show()
    plt.close(fig)
    return None


def cumulative_deposits(result: SimulationResult, initial_capital: float) -> np.ndarray:
    """Running deposits (initial capital included) at the end of each month."""
    deposits = np.concatenate(
        [np.full(p.months, p.monthly_deposit, dtype=float) for p in result.periods]
        or [np.zeros(0)]
    )
    return initial_capital + np.cumsum(deposits)


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

def plot_timeline(
    result: SimulationResult,
    *,
    threshold: Optional[float] = None,
    figsize: tuple = DEFAULT_FIGSIZE,
    title: Optional[str] = "Capital Growth Over Time",
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Capital before and after tax by month.

    Parameters
    ----------
    result : SimulationResult
        Projection to plot. Must have at least one month.
    threshold : float, optional
        Goal threshold (rise number) drawn as a dashed horizontal line.
        Ignored when not finite.
    figsize, title, save_path, return_fig_ax
        Common plotting parameters.

    Returns
    -------
    None or (fig, ax)
    """
    from matplotlib import pyplot as plt
    from matplotlib.ticker import FuncFormatter

    _require_timeline(result)
    months = np.array([p.month for p in result.timeline])

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(months, result.capital_path, color=COLOR_BEFORE_TAX,
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Capital (before tax)")
    ax.plot(months, result.capital_after_tax_path, color=COLOR_AFTER_TAX,
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Capital (after tax)")

    if threshold is not None and np.isfinite(threshold):
        ax.axhline(threshold, color=COLOR_THRESHOLD, linestyle='--',
                   linewidth=DEFAULT_LINEWIDTH, label=f"Goal {format_currency(threshold, 0)}")

    goal = result.goal_reached_at
    if goal is not None:
        point = result.timeline[goal.month - 1]
        ax.scatter([point.month], [point.capital_after_tax], color=COLOR_THRESHOLD,
                   zorder=5, label=f"Goal met ({goal})")

    ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    ax.set_xlabel("Month", fontsize=11)
    ax.set_ylabel("Capital", fontsize=11)
    _year_ticks(ax, len(months))
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper left', fontsize=10)

    return _finish(fig, title, save_path, return_fig_ax, ax)


def plot_decomposition(
    result: SimulationResult,
    inputs: SimulationInput,
    *,
    figsize: tuple = DEFAULT_FIGSIZE,
    title: Optional[str] = "Deposits vs Growth",
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Capital before tax split into cumulative deposits and growth.

    Growth below zero (negative real rate) is drawn as a negative band.
    """
    from matplotlib import pyplot as plt
    from matplotlib.ticker import FuncFormatter

    _require_timeline(result)
    months = np.array([p.month for p in result.timeline])
    deposits = cumulative_deposits(result, inputs.initial_capital)
    growth = result.capital_path - deposits

    fig, ax = plt.subplots(figsize=figsize)
    ax.stackplot(months, deposits, np.clip(growth, 0, None),
                 labels=["Deposits", "Growth"],
                 colors=[COLOR_BEFORE_TAX, COLOR_AFTER_TAX], alpha=0.8)
    if (growth < 0).any():
        ax.fill_between(months, deposits + np.clip(growth, None, 0), deposits,
                        color=COLOR_THRESHOLD, alpha=0.5, label="Loss")

    ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    ax.set_xlabel("Month", fontsize=11)
    ax.set_ylabel("Capital", fontsize=11)
    _year_ticks(ax, len(months))
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper left', fontsize=10)

    return _finish(fig, title, save_path, return_fig_ax, ax)


def plot_comparison(
    results: Dict[str, SimulationResult],
    *,
    after_tax: bool = False,
    figsize: tuple = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = "Projection Comparison",
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Overlay several projections.

    Left panel: capital trajectories. Right panel: final capital per run.

    Parameters
    ----------
    results : dict[str, SimulationResult]
        Label → result.
    after_tax : bool, default False
        Plot provisional after-tax capital instead of capital before tax.
    """
    if not isinstance(results, dict) or not results:
        raise TypeError("mode='comparison' requires a non-empty results dict")

    from matplotlib import pyplot as plt
    from matplotlib.ticker import FuncFormatter

    fig, axes = plt.subplots(1, 2, figsize=figsize)
    colors = plt.cm.Dark2(np.linspace(0, 1, len(results)))

    finals = []
    for color, (label, result) in zip(colors, results.items()):
        _require_timeline(result)
        months = [p.month for p in result.timeline]
        path = result.capital_after_tax_path if after_tax else result.capital_path
        axes[0].plot(months, path, label=label, color=color, linewidth=DEFAULT_LINEWIDTH_THICK)
        finals.append(result.capital_after_tax if after_tax else result.final_capital)

    axes[0].yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    axes[0].set_xlabel("Month", fontsize=11)
    axes[0].set_ylabel("Capital (after tax)" if after_tax else "Capital (before tax)", fontsize=11)
    axes[0].set_title("Trajectories", fontsize=12, fontweight='bold')
    axes[0].legend(loc='best', fontsize=10)
    axes[0].grid(True, alpha=0.3)

    axes[1].bar(list(results.keys()), finals, color=colors)
    axes[1].yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    axes[1].set_ylabel("Final Capital", fontsize=11)
    axes[1].set_title("Final Capital", fontsize=12, fontweight='bold')
    axes[1].grid(True, alpha=0.3, axis='y')
    axes[1].tick_params(axis='x', rotation=45)

    return _finish(fig, title, save_path, return_fig_ax, axes)
