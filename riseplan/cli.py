"""
Command-Line Interface for riseplan.

Purpose
-------
Runs projections, manages input config files and the local run store, and
exports results without writing Python code.

Commands
--------
- project: Run one projection from a config file and/or options
- config: Create, validate and display input config files
- runs: List, show and delete stored runs
- export: Write a stored run to CSV (and optionally a plot)
- info: Show package and dependency versions

Example Usage
-------------
    # Projection with the form defaults
    $ riseplan project

    # Two deposit phases, interest-only tax, stored under a name
    $ riseplan project --periods "10:200,5:500" --tax-option interest_only --save "Plan B"

    # From a config file, with CSV and plot output
    $ riseplan project -c plan.json --csv plan.csv --plot plan.png

    # Stored runs
    $ riseplan runs list
    $ riseplan export 3f2a... -o plan_b.csv
"""

from __future__ import annotations

import json
import sys
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from . import __version__
from .exceptions import RisePlanError


# Lazy imports for performance
def _get_console():
    """Rich console for styled output."""
    from rich.console import Console
    return Console()


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


def _echo_warnings(caught: List[warnings.WarningMessage]) -> None:
    for w in caught:
        click.echo(f"Warning: {w.message}", err=True)


def _get_settings(ctx: click.Context):
    from .config import AppSettings

    if ctx.obj.get("settings") is None:
        ctx.obj["settings"] = AppSettings()
    return ctx.obj["settings"]


def _get_store(ctx: click.Context):
    from .store import RunStore

    return RunStore(_get_settings(ctx).runs_path)


def parse_periods(value: str) -> List[Dict[str, float]]:
    """
    Parse ``"YEARS:DEPOSIT,YEARS:DEPOSIT"`` into period dicts.

    Examples
    --------
    >>> parse_periods("10:200,5:100")
    [{'years': 10, 'monthly_deposit': 200.0}, {'years': 5, 'monthly_deposit': 100.0}]
    """
    periods = []
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            years, deposit = chunk.split(":")
            periods.append({"years": int(years), "monthly_deposit": float(deposit)})
        except ValueError:
            raise click.BadParameter(
                f"'{chunk}' is not YEARS:DEPOSIT (e.g. '10:200')", param_hint="--periods"
            ) from None
    if not periods:
        raise click.BadParameter("at least one YEARS:DEPOSIT pair is required", param_hint="--periods")
    return periods


def _summary_table(inputs, result, title: str):
    from rich.table import Table

    from .export import summary_rows
    from .goals import target_met

    table = Table(title=title, show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for label, value in summary_rows(inputs, result):
        if label == "Status":
            style = "bold green" if target_met(inputs, result) else "bold red"
            table.add_row(label, f"[{style}]{value}[/{style}]")
        else:
            table.add_row(label, value)
    return table


def _echo_summary(inputs, result) -> None:
    from .export import summary_rows

    for label, value in summary_rows(inputs, result):
        click.echo(f"{label}: {value}")


def _plot_to(path: Path, inputs, result) -> None:
    import matplotlib
    matplotlib.use("Agg")

    from .plotting import plot_timeline
    from .tax import rise_threshold

    threshold = rise_threshold(
        inputs.desired_monthly_income, inputs.withdrawal_rate, inputs.tax_rate, warn=False
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    plot_timeline(result, threshold=threshold, save_path=str(path))


@click.group()
@click.version_option(version=__version__, prog_name="riseplan")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    riseplan - Savings projection toward financial independence.

    Projects capital across deposit phases, adjusts for inflation and
    tax, and reports when the desired monthly income is first reached.

    Use 'riseplan COMMAND --help' for command-specific help.
    """
    from .config import AppSettings, configure_logging

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = _get_console()
    if ctx.obj.get("settings") is None:
        ctx.obj["settings"] = AppSettings()
    configure_logging(ctx.obj["settings"])


# ---------------------------------------------------------------------------
# project
# ---------------------------------------------------------------------------

@main.command("project")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Input config file (JSON); options below override its values"
)
@click.option("--nominal", type=float, default=None, help="Nominal annual interest rate (%)")
@click.option("--inflation", type=float, default=None, help="Expected annual inflation (%)")
@click.option("--initial-capital", type=float, default=None, help="Initial capital")
@click.option("--income", type=float, default=None, help="Desired monthly income after tax")
@click.option("--withdrawal", type=float, default=None, help="Planned annual withdrawal rate (%)")
@click.option("--tax-rate", type=float, default=None, help="Tax rate (%)")
@click.option(
    "--tax-option",
    type=click.Choice(["whole_capital", "interest_only", "1", "2"], case_sensitive=False),
    default=None,
    help="Tax the whole capital (1) or only the interest (2)"
)
@click.option(
    "--periods", "-p",
    type=str,
    default=None,
    help="Deposit phases as YEARS:DEPOSIT pairs, e.g. '10:200,5:100'"
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write inputs and result to this JSON file"
)
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the CSV export to this file")
@click.option("--plot", "plot_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Save the timeline plot to this image file")
@click.option("--save", "save_name", type=str, default=None,
              help="Store the run in the run store under this name")
@click.pass_context
def project_command(
    ctx: click.Context,
    config: Optional[Path],
    nominal: Optional[float],
    inflation: Optional[float],
    initial_capital: Optional[float],
    income: Optional[float],
    withdrawal: Optional[float],
    tax_rate: Optional[float],
    tax_option: Optional[str],
    periods: Optional[str],
    output: Optional[Path],
    csv_path: Optional[Path],
    plot_path: Optional[Path],
    save_name: Optional[str],
) -> None:
    """
    Run a projection.

    Rates are given in percent, as in the input form. Values not given
    come from the config file or, without one, the form defaults.

    Example:
        riseplan project --nominal 6 --periods "10:200,5:500" --save "Plan B"
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from pydantic import ValidationError as PydanticValidationError

    from .config import SimulationInputConfig
    from .engine import project
    from .serialization import load_input_config, save_result

    overrides: Dict[str, Any] = {
        "nominal_interest_pct": nominal,
        "inflation_rate_pct": inflation,
        "initial_capital": initial_capital,
        "desired_monthly_income": income,
        "withdrawal_rate_pct": withdrawal,
        "tax_rate_pct": tax_rate,
        "tax_option": tax_option,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if periods is not None:
        overrides["periods"] = parse_periods(periods)

    try:
        base = load_input_config(config) if config else SimulationInputConfig()
        merged = {**base.model_dump(), **overrides}
        inputs = SimulationInputConfig.model_validate(merged).to_input()
    except PydanticValidationError as e:
        _fail(f"Invalid inputs:\n{e}")
    except RisePlanError as e:
        _fail(f"Error loading inputs: {e}")

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = project(inputs)
    except RisePlanError as e:
        _fail(f"Error during projection: {e}")
    _echo_warnings(caught)

    if quiet:
        _echo_summary(inputs, result)
    else:
        console.print(_summary_table(inputs, result, "Projection Results"))

    try:
        if output:
            save_result(result, output, inputs=inputs)
            if not quiet:
                click.echo(f"Result saved to {output}")
        if csv_path:
            from .export import write_csv
            write_csv(inputs, result, csv_path)
            if not quiet:
                click.echo(f"CSV saved to {csv_path}")
        if plot_path:
            _plot_to(plot_path, inputs, result)
            if not quiet:
                click.echo(f"Plot saved to {plot_path}")
        if save_name is not None:
            record = _get_store(ctx).save(save_name, inputs, result)
            if not quiet:
                click.echo(f"Run stored with id {record.id}")
    except (OSError, ValueError, RisePlanError) as e:
        _fail(f"Error writing output: {e}")


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

@main.group()
def config():
    """Input config file management."""
    pass


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, config_file: Path) -> None:
    """
    Validate an input config file.

    Example:
        riseplan config validate plan.json
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .rates import normalize_rates
    from .serialization import load_input_config
    from .utils import format_percent

    try:
        inputs = load_input_config(config_file).to_input()
    except RisePlanError as e:
        _fail(f"Configuration validation failed: {e}")

    rates = normalize_rates(inputs.nominal_interest, inputs.inflation_rate)
    lines = [
        f"Deposit periods: {len(inputs.periods)}",
        f"Total months: {inputs.total_months}",
        f"Real annual rate: {format_percent(rates.real_rate)}",
        f"Tax applied to: {inputs.tax_option.label}",
    ]
    if quiet:
        return
    from rich.panel import Panel
    console.print(Panel("\n".join(lines), title="Configuration is valid", border_style="green"))


@config.command("show")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "-f", type=click.Choice(["json", "table"]), default="table")
@click.pass_context
def config_show(ctx: click.Context, config_file: Path, format: str) -> None:
    """
    Display an input config file.

    Example:
        riseplan config show plan.json --format table
    """
    console = ctx.obj.get("console")

    from .serialization import load_input_config

    try:
        cfg = load_input_config(config_file)
    except RisePlanError as e:
        _fail(f"Error loading config: {e}")

    if format == "json":
        click.echo(cfg.model_dump_json(indent=2))
        return

    from rich.table import Table

    inputs_table = Table(title="Inputs")
    inputs_table.add_column("Field", style="cyan")
    inputs_table.add_column("Value", justify="right")
    inputs_table.add_row("Nominal interest", f"{cfg.nominal_interest_pct:g}%")
    inputs_table.add_row("Inflation", f"{cfg.inflation_rate_pct:g}%")
    inputs_table.add_row("Initial capital", f"${cfg.initial_capital:,.2f}")
    inputs_table.add_row("Desired monthly income", f"${cfg.desired_monthly_income:,.2f}")
    inputs_table.add_row("Withdrawal rate", f"{cfg.withdrawal_rate_pct:g}%")
    inputs_table.add_row("Tax rate", f"{cfg.tax_rate_pct:g}%")
    inputs_table.add_row("Tax applied to", cfg.tax_option.label)
    console.print(inputs_table)

    periods_table = Table(title="Deposit Periods")
    periods_table.add_column("#", style="cyan")
    periods_table.add_column("Years", justify="right")
    periods_table.add_column("Monthly deposit", justify="right")
    for i, p in enumerate(cfg.periods, start=1):
        periods_table.add_row(str(i), str(p.years), f"${p.monthly_deposit:,.2f}")
    console.print(periods_table)


@config.command("create")
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--template", "-t", type=click.Choice(["basic", "phased"]), default="basic",
              help="basic: the form defaults; phased: three deposit phases")
@click.pass_context
def config_create(ctx: click.Context, output_file: Path, template: str) -> None:
    """
    Create a new input config file from a template.

    Example:
        riseplan config create plan.json --template phased
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .config import SimulationInputConfig
    from .serialization import save_input_config

    if template == "basic":
        cfg = SimulationInputConfig()
    else:
        cfg = SimulationInputConfig(
            periods=[
                {"years": 5, "monthly_deposit": 300},
                {"years": 10, "monthly_deposit": 600},
                {"years": 10, "monthly_deposit": 1_000},
            ],
        )

    try:
        save_input_config(cfg, output_file)
    except OSError as e:
        _fail(f"Error writing config: {e}")

    if not quiet:
        console.print(f"[green]Created configuration file: {output_file}[/green]")


# ---------------------------------------------------------------------------
# runs
# ---------------------------------------------------------------------------

@main.group()
def runs():
    """Stored run management."""
    pass


@runs.command("list")
@click.option("--format", "-f", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def runs_list(ctx: click.Context, format: str) -> None:
    """
    List stored runs, newest first.

    Example:
        riseplan runs list
    """
    console = ctx.obj.get("console")

    try:
        records = _get_store(ctx).list()
    except RisePlanError as e:
        _fail(f"Error reading run store: {e}")

    if format == "json":
        click.echo(json.dumps(
            [
                {
                    "id": r.id,
                    "name": r.name,
                    "timestamp": r.timestamp.isoformat(),
                    "final_capital": r.results.final_capital,
                    "goal_reached": r.results.goal_reached,
                }
                for r in records
            ],
            indent=2,
        ))
        return

    if not records:
        click.echo("No stored runs.")
        return

    from rich.table import Table

    table = Table(title="Stored Runs")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Saved (UTC)")
    table.add_column("Final Capital", justify="right")
    table.add_column("Goal Reached", justify="right")
    for r in records:
        goal = r.results.goal_reached_at
        table.add_row(
            r.id,
            r.name,
            r.timestamp.strftime("%Y-%m-%d %H:%M"),
            f"${r.results.final_capital:,.0f}",
            str(goal) if goal else "-",
        )
    console.print(table)


@runs.command("show")
@click.argument("run_id")
@click.pass_context
def runs_show(ctx: click.Context, run_id: str) -> None:
    """
    Show the summary of a stored run.

    Example:
        riseplan runs show 3f2a9c...
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    try:
        record = _get_store(ctx).get(run_id)
    except RisePlanError as e:
        _fail(f"Error: {e}")

    if quiet:
        _echo_summary(record.inputs, record.results)
    else:
        console.print(_summary_table(record.inputs, record.results, f"Run: {record.name}"))


@runs.command("delete")
@click.argument("run_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def runs_delete(ctx: click.Context, run_id: str, yes: bool) -> None:
    """
    Delete a stored run.

    Example:
        riseplan runs delete 3f2a9c... --yes
    """
    quiet = ctx.obj.get("quiet", False)

    if not yes:
        click.confirm(f"Delete run {run_id}?", abort=True)
    try:
        deleted = _get_store(ctx).delete(run_id)
    except RisePlanError as e:
        _fail(f"Error: {e}")

    if not deleted:
        _fail(f"Error: no run with id '{run_id}'")
    if not quiet:
        click.echo(f"Deleted run {run_id}")


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------

@main.command("export")
@click.argument("run_id")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="CSV file (default: <export_dir>/<RUN_ID>.csv)"
)
@click.option("--plot", "plot_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also save the timeline plot to this image file")
@click.pass_context
def export_command(
    ctx: click.Context,
    run_id: str,
    output: Optional[Path],
    plot_path: Optional[Path],
) -> None:
    """
    Export a stored run to CSV.

    Example:
        riseplan export 3f2a9c... -o plan.csv
    """
    quiet = ctx.obj.get("quiet", False)

    from .export import write_csv

    try:
        record = _get_store(ctx).get(run_id)
    except RisePlanError as e:
        _fail(f"Error: {e}")

    if output is None:
        output = _get_settings(ctx).export_dir / f"{run_id}.csv"
    try:
        write_csv(record.inputs, record.results, output)
        if plot_path:
            _plot_to(plot_path, record.inputs, record.results)
    except (OSError, ValueError) as e:
        _fail(f"Error writing export: {e}")

    if not quiet:
        click.echo(f"CSV report saved to {output}")
        if plot_path:
            click.echo(f"Plot saved to {plot_path}")


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display package and dependency versions and the run store location.
    """
    console = ctx.obj.get("console")

    info_lines = [
        f"riseplan Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    # Check dependencies
    dependencies = {
        "numpy": "numpy",
        "pandas": "pandas",
        "matplotlib": "matplotlib",
        "pydantic": "pydantic",
        "rich": "rich",
        "click": "click",
    }
    for name, module in dependencies.items():
        try:
            mod = __import__(module)
            version = getattr(mod, "__version__", "installed")
            info_lines.append(f"{name}: {version}")
        except ImportError:
            info_lines.append(f"{name}: not installed")

    info_lines.append(f"Run store: {_get_settings(ctx).runs_path}")

    from rich.panel import Panel
    console.print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
