"""
Unit tests for CLI module.

Tests command-line interface functionality using Click's testing utilities.
Every invocation gets settings rooted in tmp_path, so the run store never
touches the real data directory.
"""

import json

import pytest
from click.testing import CliRunner

from riseplan import __version__
from riseplan.cli import main, parse_periods
from riseplan.config import SimulationInputConfig
from riseplan.serialization import load_result, save_input_config
from riseplan.store import RunStore


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, settings):
    """Invoke the CLI with isolated settings."""
    def _invoke(args, **kwargs):
        return runner.invoke(main, args, obj={"settings": settings}, **kwargs)
    return _invoke


@pytest.fixture
def temp_config(tmp_path):
    """Create temporary input config file."""
    config = SimulationInputConfig(
        nominal_interest_pct=6,
        tax_option="2",
        periods=[{"years": 5, "deposit": 300}, {"years": 5, "deposit": 500}],
    )
    config_file = tmp_path / "plan.json"
    save_input_config(config, config_file)
    return config_file


# ============================================================================
# MAIN COMMAND TESTS
# ============================================================================

class TestMainCommand:
    """Test main CLI entry point."""

    def test_main_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "riseplan" in result.output
        for command in ("project", "config", "runs", "export", "info"):
            assert command in result.output

    def test_main_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_main_quiet_option(self, runner):
        result = runner.invoke(main, ["--quiet", "--help"])
        assert result.exit_code == 0


# ============================================================================
# PROJECT COMMAND TESTS
# ============================================================================

class TestParsePeriods:
    """Test the --periods parser."""

    def test_pairs(self):
        assert parse_periods("10:200, 5:100") == [
            {"years": 10, "monthly_deposit": 200.0},
            {"years": 5, "monthly_deposit": 100.0},
        ]

    def test_withdrawal_phase(self):
        assert parse_periods("2:500,3:-150")[1] == {"years": 3, "monthly_deposit": -150.0}

    @pytest.mark.parametrize("value", ["10", "10:200:3", "a:b", "2.5:100", ","])
    def test_invalid(self, value):
        import click
        with pytest.raises(click.BadParameter):
            parse_periods(value)


class TestProjectCommand:
    """Test project command."""

    def test_defaults(self, invoke):
        result = invoke(["project"])
        assert result.exit_code == 0, result.output
        assert "Projection Results" in result.output
        assert "SHORTFALL" in result.output

    def test_quiet_prints_plain_summary(self, invoke):
        result = invoke(["--quiet", "project"])
        assert result.exit_code == 0
        assert "Total deposits: 34000.00" in result.output
        assert "Status: SHORTFALL: Target not met." in result.output

    def test_options(self, invoke):
        result = invoke([
            "--quiet", "project",
            "--nominal", "0", "--inflation", "0", "--tax-rate", "0",
            "--withdrawal", "50", "--initial-capital", "0", "--income", "500",
            "--periods", "2:1000",
        ])
        assert result.exit_code == 0, result.output
        assert "Goal reached after: 1 years and 0 months" in result.output
        assert "SUCCESS" in result.output

    def test_config_file_with_override(self, invoke, temp_config, tmp_path):
        out = tmp_path / "result.json"
        result = invoke(["-q", "project", "-c", str(temp_config), "--nominal", "8", "-o", str(out)])
        assert result.exit_code == 0, result.output

        loaded, inputs = load_result(out)
        assert inputs.nominal_interest == pytest.approx(0.08)
        assert inputs.tax_option.value == "interest_only"
        assert loaded.total_months == 120
        assert loaded.total_deposits == 10_000 + 300 * 60 + 500 * 60

    def test_csv_and_plot(self, invoke, tmp_path):
        csv_path = tmp_path / "out" / "plan.csv"
        png_path = tmp_path / "out" / "plan.png"
        result = invoke(["project", "--csv", str(csv_path), "--plot", str(png_path)])
        assert result.exit_code == 0, result.output
        assert csv_path.read_text().startswith("Parameter,Value")
        assert png_path.stat().st_size > 0

    def test_save(self, invoke, settings):
        result = invoke(["project", "--save", "Baseline"])
        assert result.exit_code == 0, result.output
        records = RunStore(settings.runs_path).list()
        assert [r.name for r in records] == ["Baseline"]
        assert records[0].id in result.output

    def test_zero_withdrawal_warns(self, invoke):
        result = invoke(["project", "--withdrawal", "0"])
        assert result.exit_code == 0
        assert "Warning" in result.output

    def test_invalid_value(self, invoke):
        result = invoke(["project", "--tax-rate", "150"])
        assert result.exit_code == 1
        assert "Invalid inputs" in result.output

    def test_invalid_periods(self, invoke):
        result = invoke(["project", "--periods", "ten:200"])
        assert result.exit_code == 2
        assert "YEARS:DEPOSIT" in result.output

    def test_invalid_config_file(self, invoke, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"tax_rate_pct": -5}')
        result = invoke(["project", "-c", str(bad)])
        assert result.exit_code == 1
        assert "Error loading inputs" in result.output


# ============================================================================
# CONFIG COMMAND TESTS
# ============================================================================

class TestConfigCommands:
    """Test config subcommands."""

    def test_config_help(self, runner):
        result = runner.invoke(main, ["config", "--help"])
        assert result.exit_code == 0
        assert "validate" in result.output
        assert "show" in result.output
        assert "create" in result.output

    @pytest.mark.parametrize("template, n_periods", [("basic", 1), ("phased", 3)])
    def test_create(self, invoke, tmp_path, template, n_periods):
        path = tmp_path / "new" / "plan.json"
        result = invoke(["config", "create", str(path), "--template", template])
        assert result.exit_code == 0, result.output

        data = json.loads(path.read_text())
        assert "schema_version" in data
        assert len(data["periods"]) == n_periods

    def test_validate(self, invoke, temp_config):
        result = invoke(["config", "validate", str(temp_config)])
        assert result.exit_code == 0, result.output
        assert "Total months: 120" in result.output

    def test_validate_invalid(self, invoke, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"periods": []}')
        result = invoke(["config", "validate", str(bad)])
        assert result.exit_code == 1
        assert "validation failed" in result.output

    def test_validate_nonexistent(self, invoke):
        result = invoke(["config", "validate", "nonexistent.json"])
        assert result.exit_code != 0

    def test_show_json(self, invoke, temp_config):
        result = invoke(["config", "show", str(temp_config), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["tax_option"] == "interest_only"

    def test_show_table(self, invoke, temp_config):
        result = invoke(["config", "show", str(temp_config)])
        assert result.exit_code == 0
        assert "Deposit Periods" in result.output
        assert "Interest only" in result.output


# ============================================================================
# RUNS / EXPORT COMMAND TESTS
# ============================================================================

@pytest.fixture
def stored_run(settings, worked_inputs, worked_result):
    return RunStore(settings.runs_path).save("Baseline", worked_inputs, worked_result)


class TestRunsCommands:
    """Test runs subcommands."""

    def test_list_empty(self, invoke):
        result = invoke(["runs", "list"])
        assert result.exit_code == 0
        assert "No stored runs" in result.output

    def test_list(self, invoke, stored_run):
        result = invoke(["runs", "list"])
        assert result.exit_code == 0
        assert "Stored Runs" in result.output

    def test_list_json(self, invoke, stored_run):
        result = invoke(["runs", "list", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["id"] == stored_run.id
        assert data[0]["goal_reached"] is False

    def test_show(self, invoke, stored_run):
        result = invoke(["-q", "runs", "show", stored_run.id])
        assert result.exit_code == 0
        assert "Total deposits: 34000.00" in result.output

    def test_show_unknown(self, invoke):
        result = invoke(["runs", "show", "missing"])
        assert result.exit_code == 1
        assert "missing" in result.output

    def test_delete(self, invoke, stored_run, settings):
        result = invoke(["runs", "delete", stored_run.id, "--yes"])
        assert result.exit_code == 0
        assert len(RunStore(settings.runs_path)) == 0

    def test_delete_confirmation_declined(self, invoke, stored_run, settings):
        result = invoke(["runs", "delete", stored_run.id], input="n\n")
        assert result.exit_code == 1
        assert len(RunStore(settings.runs_path)) == 1

    def test_delete_unknown(self, invoke):
        result = invoke(["runs", "delete", "missing", "--yes"])
        assert result.exit_code == 1


class TestExportCommand:
    """Test export command."""

    def test_export_to_file(self, invoke, stored_run, tmp_path):
        out = tmp_path / "run.csv"
        result = invoke(["export", stored_run.id, "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text().startswith("Parameter,Value")

    def test_export_default_location(self, invoke, stored_run, settings):
        result = invoke(["export", stored_run.id])
        assert result.exit_code == 0, result.output
        assert (settings.export_dir / f"{stored_run.id}.csv").exists()

    def test_export_with_plot(self, invoke, stored_run, tmp_path):
        png = tmp_path / "run.png"
        result = invoke(["export", stored_run.id, "-o", str(tmp_path / "run.csv"), "--plot", str(png)])
        assert result.exit_code == 0, result.output
        assert png.exists()

    def test_export_unknown(self, invoke):
        result = invoke(["export", "missing"])
        assert result.exit_code == 1


# ============================================================================
# INFO COMMAND TESTS
# ============================================================================

class TestInfoCommand:
    """Test info command."""

    def test_info(self, invoke):
        result = invoke(["info"])
        assert result.exit_code == 0
        assert __version__ in result.output
        assert "numpy" in result.output
