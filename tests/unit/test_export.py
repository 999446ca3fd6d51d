"""
Unit tests for export.py module.

Tests the two-table CSV export.
"""

import csv
import io

from riseplan.engine import project
from riseplan.export import TIMELINE_HEADER, summary_rows, timeline_rows, to_csv_string, write_csv


def _read(text):
    return list(csv.reader(io.StringIO(text)))


class TestSummaryRows:
    """Test summary_rows."""

    def test_rates_as_percentages(self, worked_inputs, worked_result):
        rows = dict(summary_rows(worked_inputs, worked_result))
        assert rows["Nominal annual interest rate"] == "7.00%"
        assert rows["Real annual interest rate"] == "4.90%"
        assert rows["Tax applied to"] == "Entire capital"

    def test_periods_and_totals(self, worked_inputs, worked_result):
        rows = dict(summary_rows(worked_inputs, worked_result))
        assert rows["Period 1"] == "200.00 per month for 10 years"
        assert rows["Total deposits"] == "34000.00"
        assert rows["Goal reached after"] == "not reached"
        assert rows["Status"] == "SHORTFALL: Target not met."

    def test_goal_reached(self, goal_inputs, goal_result):
        rows = dict(summary_rows(goal_inputs, goal_result))
        assert rows["Goal reached after"] == "1 years and 0 months"
        assert rows["Status"].startswith("SUCCESS")
        assert rows["Progress toward target"] == "200.00%"

    def test_progress_below_target(self, worked_inputs, worked_result):
        progress = dict(summary_rows(worked_inputs, worked_result))["Progress toward target"]
        assert progress.endswith("%")
        assert 0 < float(progress[:-1]) < 100

    def test_progress_without_desired_income(self, make_inputs):
        inputs = make_inputs(desired_monthly_income=0.0)
        rows = dict(summary_rows(inputs, project(inputs)))
        assert rows["Progress toward target"] == "n/a"


class TestCsv:
    """Test write_csv / to_csv_string."""

    def test_layout(self, worked_inputs, worked_result):
        rows = _read(to_csv_string(worked_inputs, worked_result))

        assert rows[0] == ["Parameter", "Value"]
        blank = rows.index([])
        assert rows[blank + 1] == list(TIMELINE_HEADER)
        timeline = rows[blank + 2:]
        assert len(timeline) == 120
        assert timeline[0][0] == "1"
        assert timeline[-1][0] == "120"
        assert float(timeline[-1][1]) == round(worked_result.final_capital, 2)

    def test_timeline_rows(self, goal_result):
        rows = timeline_rows(goal_result)
        assert rows[11] == (12, "12000.00", "12000.00")

    def test_write_to_path(self, tmp_path, worked_inputs, worked_result):
        path = tmp_path / "nested" / "export.csv"
        write_csv(worked_inputs, worked_result, path)
        with open(path, newline="") as f:
            assert _read(f.read()) == _read(to_csv_string(worked_inputs, worked_result))

    def test_write_to_stream(self, worked_inputs, worked_result):
        buffer = io.StringIO()
        write_csv(worked_inputs, worked_result, buffer)
        assert buffer.getvalue() == to_csv_string(worked_inputs, worked_result)
