"""
Unit tests for serialization.py module.

Tests input/result serialization, result files and percent-style config
files.
"""

import json
import warnings

import pandas as pd
import pytest

from riseplan.config import SimulationInputConfig
from riseplan.exceptions import ConfigurationError
from riseplan.periods import DepositPeriod
from riseplan.serialization import (
    SCHEMA_VERSION,
    input_from_dict,
    input_to_dict,
    load_input_config,
    load_result,
    period_from_dict,
    period_to_dict,
    result_from_dict,
    result_to_dict,
    result_to_frame,
    save_input_config,
    save_result,
)
from riseplan.tax import TaxOption


# ============================================================================
# PERIOD / INPUT TESTS
# ============================================================================

class TestPeriodSerialization:
    """Test deposit period serialization."""

    def test_period_to_dict(self):
        assert period_to_dict(DepositPeriod(10, 200)) == {"years": 10, "monthly_deposit": 200.0}

    def test_period_from_dict_accepts_deposit_key(self):
        assert period_from_dict({"years": 5, "deposit": 100}) == DepositPeriod(5, 100.0)


class TestInputSerialization:
    """Test SimulationInput serialization."""

    def test_input_to_dict(self, worked_inputs):
        data = input_to_dict(worked_inputs)

        assert data["nominal_interest"] == 0.07
        assert data["tax_option"] == "whole_capital"
        assert data["periods"] == [{"years": 10, "monthly_deposit": 200.0}]
        json.dumps(data)

    def test_input_round_trip(self, make_inputs):
        inputs = make_inputs(
            tax_option=TaxOption.INTEREST_ONLY,
            periods=(DepositPeriod(2, 100), DepositPeriod(0, 5), DepositPeriod(3, 50)),
        )
        assert input_from_dict(input_to_dict(inputs)) == inputs

    def test_missing_field(self, worked_inputs):
        data = dict(input_to_dict(worked_inputs))
        del data["tax_rate"]
        with pytest.raises(ConfigurationError, match="tax_rate"):
            input_from_dict(data)


# ============================================================================
# RESULT TESTS
# ============================================================================

class TestResultSerialization:
    """Test SimulationResult serialization."""

    def test_result_to_dict_field_names(self, worked_result):
        data = result_to_dict(worked_result)

        assert set(data) == {
            "real_interest_rate", "final_capital", "total_deposits",
            "interest_earned", "tax_amount", "capital_after_tax",
            "monthly_income_after_tax", "goal_reached_at", "timeline", "periods",
        }
        assert data["goal_reached_at"] is None
        assert data["timeline"][0] == {
            "month": 1,
            "capital": worked_result.timeline[0].capital,
            "capital_after_tax": worked_result.timeline[0].capital_after_tax,
        }

    def test_goal_serialized(self, goal_result):
        data = result_to_dict(goal_result)
        assert data["goal_reached_at"] == {"years": 1, "months": 0, "month": 12}

    def test_lossless(self, worked_result, goal_result):
        assert result_from_dict(result_to_dict(worked_result)) == worked_result
        assert result_from_dict(json.loads(json.dumps(result_to_dict(goal_result)))) == goal_result

    def test_goal_without_absolute_month(self, goal_result):
        data = result_to_dict(goal_result)
        data["goal_reached_at"] = {"years": 1, "months": 0}
        assert result_from_dict(data).goal_reached_at.month == 12

    def test_out_of_order_timeline_rejected(self, worked_result):
        data = result_to_dict(worked_result)
        data["timeline"] = list(reversed(data["timeline"]))
        with pytest.raises(ConfigurationError, match="months 1..T"):
            result_from_dict(data)

    def test_missing_field(self, worked_result):
        data = result_to_dict(worked_result)
        del data["timeline"]
        with pytest.raises(ConfigurationError, match="timeline"):
            result_from_dict(data)

    def test_result_to_frame(self, worked_result):
        frame = result_to_frame(worked_result)
        assert isinstance(frame, pd.DataFrame)
        assert len(frame) == 120


# ============================================================================
# FILE TESTS
# ============================================================================

class TestResultFiles:
    """Test save_result / load_result."""

    def test_round_trip_with_inputs(self, tmp_path, worked_inputs, worked_result):
        path = tmp_path / "out" / "result.json"
        save_result(worked_result, path, inputs=worked_inputs)

        result, inputs = load_result(path)
        assert result == worked_result
        assert inputs == worked_inputs

    def test_without_inputs(self, tmp_path, worked_result):
        path = tmp_path / "result.json"
        save_result(worked_result, path)
        assert load_result(path)[1] is None
        assert json.loads(path.read_text())["schema_version"] == SCHEMA_VERSION

    def test_version_mismatch_warns(self, tmp_path, worked_result):
        path = tmp_path / "result.json"
        save_result(worked_result, path)
        document = json.loads(path.read_text())
        document["schema_version"] = "0.0.1"
        path.write_text(json.dumps(document))

        with pytest.warns(UserWarning, match="schema version"):
            load_result(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_result(path)

    def test_missing_results(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("{}")
        with pytest.raises(ConfigurationError, match="results"):
            load_result(path)


class TestInputConfigFiles:
    """Test save_input_config / load_input_config."""

    def test_round_trip(self, tmp_path):
        config = SimulationInputConfig(tax_option="2", periods=[{"years": 4, "deposit": 250}])
        path = tmp_path / "plan.json"
        save_input_config(config, path)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert load_input_config(path) == config

    def test_without_schema_version(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps({"nominal_interest_pct": 5, "periods": [{"years": 1, "deposit": 10}]}))
        config = load_input_config(path)
        assert config.nominal_interest_pct == 5.0
        assert config.inflation_rate_pct == 2.0

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps({"tax_rate_pct": 150}))
        with pytest.raises(ConfigurationError, match="Invalid input config"):
            load_input_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_input_config(path)
