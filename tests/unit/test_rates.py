"""
Unit tests for rates.py module.

Tests the Fisher real rate and the annual ↔ monthly conversion.
"""

import pytest

from riseplan.rates import RateNormalization, normalize_rates, real_rate


class TestRealRate:
    """Test real_rate (Fisher relation)."""

    def test_reference_values(self):
        assert real_rate(0.07, 0.02) == pytest.approx(0.0490196078, rel=1e-9)

    def test_zero_inflation_is_identity(self):
        assert real_rate(0.05, 0.0) == pytest.approx(0.05)

    def test_equal_rates_give_zero(self):
        assert real_rate(0.03, 0.03) == pytest.approx(0.0, abs=1e-15)

    def test_inflation_above_nominal_is_negative(self):
        assert real_rate(0.02, 0.05) < 0

    def test_deflation_raises_real_rate(self):
        assert real_rate(0.02, -0.01) > 0.02


class TestNormalizeRates:
    """Test normalize_rates."""

    def test_returns_rate_normalization(self):
        rates = normalize_rates(0.07, 0.02)
        assert isinstance(rates, RateNormalization)
        assert rates.real_rate == pytest.approx(0.0490196078, rel=1e-9)

    def test_monthly_rate_compounds_back_to_real_rate(self):
        rates = normalize_rates(0.07, 0.02)
        assert (1 + rates.monthly_rate) ** 12 - 1 == pytest.approx(rates.real_rate, rel=1e-12)

    def test_monthly_rate_is_not_simple_division(self):
        rates = normalize_rates(0.07, 0.02)
        assert rates.monthly_rate < rates.real_rate / 12

    def test_zero_rates(self):
        rates = normalize_rates(0.0, 0.0)
        assert rates.real_rate == 0.0
        assert rates.monthly_rate == 0.0

    def test_negative_real_rate(self):
        rates = normalize_rates(0.0, 0.10)
        assert rates.monthly_rate < 0
        assert (1 + rates.monthly_rate) ** 12 - 1 == pytest.approx(rates.real_rate)

    def test_frozen(self):
        rates = normalize_rates(0.07, 0.02)
        with pytest.raises(AttributeError):
            rates.real_rate = 0.1
