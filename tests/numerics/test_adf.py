"""
Tests for the augmented Dickey-Fuller test.
"""

import numpy as np
import pytest

from tsgraph.numerics import adfuller, ADFResult
from tsgraph.numerics.adf import critical_value


class TestCriticalValues:
    """Test table lookup."""

    def test_nearest_table_size(self):
        assert critical_value(60, 0.05) == (-3.67, 50)
        assert critical_value(160, 0.01) == (-4.00, 200)
        assert critical_value(10_000, 0.10) == (-3.02, 200)

    def test_tie_prefers_smaller_table(self):
        assert critical_value(150, 0.05) == (-3.37, 100)

    def test_unknown_significance(self):
        with pytest.raises(ValueError, match="significance"):
            critical_value(100, 0.2)


class TestAdfuller:
    """Test the unit-root test on simulated data."""

    def test_white_noise_is_stationary(self, rng):
        result = adfuller(rng.normal(size=200))

        assert isinstance(result, ADFResult)
        assert result.is_stationary
        assert result.critical_value == -3.37
        assert result.table_size == 200

    def test_random_walk_has_larger_statistic(self, rng):
        """Test that a random walk looks less stationary than its steps."""
        steps = rng.normal(size=200)

        noise = adfuller(steps)
        walk = adfuller(np.cumsum(steps))

        assert walk.statistic > noise.statistic

    def test_accepts_timeseries(self, rng, make_series):
        values = rng.normal(size=100)

        from_array = adfuller(values, lags=2)
        from_series = adfuller(make_series(values), lags=2)

        assert from_series.statistic == pytest.approx(from_array.statistic)
        assert from_series.lags == 2
        assert from_series.num_observations == 99 - 2

    def test_zero_lags(self, rng):
        result = adfuller(rng.normal(size=80), lags=0)
        assert result.num_observations == 79

    def test_too_short(self):
        with pytest.raises(ValueError, match="too short"):
            adfuller(np.arange(5.0), lags=1)

    def test_constant_series(self):
        with pytest.raises(ValueError, match="non-constant"):
            adfuller(np.full(40, 3.0))

    def test_negative_lags(self):
        with pytest.raises(ValueError, match="lags"):
            adfuller(np.arange(50.0), lags=-1)
