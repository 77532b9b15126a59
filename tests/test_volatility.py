"""
Tests for the historical volatility estimate.

The estimate is sqrt(sum of squared deviations) / 100 over the spot price
and the historical minute-end prices, with no normalisation by sample size.
"""

import math

import pytest

from conftest import SCENARIO_PRICES, SCENARIO_SUM_OF_SQUARES
from stockast import HistoricalDataError, estimate_volatility


class TestEstimateVolatility:
    """Tests for estimate_volatility."""

    def test_worked_example(self):
        """Mean 100.125, sum of squares 0.8675."""
        volatility = estimate_volatility(100.0, SCENARIO_PRICES)
        assert volatility == pytest.approx(math.sqrt(SCENARIO_SUM_OF_SQUARES) / 100.0, rel=1e-9)
        assert volatility == pytest.approx(0.009314, abs=1e-6)

    def test_not_normalised_by_sample_size(self):
        """Two prices one unit either side of their mean give sqrt(2) / 100."""
        single = estimate_volatility(100.0, [102.0])
        assert single == pytest.approx(math.sqrt(2.0) / 100.0)

    def test_deterministic(self):
        first = estimate_volatility(100.0, SCENARIO_PRICES)
        second = estimate_volatility(100.0, SCENARIO_PRICES)
        assert first == second

    def test_flat_series_has_zero_volatility(self):
        assert estimate_volatility(50.0, [50.0, 50.0, 50.0]) == 0.0

    @pytest.mark.parametrize(
        "prices",
        [
            [1.0],
            [250.0, 10.0, 0.5],
            [99.99, 100.01, 99.98, 100.02],
        ],
    )
    def test_never_negative(self, prices):
        assert estimate_volatility(100.0, prices) >= 0.0

    def test_empty_history_is_fatal(self):
        with pytest.raises(HistoricalDataError, match="No historical prices"):
            estimate_volatility(100.0, [])
