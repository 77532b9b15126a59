"""
Tests for the two-level Monte Carlo forecast.

Inner paths are averaged per outer iteration, then outer averages are
averaged into the final trajectory.
"""

import math

import pytest
import torch

from conftest import SCENARIO_PRICES
from stockast import (
    ConstantNormalSource,
    HistoricalDataError,
    HistoricalPrices,
    PathSimulator,
    SimulationParameters,
    StockForecaster,
    TorchNormalSource,
    average_trajectories,
    estimate_volatility,
    run_forecast,
    summarize_forecast,
)
from stockast.forecaster import _chunk_bounds


def zero_draw_path(params):
    dt = 1.0 / params.time_steps
    prices = [params.spot_price]
    for _ in range(params.time_steps - 1):
        prices.append(prices[-1] * math.exp((params.risk_free_rate - params.volatility**2 / 2.0) * dt))
    return prices


def single_loop_parameters():
    return SimulationParameters(
        spot_price=100.0, time_steps=4, risk_free_rate=0.001, volatility=0.0, in_loops=1, out_loops=1
    )


class TestCalibration:

    def test_volatility_estimated_once_from_history(self, small_parameters, zero_source):
        calibrated = StockForecaster(small_parameters, zero_source).calibrate(SCENARIO_PRICES)
        assert calibrated.volatility == estimate_volatility(100.0, SCENARIO_PRICES)
        assert calibrated.time_steps == small_parameters.time_steps

    def test_history_length_must_match_time_steps(self, small_parameters, zero_source):
        with pytest.raises(HistoricalDataError, match="Expected 3 historical prices"):
            StockForecaster(small_parameters, zero_source).run([100.0, 101.0])

    def test_accepts_historical_prices(self, small_parameters, zero_source):
        history = HistoricalPrices(values=SCENARIO_PRICES)
        result = StockForecaster(small_parameters, zero_source).run(history)
        assert result.volatility == pytest.approx(0.009314, abs=1e-6)

    def test_simulate_uses_given_calibration(self, small_parameters, zero_source):
        calibrated = small_parameters.with_volatility(0.25)
        result = StockForecaster(small_parameters, zero_source).simulate(calibrated)
        assert result.volatility == 0.25
        assert result.parameters is calibrated


class TestRun:

    def test_single_path_pipeline_matches_formula(self, zero_source):
        """in_loops = out_loops = 1 with zero draws reduces to one path."""
        result = run_forecast(single_loop_parameters(), SCENARIO_PRICES, zero_source)
        expected = zero_draw_path(result.parameters)
        assert result.trajectory.tolist() == pytest.approx(expected, rel=1e-14)

    def test_zero_draws_any_loop_counts(self, small_parameters, zero_source):
        result = run_forecast(small_parameters, SCENARIO_PRICES, zero_source, block_size=2)
        expected = zero_draw_path(result.parameters)
        assert result.trajectory.tolist() == pytest.approx(expected, rel=1e-13)

    def test_result_shapes(self, small_parameters):
        result = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=4))
        assert result.trajectory.shape == (4,)
        assert result.outer_means.shape == (5, 4)
        assert result.trajectory[0].item() == pytest.approx(100.0, rel=1e-15)
        assert result.elapsed_seconds >= 0.0

    def test_two_level_reduction(self, small_parameters):
        """The forecast is the average of the per-iteration inner averages."""
        params = small_parameters.with_volatility(estimate_volatility(100.0, SCENARIO_PRICES))
        result = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=21), block_size=1)

        replay = PathSimulator(params, TorchNormalSource(seed=21))
        outer = [average_trajectories(replay.simulate_batch((1, params.in_loops)), params.in_loops)[0]
                 for _ in range(params.out_loops)]
        assert torch.allclose(result.outer_means, torch.stack(outer), rtol=1e-14, atol=0.0)
        assert torch.allclose(result.trajectory, average_trajectories(outer, params.out_loops), rtol=1e-14, atol=0.0)

    def test_seeded_runs_reproducible(self, small_parameters):
        first = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=8))
        second = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=8))
        assert torch.equal(first.trajectory, second.trajectory)

    def test_progress_reports_every_outer_iteration(self, small_parameters, zero_source):
        seen = []
        StockForecaster(small_parameters, zero_source, block_size=2, progress=seen.append).run(SCENARIO_PRICES)
        assert seen == [2, 4, 5]

    def test_forecast_close_to_risk_neutral_growth(self):
        """E[S_t] = S_0 exp(r t) under the GBM step."""
        params = SimulationParameters(
            spot_price=100.0, time_steps=4, risk_free_rate=0.001, volatility=0.0, in_loops=200, out_loops=100
        )
        result = run_forecast(params, [80.0, 120.0, 100.0], TorchNormalSource(seed=2))
        horizon = (params.time_steps - 1) / params.time_steps
        assert result.terminal_price == pytest.approx(100.0 * math.exp(0.001 * horizon), rel=0.01)

    def test_rejects_invalid_block_size(self, small_parameters, zero_source):
        with pytest.raises(ValueError, match="Block size"):
            StockForecaster(small_parameters, zero_source, block_size=0)


class TestParallelRun:

    def test_workers_match_sequential_with_zero_draws(self, zero_source):
        params = SimulationParameters(
            spot_price=100.0, time_steps=4, risk_free_rate=0.001, volatility=0.0, in_loops=3, out_loops=7
        )
        sequential = run_forecast(params, SCENARIO_PRICES, zero_source)
        parallel = run_forecast(params, SCENARIO_PRICES, zero_source, workers=3, block_size=2)
        assert torch.allclose(sequential.outer_means, parallel.outer_means, rtol=1e-14, atol=0.0)
        assert torch.allclose(sequential.trajectory, parallel.trajectory, rtol=1e-14, atol=0.0)

    def test_seeded_parallel_reproducible(self, small_parameters):
        first = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=5), workers=2)
        second = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=5), workers=2)
        assert torch.equal(first.trajectory, second.trajectory)

    def test_progress_total(self, small_parameters, zero_source):
        seen = []
        run_forecast(small_parameters, SCENARIO_PRICES, zero_source, workers=2, block_size=1, progress=seen.append)
        assert sorted(seen) == [1, 2, 3, 4, 5]

    def test_chunk_bounds(self):
        assert _chunk_bounds(7, 3) == [(0, 3), (3, 5), (5, 7)]
        assert _chunk_bounds(2, 2) == [(0, 1), (1, 2)]


class TestSummary:

    def test_single_outer_iteration_has_no_spread(self, zero_source):
        result = run_forecast(single_loop_parameters(), SCENARIO_PRICES, zero_source)
        summary = summarize_forecast(result)
        assert summary.standard_error == 0.0
        assert summary.confidence_interval[0] == summary.confidence_interval[1] == summary.expected_price

    def test_expected_return(self, zero_source):
        result = run_forecast(single_loop_parameters(), SCENARIO_PRICES, zero_source)
        summary = summarize_forecast(result)
        assert summary.expected_return == pytest.approx(result.terminal_price / 100.0 - 1.0)
        assert summary.expected_return > 0

    def test_interval_contains_estimate(self, small_parameters):
        result = run_forecast(small_parameters, SCENARIO_PRICES, TorchNormalSource(seed=3))
        summary = summarize_forecast(result)
        low, high = summary.confidence_interval
        assert low <= summary.expected_price <= high
        assert summary.outer_standard_deviation > 0
