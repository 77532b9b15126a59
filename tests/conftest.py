"""
Shared pytest fixtures for the stockast test suite.

Plots are rendered with the non-interactive Agg backend so the CLI tests can
run headless.
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest
import torch

from stockast import ConstantNormalSource, SimulationParameters

#: Historical line used by the worked volatility example
SCENARIO_LINE = "99.5,100.2,100.8"
SCENARIO_PRICES = (99.5, 100.2, 100.8)
SCENARIO_SUM_OF_SQUARES = 0.8675


@pytest.fixture
def small_parameters() -> SimulationParameters:
    """Cheap, uncalibrated parameters for four-point trajectories."""
    return SimulationParameters(
        spot_price=100.0,
        time_steps=4,
        risk_free_rate=0.001,
        volatility=0.0,
        in_loops=8,
        out_loops=5,
        device=torch.device("cpu"),
        dtype=torch.float64,
    )


@pytest.fixture
def zero_source() -> ConstantNormalSource:
    """Source whose every draw is exactly zero."""
    return ConstantNormalSource(0.0)


@pytest.fixture
def scenario_file(tmp_path) -> Path:
    path = tmp_path / "data.csv"
    path.write_text(SCENARIO_LINE + "\n", encoding="utf-8")
    return path
