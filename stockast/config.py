"""Configuration helpers for the Black-Scholes forecaster."""
from __future__ import annotations

from dataclasses import dataclass, replace

import torch

DEFAULT_SPOT_PRICE = 100.0
DEFAULT_TIME_STEPS = 180
DEFAULT_RISK_FREE_RATE = 0.001
DEFAULT_IN_LOOPS = 100
DEFAULT_OUT_LOOPS = 10000


@dataclass(frozen=True)
class SimulationParameters:
    """Immutable bundle of market and Monte Carlo settings for one run."""

    spot_price: float
    time_steps: int
    risk_free_rate: float
    volatility: float
    in_loops: int
    out_loops: int
    device: torch.device = torch.device("cpu")
    dtype: torch.dtype = torch.float64

    def __post_init__(self) -> None:
        if self.spot_price <= 0:
            raise ValueError("Spot price must be positive.")
        if self.time_steps < 2:
            raise ValueError("A trajectory needs at least two time steps.")
        if self.volatility < 0:
            raise ValueError("Volatility must be non-negative.")
        if self.in_loops <= 0 or self.out_loops <= 0:
            raise ValueError("Inner and outer loop counts must be positive.")

    @property
    def delta_t(self) -> float:
        return 1.0 / self.time_steps

    @property
    def total_paths(self) -> int:
        return self.in_loops * self.out_loops

    def with_volatility(self, volatility: float) -> "SimulationParameters":
        """Return a copy calibrated with the given volatility."""
        return replace(self, volatility=float(volatility))


def build_default_parameters(
    *,
    device: torch.device = torch.device("cpu"),
    dtype: torch.dtype = torch.float64,
) -> SimulationParameters:
    """Factory for the stock forecasting defaults (uncalibrated, zero volatility)."""
    return SimulationParameters(
        spot_price=DEFAULT_SPOT_PRICE,
        time_steps=DEFAULT_TIME_STEPS,
        risk_free_rate=DEFAULT_RISK_FREE_RATE,
        volatility=0.0,
        in_loops=DEFAULT_IN_LOOPS,
        out_loops=DEFAULT_OUT_LOOPS,
        device=device,
        dtype=dtype,
    )
