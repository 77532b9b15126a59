"""Black-Scholes (GBM) price path simulation using PyTorch."""
from __future__ import annotations

import math
from typing import Sequence

import torch

from .config import SimulationParameters
from .random_source import RandomNormalSource, TorchNormalSource


class PathSimulator:
    """Generates GBM price trajectories with the exact log-normal step."""

    def __init__(self, parameters: SimulationParameters, source: RandomNormalSource | None = None) -> None:
        self.parameters = parameters
        if source is None:
            source = TorchNormalSource(device=parameters.device)
        self.source = source

        self.dt = parameters.delta_t
        self.sqrt_dt = math.sqrt(self.dt)
        self.drift = (parameters.risk_free_rate - parameters.volatility**2 / 2.0) * self.dt

    def simulate(self) -> torch.Tensor:
        """Simulate a single trajectory one normal draw at a time."""
        params = self.parameters
        prices = [float(params.spot_price)]
        for _ in range(params.time_steps - 1):
            z = self.source.sample(0.0, 1.0)
            prices.append(prices[-1] * math.exp(self.drift + params.volatility * z * self.sqrt_dt))
        return torch.tensor(prices, dtype=params.dtype, device=params.device)

    def simulate_batch(self, batch_shape: int | Sequence[int]) -> torch.Tensor:
        """Simulate independent trajectories, shape ``(*batch_shape, time_steps)``."""
        if isinstance(batch_shape, int):
            batch_shape = (batch_shape,)
        batch_shape = tuple(batch_shape)
        if any(size <= 0 for size in batch_shape):
            raise ValueError("Batch dimensions must be positive.")

        params = self.parameters
        n_steps = params.time_steps - 1

        prices = torch.empty(
            batch_shape + (params.time_steps,),
            dtype=params.dtype,
            device=params.device,
        )
        prices[..., 0] = params.spot_price

        shocks = self.source.sample_batch(
            0.0,
            1.0,
            batch_shape + (n_steps,),
            dtype=params.dtype,
            device=params.device,
        ) * self.sqrt_dt

        for step in range(n_steps):
            increment = self.drift + params.volatility * shocks[..., step]
            prices[..., step + 1] = prices[..., step] * torch.exp(increment)

        return prices
