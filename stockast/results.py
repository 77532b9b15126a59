"""Result dataclasses for stock forecasts."""
from __future__ import annotations

from dataclasses import dataclass

import torch

from .config import SimulationParameters


@dataclass
class ForecastResult:
    trajectory: torch.Tensor
    volatility: float
    parameters: SimulationParameters
    outer_means: torch.Tensor
    elapsed_seconds: float = 0.0

    @property
    def terminal_price(self) -> float:
        return float(self.trajectory[-1].cpu())
