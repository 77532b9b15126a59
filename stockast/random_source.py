"""Normal variate sources feeding the path simulator."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import torch

_SEED_BOUND = 2**63 - 1


class RandomNormalSource(ABC):
    """Draws normally distributed samples for a given mean and standard deviation."""

    def sample(self, mean: float, std_dev: float) -> float:
        """Return a single normal variate."""
        return float(self.sample_batch(mean, std_dev, (1,))[0])

    @abstractmethod
    def sample_batch(
        self,
        mean: float,
        std_dev: float,
        shape: Sequence[int],
        *,
        dtype: torch.dtype = torch.float64,
        device: torch.device | None = None,
    ) -> torch.Tensor:
        """Return a tensor of independent normal variates."""

    @abstractmethod
    def spawn(self, count: int) -> list["RandomNormalSource"]:
        """Derive ``count`` sources that may be used from separate workers."""


class TorchNormalSource(RandomNormalSource):
    """Wraps a single ``torch.Generator`` seeded once for the whole run."""

    def __init__(
        self,
        generator: torch.Generator | None = None,
        *,
        seed: Optional[int] = None,
        device: torch.device = torch.device("cpu"),
    ) -> None:
        if generator is None:
            generator = torch.Generator(device=device)
            if seed is not None:
                generator.manual_seed(seed)
            else:
                generator.manual_seed(torch.seed())
        elif seed is not None:
            generator.manual_seed(seed)
        self.generator = generator

    @property
    def device(self) -> torch.device:
        return self.generator.device

    def sample_batch(
        self,
        mean: float,
        std_dev: float,
        shape: Sequence[int],
        *,
        dtype: torch.dtype = torch.float64,
        device: torch.device | None = None,
    ) -> torch.Tensor:
        if std_dev < 0:
            raise ValueError("Standard deviation must be non-negative.")
        draws = torch.randn(
            tuple(shape),
            generator=self.generator,
            dtype=dtype,
            device=self.device,
        )
        draws = draws * std_dev + mean
        if device is not None:
            draws = draws.to(device=device)
        return draws

    def spawn(self, count: int) -> list["TorchNormalSource"]:
        if count <= 0:
            raise ValueError("Number of child sources must be positive.")
        seeds = torch.randint(
            0,
            _SEED_BOUND,
            (count,),
            generator=self.generator,
            dtype=torch.int64,
            device=self.device,
        )
        return [TorchNormalSource(seed=int(seed), device=self.device) for seed in seeds.tolist()]


class ConstantNormalSource(RandomNormalSource):
    """Deterministic stand-in that always returns ``value``."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = float(value)

    def sample(self, mean: float, std_dev: float) -> float:
        return self.value

    def sample_batch(
        self,
        mean: float,
        std_dev: float,
        shape: Sequence[int],
        *,
        dtype: torch.dtype = torch.float64,
        device: torch.device | None = None,
    ) -> torch.Tensor:
        return torch.full(
            tuple(shape),
            fill_value=self.value,
            dtype=dtype,
            device=device or torch.device("cpu"),
        )

    def spawn(self, count: int) -> list["ConstantNormalSource"]:
        if count <= 0:
            raise ValueError("Number of child sources must be positive.")
        return [ConstantNormalSource(self.value) for _ in range(count)]
