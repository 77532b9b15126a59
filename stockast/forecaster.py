"""Nested-loop Monte Carlo forecast of a stock price trajectory."""
from __future__ import annotations

import concurrent.futures
import logging
import threading
import time
from typing import Callable, Optional, Sequence

import torch

from .averaging import average_trajectories
from .config import SimulationParameters
from .errors import HistoricalDataError
from .random_source import RandomNormalSource, TorchNormalSource
from .results import ForecastResult
from .simulator import PathSimulator
from .volatility import estimate_volatility

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 100

ProgressCallback = Callable[[int], None]


class StockForecaster:
    """
    Drives the two-level Monte Carlo reduction.

    Every outer iteration simulates ``in_loops`` paths and averages them; the
    ``out_loops`` outer averages are then averaged again into the forecast.
    Outer iterations are evaluated ``block_size`` at a time as one tensor of
    shape ``(block, in_loops, time_steps)`` and reduced over the ``in_loops``
    axis, which keeps the per-iteration averages of the two-pass scheme.

    With ``workers > 1`` the outer iterations are split into contiguous
    chunks run on a thread pool, each chunk drawing from its own child
    source. Outer averages land in their own slots, so the final reduction
    order does not depend on the number of workers.
    """

    def __init__(
        self,
        parameters: SimulationParameters,
        source: RandomNormalSource | None = None,
        *,
        block_size: int = DEFAULT_BLOCK_SIZE,
        workers: int = 1,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        if block_size <= 0:
            raise ValueError("Block size must be positive.")
        if workers <= 0:
            raise ValueError("Number of workers must be positive.")
        if source is None:
            source = TorchNormalSource(device=parameters.device)

        self.parameters = parameters
        self.source = source
        self.block_size = block_size
        self.workers = min(workers, parameters.out_loops)
        self.progress = progress

        self._completed = 0
        self._lock = threading.Lock()

    def calibrate(self, history: Sequence[float]) -> SimulationParameters:
        """Estimate volatility from ``history`` and return calibrated parameters."""
        expected = self.parameters.time_steps - 1
        if len(history) != expected:
            raise HistoricalDataError(
                f"Expected {expected} historical prices for {self.parameters.time_steps} time steps, "
                f"got {len(history)}."
            )
        volatility = estimate_volatility(self.parameters.spot_price, history)
        return self.parameters.with_volatility(volatility)

    def run(self, history: Sequence[float]) -> ForecastResult:
        """Calibrate on ``history`` and simulate the forecast."""
        return self.simulate(self.calibrate(history))

    def simulate(self, parameters: SimulationParameters) -> ForecastResult:
        """Run the two-level reduction with already calibrated ``parameters``."""
        start_time = time.perf_counter()
        logger.info(
            "Simulating %d x %d paths over %d steps (volatility %.6f)",
            parameters.out_loops,
            parameters.in_loops,
            parameters.time_steps,
            parameters.volatility,
        )

        self._completed = 0
        outer_means = torch.empty(
            (parameters.out_loops, parameters.time_steps),
            dtype=parameters.dtype,
            device=parameters.device,
        )

        if self.workers == 1:
            self._fill_outer_means(parameters, self.source, outer_means, 0, parameters.out_loops)
        else:
            self._fill_parallel(parameters, outer_means)

        trajectory = average_trajectories(outer_means, parameters.out_loops)
        elapsed = time.perf_counter() - start_time
        logger.info("Forecast complete in %.3fs", elapsed)
        return ForecastResult(
            trajectory=trajectory,
            volatility=parameters.volatility,
            parameters=parameters,
            outer_means=outer_means,
            elapsed_seconds=elapsed,
        )

    def _fill_parallel(self, parameters: SimulationParameters, outer_means: torch.Tensor) -> None:
        bounds = _chunk_bounds(parameters.out_loops, self.workers)
        sources = self.source.spawn(len(bounds))
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(bounds)) as executor:
            futures = [
                executor.submit(self._fill_outer_means, parameters, source, outer_means, start, stop)
                for source, (start, stop) in zip(sources, bounds)
            ]
            for future in concurrent.futures.as_completed(futures):
                future.result()

    def _fill_outer_means(
        self,
        parameters: SimulationParameters,
        source: RandomNormalSource,
        outer_means: torch.Tensor,
        start: int,
        stop: int,
    ) -> None:
        simulator = PathSimulator(parameters, source)
        for block_start in range(start, stop, self.block_size):
            block_stop = min(block_start + self.block_size, stop)
            paths = simulator.simulate_batch((block_stop - block_start, parameters.in_loops))
            outer_means[block_start:block_stop] = average_trajectories(paths, parameters.in_loops)
            self._report(block_stop - block_start)

    def _report(self, finished: int) -> None:
        with self._lock:
            self._completed += finished
            completed = self._completed
        if self.progress is not None:
            self.progress(completed)


def _chunk_bounds(total: int, parts: int) -> list[tuple[int, int]]:
    """Split ``range(total)`` into ``parts`` contiguous, nearly equal chunks."""
    base, extra = divmod(total, parts)
    bounds = []
    start = 0
    for index in range(parts):
        stop = start + base + (1 if index < extra else 0)
        if stop > start:
            bounds.append((start, stop))
        start = stop
    return bounds


def run_forecast(
    parameters: SimulationParameters,
    history: Sequence[float],
    source: RandomNormalSource | None = None,
    **kwargs,
) -> ForecastResult:
    """Calibrate on ``history`` and run the full Monte Carlo forecast."""
    return StockForecaster(parameters, source, **kwargs).run(history)
