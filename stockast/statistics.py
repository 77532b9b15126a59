"""Monte Carlo summary statistics."""
from __future__ import annotations

from dataclasses import dataclass
import math

from .results import ForecastResult


@dataclass
class ForecastSummary:
    spot_price: float
    expected_price: float
    expected_return: float
    outer_standard_deviation: float
    standard_error: float
    confidence_interval: tuple[float, float]


def summarize_forecast(result: ForecastResult) -> ForecastSummary:
    """Summarise the terminal forecast and the spread of the outer averages."""
    terminal = result.outer_means[:, -1]
    expected = result.trajectory[-1]
    n_outer = terminal.shape[0]
    if n_outer > 1:
        std = terminal.std(unbiased=True)
        stderr = std / math.sqrt(n_outer)
    else:
        std = terminal.new_zeros(())
        stderr = std
    spot = result.parameters.spot_price
    expected_price = float(expected.cpu())
    return ForecastSummary(
        spot_price=spot,
        expected_price=expected_price,
        expected_return=expected_price / spot - 1.0,
        outer_standard_deviation=float(std.cpu()),
        standard_error=float(stderr.cpu()),
        confidence_interval=(
            float((expected - 1.96 * stderr).cpu()),
            float((expected + 1.96 * stderr).cpu()),
        ),
    )
