"""Market volatility estimate from a historical minute-end price series."""
from __future__ import annotations

import logging
import math
from typing import Sequence

from .errors import HistoricalDataError

logger = logging.getLogger(__name__)


def estimate_volatility(spot_price: float, historical_prices: Sequence[float]) -> float:
    """
    Estimate volatility as a percentage-scaled dispersion of the price series.

    The spot price is treated as one more observation alongside the
    historical minute-end prices. The sum of squared deviations from their
    common mean is not normalised by the sample size; its square root is
    divided by 100 to express the figure as a percentage.

    Args:
        spot_price: Price at t = 0.
        historical_prices: Minute-end prices read from the data source.

    Returns:
        ``sqrt(sum((x - mean) ** 2)) / 100`` over the spot and historical prices.
    """
    prices = [float(price) for price in historical_prices]
    if not prices:
        raise HistoricalDataError("No historical prices available to estimate volatility.")

    total = float(spot_price)
    for price in prices:
        total += price
    mean_price = total / (len(prices) + 1)

    squares = (spot_price - mean_price) ** 2
    for price in prices:
        squares += (price - mean_price) ** 2

    volatility = math.sqrt(squares) / 100.0
    logger.debug(
        "Estimated volatility %.6f from %d prices (mean %.6f)",
        volatility,
        len(prices) + 1,
        mean_price,
    )
    return volatility
