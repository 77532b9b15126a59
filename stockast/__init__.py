"""Black-Scholes Monte Carlo stock forecasting package."""
from .averaging import average_trajectories
from .config import SimulationParameters, build_default_parameters
from .data import (
    HistoricalPrices,
    ensure_output_writable,
    load_historical_prices,
    parse_price_line,
    write_trajectory,
)
from .errors import HistoricalDataError, OutputError, StockastError
from .forecaster import StockForecaster, run_forecast
from .random_source import ConstantNormalSource, RandomNormalSource, TorchNormalSource
from .results import ForecastResult
from .simulator import PathSimulator
from .statistics import ForecastSummary, summarize_forecast
from .volatility import estimate_volatility

__all__ = [
    "SimulationParameters",
    "build_default_parameters",
    "RandomNormalSource",
    "TorchNormalSource",
    "ConstantNormalSource",
    "estimate_volatility",
    "PathSimulator",
    "average_trajectories",
    "StockForecaster",
    "run_forecast",
    "ForecastResult",
    "ForecastSummary",
    "summarize_forecast",
    "HistoricalPrices",
    "load_historical_prices",
    "parse_price_line",
    "ensure_output_writable",
    "write_trajectory",
    "StockastError",
    "HistoricalDataError",
    "OutputError",
]
