"""Exception types raised by the forecasting pipeline."""
from __future__ import annotations


class StockastError(Exception):
    """Base class for fatal forecasting errors."""


class HistoricalDataError(StockastError):
    """The historical price source is missing, unreadable or malformed."""


class OutputError(StockastError):
    """The result destination cannot be written."""
