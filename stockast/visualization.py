"""Visualization utilities for stock forecasts."""
from __future__ import annotations

from typing import Tuple

import matplotlib.pyplot as plt
import numpy as np

from .results import ForecastResult


__all__ = (
    "plot_forecast",
    "plot_terminal_distribution",
)


def plot_forecast(
    result: ForecastResult,
    *,
    ax: plt.Axes | None = None,
) -> Tuple[plt.Figure, plt.Axes]:
    """Draw the averaged trajectory with the 5-95% band of the outer averages."""
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    steps = np.arange(result.parameters.time_steps)
    trajectory = result.trajectory.detach().cpu().numpy()
    outer = result.outer_means.detach().cpu().numpy()

    if outer.shape[0] > 1:
        low, high = np.quantile(outer, [0.05, 0.95], axis=0)
        ax.fill_between(steps, low, high, color="#1f77b4", alpha=0.2, label="Outer averages 5-95%")
    ax.plot(steps, trajectory, color="#1f77b4", linewidth=1.6, label="Expected price")
    ax.axhline(result.parameters.spot_price, color="grey", linewidth=0.8, linestyle="--", label="Spot price")
    ax.set_xlabel("Time step")
    ax.set_ylabel("Stock price")
    ax.set_title(f"Black-Scholes forecast (volatility {result.volatility:.6f})")
    ax.grid(True, alpha=0.2)
    ax.legend(loc="best")
    return fig, ax


def plot_terminal_distribution(
    result: ForecastResult,
    *,
    bins: int = 60,
    ax: plt.Axes | None = None,
) -> Tuple[plt.Figure, plt.Axes]:
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    data = result.outer_means[:, -1].detach().cpu().numpy()
    ax.hist(data, bins=bins, alpha=0.75, color="#1f77b4", edgecolor="black")
    ax.axvline(result.terminal_price, color="black", linewidth=1.2)
    ax.set_xlabel("Terminal price (outer average)")
    ax.set_ylabel("Frequency")
    ax.set_title("Terminal distribution of outer averages")
    ax.grid(True, alpha=0.2)
    return fig, ax
