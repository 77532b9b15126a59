#!/usr/bin/env python3
"""CLI launcher for Black-Scholes Monte Carlo stock forecasts."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional
import sys

import matplotlib.pyplot as plt
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from stockast import (
    SimulationParameters,
    StockForecaster,
    StockastError,
    ensure_output_writable,
    load_historical_prices,
    summarize_forecast,
    write_trajectory,
)
from stockast.config import (
    DEFAULT_IN_LOOPS,
    DEFAULT_OUT_LOOPS,
    DEFAULT_RISK_FREE_RATE,
    DEFAULT_SPOT_PRICE,
    DEFAULT_TIME_STEPS,
)
from stockast.forecaster import DEFAULT_BLOCK_SIZE
from stockast.runtime import configure_logging, create_normal_source, fmt, precision_to_dtype, resolve_device
from stockast.ui.interactive import run_interactive_wizard
from stockast.visualization import plot_forecast, plot_terminal_distribution

BANNER = "--Welcome to Stockast: Stock Forecasting Tool--"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Forecast a stock price trajectory with Black-Scholes Monte Carlo simulation.",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path("data.csv"),
        help="File whose first line holds comma-separated historical minute-end prices.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("opt.csv"),
        help="File receiving the forecast, one price per line.",
    )
    parser.add_argument("--spot-price", type=float, default=DEFAULT_SPOT_PRICE, help="Stock price at t = 0.")
    parser.add_argument(
        "--time-steps",
        type=int,
        default=DEFAULT_TIME_STEPS,
        help="Number of points per trajectory (minutes), including the spot price.",
    )
    parser.add_argument(
        "--risk-free-rate",
        type=float,
        default=DEFAULT_RISK_FREE_RATE,
        help="Risk-free interest rate used as drift.",
    )
    parser.add_argument("--in-loops", type=int, default=DEFAULT_IN_LOOPS, help="Paths averaged per outer iteration.")
    parser.add_argument("--out-loops", type=int, default=DEFAULT_OUT_LOOPS, help="Number of outer iterations.")
    parser.add_argument("--seed", type=int, default=None, help="Optional RNG seed.")
    parser.add_argument(
        "--device",
        type=str,
        default="auto",
        help="PyTorch device: auto, cpu, cuda, or explicit device string.",
    )
    parser.add_argument(
        "--precision",
        choices=("float32", "float64"),
        default="float64",
        help="Floating point precision for simulation.",
    )
    parser.add_argument(
        "--block-size",
        type=int,
        default=DEFAULT_BLOCK_SIZE,
        help="Outer iterations evaluated together as one tensor.",
    )
    parser.add_argument("--workers", type=int, default=1, help="Worker threads sharing the outer iterations.")
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Save the forecast and terminal distribution charts.",
    )
    parser.add_argument(
        "--save-dir",
        type=Path,
        default=Path("figures"),
        help="Directory where plots are saved.",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display plots interactively after simulation.",
    )
    parser.add_argument(
        "--hist-bins",
        type=int,
        default=60,
        help="Number of bins for the terminal distribution histogram.",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Launch a rich interactive CLI wizard to choose forecast options.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--quiet", action="store_true", help="Only report errors.")
    return parser.parse_args(argv)


def execute_forecast(args: argparse.Namespace, *, suppress_output: bool = False) -> dict:
    messages: list[str] = []
    saved_paths: list[Path] = []

    def log(message: str = "") -> None:
        messages.append(message)
        if not suppress_output:
            print(message)

    device = resolve_device(args.device)
    dtype = precision_to_dtype(args.precision)

    parameters = SimulationParameters(
        spot_price=args.spot_price,
        time_steps=args.time_steps,
        risk_free_rate=args.risk_free_rate,
        volatility=0.0,
        in_loops=args.in_loops,
        out_loops=args.out_loops,
        device=device,
        dtype=dtype,
    )

    output = ensure_output_writable(args.output)
    history = load_historical_prices(args.data)
    source = create_normal_source(device, args.seed)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        disable=suppress_output,
        transient=True,
    ) as progress:
        task = progress.add_task("Simulating", total=parameters.out_loops)
        forecaster = StockForecaster(
            parameters,
            source,
            block_size=args.block_size,
            workers=args.workers,
            progress=lambda completed: progress.update(task, completed=completed),
        )
        calibrated = forecaster.calibrate(history)

        log(BANNER)
        log("")
        log(f"  Using market volatility = {fmt(calibrated.volatility)}")

        result = forecaster.simulate(calibrated)

    write_trajectory(output, result.trajectory)
    summary = summarize_forecast(result)

    log(" done!")
    log(f"  Time taken = {result.elapsed_seconds:.3f}s")
    log("")
    log(f"Device: {device}")
    log(f"Precision: {args.precision}")
    log(f"Paths: {parameters.in_loops} x {parameters.out_loops}")
    log(f"Steps: {parameters.time_steps}")
    log(f"Spot price: {fmt(parameters.spot_price)}")
    log(f"Expected terminal price: {fmt(summary.expected_price)}")
    log(f"Expected return: {summary.expected_return:.4%}")
    log(f"Outer average standard deviation: {fmt(summary.outer_standard_deviation)}")
    log(
        "95% CI for terminal price: ("
        f"{fmt(summary.confidence_interval[0])}, {fmt(summary.confidence_interval[1])})"
    )
    log(f"Forecast written to {output}")

    figures: list[plt.Figure] = []
    if args.plot or args.show:
        fig_forecast, _ = plot_forecast(result)
        fig_hist, _ = plot_terminal_distribution(result, bins=args.hist_bins)
        figures.extend([fig_forecast, fig_hist])

        if args.plot:
            save_dir = args.save_dir.expanduser()
            save_dir.mkdir(parents=True, exist_ok=True)
            path_chart = save_dir / "stockast_forecast.png"
            path_hist = save_dir / "stockast_terminal_hist.png"
            fig_forecast.savefig(path_chart, dpi=150, bbox_inches="tight")
            fig_hist.savefig(path_hist, dpi=150, bbox_inches="tight")
            saved_paths.extend([path_chart, path_hist])
            log("")
            log("Saved:")
            log(f"  {path_chart}")
            log(f"  {path_hist}")

    if args.show:
        plt.show()
    else:
        for fig in figures:
            plt.close(fig)

    return {
        "parameters": result.parameters,
        "result": result,
        "summary": summary,
        "messages": messages,
        "output": output,
        "saved_paths": saved_paths,
    }


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    auto_interactive = argv is None and len(sys.argv) == 1 and sys.stdin.isatty() and sys.stdout.isatty()
    if args.interactive or auto_interactive:
        args = run_interactive_wizard(args)

    try:
        execute_forecast(args, suppress_output=args.quiet)
    except (StockastError, ValueError, RuntimeError) as exc:
        raise SystemExit(f"{exc} Exiting..")


if __name__ == "__main__":
    main()
