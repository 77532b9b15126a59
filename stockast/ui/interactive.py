"""Rich-powered interactive wizard for configuring stock forecasts."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "accent": "bright_cyan",
        "muted": "grey70",
        "warning": "gold1",
        "success": "spring_green2",
    }
)

_console = Console(theme=_THEME)


def _prompt_int(message: str, default: int, *, minimum: Optional[int] = None) -> int:
    while True:
        response = Prompt.ask(message, default=str(default), console=_console)
        try:
            value = int(response)
        except ValueError:
            _console.print("[warning]Please enter a whole number.[/warning]")
            continue
        if minimum is not None and value < minimum:
            _console.print(f"[warning]Value must be at least {minimum}.[/warning]")
            continue
        return value


def _prompt_float(message: str, default: float, *, minimum: Optional[float] = None) -> float:
    while True:
        response = Prompt.ask(message, default=f"{default}", console=_console)
        try:
            value = float(response)
        except ValueError:
            _console.print("[warning]Please enter a numeric value.[/warning]")
            continue
        if minimum is not None and value < minimum:
            _console.print(f"[warning]Value must be at least {minimum}.[/warning]")
            continue
        return value


def _prompt_optional_int(message: str, default: Optional[int]) -> Optional[int]:
    default_label = "none" if default is None else str(default)
    response = Prompt.ask(message, default=default_label, console=_console)
    if response.strip().lower() in {"", "none", "null"}:
        return None
    try:
        return int(response)
    except ValueError:
        _console.print("[warning]Invalid integer; falling back to default.[/warning]")
        return default


def _prompt_choice(message: str, choices: Iterable[str], default: str) -> str:
    return Prompt.ask(
        message,
        choices=list(choices),
        default=default,
        console=_console,
        show_choices=True,
    )


def _prompt_path(message: str, default: Path) -> Path:
    return Path(Prompt.ask(message, default=str(default), console=_console)).expanduser()


def _summarise_configuration(data: dict[str, str]) -> None:
    table = Table(title="Configuration Summary", show_lines=False, expand=True)
    table.add_column("Setting", style="accent", no_wrap=True)
    table.add_column("Value", style="muted")
    for key, value in data.items():
        table.add_row(key, value)
    _console.print(table)


def run_interactive_wizard(args: argparse.Namespace) -> argparse.Namespace:
    _console.print(Panel.fit("[accent bold]Stockast Forecast Configurator[/accent bold]", border_style="accent"))
    _console.print(
        "Use the prompts below to tailor the forecast. Press [accent]<enter>[/accent] to accept defaults.",
        style="muted",
    )

    data = _prompt_path("Historical price file", args.data)
    output = _prompt_path("Forecast output file", args.output)

    spot_price = _prompt_float("Spot price", args.spot_price, minimum=1e-9)
    time_steps = _prompt_int("Time steps (minutes)", args.time_steps, minimum=2)
    risk_free_rate = _prompt_float("Risk-free rate", args.risk_free_rate)
    in_loops = _prompt_int("Inner loop paths", args.in_loops, minimum=1)
    out_loops = _prompt_int("Outer loop iterations", args.out_loops, minimum=1)
    seed = _prompt_optional_int("Random seed (or 'none')", args.seed)

    device = _prompt_choice("Computation device", ["auto", "cpu", "cuda"], args.device)
    precision = _prompt_choice("Floating point precision", ["float64", "float32"], args.precision)
    workers = _prompt_int("Worker threads", args.workers, minimum=1)

    plot = Confirm.ask("Save forecast plots?", default=args.plot, console=_console)
    save_dir = args.save_dir
    hist_bins = args.hist_bins
    if plot:
        save_dir = _prompt_path("Directory for saved plots", args.save_dir)
        hist_bins = _prompt_int("Histogram bins", args.hist_bins, minimum=1)
    show = Confirm.ask("Show plot windows?", default=args.show, console=_console)

    summary_data = {
        "Data file": str(data),
        "Output file": str(output),
        "Spot price": f"{spot_price}",
        "Time steps": f"{time_steps}",
        "Risk-free rate": f"{risk_free_rate}",
        "Paths": f"{in_loops} x {out_loops}",
        "Seed": "random" if seed is None else f"{seed}",
        "Device": device,
        "Precision": precision,
        "Workers": f"{workers}",
        "Save plots": "Yes" if plot else "No",
        "Show window": "Yes" if show else "No",
    }
    _summarise_configuration(summary_data)

    namespace = argparse.Namespace(**vars(args))
    namespace.data = data
    namespace.output = output
    namespace.spot_price = spot_price
    namespace.time_steps = time_steps
    namespace.risk_free_rate = risk_free_rate
    namespace.in_loops = in_loops
    namespace.out_loops = out_loops
    namespace.seed = seed
    namespace.device = device
    namespace.precision = precision
    namespace.workers = workers
    namespace.plot = plot
    namespace.save_dir = save_dir
    namespace.hist_bins = hist_bins
    namespace.show = show
    namespace.interactive = False
    return namespace
