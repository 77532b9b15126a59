"""Historical price input and forecast output files."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Optional

import numpy as np
import torch

from .errors import HistoricalDataError, OutputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoricalPrices:
    """Minute-end prices parsed from the first line of a data file."""

    values: tuple[float, ...]
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)


def parse_price_line(line: str) -> tuple[float, ...]:
    """Parse a comma-separated line of prices."""
    stripped = line.strip()
    if not stripped:
        raise HistoricalDataError("Historical data line is empty.")

    tokens = stripped.split(",")
    # A single trailing separator does not start another field.
    if len(tokens) > 1 and not tokens[-1].strip():
        tokens.pop()

    values: list[float] = []
    for position, token in enumerate(tokens, start=1):
        token = token.strip()
        try:
            value = float(token)
        except ValueError:
            raise HistoricalDataError(f"Invalid price {token!r} at position {position}.") from None
        if not np.isfinite(value):
            raise HistoricalDataError(f"Non-finite price {token!r} at position {position}.")
        values.append(value)
    return tuple(values)


def load_historical_prices(path: Path | str) -> HistoricalPrices:
    """Read the first line of ``path`` as a historical price series."""
    path = Path(path).expanduser()
    try:
        with path.open("r", encoding="utf-8") as handle:
            line = handle.readline()
    except OSError as exc:
        raise HistoricalDataError(f"Cannot open {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise HistoricalDataError(f"Cannot read from {path}: {exc}") from exc

    if not line:
        raise HistoricalDataError(f"Cannot read from {path}: file is empty.")

    values = parse_price_line(line)
    logger.info("Loaded %d historical prices from %s", len(values), path)
    return HistoricalPrices(values=values, source=path)


def ensure_output_writable(path: Path | str) -> Path:
    """Fail early if the forecast cannot be written to ``path``."""
    path = Path(path).expanduser()
    if path.exists():
        if path.is_dir():
            raise OutputError(f"Couldn't open {path}: it is a directory.")
        if not os.access(path, os.W_OK):
            raise OutputError(f"Couldn't open {path}: permission denied.")
        return path

    parent = path.parent if str(path.parent) else Path(".")
    if not parent.is_dir():
        raise OutputError(f"Couldn't open {path}: directory {parent} does not exist.")
    if not os.access(parent, os.W_OK):
        raise OutputError(f"Couldn't open {path}: directory {parent} is not writable.")
    return path


def write_trajectory(path: Path | str, trajectory: torch.Tensor) -> Path:
    """Write one price per line in chronological order."""
    path = Path(path).expanduser()
    values = trajectory.detach().cpu().numpy().reshape(-1)
    try:
        with path.open("w", encoding="utf-8") as handle:
            np.savetxt(handle, values, fmt="%.10f")
    except OSError as exc:
        raise OutputError(f"Couldn't open {path}: {exc.strerror or exc}") from exc
    logger.info("Wrote %d forecast prices to %s", values.shape[0], path)
    return path
