"""Runtime helpers shared by the CLI and the interactive wizard."""
from __future__ import annotations

import logging
from typing import Optional

import torch
from rich.logging import RichHandler

from .random_source import TorchNormalSource


def resolve_device(device_arg: str) -> torch.device:
    if device_arg == "auto":
        if torch.cuda.is_available():
            return torch.device("cuda")
        return torch.device("cpu")
    device = torch.device(device_arg)
    if device.type == "cuda" and not torch.cuda.is_available():
        raise RuntimeError("CUDA requested but not available.")
    return device


def precision_to_dtype(precision: str) -> torch.dtype:
    return torch.float64 if precision == "float64" else torch.float32


def create_normal_source(device: torch.device, seed: Optional[int]) -> TorchNormalSource:
    """One generator per run, seeded once."""
    return TorchNormalSource(seed=seed, device=device)


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def fmt(value: float) -> str:
    return f"{value:.6f}"
