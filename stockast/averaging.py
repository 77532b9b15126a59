"""Elementwise averaging of equal-length trajectories."""
from __future__ import annotations

from typing import Optional, Sequence

import torch


def average_trajectories(
    trajectories: torch.Tensor | Sequence[torch.Tensor],
    count: Optional[int] = None,
) -> torch.Tensor:
    """
    Average a collection of trajectories time step by time step.

    ``trajectories`` is either a sequence of 1-D tensors or a stacked tensor
    whose second to last axis indexes the collection, so a tensor of shape
    ``(blocks, n, time_steps)`` yields one average per block. ``count``
    defaults to the collection size.
    """
    if isinstance(trajectories, torch.Tensor):
        stacked = trajectories
    else:
        if len(trajectories) == 0:
            raise ValueError("Cannot average an empty collection of trajectories.")
        lengths = {tuple(traj.shape) for traj in trajectories}
        if len(lengths) != 1:
            raise ValueError("All trajectories must have the same length.")
        stacked = torch.stack(list(trajectories), dim=0)

    if stacked.dim() < 2:
        raise ValueError("Expected a collection of trajectories, got a single vector.")
    if stacked.shape[-2] == 0:
        raise ValueError("Cannot average an empty collection of trajectories.")
    if stacked.shape[-1] == 0:
        raise ValueError("Trajectories must have a positive length.")

    if count is None:
        count = stacked.shape[-2]
    if count <= 0:
        raise ValueError("Trajectory count must be positive.")

    return stacked.sum(dim=-2) / count
