"""Tests for elementwise trajectory averaging."""

import pytest
import torch

from stockast import average_trajectories


class TestAverageTrajectories:
    """Tests for average_trajectories."""

    def test_singleton_is_identity(self):
        """average([T], 1) == T."""
        trajectory = torch.tensor([100.0, 101.5, 99.25, 102.125], dtype=torch.float64)
        result = average_trajectories([trajectory], 1)
        assert torch.equal(result, trajectory)

    def test_elementwise_mean(self):
        trajectories = [
            torch.tensor([100.0, 102.0, 104.0], dtype=torch.float64),
            torch.tensor([100.0, 98.0, 96.0], dtype=torch.float64),
        ]
        result = average_trajectories(trajectories, 2)
        assert result.tolist() == [100.0, 100.0, 100.0]

    def test_count_defaults_to_collection_size(self):
        stacked = torch.tensor([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]], dtype=torch.float64)
        assert average_trajectories(stacked).tolist() == [3.0, 4.0]

    def test_order_insensitive(self):
        generator = torch.Generator().manual_seed(7)
        stacked = 100.0 + torch.randn((25, 12), generator=generator, dtype=torch.float64)
        permuted = stacked[torch.randperm(25, generator=generator)]
        assert torch.allclose(average_trajectories(stacked), average_trajectories(permuted), rtol=0, atol=1e-12)

    def test_batched_collections(self):
        """Second to last axis is the collection; leading axes are kept."""
        stacked = torch.arange(24, dtype=torch.float64).reshape(2, 3, 4)
        result = average_trajectories(stacked, 3)
        assert result.shape == (2, 4)
        assert torch.equal(result[0], stacked[0].mean(dim=0))
        assert torch.equal(result[1], stacked[1].mean(dim=0))

    def test_empty_collection(self):
        with pytest.raises(ValueError, match="empty collection"):
            average_trajectories([])

    def test_ragged_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            average_trajectories([torch.ones(3), torch.ones(4)])

    def test_non_positive_count(self):
        with pytest.raises(ValueError, match="count must be positive"):
            average_trajectories([torch.ones(3)], 0)

    def test_zero_length_trajectories(self):
        with pytest.raises(ValueError, match="positive length"):
            average_trajectories(torch.empty((2, 0)))
