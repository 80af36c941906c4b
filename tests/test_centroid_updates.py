# tests/test_centroid_updates.py
"""
Centroid representation and the mean update

Covers:
- MeanUpdater sets the centroid to the plain mean
- An empty point set leaves the centroid untouched
- Shape checks and device moves on CentroidRepresentation

All tests run on CPU via the `torch_device` fixture.
"""

from __future__ import annotations

import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from kspectral.representations import CentroidRepresentation
from kspectral.updates import MeanUpdater


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def _points(device):
    return torch.tensor([[0.0, 0.0], [4.0, 0.0]], device=device, dtype=torch.float64)


def test_plain_mean(torch_device):
    rep = CentroidRepresentation(2, torch_device, dtype=torch.float64)
    MeanUpdater().update(rep, _points(torch_device))
    assert torch.allclose(rep.mean, torch.tensor([2.0, 0.0], dtype=torch.float64))


def test_empty_points_keep_mean(torch_device):
    rep = CentroidRepresentation(2, torch_device)
    rep.mean = torch.tensor([1.5, -2.0])
    MeanUpdater().update(rep, torch.zeros(0, 2))
    assert torch.equal(rep.mean, torch.tensor([1.5, -2.0]))


def test_distance_and_shape_checks(torch_device):
    rep = CentroidRepresentation(2, torch_device, dtype=torch.float64)
    rep.mean = torch.tensor([1.0, 1.0], dtype=torch.float64)

    d = rep.distance_to_point(_points(torch_device))
    assert torch.allclose(d, torch.tensor([2.0, 10.0], dtype=torch.float64))

    with pytest.raises(ValueError):
        rep.distance_to_point(torch.zeros(3, 3))
    with pytest.raises(ValueError):
        rep.update_from_points(torch.zeros(3))


def test_to_device_preserves_parameters(torch_device):
    rep = CentroidRepresentation(2, torch_device, dtype=torch.float64)
    rep.mean = torch.tensor([0.5, 0.25], dtype=torch.float64)

    moved = rep.to(torch_device)
    assert moved is not rep
    assert moved.dimension == 2
    assert moved.mean.dtype == torch.float64
    assert torch.equal(moved.get_parameters()["mean"], rep.mean)
