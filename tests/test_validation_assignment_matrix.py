# tests/test_validation_assignment_matrix.py
"""
Validation & AssignmentMatrix behavior

Covers:
- `_validate_data` converts list / numpy → torch.float32 on the right device
- Ragged and non-finite point sets are rejected with InvalidInputError
- Random state resolution into torch.Generator
- AssignmentMatrix counts, cluster indices and empty clusters
"""

from __future__ import annotations

import numpy as np
import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from kspectral.algorithms import KMeans
from kspectral.base.data_structures import AssignmentMatrix
from kspectral.exceptions import InvalidInputError
from kspectral.utils.validation import (
    validate_data, check_n_clusters, check_random_state, validate_init_params
)


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def test_validate_data_numpy_and_list_to_tensor(seed_all, torch_device):
    device = torch_device
    model = KMeans(n_clusters=2, random_state=0, device=device)

    # numpy array (float64) → torch.float32 on model.device
    X_np = np.random.RandomState(0).randn(5, 3).astype(np.float64)
    X_t = model._validate_data(X_np)
    assert isinstance(X_t, torch.Tensor)
    assert X_t.dtype == torch.float32
    assert X_t.device.type == device.type
    assert X_t.shape == (5, 3)

    # python list of lists → torch.float32 tensor
    X_t2 = model._validate_data([[1.0, 2.0, 3.0], [0.5, -0.1, 4.2]])
    assert X_t2.dtype == torch.float32
    assert X_t2.shape == (2, 3)

    # float64 tensors keep their precision
    X_t3 = model._validate_data(torch.zeros(4, 2, dtype=torch.float64))
    assert X_t3.dtype == torch.float64


def test_validate_data_rejects_ragged_points():
    with pytest.raises(InvalidInputError, match="Point 2 has dimension 3"):
        validate_data([[0.0, 1.0], [1.0, 0.0], [1.0, 1.0, 1.0]])


def test_validate_data_rejects_non_finite():
    with pytest.raises(InvalidInputError, match="NaN"):
        validate_data([[0.0, float("nan")]])
    with pytest.raises(InvalidInputError, match="infinite"):
        validate_data(np.array([[0.0, np.inf]]))


def test_validate_data_rejects_empty():
    with pytest.raises(InvalidInputError):
        validate_data(np.zeros((0, 2)))


@pytest.mark.parametrize("n_clusters", [0, -1, 2.5, True, 6])
def test_check_n_clusters_rejects(n_clusters):
    with pytest.raises(InvalidInputError):
        check_n_clusters(n_clusters, n_samples=5)


def test_check_random_state_variants():
    g1 = check_random_state(7)
    g2 = check_random_state(np.int64(7))
    assert torch.equal(torch.rand(3, generator=g1), torch.rand(3, generator=g2))

    gen = torch.Generator()
    assert check_random_state(gen) is gen
    assert isinstance(check_random_state(None), torch.Generator)

    with pytest.raises(TypeError):
        check_random_state("seed")


def test_validate_init_params():
    assert validate_init_params("random", 3, 2) == "random"
    with pytest.raises(InvalidInputError):
        validate_init_params("farthest", 3, 2)
    with pytest.raises(InvalidInputError, match="shape"):
        validate_init_params(np.zeros((2, 2)), 3, 2)
    centers = validate_init_params([[0.0, 0.0], [1.0, 1.0]], 2, 2)
    assert centers.shape == (2, 2)


def test_assignment_matrix_counts_and_indices(seed_all, torch_device):
    device = torch_device
    hard = torch.tensor([0, 2, 0, 2], device=device, dtype=torch.long)
    AM = AssignmentMatrix(hard, n_clusters=3)

    assert AM.n_points == 4
    assert torch.equal(AM.count_per_cluster(), torch.tensor([2, 0, 2], device=device))
    assert set(AM.get_cluster_indices(0).tolist()) == {0, 2}
    assert set(AM.get_cluster_indices(2).tolist()) == {1, 3}
    assert AM.get_cluster_indices(1).numel() == 0
    assert AM.empty_clusters() == [1]
    assert torch.equal(AM.to(device).get_hard(), hard)
