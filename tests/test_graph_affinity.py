# tests/test_graph_affinity.py
"""
Similarity kernels and k-NN affinity graphs

Covers:
- Exponential kernel values, unit diagonal, symmetry
- Gaussian (RBF) kernel values
- k-NN selection: self excluded by default, tie-breaking by column index
- Union symmetrization can give a node more than m neighbors
- Mutual symmetrization, include_self=True
- m >= n returns the similarity matrix unchanged
"""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from kspectral.graph import (
    ExponentialKernel, GaussianKernel, get_kernel, similarity_matrix,
    knn_affinity, knn_mask
)
from kspectral.base.interfaces import SimilarityKernel
from kspectral.exceptions import InvalidInputError, NonSymmetricInputError

from data_gen import make_two_blobs


def _line_points():
    # Points on a line at 0, 1, 3, 7: every pairwise distance is distinct
    return [[0.0], [1.0], [3.0], [7.0]]


def test_exponential_similarity_values():
    S = similarity_matrix(_line_points())

    assert S.dtype == torch.float64
    assert S.shape == (4, 4)
    assert torch.equal(torch.diagonal(S), torch.ones(4, dtype=torch.float64))
    assert torch.equal(S, S.T)
    assert math.isclose(S[0, 1].item(), math.exp(-1.0), rel_tol=1e-12)
    assert math.isclose(S[1, 3].item(), math.exp(-6.0), rel_tol=1e-12)


def test_similarity_in_unit_interval(rng):
    X = rng.normal(size=(30, 3))
    S = similarity_matrix(X)
    assert torch.all(S > 0) and torch.all(S <= 1)
    assert torch.equal(S, S.T)


def test_exponential_scale_and_rbf():
    S = similarity_matrix(_line_points(), kernel="exponential", scale=2.0)
    assert math.isclose(S[0, 2].item(), math.exp(-1.5), rel_tol=1e-12)

    S_rbf = similarity_matrix(_line_points(), kernel="rbf", sigma=1.0)
    assert math.isclose(S_rbf[0, 1].item(), math.exp(-0.5), rel_tol=1e-12)
    assert torch.equal(torch.diagonal(S_rbf), torch.ones(4, dtype=torch.float64))


def test_get_kernel_resolution():
    assert isinstance(get_kernel("exponential"), ExponentialKernel)
    assert isinstance(get_kernel("gaussian", sigma=0.5), GaussianKernel)

    custom = ExponentialKernel(scale=3.0)
    assert get_kernel(custom) is custom
    assert isinstance(custom, SimilarityKernel)

    with pytest.raises(InvalidInputError):
        get_kernel("cosine")
    with pytest.raises(InvalidInputError):
        ExponentialKernel(scale=0.0)


def test_similarity_rejects_ragged():
    with pytest.raises(InvalidInputError, match="Point 1"):
        similarity_matrix([[0.0, 0.0], [1.0]])


def test_knn_excludes_self_by_default():
    S = similarity_matrix(_line_points())
    A = knn_affinity(S, n_neighbors=2)

    # Each row selects its two nearest other points:
    # 0→{1,2}, 1→{0,2}, 2→{1,0}, 3→{2,1}. Union adds the reverse edges.
    expected = torch.tensor([
        [0, 1, 1, 0],
        [1, 0, 1, 1],
        [1, 1, 0, 1],
        [0, 1, 1, 0],
    ], dtype=torch.bool)
    assert torch.equal(A > 0, expected)
    assert torch.all(torch.diagonal(A) == 0)
    assert torch.equal(A, A.T)
    # Kept entries are the original similarities
    assert torch.equal(A[expected], S[expected])


def test_include_self_takes_a_slot():
    S = similarity_matrix(_line_points())
    A = knn_affinity(S, n_neighbors=2, include_self=True)

    # Each row selects itself and its nearest point:
    # 0→1, 1→0, 2→1, 3→2. Union adds the reverse edges.
    expected = torch.tensor([
        [1, 1, 0, 0],
        [1, 1, 1, 0],
        [0, 1, 1, 1],
        [0, 0, 1, 1],
    ], dtype=torch.bool)
    assert torch.equal(A > 0, expected)
    assert torch.equal(torch.diagonal(A), torch.ones(4, dtype=torch.float64))


def test_union_degree_can_exceed_m():
    # Node 0 at the origin is the nearest neighbor of every other point
    X = [[0.0, 0.0], [1.0, 0.0], [-1.1, 0.0], [0.0, 1.2], [0.0, -1.3]]
    A = knn_affinity(similarity_matrix(X), n_neighbors=2)

    assert int((A[0] > 0).sum()) == 4
    mask = knn_mask(similarity_matrix(X), 2)
    assert mask[0].tolist() == [False, True, True, False, False]


def test_mutual_rule_is_subset_of_union():
    S = similarity_matrix(_line_points())
    union = knn_affinity(S, n_neighbors=2, symmetrize="union")
    mutual = knn_affinity(S, n_neighbors=2, symmetrize="mutual")

    assert torch.all((mutual > 0) <= (union > 0))
    assert torch.equal(mutual, mutual.T)
    # 3 selects 1 and 2, but neither selects 3
    assert union[2, 3] > 0 and mutual[2, 3] == 0
    assert union[1, 3] > 0 and mutual[1, 3] == 0
    assert mutual[0, 1] > 0 and mutual[1, 2] > 0


def test_ties_break_toward_lower_index():
    # Row 0 is equally similar to columns 1, 2 and 3
    S = torch.tensor([
        [1.0, 0.5, 0.5, 0.5],
        [0.5, 1.0, 0.1, 0.1],
        [0.5, 0.1, 1.0, 0.1],
        [0.5, 0.1, 0.1, 1.0],
    ], dtype=torch.float64)

    assert knn_mask(S, 2)[0].tolist() == [False, True, True, False]
    assert knn_mask(S, 2, include_self=True)[0].tolist() == [True, True, False, False]


def test_one_neighbor_without_self():
    S = similarity_matrix(_line_points())
    A = knn_affinity(S, n_neighbors=1)

    assert torch.all(torch.diagonal(A) == 0)
    # 0-1, 1-0, 2-1, 3-2 selected; union makes them symmetric
    assert (A > 0).sum().item() == 6


def test_full_graph_when_m_at_least_n():
    X, _ = make_two_blobs(n_per=5, seed=0)
    S = similarity_matrix(X)

    A = knn_affinity(S, n_neighbors=10)
    assert torch.equal(A, S)
    assert A.data_ptr() != S.data_ptr()

    A_big = knn_affinity(S, n_neighbors=1000)
    assert torch.equal(A_big, S)


def test_knn_affinity_rejects_bad_input():
    S = similarity_matrix(_line_points())

    with pytest.raises(InvalidInputError):
        knn_affinity(S, n_neighbors=0)
    with pytest.raises(InvalidInputError):
        knn_affinity(S, n_neighbors=2, symmetrize="either")
    with pytest.raises(InvalidInputError):
        knn_affinity(S[:, :3], n_neighbors=2)

    S_bad = S.clone()
    S_bad[0, 1] += 0.1
    with pytest.raises(NonSymmetricInputError):
        knn_affinity(S_bad, n_neighbors=2)


def test_knn_affinity_accepts_numpy():
    S = similarity_matrix(_line_points()).numpy()
    A = knn_affinity(S, n_neighbors=2)
    assert isinstance(A, torch.Tensor)
    assert np.allclose(A.numpy(), A.numpy().T)
