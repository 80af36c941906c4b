import numpy as np
import pytest
import torch

from utils import time_block, perm_invariant_accuracy
from data_gen import make_two_spirals

from kspectral import SpectralClustering, KMeans
from kspectral.utils.linalg import zero_eigenvalue_multiplicity

N_PER = 300


@pytest.mark.parametrize("kernel", ["rbf", "exponential"])
@pytest.mark.parametrize("laplacian", ["unnormalized", "normalized"])
def test_spectral_separates_interleaved_spirals(kernel, laplacian):
    """
    Two spirals, 3-NN union graph: one chain per arm, so the graph has two
    connected components and the two smallest eigenvectors are the arm
    indicators. Spectral clustering recovers the arms with either kernel.
    """
    X, y = make_two_spirals(n_per=N_PER)

    model = SpectralClustering(n_clusters=2, n_neighbors=3, kernel=kernel,
                               laplacian=laplacian, random_state=0)
    with time_block("spectral.fit", {"n": X.shape[0], "K": 2, "m": 3, "kernel": kernel,
                                     "laplacian": laplacian}):
        labels = model.fit_predict(X)

    assert zero_eigenvalue_multiplicity(model.eigenvalues_) == 2
    acc = perm_invariant_accuracy(labels, N_PER)
    assert acc > 0.95, f"spectral accuracy {acc:.3f}"


def test_kmeans_fails_on_interleaved_spirals():
    """Both arms share a centroid, so a Voronoi split mixes them."""
    X, y = make_two_spirals(n_per=N_PER)

    km = KMeans(n_clusters=2, random_state=0)
    with time_block("kmeans.fit", {"n": X.shape[0], "K": 2}):
        labels = km.fit_predict(X)

    acc = perm_invariant_accuracy(labels, N_PER)
    assert acc < 0.75, f"kmeans unexpectedly separated the spirals (acc={acc:.3f})"


@pytest.mark.parametrize("kernel", ["rbf", "exponential"])
def test_spirals_affinity_has_no_cross_arm_edges(kernel):
    X, _ = make_two_spirals(n_per=N_PER)
    model = SpectralClustering(n_clusters=2, n_neighbors=3, kernel=kernel, random_state=0).fit(X)

    A = model.affinity_matrix_
    assert torch.all(A[:N_PER, N_PER:] == 0)
    assert torch.equal(A, A.T)
    assert torch.all(torch.diagonal(A) == 0)
