"""
Clustering evaluation metrics.

Internal metrics (no ground truth needed) and external metrics comparing a
clustering to ground truth labels up to a relabeling of clusters.
"""

import itertools
import torch
from torch import Tensor


def pairwise_distances(X: Tensor) -> Tensor:
    """Compute pairwise Euclidean distances between the rows of X.

    Uses the direct difference formulation rather than the
    ||x||² + ||y||² - 2<x,y> expansion so that d(x, x) is exactly zero and
    the result is exactly symmetric.

    Args:
        X: (n, d) points

    Returns:
        (n, n) distance matrix
    """
    return torch.cdist(X, X, p=2.0, compute_mode='donot_use_mm_for_euclid_dist')


def inertia(X: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Within-cluster sum of squared distances.

    Args:
        X: (n, d) data
        labels: (n,) cluster labels
        centers: (K, d) cluster centers

    Returns:
        Inertia value
    """
    diff = X - centers[labels]
    return torch.sum(diff * diff).item()


# External metrics (require ground truth)

def contingency_matrix(labels_true: Tensor, labels_pred: Tensor) -> Tensor:
    """Build contingency matrix for comparing clusterings.

    Args:
        labels_true: (n,) true labels
        labels_pred: (n,) predicted labels

    Returns:
        Contingency matrix C where C[i,j] is the number of samples
        with true label i and predicted label j
    """
    labels_true = torch.as_tensor(labels_true).long().cpu()
    labels_pred = torch.as_tensor(labels_pred).long().cpu()
    if labels_true.shape != labels_pred.shape:
        raise ValueError(f"Label shapes differ: {tuple(labels_true.shape)} "
                         f"vs {tuple(labels_pred.shape)}")

    n_true = int(labels_true.max().item()) + 1
    n_pred = int(labels_pred.max().item()) + 1

    flat = labels_true * n_pred + labels_pred
    counts = torch.bincount(flat, minlength=n_true * n_pred)
    return counts.reshape(n_true, n_pred)


def adjusted_rand_score(labels_true: Tensor, labels_pred: Tensor) -> float:
    """Compute Adjusted Rand Index.

    ARI is 1.0 for perfect match (up to relabeling), ~0.0 for random labeling.

    Args:
        labels_true: (n,) ground truth labels
        labels_pred: (n,) predicted labels

    Returns:
        ARI score in [-1, 1]
    """
    contingency = contingency_matrix(labels_true, labels_pred).double()

    row_sum = contingency.sum(dim=1)
    col_sum = contingency.sum(dim=0)
    n = contingency.sum()

    sum_comb = torch.sum(contingency * (contingency - 1)) / 2
    sum_comb_rows = torch.sum(row_sum * (row_sum - 1)) / 2
    sum_comb_cols = torch.sum(col_sum * (col_sum - 1)) / 2

    expected_index = sum_comb_rows * sum_comb_cols / (n * (n - 1) / 2)
    max_index = (sum_comb_rows + sum_comb_cols) / 2

    if max_index - expected_index == 0:
        return 1.0

    ari = (sum_comb - expected_index) / (max_index - expected_index)
    return ari.item()


def clustering_accuracy(labels_true: Tensor, labels_pred: Tensor) -> float:
    """Best fraction of agreement over all relabelings of the prediction.

    Brute force over permutations; intended for the small cluster counts
    of synthetic benchmarks.

    Args:
        labels_true: (n,) ground truth labels
        labels_pred: (n,) predicted labels

    Returns:
        Accuracy in [0, 1]
    """
    contingency = contingency_matrix(labels_true, labels_pred)
    n_true, n_pred = contingency.shape
    size = max(n_true, n_pred)
    padded = torch.zeros(size, size, dtype=contingency.dtype)
    padded[:n_true, :n_pred] = contingency

    best = 0
    rows = torch.arange(size)
    for perm in itertools.permutations(range(size)):
        matched = padded[rows, torch.tensor(perm)].sum().item()
        best = max(best, matched)

    n = contingency.sum().item()
    return best / n if n > 0 else 0.0
