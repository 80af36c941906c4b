"""
Core data structures for the kspectral clustering algorithms.

This module provides containers for cluster states, assignments and the
results returned by K-means and the spectral pipeline.
"""

from typing import Optional, Dict, Any, List
from enum import Enum
import torch
from torch import Tensor
from dataclasses import dataclass, field


class TerminalState(str, Enum):
    """How an iterative clustering run stopped."""

    CONVERGED = 'converged'
    MAX_ITER_REACHED = 'max_iter_reached'


@dataclass
class ClusterState:
    """Container for all parameters defining clusters at a given iteration."""

    means: Tensor  # (K, d) cluster centers/means
    n_clusters: int
    dimension: int

    # Auxiliary information
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate dimensions."""
        assert self.means.shape == (self.n_clusters, self.dimension)

    @property
    def device(self) -> torch.device:
        """Device where tensors are stored."""
        return self.means.device

    def to(self, device: torch.device) -> 'ClusterState':
        """Move all tensors to specified device."""
        return ClusterState(
            means=self.means.to(device),
            n_clusters=self.n_clusters,
            dimension=self.dimension,
            metadata=self.metadata.copy()
        )


class AssignmentMatrix:
    """Storage and manipulation of hard cluster assignments."""

    def __init__(self,
                 assignments: Tensor,
                 n_clusters: int):
        """
        Args:
            assignments: (n,) hard assignments
            n_clusters: Number of clusters K
        """
        self.n_clusters = n_clusters
        self._validate_and_store(assignments)

    def _validate_and_store(self, assignments: Tensor):
        """Validate and store assignments in canonical format."""
        assert assignments.dim() == 1
        if assignments.numel() > 0:
            assert assignments.max() < self.n_clusters
            assert assignments.min() >= 0
        self._hard_assignments = assignments.long()

    @property
    def n_points(self) -> int:
        """Number of data points."""
        return self._hard_assignments.shape[0]

    def get_hard(self) -> Tensor:
        """Get hard assignments."""
        return self._hard_assignments

    def get_cluster_indices(self, cluster_idx: int) -> Tensor:
        """Get indices of points assigned to a specific cluster."""
        return torch.where(self._hard_assignments == cluster_idx)[0]

    def count_per_cluster(self) -> Tensor:
        """Count points per cluster."""
        return torch.bincount(self._hard_assignments, minlength=self.n_clusters)

    def empty_clusters(self) -> List[int]:
        """Indices of clusters with no assigned point."""
        counts = self.count_per_cluster()
        return [k for k in range(self.n_clusters) if counts[k].item() == 0]

    def to(self, device: torch.device) -> 'AssignmentMatrix':
        """Move to specified device."""
        return AssignmentMatrix(self._hard_assignments.to(device), self.n_clusters)


@dataclass
class AlgorithmState:
    """Complete state of a clustering algorithm at a given iteration.

    Used for convergence checking and debugging.
    """
    iteration: int
    cluster_state: ClusterState
    assignments: AssignmentMatrix
    objective_value: float

    converged: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to(self, device: torch.device) -> 'AlgorithmState':
        """Move all components to specified device."""
        return AlgorithmState(
            iteration=self.iteration,
            cluster_state=self.cluster_state.to(device),
            assignments=self.assignments.to(device),
            objective_value=self.objective_value,
            converged=self.converged,
            metadata=self.metadata.copy()
        )


@dataclass(frozen=True)
class KMeansResult:
    """Outcome of one K-means run."""
    labels: Tensor          # (n,) labels in [0, K)
    centers: Tensor         # (K, d) final centroids
    n_iter: int
    terminal_state: TerminalState
    inertia: float

    @property
    def converged(self) -> bool:
        return self.terminal_state is TerminalState.CONVERGED


@dataclass(frozen=True)
class SpectralEmbeddingResult:
    """Eigendecomposition of a Laplacian and the embedding drawn from it."""
    embedding: Tensor       # (n, k) selected eigenvectors as columns
    eigenvalues: Tensor     # (n,) all eigenvalues, ascending
    eigenvectors: Tensor    # (n, n) all eigenvectors as columns, same order

    @property
    def n_components(self) -> int:
        return self.embedding.shape[1]


@dataclass(frozen=True)
class SpectralClusteringResult:
    """Every artifact produced by one spectral clustering invocation."""
    labels: Tensor
    similarity_matrix: Tensor
    affinity_matrix: Tensor
    degrees: Tensor
    laplacian: Tensor
    eigenvalues: Tensor
    eigenvectors: Tensor
    embedding: Tensor
    centers: Tensor
    n_iter: int
    terminal_state: TerminalState

    @property
    def converged(self) -> bool:
        return self.terminal_state is TerminalState.CONVERGED
