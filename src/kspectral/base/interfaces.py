"""
Core interfaces for the kspectral clustering framework.

This module defines the abstract base classes that all components must implement,
ensuring a consistent API between plain K-means and the spectral pipeline.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import torch
from torch import Tensor


class ClusterRepresentation(ABC):
    """Abstract base class for cluster representations.

    K-means represents a cluster by its centroid; the interface leaves room
    for richer representations that plug into the same alternating loop.
    """

    @abstractmethod
    def distance_to_point(self, points: Tensor, indices: Optional[Tensor] = None) -> Tensor:
        """Compute distance/cost from points to this cluster representation.

        Args:
            points: (n, d) tensor of data points
            indices: Optional (n,) tensor of point indices for tracking

        Returns:
            (n,) tensor of distances/costs
        """
        pass

    @abstractmethod
    def update_from_points(self, points: Tensor, **kwargs) -> None:
        """Update cluster parameters given assigned points.

        Args:
            points: (n, d) tensor of assigned points
            **kwargs: Additional update-specific parameters
        """
        pass

    @abstractmethod
    def get_parameters(self) -> Dict[str, Tensor]:
        """Return all parameters defining this cluster representation."""
        pass

    @abstractmethod
    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Set cluster parameters from dictionary."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Ambient dimension of the data."""
        pass

    @abstractmethod
    def to(self, device: torch.device) -> 'ClusterRepresentation':
        """Move representation to specified device."""
        pass


class AssignmentStrategy(ABC):
    """Abstract base class for point-to-cluster assignment strategies."""

    @abstractmethod
    def compute_assignments(self, points: Tensor,
                            representations: list[ClusterRepresentation],
                            **kwargs) -> Tensor:
        """Compute cluster assignments for points.

        Args:
            points: (n, d) tensor of data points
            representations: List of K cluster representations
            **kwargs: Strategy-specific parameters

        Returns:
            (n,) tensor of hard assignments (cluster indices)
        """
        pass


class ParameterUpdater(ABC):
    """Abstract base class for cluster parameter update strategies."""

    @abstractmethod
    def update(self, representation: ClusterRepresentation,
               points: Tensor,
               **kwargs) -> None:
        """Update cluster parameters given the points assigned to it.

        Args:
            representation: Cluster representation to update
            points: (m, d) tensor of points assigned to this cluster
            **kwargs: Update-specific parameters
        """
        pass


class DistanceMetric(ABC):
    """Abstract base class for distance/cost computations."""

    @abstractmethod
    def compute(self, points: Tensor, representation: ClusterRepresentation,
                **kwargs) -> Tensor:
        """Compute distances from points to cluster.

        Args:
            points: (n, d) tensor of points
            representation: Cluster representation
            **kwargs: Metric-specific parameters

        Returns:
            (n,) tensor of distances/costs
        """
        pass


class SimilarityKernel(ABC):
    """Abstract base class for pairwise similarity kernels.

    A kernel maps the (n, n) matrix of pairwise Euclidean distances to a
    symmetric, non-negative similarity matrix.
    """

    @abstractmethod
    def from_distances(self, distances: Tensor) -> Tensor:
        """Transform pairwise distances into similarities.

        Args:
            distances: (n, n) symmetric matrix of Euclidean distances

        Returns:
            (n, n) similarity matrix
        """
        pass


class InitializationStrategy(ABC):
    """Abstract base class for cluster initialization strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> list[ClusterRepresentation]:
        """Initialize cluster representations.

        Args:
            points: (n, d) tensor of data points
            n_clusters: Number of clusters to initialize
            generator: Source of randomness; strategies must draw from it
                       and never from the global RNG when it is given
            **kwargs: Strategy-specific parameters

        Returns:
            List of initialized cluster representations
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, points: Tensor,
                representations: list[ClusterRepresentation],
                assignments: Tensor) -> Tensor:
        """Compute objective function value.

        Args:
            points: (n, d) tensor of data points
            representations: List of cluster representations
            assignments: (n,) hard cluster assignments

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass
