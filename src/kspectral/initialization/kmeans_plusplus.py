"""
K-means++ initialization strategy.

Selects initial cluster centers using the K-means++ algorithm, which chooses
centers that are far apart to improve convergence speed and quality.
"""

import math
from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..representations.centroid import CentroidRepresentation


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for better starting positions.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Compute distance from each point to nearest existing center
       - Sample candidates with probability proportional to squared distance
       - Keep the candidate that most reduces the total potential

    Points that coincide with an existing center have zero probability, so
    duplicated rows (as produced by spectral embeddings of disconnected
    graphs) never yield two identical centers while distinct rows remain.
    """

    def __init__(self, n_local_trials: Optional[int] = None):
        """
        Args:
            n_local_trials: Number of candidates to try for each center.
                           If None, uses 2 + log(k) as in sklearn
        """
        self.n_local_trials = n_local_trials

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize cluster centers using K-means++.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: CPU generator all draws are taken from

        Returns:
            List of initialized CentroidRepresentations
        """
        n_points, dimension = points.shape
        device = points.device

        if n_clusters > n_points:
            raise ValueError(f"Cannot create {n_clusters} clusters from {n_points} points")

        if self.n_local_trials is None:
            n_local_trials = 2 + int(math.log(n_clusters))
        else:
            n_local_trials = self.n_local_trials

        centers = []

        first_idx = int(torch.randint(n_points, (1,), generator=generator).item())
        centers.append(points[first_idx].clone())

        distances = torch.sum((points - centers[0].unsqueeze(0)) ** 2, dim=1)

        for _ in range(1, n_clusters):
            total = distances.sum()
            if total > 0:
                probabilities = (distances / total).cpu()
            else:
                # Every point sits on a center already
                probabilities = torch.full((n_points,), 1.0 / n_points, dtype=torch.float64)

            candidates_idx = torch.multinomial(probabilities, n_local_trials,
                                               replacement=True, generator=generator)

            best_potential = float('inf')
            best_candidate = None

            for idx in candidates_idx.tolist():
                candidate_distances = torch.sum((points - points[idx].unsqueeze(0)) ** 2, dim=1)
                new_distances = torch.minimum(distances, candidate_distances)
                potential = new_distances.sum().item()

                if potential < best_potential:
                    best_potential = potential
                    best_candidate = idx

            centers.append(points[best_candidate].clone())

            new_center_distances = torch.sum((points - centers[-1].unsqueeze(0)) ** 2, dim=1)
            distances = torch.minimum(distances, new_center_distances)

        representations = []
        for center in centers:
            rep = CentroidRepresentation(dimension, device, dtype=points.dtype)
            rep.mean = center
            representations.append(rep)

        return representations
