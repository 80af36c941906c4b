"""
Euclidean distance metric for clustering.

Point-to-centroid distances for the K-means assignment step.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric, ClusterRepresentation


class EuclideanDistance(DistanceMetric):
    """Squared Euclidean distance ||x - μ||² to the cluster center μ.

    The argmin over centroids is the same as for plain Euclidean distance,
    without a square root per point.
    """

    def compute(self, points: Tensor, representation: ClusterRepresentation,
                **kwargs) -> Tensor:
        """Compute squared Euclidean distances from points to cluster center.

        Args:
            points: (n, d) tensor of points
            representation: Cluster representation with 'mean' parameter

        Returns:
            (n,) tensor of squared distances
        """
        params = representation.get_parameters()
        if 'mean' not in params:
            raise ValueError("Euclidean distance requires representation with 'mean' parameter")

        center = params['mean'].to(dtype=points.dtype)

        diff = points - center.unsqueeze(0)
        return torch.sum(diff * diff, dim=1)
