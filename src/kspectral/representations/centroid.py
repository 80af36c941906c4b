"""
Centroid representation for K-means clustering.

The simplest cluster representation - just a mean point in space.
"""

from typing import Dict, Optional
from torch import Tensor

from .base_representation import BaseRepresentation
from ..distances.euclidean import EuclideanDistance


class CentroidRepresentation(BaseRepresentation):
    """Cluster represented by a single centroid point, at squared Euclidean distance."""

    _metric = EuclideanDistance()

    def distance_to_point(self, points: Tensor, indices: Optional[Tensor] = None) -> Tensor:
        """Compute squared Euclidean distance from points to centroid.

        Args:
            points: (n, d) tensor of data points
            indices: Ignored for centroid representation

        Returns:
            (n,) tensor of squared Euclidean distances
        """
        self._check_points_shape(points)
        return self._metric.compute(points, self)

    def update_from_points(self, points: Tensor, **kwargs) -> None:
        """Update centroid as mean of assigned points.

        Args:
            points: (n, d) tensor of assigned points
        """
        self._check_points_shape(points)

        if len(points) == 0:
            # No points assigned - keep current mean
            return

        self._mean = points.mean(dim=0)

    def get_parameters(self) -> Dict[str, Tensor]:
        """Return parameters defining this centroid."""
        return {'mean': self._mean.clone()}

    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Set centroid parameters."""
        if 'mean' in params:
            self.mean = params['mean']

    def __repr__(self) -> str:
        return f"CentroidRepresentation(dimension={self._dimension}, mean_norm={self._mean.norm():.3f})"
