"""
Initialization from user-supplied centers or a previous solution.

Useful for warm starts and for deterministic tests.
"""

from typing import List, Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..representations.centroid import CentroidRepresentation
from ..base.data_structures import ClusterState


class FromPreviousInit(InitializationStrategy):
    """Initialize from previous cluster centers or custom starting points.

    Accepts either:
    - A tensor of shape (n_clusters, dimension) with initial centers
    - A ClusterState object from a previous run
    """

    def __init__(self, initial_state: Union[Tensor, ClusterState]):
        """
        Args:
            initial_state: Previous solution to use for initialization
        """
        self.initial_state = initial_state

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize from previous state.

        Args:
            points: (n, d) data points (used for validation)
            n_clusters: Expected number of clusters
            generator: Unused, initialization is deterministic

        Returns:
            List of initialized representations
        """
        dimension = points.shape[1]
        device = points.device

        if isinstance(self.initial_state, ClusterState):
            centers = self.initial_state.means
        elif isinstance(self.initial_state, Tensor):
            centers = self.initial_state
        else:
            raise TypeError(f"Unknown initial_state type: {type(self.initial_state)}")

        centers = centers.to(device=device, dtype=points.dtype)

        if centers.shape[0] != n_clusters:
            raise ValueError(f"Initial centers has {centers.shape[0]} clusters, "
                             f"but n_clusters={n_clusters}")
        if centers.shape[1] != dimension:
            raise ValueError(f"Initial centers has dimension {centers.shape[1]}, "
                             f"but data has dimension {dimension}")

        representations = []
        for k in range(n_clusters):
            rep = CentroidRepresentation(dimension, device, dtype=points.dtype)
            rep.mean = centers[k].clone()
            representations.append(rep)

        return representations
