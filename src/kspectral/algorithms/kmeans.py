"""
K-means clustering algorithm.

The classic K-means algorithm implemented using the modular framework. The
same estimator clusters raw points and spectral embeddings.
"""

from typing import Optional, List, Union
import numpy as np
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.data_structures import KMeansResult
from ..base.interfaces import ClusterRepresentation, ClusteringObjective
from ..representations.centroid import CentroidRepresentation
from ..assignments.hard import HardAssignment
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..initialization.random import RandomInit
from ..initialization.from_previous import FromPreviousInit
from ..utils.convergence import ChangeInAssignments
from ..utils.validation import validate_init_params
from ..updates.mean import MeanUpdater
from ..exceptions import InvalidInputError


class KMeansObjective(ClusteringObjective):
    """K-means objective: sum of squared distances to centroids."""

    def compute(self, points: Tensor, representations: List[ClusterRepresentation],
                assignments: Tensor) -> Tensor:
        """Compute within-cluster sum of squares."""
        total = torch.zeros((), dtype=points.dtype, device=points.device)

        for k, rep in enumerate(representations):
            cluster_points_mask = (assignments == k)
            if cluster_points_mask.any():
                cluster_points = points[cluster_points_mask]
                total = total + rep.distance_to_point(cluster_points).sum()

        return total

    @property
    def minimize(self) -> bool:
        return True


class KMeans(BaseClusteringAlgorithm):
    """K-means clustering algorithm.

    Partitions data into K clusters by alternating nearest-centroid
    assignment and centroid recomputation until the assignment vector stops
    changing or ``max_iter`` is reached.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    init : str or array-like, default='k-means++'
        Initialization method:
        - 'k-means++' : K-means++ initialization
        - 'random' : distinct input rows drawn uniformly without replacement
        - array of shape (n_clusters, n_features) : Use as initial centers
    max_iter : int, default=300
        Maximum number of iterations
    tol : float, default=0.0
        Fraction of labels allowed to change between consecutive iterations
        while still counting as converged; 0 requires identical assignments
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed or generator for the initialization
    device : str or torch.device, optional
        Device for computation (CPU/GPU)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Sum of squared distances to nearest cluster center
    n_iter_ : int
        Number of iterations run
    terminal_state_ : TerminalState
        CONVERGED or MAX_ITER_REACHED

    Notes
    -----
    A cluster that loses all its points keeps its previous centroid.
    """

    def __init__(self,
                 n_clusters: int,
                 init: Union[str, Tensor, np.ndarray] = 'k-means++',
                 max_iter: int = 300,
                 tol: float = 0.0,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """Initialize K-means algorithm."""
        if max_iter < 1:
            raise InvalidInputError(f"max_iter must be at least 1, got {max_iter}")
        super().__init__(
            n_clusters=n_clusters,
            max_iter=max_iter,
            tol=tol,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        self.init = init

        # Store labels for sklearn compatibility
        self.labels_ = None

    def _create_components(self) -> None:
        """Create K-means specific components."""
        self.assignment_strategy = HardAssignment()
        self.update_strategy = MeanUpdater()
        self.convergence_criterion = ChangeInAssignments(min_change_fraction=self.tol)
        self.objective = KMeansObjective()

    def _create_representations(self, data: Tensor,
                                generator: torch.Generator) -> List[ClusterRepresentation]:
        """Create centroid representations from the initialization strategy."""
        init = validate_init_params(self.init, self.n_clusters, data.shape[1])

        if isinstance(init, str):
            if init == 'k-means++':
                self.initialization_strategy = KMeansPlusPlusInit()
            else:
                self.initialization_strategy = RandomInit()
        else:
            self.initialization_strategy = FromPreviousInit(init)

        return self.initialization_strategy.initialize(
            data, self.n_clusters, generator=generator
        )

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'KMeans':
        """Fit K-means clustering.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            Training data
        y : Ignored
            Not used, present for API consistency

        Returns
        -------
        self : KMeans
            Fitted estimator
        """
        super().fit(X, y)
        self.labels_ = self.history_[-1].assignments.get_hard()
        return self

    def fit_predict(self, X: Tensor, y: Optional[Tensor] = None) -> Tensor:
        """Fit and return labels."""
        self.fit(X, y)
        return self.labels_

    def score(self, X: Tensor, y: Optional[Tensor] = None) -> float:
        """Opposite of the value of X on the K-means objective.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            New data
        y : Ignored
            Not used

        Returns
        -------
        score : float
            Negative of sum of squared distances to centers
        """
        X = self._validate_data(X)
        labels = self.predict(X)
        return -self.objective.compute(X, self.representations, labels).item()

    def result(self) -> KMeansResult:
        """Snapshot of the fitted run."""
        self._check_fitted()
        return KMeansResult(
            labels=self.labels_,
            centers=self.cluster_centers_,
            n_iter=self.n_iter_,
            terminal_state=self.terminal_state_,
            inertia=self.inertia_
        )

    def get_params(self, deep: bool = True) -> dict:
        params = super().get_params(deep)
        params['init'] = self.init
        return params


def kmeans(points: Union[Tensor, np.ndarray, list],
           n_clusters: int,
           init: Union[str, Tensor, np.ndarray] = 'k-means++',
           max_iter: int = 300,
           tol: float = 0.0,
           random_state: Optional[Union[int, torch.Generator]] = None,
           device: Optional[Union[str, torch.device]] = None,
           verbose: int = 0) -> KMeansResult:
    """Run K-means once and return labels, centers, iteration count and terminal state."""
    model = KMeans(n_clusters=n_clusters, init=init, max_iter=max_iter, tol=tol,
                   verbose=verbose, random_state=random_state, device=device)
    return model.fit(points).result()
