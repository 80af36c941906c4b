"""
Builder pattern for configuring clustering pipelines.

Provides a fluent interface for assembling a spectral clustering pipeline
(kernel, neighbor graph, Laplacian, embedding, K-means settings) without
spelling out every constructor argument.
"""

from typing import Union, Any
import numpy as np
import torch
from torch import Tensor

from .kmeans import KMeans
from .spectral import SpectralClustering
from ..base.interfaces import SimilarityKernel
from ..graph.affinity import SYMMETRIZE_RULES
from ..graph.laplacian import LAPLACIAN_MODES, ISOLATED_POLICIES
from ..exceptions import InvalidInputError


class ClusteringBuilder:
    """Fluent builder for spectral clustering and K-means estimators.

    Examples
    --------
    >>> model = (ClusteringBuilder()
    ...     .with_kernel('exponential')
    ...     .with_neighbors(3)
    ...     .with_laplacian('normalized')
    ...     .with_kmeans_plusplus_init()
    ...     .with_random_state(0)
    ...     .build(n_clusters=2))

    >>> kmeans = (ClusteringBuilder()
    ...     .with_random_init()
    ...     .with_max_iter(50)
    ...     .build_kmeans(n_clusters=3))
    """

    def __init__(self):
        """Initialize builder with defaults."""
        # Graph stage
        self._kernel: Union[str, SimilarityKernel] = 'exponential'
        self._kernel_params: dict = {}
        self._n_neighbors = 3
        self._symmetrize = 'union'
        self._include_self = False
        self._laplacian = 'unnormalized'
        self._isolated = 'raise'

        # Embedding stage
        self._normalize_rows = False
        self._drop_first = False

        # K-means stage
        self._init: Union[str, Tensor, np.ndarray] = 'k-means++'
        self._tol = 0.0
        self._max_iter = 300

        # Algorithm parameters
        self._verbose = 0
        self._random_state = None
        self._device = None
        self._dtype = torch.float64

    def with_kernel(self, kernel: Union[str, SimilarityKernel], **params: Any) -> 'ClusteringBuilder':
        """Set the similarity kernel ('exponential', 'rbf' or an instance)."""
        self._kernel = kernel
        self._kernel_params = params
        return self

    def with_neighbors(self, n_neighbors: int, symmetrize: str = 'union',
                       include_self: bool = False) -> 'ClusteringBuilder':
        """Set the k-NN affinity graph."""
        if symmetrize not in SYMMETRIZE_RULES:
            raise InvalidInputError(f"symmetrize must be one of {SYMMETRIZE_RULES}, "
                                    f"got {symmetrize!r}")
        self._n_neighbors = n_neighbors
        self._symmetrize = symmetrize
        self._include_self = include_self
        return self

    def with_mutual_neighbors(self, n_neighbors: int) -> 'ClusteringBuilder':
        """Keep only edges selected by both endpoints."""
        return self.with_neighbors(n_neighbors, symmetrize='mutual')

    def with_full_graph(self) -> 'ClusteringBuilder':
        """Use the dense similarity matrix as affinity."""
        self._n_neighbors = np.iinfo(np.int64).max
        return self

    def with_laplacian(self, mode: str = 'unnormalized',
                       isolated: str = 'raise') -> 'ClusteringBuilder':
        """Set the Laplacian variant and the isolated-node policy."""
        if mode not in LAPLACIAN_MODES:
            raise InvalidInputError(f"laplacian mode must be one of {LAPLACIAN_MODES}, got {mode!r}")
        if isolated not in ISOLATED_POLICIES:
            raise InvalidInputError(f"isolated must be one of {ISOLATED_POLICIES}, got {isolated!r}")
        self._laplacian = mode
        self._isolated = isolated
        return self

    def with_embedding(self, normalize_rows: bool = False,
                       drop_first: bool = False) -> 'ClusteringBuilder':
        """Set embedding post-processing."""
        self._normalize_rows = normalize_rows
        self._drop_first = drop_first
        return self

    def with_kmeans_init(self, init: Union[str, Tensor, np.ndarray]) -> 'ClusteringBuilder':
        """Set K-means initialization: 'k-means++', 'random' or initial centers."""
        if isinstance(init, str) and init not in ('k-means++', 'random'):
            raise InvalidInputError(f"init must be 'k-means++' or 'random', got {init!r}")
        self._init = init
        return self

    def with_random_init(self) -> 'ClusteringBuilder':
        """Use random initialization."""
        return self.with_kmeans_init('random')

    def with_kmeans_plusplus_init(self) -> 'ClusteringBuilder':
        """Use K-means++ initialization."""
        self._init = 'k-means++'
        return self

    def with_initial_centers(self, centers: Union[Tensor, np.ndarray]) -> 'ClusteringBuilder':
        """Start K-means from the given centers."""
        self._init = centers
        return self

    def with_assignment_convergence(self, tol: float = 0.0) -> 'ClusteringBuilder':
        """Fraction of labels allowed to change at convergence."""
        self._tol = tol
        return self

    def with_max_iter(self, max_iter: int) -> 'ClusteringBuilder':
        """Set maximum iterations."""
        self._max_iter = max_iter
        return self

    def with_verbose(self, verbose: int) -> 'ClusteringBuilder':
        """Set verbosity level."""
        self._verbose = verbose
        return self

    def with_random_state(self, random_state: Union[int, torch.Generator]) -> 'ClusteringBuilder':
        """Set random seed or generator."""
        self._random_state = random_state
        return self

    def with_device(self, device: Union[str, torch.device]) -> 'ClusteringBuilder':
        """Set computation device."""
        self._device = device
        return self

    def with_dtype(self, dtype: torch.dtype) -> 'ClusteringBuilder':
        """Set the precision of the graph and eigen stages."""
        self._dtype = dtype
        return self

    def build(self, n_clusters: int) -> SpectralClustering:
        """Build the spectral clustering estimator.

        Parameters
        ----------
        n_clusters : int
            Number of clusters

        Returns
        -------
        algorithm : SpectralClustering
            The configured, unfitted estimator
        """
        return SpectralClustering(
            n_clusters=n_clusters,
            n_neighbors=self._n_neighbors,
            kernel=self._kernel,
            kernel_params=dict(self._kernel_params),
            laplacian=self._laplacian,
            symmetrize=self._symmetrize,
            include_self=self._include_self,
            isolated=self._isolated,
            normalize_rows=self._normalize_rows,
            drop_first=self._drop_first,
            init=self._init,
            max_iter=self._max_iter,
            tol=self._tol,
            verbose=self._verbose,
            random_state=self._random_state,
            device=self._device,
            dtype=self._dtype
        )

    def build_kmeans(self, n_clusters: int) -> KMeans:
        """Build a plain K-means estimator from the K-means settings only."""
        return KMeans(
            n_clusters=n_clusters,
            init=self._init,
            max_iter=self._max_iter,
            tol=self._tol,
            verbose=self._verbose,
            random_state=self._random_state,
            device=self._device
        )


# Builder methods that take no argument; create_spectral accepts them as flags
_FLAG_OPTIONS = ('full_graph', 'random_init', 'kmeans_plusplus_init')


def create_spectral(n_clusters: int, **kwargs) -> SpectralClustering:
    """Create a spectral clustering estimator using the builder.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    **kwargs : dict
        Each key ``name`` calls ``with_<name>(value)`` on the builder,
        e.g. ``neighbors=5`` or ``laplacian='normalized'``. The argument-free
        options ``full_graph``, ``random_init`` and ``kmeans_plusplus_init``
        take a bool: True calls ``with_<name>()``, False leaves the default.

    Returns
    -------
    algorithm : SpectralClustering
    """
    builder = ClusteringBuilder()

    for key, value in kwargs.items():
        method = getattr(builder, f'with_{key}', None)
        if method is None:
            raise InvalidInputError(f"Unknown builder option: {key!r}")
        if key in _FLAG_OPTIONS:
            if not isinstance(value, bool):
                raise InvalidInputError(f"{key} takes True or False, got {value!r}")
            if value:
                method()
        else:
            method(value)

    return builder.build(n_clusters)
