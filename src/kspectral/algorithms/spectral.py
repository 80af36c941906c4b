"""
Spectral clustering.

Points -> similarity matrix -> k-NN affinity -> graph Laplacian ->
spectral embedding -> K-means on the embedding rows.

Every intermediate matrix is kept on the fitted estimator (and on the
result of ``spectral_clustering``) for inspection.
"""

from typing import Optional, Union, Dict, Any
import numpy as np
import torch
from torch import Tensor

from .kmeans import KMeans
from ..base.data_structures import SpectralClusteringResult, TerminalState
from ..base.interfaces import SimilarityKernel
from ..embedding.spectral import spectral_embedding
from ..exceptions import NotFittedError
from ..graph.affinity import knn_affinity
from ..graph.kernels import get_kernel
from ..graph.laplacian import graph_laplacian, resolve_mode
from ..utils.device import parse_device
from ..utils.metrics import pairwise_distances
from ..utils.validation import validate_data, check_n_clusters


class SpectralClustering:
    """Spectral clustering with a k-NN affinity graph.

    Parameters
    ----------
    n_clusters : int
        Number of clusters, also the embedding dimension
    n_neighbors : int, default=3
        Neighbors kept per node in the affinity graph (self excluded);
        n_neighbors >= n_samples keeps the full similarity matrix
    kernel : str or SimilarityKernel, default='exponential'
        'exponential' for exp(-||x_i - x_j|| / scale), 'rbf' for
        exp(-||x_i - x_j||² / (2 sigma²)), or a kernel instance
    kernel_params : dict, optional
        Constructor arguments for a named kernel
    laplacian : {'unnormalized', 'normalized'}, default='unnormalized'
        Which Laplacian to embed
    symmetrize : {'union', 'mutual'}, default='union'
        How one-sided k-NN selections become undirected edges
    include_self : bool, default=False
        Whether a node's own column competes for its top-k slots
    isolated : {'raise', 'zero'}, default='raise'
        Isolated-node policy for the normalized Laplacian
    normalize_rows : bool, default=False
        Row-normalize the embedding before K-means
    drop_first : bool, default=False
        Skip the eigenvector of the smallest eigenvalue
    init, max_iter, tol : passed to KMeans
    verbose : int, default=0
    random_state : int or torch.Generator, optional
        Seed or generator for the K-means initialization
    device : str or torch.device, optional
    dtype : torch.dtype, default=torch.float64
        Precision of the graph and eigen stages

    Attributes
    ----------
    similarity_matrix_, affinity_matrix_, degrees_, laplacian_,
    eigenvalues_, eigenvectors_, embedding_ : Tensor
        Intermediate artifacts of the last fit
    labels_ : Tensor of shape (n_samples,)
    cluster_centers_ : Tensor of shape (n_clusters, n_clusters)
        Centroids in embedding space
    n_iter_ : int
    terminal_state_ : TerminalState
    kmeans_ : KMeans
        The fitted K-means estimator
    """

    def __init__(self,
                 n_clusters: int,
                 n_neighbors: int = 3,
                 kernel: Union[str, SimilarityKernel] = 'exponential',
                 kernel_params: Optional[Dict[str, Any]] = None,
                 laplacian: str = 'unnormalized',
                 symmetrize: str = 'union',
                 include_self: bool = False,
                 isolated: str = 'raise',
                 normalize_rows: bool = False,
                 drop_first: bool = False,
                 init: Union[str, Tensor, np.ndarray] = 'k-means++',
                 max_iter: int = 300,
                 tol: float = 0.0,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None,
                 dtype: torch.dtype = torch.float64):
        self.n_clusters = n_clusters
        self.n_neighbors = n_neighbors
        self.kernel = kernel
        self.kernel_params = kernel_params
        self.laplacian = laplacian
        self.symmetrize = symmetrize
        self.include_self = include_self
        self.isolated = isolated
        self.normalize_rows = normalize_rows
        self.drop_first = drop_first
        self.init = init
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.random_state = random_state
        self.device = parse_device(device)
        self.dtype = dtype

        self.fitted_ = False
        self.kmeans_: Optional[KMeans] = None
        self.labels_ = None

    def fit(self, X: Union[Tensor, np.ndarray, list],
            y: Optional[Tensor] = None) -> 'SpectralClustering':
        """Run the full pipeline on X.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
        y : Ignored

        Returns
        -------
        self : SpectralClustering
        """
        normalized = resolve_mode(self.laplacian)
        X = validate_data(X, dtype=self.dtype, device=self.device)
        check_n_clusters(self.n_clusters, X.shape[0])

        kernel = get_kernel(self.kernel, **(self.kernel_params or {}))

        if self.verbose:
            print(f"Building {kernel!r} similarity for {X.shape[0]} points...")
        self.similarity_matrix_ = kernel.from_distances(pairwise_distances(X))

        self.affinity_matrix_ = knn_affinity(
            self.similarity_matrix_,
            n_neighbors=self.n_neighbors,
            symmetrize=self.symmetrize,
            include_self=self.include_self
        )

        self.laplacian_, self.degrees_ = graph_laplacian(
            self.affinity_matrix_,
            normalized=normalized,
            isolated=self.isolated,
            return_degrees=True
        )

        embedding = spectral_embedding(
            self.laplacian_,
            n_components=self.n_clusters,
            normalize_rows=self.normalize_rows,
            drop_first=self.drop_first
        )
        self.eigenvalues_ = embedding.eigenvalues
        self.eigenvectors_ = embedding.eigenvectors
        self.embedding_ = embedding.embedding

        if self.verbose:
            head = ', '.join(f"{v:.4g}" for v in self.eigenvalues_[:self.n_clusters + 1].tolist())
            print(f"Smallest eigenvalues: {head}")

        self.kmeans_ = KMeans(
            n_clusters=self.n_clusters,
            init=self.init,
            max_iter=self.max_iter,
            tol=self.tol,
            verbose=self.verbose,
            random_state=self.random_state,
            device=self.device
        )
        self.labels_ = self.kmeans_.fit_predict(self.embedding_)
        self.fitted_ = True
        return self

    def fit_predict(self, X: Union[Tensor, np.ndarray, list],
                    y: Optional[Tensor] = None) -> Tensor:
        """Fit and return cluster labels."""
        return self.fit(X, y).labels_

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise NotFittedError("SpectralClustering must be fitted first")

    @property
    def cluster_centers_(self) -> Tensor:
        self._check_fitted()
        return self.kmeans_.cluster_centers_

    @property
    def n_iter_(self) -> int:
        self._check_fitted()
        return self.kmeans_.n_iter_

    @property
    def terminal_state_(self) -> TerminalState:
        self._check_fitted()
        return self.kmeans_.terminal_state_

    def result(self) -> SpectralClusteringResult:
        """All artifacts of the last fit."""
        self._check_fitted()
        return SpectralClusteringResult(
            labels=self.labels_,
            similarity_matrix=self.similarity_matrix_,
            affinity_matrix=self.affinity_matrix_,
            degrees=self.degrees_,
            laplacian=self.laplacian_,
            eigenvalues=self.eigenvalues_,
            eigenvectors=self.eigenvectors_,
            embedding=self.embedding_,
            centers=self.cluster_centers_,
            n_iter=self.n_iter_,
            terminal_state=self.terminal_state_
        )

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'n_neighbors': self.n_neighbors,
            'kernel': self.kernel,
            'kernel_params': self.kernel_params,
            'laplacian': self.laplacian,
            'symmetrize': self.symmetrize,
            'include_self': self.include_self,
            'isolated': self.isolated,
            'normalize_rows': self.normalize_rows,
            'drop_first': self.drop_first,
            'init': self.init,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device,
            'dtype': self.dtype
        }

    def set_params(self, **params) -> 'SpectralClustering':
        """Set parameters (sklearn compatibility)."""
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Invalid parameter {key!r} for SpectralClustering")
            if key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        return self


def spectral_clustering(points: Union[Tensor, np.ndarray, list],
                        n_clusters: int,
                        n_neighbors: int = 3,
                        laplacian: str = 'unnormalized',
                        random_state: Optional[Union[int, torch.Generator]] = None,
                        **kwargs) -> SpectralClusteringResult:
    """Cluster points spectrally and return labels with every intermediate matrix.

    A pure function of its inputs and ``random_state``. Extra keyword
    arguments are forwarded to SpectralClustering.
    """
    model = SpectralClustering(n_clusters=n_clusters, n_neighbors=n_neighbors,
                               laplacian=laplacian, random_state=random_state, **kwargs)
    return model.fit(points).result()
