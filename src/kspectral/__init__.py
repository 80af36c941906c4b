"""
KSpectral: spectral clustering on k-nearest-neighbor graphs.

The pipeline runs in stages, each usable on its own:
- Similarity kernel over pairwise distances
- Sparse k-NN affinity graph
- Unnormalized or symmetric normalized graph Laplacian
- Spectral embedding from the smallest eigenvectors
- K-means on the embedding rows

Example usage:
    >>> import torch
    >>> from kspectral import SpectralClustering
    >>>
    >>> # Generate sample data
    >>> X = torch.randn(200, 2)
    >>>
    >>> # Fit spectral clustering
    >>> model = SpectralClustering(n_clusters=2, n_neighbors=5, random_state=0)
    >>> labels = model.fit_predict(X)
    >>>
    >>> # Inspect intermediate matrices
    >>> model.laplacian_.shape
    torch.Size([200, 200])
"""

__version__ = '0.1.0'

# Import main algorithms
from .algorithms.kmeans import KMeans, kmeans
from .algorithms.spectral import SpectralClustering, spectral_clustering
from .algorithms.builder import ClusteringBuilder, create_spectral

# Pipeline stages
from .graph import (
    ExponentialKernel,
    GaussianKernel,
    similarity_matrix,
    knn_affinity,
    graph_laplacian
)
from .embedding import spectral_embedding, estimate_n_clusters

# Convenience imports
from .base import (
    TerminalState,
    KMeansResult,
    SpectralEmbeddingResult,
    SpectralClusteringResult
)
from .exceptions import (
    KSpectralError,
    InvalidInputError,
    DegenerateGraphError,
    NonSymmetricInputError,
    NotFittedError,
    ConvergenceNotReached
)

__all__ = [
    # Algorithms
    'KMeans',
    'kmeans',
    'SpectralClustering',
    'spectral_clustering',

    # Builder
    'ClusteringBuilder',
    'create_spectral',

    # Pipeline stages
    'ExponentialKernel',
    'GaussianKernel',
    'similarity_matrix',
    'knn_affinity',
    'graph_laplacian',
    'spectral_embedding',
    'estimate_n_clusters',

    # Results
    'TerminalState',
    'KMeansResult',
    'SpectralEmbeddingResult',
    'SpectralClusteringResult',

    # Errors
    'KSpectralError',
    'InvalidInputError',
    'DegenerateGraphError',
    'NonSymmetricInputError',
    'NotFittedError',
    'ConvergenceNotReached',

    # Version
    '__version__'
]
