"""Graph construction: similarity kernels, k-NN affinity and Laplacians."""

from .kernels import (
    ExponentialKernel,
    GaussianKernel,
    get_kernel,
    similarity_matrix
)
from .affinity import knn_affinity, knn_mask
from .laplacian import (
    degree_vector,
    graph_laplacian,
    isolated_nodes
)

__all__ = [
    'ExponentialKernel',
    'GaussianKernel',
    'get_kernel',
    'similarity_matrix',
    'knn_affinity',
    'knn_mask',
    'degree_vector',
    'graph_laplacian',
    'isolated_nodes'
]
