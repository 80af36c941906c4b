"""
Similarity kernels turning a point set into a dense similarity matrix.

Both kernels depend on the pair (x_i, x_j) only through ||x_i - x_j||, so
the similarity matrix is symmetric by construction.
"""

from typing import Optional, Union
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import SimilarityKernel
from ..exceptions import InvalidInputError
from ..utils.metrics import pairwise_distances
from ..utils.validation import validate_data


class ExponentialKernel(SimilarityKernel):
    """S[i][j] = exp(-||x_i - x_j|| / scale).

    With the default scale of 1 this is exp(-||x_i - x_j||), and every
    self-similarity is exactly 1.
    """

    def __init__(self, scale: float = 1.0):
        if scale <= 0:
            raise InvalidInputError(f"scale must be positive, got {scale}")
        self.scale = scale

    def from_distances(self, distances: Tensor) -> Tensor:
        return torch.exp(-distances / self.scale)

    def __repr__(self) -> str:
        return f"ExponentialKernel(scale={self.scale})"


class GaussianKernel(SimilarityKernel):
    """S[i][j] = exp(-||x_i - x_j||² / (2 sigma²)), the RBF kernel."""

    def __init__(self, sigma: float = 1.0):
        if sigma <= 0:
            raise InvalidInputError(f"sigma must be positive, got {sigma}")
        self.sigma = sigma

    def from_distances(self, distances: Tensor) -> Tensor:
        return torch.exp(-(distances * distances) / (2.0 * self.sigma ** 2))

    def __repr__(self) -> str:
        return f"GaussianKernel(sigma={self.sigma})"


_KERNELS = {
    'exponential': ExponentialKernel,
    'rbf': GaussianKernel,
    'gaussian': GaussianKernel,
}


def get_kernel(kernel: Union[str, SimilarityKernel] = 'exponential',
               **kwargs) -> SimilarityKernel:
    """Resolve a kernel name (or instance) into a SimilarityKernel.

    Args:
        kernel: 'exponential', 'rbf'/'gaussian', or a SimilarityKernel instance
        **kwargs: Constructor arguments for named kernels (scale, sigma)
    """
    if isinstance(kernel, SimilarityKernel):
        return kernel
    if isinstance(kernel, str) and kernel in _KERNELS:
        return _KERNELS[kernel](**kwargs)
    raise InvalidInputError(f"Unknown kernel: {kernel!r}. "
                            f"Expected one of {sorted(_KERNELS)} or a SimilarityKernel")


def similarity_matrix(points: Union[Tensor, np.ndarray, list],
                      kernel: Union[str, SimilarityKernel] = 'exponential',
                      dtype: torch.dtype = torch.float64,
                      device: Optional[torch.device] = None,
                      **kernel_kwargs) -> Tensor:
    """Dense pairwise similarity matrix of a point set.

    Args:
        points: n points in R^d (tensor, array or list of sequences)
        kernel: Kernel name or instance
        dtype: Floating dtype of the result
        device: Device of the result
        **kernel_kwargs: Passed to the kernel constructor

    Returns:
        (n, n) symmetric similarity matrix

    Raises:
        InvalidInputError: If any point's dimensionality differs from the
            first point's, or the input is empty or non-finite
    """
    X = validate_data(points, dtype=dtype, device=device, ensure_2d=True)
    return get_kernel(kernel, **kernel_kwargs).from_distances(pairwise_distances(X))
