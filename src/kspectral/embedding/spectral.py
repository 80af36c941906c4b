"""
Spectral embedding of a graph Laplacian.

The embedding is the (n, k) matrix whose columns are the eigenvectors of
the k smallest eigenvalues, in ascending eigenvalue order. For the
unnormalized Laplacian the first column is the (constant) eigenvector of
eigenvalue 0; it is kept unless ``drop_first`` is set.

Eigenvector signs, and the basis chosen inside a repeated eigenvalue, are
whatever the solver returns. Consumers must not depend on them.
"""

from typing import Optional, Union
import warnings
import numpy as np
import torch
from torch import Tensor

from ..base.data_structures import SpectralEmbeddingResult
from ..exceptions import InvalidInputError
from ..utils.linalg import sorted_eigh, zero_eigenvalue_multiplicity
from ..utils.validation import validate_square_matrix


def spectral_embedding(laplacian: Union[Tensor, np.ndarray, list],
                       n_components: int,
                       normalize_rows: bool = False,
                       drop_first: bool = False,
                       rtol: float = 1e-5,
                       atol: float = 1e-8) -> SpectralEmbeddingResult:
    """Eigendecompose a Laplacian and keep its k smallest eigenvectors.

    Args:
        laplacian: (n, n) symmetric matrix
        n_components: Embedding dimension k
        normalize_rows: Scale each embedding row to unit norm
                        (Ng, Jordan & Weiss); zero rows stay zero
        drop_first: Skip the eigenvector of the smallest eigenvalue and
                    take the next k instead
        rtol: Relative tolerance of the symmetry check
        atol: Absolute tolerance of the symmetry check

    Returns:
        SpectralEmbeddingResult with the embedding and all eigenpairs,
        eigenvalues ascending

    Raises:
        NonSymmetricInputError: If the matrix is not symmetric within tolerance
        InvalidInputError: If k is outside [1, n] (or [1, n - 1] with drop_first)
    """
    L = validate_square_matrix(laplacian, name='Laplacian')
    n = L.shape[0]
    offset = 1 if drop_first else 0

    if isinstance(n_components, bool) or not isinstance(n_components, (int, np.integer)) \
            or not 1 <= n_components <= n - offset:
        raise InvalidInputError(f"n_components must be an int in [1, {n - offset}], "
                                f"got {n_components!r}")

    eigenvalues, eigenvectors = sorted_eigh(L, rtol=rtol, atol=atol)

    n_zero = zero_eigenvalue_multiplicity(eigenvalues)
    if n_zero > n_components + offset:
        warnings.warn(f"Laplacian has {n_zero} (near-)zero eigenvalues but only "
                      f"{n_components} components were requested; the graph has more "
                      f"connected components than clusters and the embedding basis "
                      f"is not unique")

    embedding = eigenvectors[:, offset:offset + n_components]

    if normalize_rows:
        norms = embedding.norm(dim=1, keepdim=True)
        embedding = embedding / torch.where(norms > 0, norms, torch.ones_like(norms))
    else:
        embedding = embedding.clone()

    return SpectralEmbeddingResult(
        embedding=embedding,
        eigenvalues=eigenvalues,
        eigenvectors=eigenvectors
    )


def estimate_n_clusters(eigenvalues: Tensor,
                        max_clusters: Optional[int] = None,
                        min_clusters: int = 1) -> int:
    """Eigengap heuristic for the number of clusters.

    Returns the k in [min_clusters, max_clusters] maximizing
    lambda_{k+1} - lambda_k over the ascending eigenvalues.
    """
    eigenvalues = torch.sort(torch.as_tensor(eigenvalues)).values
    n = eigenvalues.shape[0]
    if n < 2:
        return 1
    if max_clusters is None:
        max_clusters = n - 1
    max_clusters = min(max_clusters, n - 1)
    if not 1 <= min_clusters <= max_clusters:
        raise InvalidInputError(f"Need 1 <= min_clusters <= max_clusters, got "
                                f"{min_clusters} and {max_clusters}")

    gaps = eigenvalues[1:max_clusters + 1] - eigenvalues[:max_clusters]
    best = int(torch.argmax(gaps[min_clusters - 1:]).item())
    return best + min_clusters
