"""
Linear algebra utilities for the spectral pipeline.

Symmetric eigendecomposition with an explicit symmetry precondition and a
deterministic ascending ordering of the eigenpairs.
"""

from typing import Tuple
import torch
from torch import Tensor
import warnings

from .validation import check_symmetric


def safe_eigh(matrix: Tensor, rtol: float = 1e-5, atol: float = 1e-8) -> Tuple[Tensor, Tensor]:
    """Compute eigendecomposition of a symmetric matrix.

    Args:
        matrix: (n, n) symmetric matrix
        rtol: Relative tolerance for the symmetry check
        atol: Absolute tolerance for the symmetry check

    Returns:
        eigenvalues (n,), eigenvectors (n, n) with eigenvectors as columns,
        in the order returned by the solver

    Raises:
        NonSymmetricInputError: If the matrix is not symmetric within tolerance
    """
    check_symmetric(matrix, name='Laplacian', rtol=rtol, atol=atol)

    # eigh only reads one triangle; average out last-ulp asymmetry first
    matrix_sym = 0.5 * (matrix + matrix.transpose(0, 1))

    try:
        return torch.linalg.eigh(matrix_sym)
    except RuntimeError as e:
        if matrix_sym.dtype == torch.float64:
            raise
        warnings.warn(f"Eigendecomposition failed in {matrix_sym.dtype}: {e}. "
                      f"Retrying in float64.")
        eigvals, eigvecs = torch.linalg.eigh(matrix_sym.double())
        return eigvals.to(matrix.dtype), eigvecs.to(matrix.dtype)


def sorted_eigh(matrix: Tensor, rtol: float = 1e-5, atol: float = 1e-8) -> Tuple[Tensor, Tensor]:
    """Symmetric eigendecomposition with eigenpairs sorted ascending.

    The sort is stable, so eigenvalues the solver reports as exactly equal
    keep the solver's relative order.
    """
    eigvals, eigvecs = safe_eigh(matrix, rtol=rtol, atol=atol)
    order = torch.sort(eigvals, stable=True).indices
    return eigvals[order], eigvecs[:, order]


def zero_eigenvalue_multiplicity(eigenvalues: Tensor, tol: float = 1e-8) -> int:
    """Number of eigenvalues within tol (scaled by the spectral radius) of zero.

    For a graph Laplacian this counts connected components.
    """
    scale = max(1.0, eigenvalues.abs().max().item())
    return int((eigenvalues.abs() <= tol * scale).sum().item())
