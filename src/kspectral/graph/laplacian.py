"""
Degree vector and graph Laplacians of an affinity matrix.

Unnormalized:  L = D - A
Normalized:    L_sym = D^(-1/2) (D - A) D^(-1/2)

d^(-1/2) is undefined for isolated nodes (degree 0). The ``isolated``
policy decides what happens then: 'raise' (default) raises
DegenerateGraphError, 'zero' substitutes 0 for d^(-1/2), which leaves the
isolated node's row and column of L_sym all zero.
"""

from typing import List, Tuple, Union
import warnings
import numpy as np
import torch
from torch import Tensor

from ..exceptions import DegenerateGraphError, InvalidInputError
from ..utils.validation import validate_square_matrix, check_symmetric

LAPLACIAN_MODES = ('unnormalized', 'normalized')
ISOLATED_POLICIES = ('raise', 'zero')


def degree_vector(A: Tensor) -> Tensor:
    """Row sums of the affinity matrix."""
    return A.sum(dim=1)


def isolated_nodes(degrees: Tensor) -> List[int]:
    """Indices of nodes with zero degree."""
    return torch.nonzero(degrees == 0, as_tuple=False).flatten().tolist()


def resolve_mode(mode: Union[str, bool]) -> bool:
    """Map a Laplacian mode flag onto ``normalized``."""
    if isinstance(mode, bool):
        return mode
    if mode not in LAPLACIAN_MODES:
        raise InvalidInputError(f"laplacian mode must be one of {LAPLACIAN_MODES}, got {mode!r}")
    return mode == 'normalized'


def graph_laplacian(A: Union[Tensor, np.ndarray, list],
                    normalized: Union[bool, str] = False,
                    isolated: str = 'raise',
                    return_degrees: bool = False) -> Union[Tensor, Tuple[Tensor, Tensor]]:
    """Compute the graph Laplacian of an affinity matrix.

    Args:
        A: (n, n) symmetric, non-negative affinity matrix
        normalized: False/'unnormalized' for D - A, True/'normalized' for
                    the symmetric normalized Laplacian
        isolated: Policy for zero-degree nodes in normalized mode,
                  'raise' or 'zero'
        return_degrees: Also return the degree vector

    Returns:
        (n, n) Laplacian, and the (n,) degree vector if requested

    Raises:
        DegenerateGraphError: Normalized mode with an isolated node and
            ``isolated='raise'``
        NonSymmetricInputError: If A is not symmetric
    """
    if isolated not in ISOLATED_POLICIES:
        raise InvalidInputError(f"isolated must be one of {ISOLATED_POLICIES}, got {isolated!r}")
    normalized = resolve_mode(normalized)

    A = validate_square_matrix(A, name='affinity matrix')
    check_symmetric(A, name='affinity matrix')
    if (A < 0).any():
        raise InvalidInputError("affinity matrix has negative entries")

    degrees = degree_vector(A)
    L = torch.diag(degrees) - A

    if normalized:
        lonely = isolated_nodes(degrees)
        if lonely:
            if isolated == 'raise':
                raise DegenerateGraphError(
                    f"{len(lonely)} isolated node(s) have zero degree, "
                    f"d^(-1/2) is undefined: {lonely[:10]}",
                    isolated=lonely
                )
            warnings.warn(f"Substituting 0 for d^(-1/2) on {len(lonely)} isolated node(s)")

        inv_sqrt = torch.zeros_like(degrees)
        connected = degrees > 0
        inv_sqrt[connected] = degrees[connected].rsqrt()
        L = inv_sqrt.unsqueeze(1) * L * inv_sqrt.unsqueeze(0)

    if return_degrees:
        return L, degrees
    return L
