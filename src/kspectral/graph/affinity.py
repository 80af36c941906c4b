"""
k-nearest-neighbor sparsification of a similarity matrix.

Each row keeps the columns of its m largest similarities; the kept edges
are then symmetrized. Under the default union rule an edge survives when
either endpoint selected the other, so a node can end up with more than m
neighbors. Under the mutual rule both endpoints must have selected each
other.
"""

from typing import Union
import numpy as np
import torch
from torch import Tensor

from ..exceptions import InvalidInputError
from ..utils.validation import validate_square_matrix, check_symmetric

SYMMETRIZE_RULES = ('union', 'mutual')


def knn_mask(S: Tensor, n_neighbors: int, include_self: bool = False) -> Tensor:
    """Boolean (n, n) mask of each row's top-m columns, before symmetrization.

    Columns are ranked by descending similarity; equal similarities keep
    ascending column order (stable sort).
    """
    n = S.shape[0]
    scores = S
    if not include_self:
        scores = S.clone()
        scores.fill_diagonal_(-float('inf'))

    order = torch.sort(scores, dim=1, descending=True, stable=True).indices
    top = order[:, :n_neighbors]

    mask = torch.zeros(n, n, dtype=torch.bool, device=S.device)
    mask.scatter_(1, top, True)

    if not include_self:
        mask.fill_diagonal_(False)
    return mask


def knn_affinity(S: Union[Tensor, np.ndarray, list],
                 n_neighbors: int = 3,
                 symmetrize: str = 'union',
                 include_self: bool = False) -> Tensor:
    """Build the k-NN affinity matrix of a similarity matrix.

    Args:
        S: (n, n) symmetric similarity matrix
        n_neighbors: Neighbors kept per row (m). When m >= n the graph is
                     fully connected and a copy of S is returned unchanged.
        symmetrize: 'union' (edge if either endpoint selects the other) or
                    'mutual' (edge only if both do)
        include_self: Whether a node's own column competes for its top-m slots.
                      By default the diagonal is excluded from the ranking
                      and is 0 in the result, so m counts other points.

    Returns:
        (n, n) symmetric affinity matrix whose entries are 0 or S[i][j]

    Raises:
        InvalidInputError: For a non-square matrix, m < 1 or an unknown rule
        NonSymmetricInputError: If S is not symmetric
    """
    if symmetrize not in SYMMETRIZE_RULES:
        raise InvalidInputError(f"symmetrize must be one of {SYMMETRIZE_RULES}, "
                                f"got {symmetrize!r}")
    if isinstance(n_neighbors, bool) or not isinstance(n_neighbors, (int, np.integer)) \
            or n_neighbors < 1:
        raise InvalidInputError(f"n_neighbors must be a positive int, got {n_neighbors!r}")

    S = validate_square_matrix(S, name='similarity matrix')
    check_symmetric(S, name='similarity matrix')
    n = S.shape[0]

    if n_neighbors >= n:
        return S.clone()

    mask = knn_mask(S, int(n_neighbors), include_self=include_self)
    if symmetrize == 'union':
        mask = mask | mask.transpose(0, 1)
    else:
        mask = mask & mask.transpose(0, 1)

    return torch.where(mask, S, torch.zeros_like(S))
