"""
Input validation utilities.

Converts point sets to tensors, rejects ragged or non-finite input and
resolves random state into an explicit torch.Generator.
"""

from typing import Optional, Union, Sequence
import torch
from torch import Tensor
import numpy as np

from ..exceptions import InvalidInputError, NonSymmetricInputError


def _check_not_ragged(X: Sequence) -> None:
    """Raise if any row has a different length than the first."""
    if len(X) == 0:
        return
    first = X[0]
    if not hasattr(first, '__len__'):
        return
    expected = len(first)
    for i, row in enumerate(X):
        if not hasattr(row, '__len__') or len(row) != expected:
            got = len(row) if hasattr(row, '__len__') else 'a scalar'
            raise InvalidInputError(
                f"Point {i} has dimension {got}, expected {expected} "
                f"(dimension of point 0)"
            )


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: Optional[torch.dtype] = None,
                  device: Optional[torch.device] = None,
                  ensure_2d: bool = True,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1,
                  ensure_min_features: int = 1) -> Tensor:
    """Validate and convert input data to tensor.

    Args:
        X: Input data (tensor, numpy array, or list of points)
        dtype: Target floating dtype. None keeps the dtype of floating
               tensors and uses float32 for everything else.
        device: Target device
        ensure_2d: Whether to promote 1D input to a column and reject >2D
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required
        ensure_min_features: Minimum number of features required

    Returns:
        Validated tensor

    Raises:
        InvalidInputError: If validation fails
    """
    if isinstance(X, Tensor):
        target = dtype if dtype is not None else (
            X.dtype if X.is_floating_point() else torch.float32)
        X = X.to(dtype=target, device=device)
    elif isinstance(X, np.ndarray):
        if X.dtype == object:
            _check_not_ragged(list(X))
            X = np.asarray(X.tolist())
        X = torch.from_numpy(np.ascontiguousarray(X)).to(
            dtype=dtype or torch.float32, device=device)
    elif isinstance(X, (list, tuple)):
        _check_not_ragged(X)
        try:
            X = torch.tensor(np.asarray(X, dtype=np.float64),
                             dtype=dtype or torch.float32, device=device)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Cannot convert input to a point set: {exc}") from exc
    else:
        raise InvalidInputError(f"Cannot convert {type(X)} to tensor")

    if ensure_2d:
        if X.dim() == 1:
            X = X.unsqueeze(1)
        elif X.dim() != 2:
            raise InvalidInputError(f"Expected 2D array, got {X.dim()}D")

        n_samples, n_features = X.shape

        if n_samples < ensure_min_samples:
            raise InvalidInputError(f"Found {n_samples} samples, but need at least "
                                    f"{ensure_min_samples}")

        if n_features < ensure_min_features:
            raise InvalidInputError(f"Found {n_features} features, but need at least "
                                    f"{ensure_min_features}")

    if ensure_finite:
        if torch.isnan(X).any():
            raise InvalidInputError("Input contains NaN values")
        if torch.isinf(X).any():
            raise InvalidInputError("Input contains infinite values")

    return X


def validate_square_matrix(M: Union[Tensor, np.ndarray, list],
                           name: str = 'matrix',
                           dtype: Optional[torch.dtype] = None,
                           device: Optional[torch.device] = None) -> Tensor:
    """Validate an (n, n) finite matrix."""
    M = validate_data(M, dtype=dtype, device=device, ensure_2d=False)
    if M.dim() != 2 or M.shape[0] != M.shape[1]:
        raise InvalidInputError(f"{name} must be square 2D, got shape {tuple(M.shape)}")
    if M.shape[0] == 0:
        raise InvalidInputError(f"{name} is empty")
    return M


def is_symmetric(M: Tensor, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
    """Whether M equals its transpose within tolerance."""
    return bool(torch.allclose(M, M.transpose(0, 1), rtol=rtol, atol=atol))


def check_symmetric(M: Tensor, name: str = 'matrix',
                    rtol: float = 1e-5, atol: float = 1e-8) -> None:
    """Raise NonSymmetricInputError if M is not symmetric within tolerance."""
    if not is_symmetric(M, rtol=rtol, atol=atol):
        max_dev = (M - M.transpose(0, 1)).abs().max().item()
        raise NonSymmetricInputError(
            f"{name} is not symmetric (max |M - M^T| = {max_dev:.3e})"
        )


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples

    Raises:
        InvalidInputError: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise InvalidInputError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise InvalidInputError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InvalidInputError(f"n_clusters ({n_clusters}) cannot be larger than "
                                f"n_samples ({n_samples})")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create generator from random state.

    None draws a fresh seed from the global torch RNG so that callers who
    seed torch globally still get reproducible runs.

    Args:
        random_state: Seed, generator or None

    Returns:
        CPU generator
    """
    if random_state is None:
        generator = torch.Generator()
        generator.manual_seed(int(torch.randint(0, 2**31 - 1, (1,)).item()))
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def validate_init_params(init: Union[str, Tensor, np.ndarray, list],
                         n_clusters: int,
                         n_features: int) -> Union[str, Tensor]:
    """Validate initialization parameters.

    Args:
        init: Initialization method or initial centers
        n_clusters: Number of clusters
        n_features: Number of features

    Returns:
        Validated initialization
    """
    if isinstance(init, str):
        valid_methods = ['k-means++', 'random']
        if init not in valid_methods:
            raise InvalidInputError(f"init must be one of {valid_methods}, got '{init}'")
        return init

    init_tensor = validate_data(init, ensure_2d=True)
    if tuple(init_tensor.shape) != (n_clusters, n_features):
        raise InvalidInputError(f"init array must have shape ({n_clusters}, {n_features}), "
                                f"got {tuple(init_tensor.shape)}")
    return init_tensor
