"""Utility functions for spectral clustering."""

from .linalg import (
    safe_eigh,
    sorted_eigh,
    zero_eigenvalue_multiplicity
)

from .convergence import ChangeInAssignments

from .metrics import (
    pairwise_distances,
    inertia,
    contingency_matrix,
    adjusted_rand_score,
    clustering_accuracy
)

from .validation import (
    validate_data,
    validate_square_matrix,
    is_symmetric,
    check_symmetric,
    check_n_clusters,
    check_random_state,
    validate_init_params
)

from .device import (
    get_default_device,
    parse_device
)

__all__ = [
    # Linear algebra
    'safe_eigh',
    'sorted_eigh',
    'zero_eigenvalue_multiplicity',

    # Convergence criteria
    'ChangeInAssignments',

    # Metrics
    'pairwise_distances',
    'inertia',
    'contingency_matrix',
    'adjusted_rand_score',
    'clustering_accuracy',

    # Validation
    'validate_data',
    'validate_square_matrix',
    'is_symmetric',
    'check_symmetric',
    'check_n_clusters',
    'check_random_state',
    'validate_init_params',

    # Device management
    'get_default_device',
    'parse_device'
]
