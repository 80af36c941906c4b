"""
Base class for iterative clustering algorithms in kspectral.

Provides the common algorithmic skeleton for alternating optimization
between assignment and update steps.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Union
import torch
from torch import Tensor
import time
import warnings

from .interfaces import (
    ClusterRepresentation, AssignmentStrategy, ParameterUpdater,
    InitializationStrategy, ConvergenceCriterion, ClusteringObjective
)
from .data_structures import (
    ClusterState, AssignmentMatrix, AlgorithmState, TerminalState
)
from ..exceptions import ConvergenceNotReached, NotFittedError
from ..utils.device import parse_device
from ..utils.validation import validate_data, check_n_clusters, check_random_state


class BaseClusteringAlgorithm:
    """Base class implementing the alternating optimization framework.

    A run moves through Uninitialized -> Initialized -> Iterating and ends
    in one of the terminal states recorded in ``terminal_state_``.

    Subclasses need to specify:
    - Cluster representation type
    - Assignment strategy
    - Parameter update strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function
    """

    def __init__(self,
                 n_clusters: int,
                 max_iter: int = 300,
                 tol: float = 0.0,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            n_clusters: Number of clusters K
            max_iter: Maximum iterations
            tol: Convergence tolerance
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Seed or torch.Generator used for initialization
            device: Torch device (None for auto-detect)
        """
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.random_state = random_state
        self.device = parse_device(device)

        # These will be set by subclasses
        self.representations: Optional[List[ClusterRepresentation]] = None
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.update_strategy: Optional[ParameterUpdater] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Algorithm state
        self.fitted_ = False
        self.n_iter_ = 0
        self.history_ = []
        self.terminal_state_: Optional[TerminalState] = None

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.update_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    @abstractmethod
    def _create_representations(self, data: Tensor,
                                generator: torch.Generator) -> List[ClusterRepresentation]:
        """Create the initial cluster representations.

        Args:
            data: (n, d) data tensor
            generator: Random source for the initialization strategy

        Returns:
            List of K cluster representations
        """
        pass

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'BaseClusteringAlgorithm':
        """Fit the clustering model.

        Args:
            X: (n, d) data tensor
            y: Ignored (for sklearn compatibility)

        Returns:
            Self
        """
        return self._fit(X)

    def fit_predict(self, X: Tensor, y: Optional[Tensor] = None) -> Tensor:
        """Fit and return cluster assignments.

        Args:
            X: (n, d) data tensor
            y: Ignored

        Returns:
            (n,) tensor of cluster assignments
        """
        self._fit(X)
        return self.history_[-1].assignments.get_hard()

    def predict(self, X: Tensor) -> Tensor:
        """Predict cluster assignments for new data.

        Args:
            X: (n, d) data tensor

        Returns:
            (n,) tensor of cluster assignments
        """
        self._check_fitted()

        X = self._validate_data(X)

        assignments = self.assignment_strategy.compute_assignments(
            X, self.representations
        )

        return AssignmentMatrix(assignments, self.n_clusters).get_hard()

    def _fit(self, X: Tensor) -> 'BaseClusteringAlgorithm':
        """Internal fit method implementing the alternating optimization."""
        X = self._validate_data(X)
        n_points = X.shape[0]
        check_n_clusters(self.n_clusters, n_points)

        generator = check_random_state(self.random_state)

        self._create_components()

        if self.verbose:
            print(f"Initializing {self.n_clusters} clusters...")

        start_time = time.time()
        self.representations = self._create_representations(X, generator)

        self.n_iter_ = 0
        self.history_ = []
        self.terminal_state_ = None
        self.convergence_criterion.reset()
        converged = False

        for iteration in range(self.max_iter):
            iter_start_time = time.time()

            # Assignment step
            assignments = self.assignment_strategy.compute_assignments(
                X, self.representations
            )
            assignment_matrix = AssignmentMatrix(assignments, self.n_clusters)

            # Update step; empty clusters keep their previous parameters
            for k, representation in enumerate(self.representations):
                cluster_indices = assignment_matrix.get_cluster_indices(k)
                if len(cluster_indices) > 0:
                    self.update_strategy.update(representation, X[cluster_indices])

            objective_value = self.objective.compute(
                X, self.representations, assignments
            )

            cluster_state = self._extract_cluster_state()
            converged = self.convergence_criterion.check({
                'iteration': iteration,
                'objective': float(objective_value),
                'assignments': assignments,
                'cluster_state': cluster_state
            })

            self.history_.append(AlgorithmState(
                iteration=iteration,
                cluster_state=cluster_state,
                assignments=assignment_matrix,
                objective_value=float(objective_value),
                converged=converged,
                metadata={'empty_clusters': assignment_matrix.empty_clusters()}
            ))
            self.n_iter_ = iteration + 1

            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                obj_direction = "↓" if self.objective.minimize else "↑"
                print(f"Iteration {iteration:3d}: objective = {float(objective_value):.6f} "
                      f"{obj_direction} ({iter_time:.3f}s)")

            if converged:
                if self.verbose:
                    print(f"Converged at iteration {iteration}")
                break

        total_time = time.time() - start_time

        if converged:
            self.terminal_state_ = TerminalState.CONVERGED
        else:
            self.terminal_state_ = TerminalState.MAX_ITER_REACHED
            warnings.warn(f"Failed to converge after {self.max_iter} iterations",
                          ConvergenceNotReached)

        if self.verbose:
            print(f"Total fitting time: {total_time:.3f}s")

        self.fitted_ = True
        return self

    def _validate_data(self, X: Tensor) -> Tensor:
        """Validate and prepare input data."""
        return validate_data(X, device=self.device)

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise NotFittedError(f"{type(self).__name__} must be fitted first")

    def _extract_cluster_state(self) -> ClusterState:
        """Extract current cluster parameters into ClusterState object."""
        means = torch.stack([
            rep.get_parameters()['mean']
            for rep in self.representations
        ])

        return ClusterState(
            means=means,
            n_clusters=self.n_clusters,
            dimension=means.shape[1]
        )

    @property
    def converged_(self) -> bool:
        """Whether the last fit reached the converged terminal state."""
        self._check_fitted()
        return self.terminal_state_ is TerminalState.CONVERGED

    @property
    def cluster_centers_(self) -> Tensor:
        """Get cluster centers/means."""
        self._check_fitted()
        return self._extract_cluster_state().means

    @property
    def inertia_(self) -> float:
        """Get final objective value."""
        self._check_fitted()
        return self.history_[-1].objective_value

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        return self
