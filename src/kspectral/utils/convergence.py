"""
Convergence criterion for K-means: stop once the assignments stabilize.
"""

from typing import Dict, Any
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Convergence based on fraction of points that change clusters.

    With the default ``min_change_fraction=0.0`` the criterion fires only
    when the assignment vector is identical to the previous iteration's.
    """

    def __init__(self, min_change_fraction: float = 0.0):
        """
        Args:
            min_change_fraction: Fraction of changed labels below which the
                                 assignments count as stable
        """
        super().__init__()
        if min_change_fraction < 0:
            raise ValueError(f"min_change_fraction must be non-negative, got {min_change_fraction}")
        self.min_change_fraction = min_change_fraction
        self._prev_assignments = None

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if assignments have stabilized."""
        assignments = current_state['assignments']

        if isinstance(assignments, Tensor):
            current_assignments = assignments
        else:
            # AssignmentMatrix object
            current_assignments = assignments.get_hard()

        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            return False

        n_changed = (current_assignments != self._prev_assignments).sum().item()
        change_fraction = n_changed / len(current_assignments)

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed,
            'change_fraction': change_fraction
        })

        self._prev_assignments = current_assignments.clone()

        return n_changed == 0 or change_fraction < self.min_change_fraction

    def reset(self):
        """Reset history and the remembered assignments."""
        super().reset()
        self._prev_assignments = None
