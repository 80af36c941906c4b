"""
Exceptions and warnings raised by the kspectral pipeline.

Every error derives from the builtin it refines (ValueError, RuntimeError)
so callers that already catch those keep working.
"""


class KSpectralError(Exception):
    """Base class for all kspectral errors."""


class InvalidInputError(KSpectralError, ValueError):
    """Malformed input: ragged points, bad shapes, non-finite values or
    out-of-range parameters."""


class DegenerateGraphError(KSpectralError, ValueError):
    """The affinity graph contains isolated nodes where the normalized
    Laplacian needs d^(-1/2)."""

    def __init__(self, message: str, isolated=None):
        super().__init__(message)
        self.isolated = [] if isolated is None else list(isolated)


class NonSymmetricInputError(KSpectralError, ValueError):
    """A matrix expected to be symmetric is not, within tolerance."""


class NotFittedError(KSpectralError, RuntimeError):
    """An estimator was used before calling fit."""


class ConvergenceNotReached(UserWarning):
    """K-means stopped at max_iter with assignments still changing.

    The partial result is kept; retrying with another seed is up to the caller.
    """
