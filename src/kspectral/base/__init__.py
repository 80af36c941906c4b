"""Base classes and interfaces for spectral clustering."""

from .interfaces import (
    ClusterRepresentation,
    AssignmentStrategy,
    ParameterUpdater,
    DistanceMetric,
    SimilarityKernel,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    TerminalState,
    ClusterState,
    AssignmentMatrix,
    AlgorithmState,
    KMeansResult,
    SpectralEmbeddingResult,
    SpectralClusteringResult
)

from .clustering_base import BaseClusteringAlgorithm

__all__ = [
    # Interfaces
    'ClusterRepresentation',
    'AssignmentStrategy',
    'ParameterUpdater',
    'DistanceMetric',
    'SimilarityKernel',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'TerminalState',
    'ClusterState',
    'AssignmentMatrix',
    'AlgorithmState',
    'KMeansResult',
    'SpectralEmbeddingResult',
    'SpectralClusteringResult',

    # Base algorithm
    'BaseClusteringAlgorithm'
]
