"""Initialization strategies for clustering algorithms."""

from .random import RandomInit
from .kmeans_plusplus import KMeansPlusPlusInit
from .from_previous import FromPreviousInit

__all__ = [
    'RandomInit',
    'KMeansPlusPlusInit',
    'FromPreviousInit'
]