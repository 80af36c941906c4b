"""Clustering algorithm implementations."""

from .kmeans import KMeans, kmeans
from .spectral import SpectralClustering, spectral_clustering
from .builder import ClusteringBuilder, create_spectral

__all__ = [
    'KMeans',
    'kmeans',
    'SpectralClustering',
    'spectral_clustering',
    'ClusteringBuilder',
    'create_spectral'
]
