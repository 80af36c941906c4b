"""Spectral embeddings of graph Laplacians."""

from .spectral import spectral_embedding, estimate_n_clusters

__all__ = [
    'spectral_embedding',
    'estimate_n_clusters'
]
