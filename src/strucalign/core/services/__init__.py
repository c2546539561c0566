"""Core business logic services."""

from .ensemble_builder import EnsembleBuilder, ensemble_from_pairwise

__all__ = [
    "EnsembleBuilder",
    "ensemble_from_pairwise",
]
