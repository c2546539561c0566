"""Multiple structure alignment model and pairwise alignment conversion."""

from .core import (
    Block,
    BlockSet,
    MultipleAlignment,
    CacheState,
    MultipleAlignmentEnsemble,
    PairwiseAlignment,
    StructureCache,
    EnsembleBuilder,
    ensemble_from_pairwise,
)

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockSet",
    "MultipleAlignment",
    "CacheState",
    "MultipleAlignmentEnsemble",
    "PairwiseAlignment",
    "StructureCache",
    "EnsembleBuilder",
    "ensemble_from_pairwise",
]
