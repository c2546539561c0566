"""Core domain models, interfaces and services for multiple structure alignments."""

from .domain.models.block import Block
from .domain.models.block_set import BlockSet
from .domain.models.multiple_alignment import MultipleAlignment
from .domain.models.ensemble import CacheState, MultipleAlignmentEnsemble
from .domain.models.pairwise_alignment import PairwiseAlignment
from .domain.interfaces.structure_cache import StructureCache
from .services.ensemble_builder import EnsembleBuilder, ensemble_from_pairwise

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
