"""Domain model classes."""

from .atom import Atom
from .block import Block
from .block_set import BlockSet
from .multiple_alignment import MultipleAlignment
from .ensemble import CacheState, MultipleAlignmentEnsemble
from .pairwise_alignment import PairwiseAlignment
from .scores_cache import ScoresCache

__all__ = [
    "Atom",
    "Block",
    "BlockSet",
    "MultipleAlignment",
    "CacheState",
    "MultipleAlignmentEnsemble",
    "PairwiseAlignment",
    "ScoresCache",
]
