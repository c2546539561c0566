"""Core domain models, interfaces and exceptions."""

from .models import (
    Atom,
    Block,
    BlockSet,
    MultipleAlignment,
    CacheState,
    MultipleAlignmentEnsemble,
    PairwiseAlignment,
)
from .interfaces.structure_cache import StructureCache
from .exceptions import (
    StrucAlignError,
    InvalidStateError,
    ResolutionError,
    MalformedTransformError,
    StructuralInvariantViolation,
)

__all__ = [
    "Atom",
    "Block",
    "BlockSet",
    "MultipleAlignment",
    "CacheState",
    "MultipleAlignmentEnsemble",
    "PairwiseAlignment",
    "StructureCache",
    "StrucAlignError",
    "InvalidStateError",
    "ResolutionError",
    "MalformedTransformError",
    "StructuralInvariantViolation",
]
