#!/usr/bin/env python3
# src/strucalign/core/domain/models/multiple_alignment.py

"""
Domain model for an alignment of all structures of an ensemble.
"""

import weakref
from typing import List, Optional, TYPE_CHECKING

from ..exceptions import InvalidStateError, StructuralInvariantViolation
from .block import Block
from .block_set import BlockSet
from .scores_cache import ScoresCache

if TYPE_CHECKING:
    from .ensemble import MultipleAlignmentEnsemble


class MultipleAlignment(ScoresCache):
    """Ordered BlockSets over every structure of one ensemble.

    The ensemble is referenced weakly: an alignment never keeps its
    ensemble alive.
    """

    def __init__(self, ensemble: Optional["MultipleAlignmentEnsemble"] = None):
        """
        Initialize a MultipleAlignment.

        Args:
            ensemble: Ensemble the alignment is added to
        """
        super().__init__()
        self._ensemble_ref = None
        self._block_sets: List[BlockSet] = []

        if ensemble is not None:
            ensemble.add_multiple_alignment(self)

    @property
    def ensemble(self) -> Optional["MultipleAlignmentEnsemble"]:
        if self._ensemble_ref is None:
            return None
        return self._ensemble_ref()

    def set_ensemble(self, ensemble: Optional["MultipleAlignmentEnsemble"]) -> None:
        """Point the back-reference at ``ensemble`` without registering."""
        self._ensemble_ref = weakref.ref(ensemble) if ensemble is not None else None

    @property
    def block_sets(self) -> List[BlockSet]:
        return self._block_sets

    def add_block_set(self, block_set: BlockSet) -> None:
        """Append a BlockSet and make this alignment its parent.

        Raises:
            StructuralInvariantViolation: If its blocks align a different
                number of structures than this alignment
        """
        expected = self.expected_size()
        if expected is not None:
            for block in block_set.blocks:
                if block.size() and block.size() != expected:
                    raise StructuralInvariantViolation(
                        f"Block aligns {block.size()} structures, expected {expected}"
                    )
        self._block_sets.append(block_set)
        block_set.set_multiple_alignment(self)

    def get_block_set(self, index: int) -> BlockSet:
        return self._block_sets[index]

    def get_blocks(self) -> List[Block]:
        """All blocks, in BlockSet order."""
        return [block for block_set in self._block_sets for block in block_set.blocks]

    def get_block(self, index: int) -> Block:
        return self.get_blocks()[index]

    def expected_size(self, exclude: Optional[Block] = None) -> Optional[int]:
        """Structure count fixed by the ensemble or by existing blocks."""
        ensemble = self.ensemble
        if ensemble is not None and ensemble.has_structures():
            return ensemble.size()
        for block in self.get_blocks():
            if block is not exclude and block.size():
                return block.size()
        return None

    def size(self) -> int:
        """Number of aligned structures.

        Raises:
            InvalidStateError: If neither the ensemble nor any block fixes it
        """
        size = self.expected_size()
        if size is None:
            raise InvalidStateError("Empty alignment: no ensemble structures and no blocks")
        return size

    def length(self) -> int:
        """Number of aligned columns over all BlockSets."""
        return sum(block_set.length() for block_set in self._block_sets)

    def get_core_length(self) -> int:
        """Number of gapless columns over all BlockSets."""
        return sum(block_set.get_core_length() for block_set in self._block_sets)

    def get_lengths(self) -> List[int]:
        """Number of aligned (non-gap) residues of each structure."""
        lengths = [0] * self.size()
        for block in self.get_blocks():
            for structure, residues in enumerate(block.align_res):
                lengths[structure] += sum(1 for r in residues if r is not None)
        return lengths

    def get_atom_arrays(self) -> list:
        """Atom arrays of the owning ensemble."""
        ensemble = self.ensemble
        if ensemble is None:
            raise InvalidStateError("Alignment is not attached to an ensemble")
        return ensemble.get_atom_arrays()

    def clear(self) -> None:
        """Discard cached scores and every block's derived values."""
        super().clear()
        for block_set in self._block_sets:
            block_set.clear()

    def clone(self) -> "MultipleAlignment":
        """Copy BlockSets and scores.

        The copy points to the same ensemble but is not registered in it.
        """
        copy = MultipleAlignment()
        for name, value in self.scores.items():
            copy.put_score(name, value)
        copy.set_ensemble(self.ensemble)
        for block_set in self._block_sets:
            copy.add_block_set(block_set.clone())
        return copy

    def __str__(self) -> str:
        lines = [
            f"MultipleAlignment: {len(self._block_sets)} block sets, "
            f"{len(self.get_blocks())} blocks, length {self.length()}, "
            f"core length {self.get_core_length()}"
        ]
        for name in sorted(self.get_score_names()):
            lines.append(f"  {name}: {self.get_score(name)}")
        return "\n".join(lines)
