#!/usr/bin/env python3
# src/strucalign/core/domain/models/block_set.py

"""
Domain model for a set of blocks sharing one superposition.
"""

import weakref
from typing import List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from ..exceptions import StructuralInvariantViolation
from ...utils.geometry import identity_transformation
from .block import Block

if TYPE_CHECKING:
    from .multiple_alignment import MultipleAlignment


class BlockSet:
    """Ordered blocks of one locally rigid segment.

    Holds one 4x4 transformation per structure that superposes the
    structure onto structure 0 for this segment. The transformation of
    structure 0 is always the identity.
    """

    def __init__(self, multiple_alignment: Optional["MultipleAlignment"] = None):
        """
        Initialize a BlockSet.

        Args:
            multiple_alignment: Alignment that owns this set; the set is
                appended to it
        """
        self._alignment_ref = None
        self._blocks: List[Block] = []
        self._transformations: Optional[List[Optional[np.ndarray]]] = None

        if multiple_alignment is not None:
            multiple_alignment.add_block_set(self)

    @property
    def multiple_alignment(self) -> Optional["MultipleAlignment"]:
        """Owning MultipleAlignment, if it is still alive."""
        if self._alignment_ref is None:
            return None
        return self._alignment_ref()

    def set_multiple_alignment(
        self, multiple_alignment: Optional["MultipleAlignment"]
    ) -> None:
        """Set the non-owning reference to the parent alignment."""
        self._alignment_ref = (
            weakref.ref(multiple_alignment) if multiple_alignment is not None else None
        )

    @property
    def blocks(self) -> List[Block]:
        return self._blocks

    def add_block(self, block: Block) -> None:
        """Append a block and make this set its parent.

        Raises:
            StructuralInvariantViolation: If the block's structure count
                differs from the rest of the alignment
        """
        expected = self.expected_size()
        if block.size() and expected is not None and block.size() != expected:
            raise StructuralInvariantViolation(
                f"Block aligns {block.size()} structures, expected {expected}"
            )
        self._blocks.append(block)
        block.set_block_set(self)

    def expected_size(self, exclude: Optional[Block] = None) -> Optional[int]:
        """Structure count implied by the owning alignment or sibling blocks.

        Returns None when nothing fixes the count yet.
        """
        alignment = self.multiple_alignment
        if alignment is not None:
            size = alignment.expected_size(exclude=exclude)
            if size is not None:
                return size
        for block in self._blocks:
            if block is not exclude and block.size():
                return block.size()
        return None

    def get_transformations(self) -> List[Optional[np.ndarray]]:
        """One 4x4 transformation per structure.

        Until assigned, structure 0 gets the identity and all other
        structures None.
        """
        if self._transformations is not None:
            return self._transformations
        size = self.expected_size()
        if not size:
            return []
        return [identity_transformation()] + [None] * (size - 1)

    def set_transformations(self, transformations: Sequence[np.ndarray]) -> None:
        """Assign the superposition of every structure.

        Raises:
            StructuralInvariantViolation: If the count differs from the
                number of structures or a matrix is not 4x4
        """
        matrices = [np.array(matrix, dtype=float) for matrix in transformations]
        expected = self.expected_size()
        if expected is not None and len(matrices) != expected:
            raise StructuralInvariantViolation(
                f"Got {len(matrices)} transformations for {expected} structures"
            )
        for matrix in matrices:
            if matrix.shape != (4, 4):
                raise StructuralInvariantViolation(
                    f"Transformation must be 4x4, got {matrix.shape}"
                )
        # Structure 0 is the reference frame
        if matrices and not np.allclose(matrices[0], np.eye(4)):
            raise StructuralInvariantViolation(
                "Transformation of structure 0 must be the identity"
            )
        self._transformations = matrices

    def length(self) -> int:
        """Number of aligned columns over all blocks."""
        return sum(block.length() for block in self._blocks)

    def size(self) -> int:
        """Number of aligned structures."""
        size = self.expected_size()
        return size or 0

    def get_core_length(self) -> int:
        """Number of gapless columns over all blocks."""
        return sum(block.get_core_length() for block in self._blocks)

    def clear(self) -> None:
        """Discard cached derived values of every block."""
        for block in self._blocks:
            block.clear()

    def clone(self) -> "BlockSet":
        """Copy blocks and transformations, without a parent."""
        copy = BlockSet()
        for block in self._blocks:
            copy.add_block(block.clone())
        if self._transformations is not None:
            copy._transformations = [matrix.copy() for matrix in self._transformations]
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockSet):
            return NotImplemented
        if self._blocks != other._blocks:
            return False
        mine, theirs = self._transformations, other._transformations
        if mine is None or theirs is None:
            return mine is theirs
        return len(mine) == len(theirs) and all(
            np.array_equal(a, b) for a, b in zip(mine, theirs)
        )

    def __repr__(self) -> str:
        return f"BlockSet(blocks={len(self._blocks)}, length={self.length()})"
