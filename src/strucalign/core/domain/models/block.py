#!/usr/bin/env python3
# src/strucalign/core/domain/models/block.py

"""
Domain model for a block of aligned residues.

A block is a column-wise correspondence table: ``align_res[s][k]`` is the
residue index of structure ``s`` in alignment column ``k``, or ``None``
where that structure has no residue aligned.
"""

import weakref
from typing import List, Optional, Sequence, TYPE_CHECKING

from ..exceptions import StructuralInvariantViolation

if TYPE_CHECKING:
    from .block_set import BlockSet


class Block:
    """Aligned residue columns of a locally rigid segment."""

    def __init__(
        self,
        block_set: Optional["BlockSet"] = None,
        align_res: Optional[Sequence[Sequence[Optional[int]]]] = None,
    ):
        """
        Initialize a Block.

        Args:
            block_set: BlockSet that owns this block; the block is appended
                to it
            align_res: One residue list per structure, all the same length
        """
        self._block_set_ref = None
        self._align_res: List[List[Optional[int]]] = []
        self._core_length: Optional[int] = None

        if align_res is not None:
            self.set_align_res(align_res)
        if block_set is not None:
            block_set.add_block(self)

    @property
    def block_set(self) -> Optional["BlockSet"]:
        """Owning BlockSet, if it is still alive."""
        if self._block_set_ref is None:
            return None
        return self._block_set_ref()

    def set_block_set(self, block_set: Optional["BlockSet"]) -> None:
        """Set the non-owning reference to the parent BlockSet."""
        self._block_set_ref = weakref.ref(block_set) if block_set is not None else None

    @property
    def align_res(self) -> List[List[Optional[int]]]:
        return self._align_res

    def set_align_res(self, align_res: Sequence[Sequence[Optional[int]]]) -> None:
        """Replace the residue lists.

        Raises:
            StructuralInvariantViolation: If the lists differ in length
        """
        lists = [list(residues) for residues in align_res]
        lengths = {len(residues) for residues in lists}
        if len(lengths) > 1:
            raise StructuralInvariantViolation(
                f"Residue lists of a block must have equal length, got {sorted(lengths)}"
            )
        block_set = self.block_set
        if block_set is not None and lists:
            expected = block_set.expected_size(exclude=self)
            if expected is not None and len(lists) != expected:
                raise StructuralInvariantViolation(
                    f"Block aligns {len(lists)} structures, expected {expected}"
                )
        self._align_res = lists
        self.clear()

    def add_column(self, residues: Sequence[Optional[int]]) -> None:
        """Append one alignment column, one entry per structure."""
        if self._align_res and len(residues) != len(self._align_res):
            raise StructuralInvariantViolation(
                f"Column has {len(residues)} entries, block has "
                f"{len(self._align_res)} structures"
            )
        if not self._align_res:
            self._align_res = [[] for _ in residues]
        for structure, residue in enumerate(residues):
            self._align_res[structure].append(residue)
        self.clear()

    def get_residue(self, structure: int, column: int) -> Optional[int]:
        """Residue index of ``structure`` at ``column``, None for a gap."""
        return self._align_res[structure][column]

    def length(self) -> int:
        """Number of aligned columns."""
        if not self._align_res:
            return 0
        return len(self._align_res[0])

    def size(self) -> int:
        """Number of structures in the block."""
        return len(self._align_res)

    def get_core_length(self) -> int:
        """Number of columns without any gap."""
        if self._core_length is None:
            self._core_length = sum(
                1
                for column in zip(*self._align_res)
                if all(residue is not None for residue in column)
            )
        return self._core_length

    def get_start_index(self, structure: int) -> int:
        """First column with a residue of ``structure``, -1 if none."""
        for column, residue in enumerate(self._align_res[structure]):
            if residue is not None:
                return column
        return -1

    def get_final_index(self, structure: int) -> int:
        """Last column with a residue of ``structure``, -1 if none."""
        residues = self._align_res[structure]
        for column in range(len(residues) - 1, -1, -1):
            if residues[column] is not None:
                return column
        return -1

    def get_start_residue(self, structure: int) -> Optional[int]:
        index = self.get_start_index(structure)
        return None if index < 0 else self._align_res[structure][index]

    def get_final_residue(self, structure: int) -> Optional[int]:
        index = self.get_final_index(structure)
        return None if index < 0 else self._align_res[structure][index]

    def clear(self) -> None:
        """Discard cached derived values."""
        self._core_length = None

    def clone(self) -> "Block":
        """Independent copy of the residue lists, without a parent."""
        return Block(align_res=self._align_res)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Block):
            return NotImplemented
        return self._align_res == other._align_res

    def __repr__(self) -> str:
        return f"Block(size={self.size()}, length={self.length()})"
