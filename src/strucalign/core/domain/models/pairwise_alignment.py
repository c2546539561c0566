"""Domain model for the result of a pairwise structure alignment."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ...utils.geometry import get_transformation


@dataclass
class PairwiseAlignment:
    """Segmented residue correspondences between two structures.

    ``opt_aln[b][0]`` and ``opt_aln[b][1]`` list the residues of structure 0
    and structure 1 aligned in segment ``b``. Each segment comes with the
    rotation and shift that superpose structure 1 onto structure 0.
    """

    opt_aln: List[List[List[int]]]
    block_num: Optional[int] = None
    block_rotation_matrix: Optional[Sequence[Any]] = None
    block_shift_vector: Optional[Sequence[Any]] = None
    name1: Optional[str] = None
    name2: Optional[str] = None
    algorithm_name: Optional[str] = None
    version: Optional[str] = None
    calculation_time: Optional[int] = None
    probability: Optional[float] = None
    tm_score: Optional[float] = None
    align_score: Optional[float] = None
    total_rmsd_opt: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.block_num is None:
            self.block_num = len(self.opt_aln)

    def get_block_transformation(self, block: int) -> Optional[np.ndarray]:
        """4x4 superposition of segment ``block``.

        Returns:
            The transformation, or None if the rotation or shift of that
            segment is missing or malformed
        """
        rotation = _lookup(self.block_rotation_matrix, block)
        shift = _lookup(self.block_shift_vector, block)
        return get_transformation(rotation, shift)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairwiseAlignment":
        """Build a record from a plain mapping, e.g. parsed JSON."""
        known = {name for name in cls.__dataclass_fields__ if name != "extra"}
        kwargs = {key: value for key, value in data.items() if key in known}
        kwargs["extra"] = {key: value for key, value in data.items() if key not in known}
        return cls(**kwargs)


def _lookup(values: Optional[Sequence[Any]], index: int) -> Optional[Any]:
    if values is None or not 0 <= index < len(values):
        return None
    return values[index]
