#!/usr/bin/env python3
# src/strucalign/core/domain/models/ensemble.py

"""
Domain model for a set of structures and the alignments among them.

The ensemble owns every alignment, BlockSet, Block and distance matrix
reachable from it. Atom arrays and structure identifiers are external,
immutable data and are shared by reference between copies.

Atom arrays and distance matrices are filled lazily on first access. The
lazy fill is not synchronized: callers that share one ensemble between
threads must serialize access to it, or populate both caches before
sharing it.
"""

import enum
import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..exceptions import (
    InvalidStateError,
    ResolutionError,
    StructuralInvariantViolation,
)
from ..interfaces.structure_cache import StructureCache
from ...utils.benchmarking import Timer
from ...utils.geometry import get_distance_matrix
from .multiple_alignment import MultipleAlignment
from .scores_cache import ScoresCache

logger = logging.getLogger(__name__)


class CacheState(enum.Enum):
    """Fill state of a lazily computed field."""

    UNSET = "unset"
    COMPUTING = "computing"
    POPULATED = "populated"


class MultipleAlignmentEnsemble(ScoresCache):
    """Structures, their derived geometry and the alignments among them."""

    def __init__(
        self,
        structure_identifiers: Optional[Sequence[str]] = None,
        atom_arrays: Optional[Sequence[Any]] = None,
        structure_cache: Optional[StructureCache] = None,
    ):
        """
        Initialize an ensemble.

        Args:
            structure_identifiers: Names resolvable by the structure cache
            atom_arrays: Representative atoms of each structure
            structure_cache: Resolver used when atom arrays are requested
                but were never set
        """
        super().__init__()

        # Creation properties
        self.algorithm_name: Optional[str] = None
        self.version: Optional[str] = None
        self.io_time: Optional[int] = None
        self.calculation_time: Optional[int] = None
        self.properties: Dict[str, Any] = {}

        self._structure_cache = structure_cache
        self._structure_identifiers: Optional[List[str]] = None
        self._atom_arrays: Optional[List[Any]] = None
        self._atom_arrays_state = CacheState.UNSET
        self._distance_matrices: Optional[List[np.ndarray]] = None
        self._distance_matrices_state = CacheState.UNSET
        self._multiple_alignments: Optional[List[MultipleAlignment]] = None

        if structure_identifiers is not None:
            self.set_structure_identifiers(structure_identifiers)
        if atom_arrays is not None:
            self.set_atom_arrays(atom_arrays)

    @property
    def atom_arrays_state(self) -> CacheState:
        return self._atom_arrays_state

    @property
    def distance_matrices_state(self) -> CacheState:
        return self._distance_matrices_state

    @property
    def structure_cache(self) -> StructureCache:
        """Resolver for structure identifiers.

        Defaults to a repository of PDB files in the working directory.
        """
        if self._structure_cache is None:
            from ....infrastructure.repositories.structure_repository import (
                StructureRepository,
            )

            self._structure_cache = StructureRepository(".")
        return self._structure_cache

    def get_structure_identifiers(self) -> Optional[List[str]]:
        return self._structure_identifiers

    def set_structure_identifiers(
        self, structure_identifiers: Optional[Sequence[str]]
    ) -> None:
        if structure_identifiers is None:
            self._structure_identifiers = None
            return
        identifiers = list(structure_identifiers)
        if len(set(identifiers)) != len(identifiers):
            raise StructuralInvariantViolation(
                f"Structure identifiers must be unique: {identifiers}"
            )
        self._check_structure_count(len(identifiers), self._atom_arrays)
        self._structure_identifiers = identifiers

    def has_structures(self) -> bool:
        """True if identifiers or atom arrays fix the number of structures."""
        return self._structure_identifiers is not None or self._atom_arrays is not None

    def size(self) -> int:
        """Number of structures in the ensemble.

        Raises:
            InvalidStateError: If neither identifiers nor atom arrays are set
        """
        if self._structure_identifiers is not None:
            return len(self._structure_identifiers)
        if self._atom_arrays is not None:
            return len(self._atom_arrays)
        raise InvalidStateError("Empty ensemble: no structure identifiers and no atom arrays")

    def get_atom_arrays(self) -> List[Any]:
        """Atom arrays of every structure, resolving them on first access.

        Raises:
            ResolutionError: If a structure cannot be resolved; the cache
                stays unset so a later call may retry
            InvalidStateError: If there are no identifiers to resolve
        """
        if self._atom_arrays is None:
            self.update_atom_arrays()
        return self._atom_arrays

    def set_atom_arrays(self, atom_arrays: Optional[Sequence[Any]]) -> None:
        """Replace the atom arrays; cached distance matrices are dropped."""
        if atom_arrays is None:
            self._atom_arrays = None
            self._atom_arrays_state = CacheState.UNSET
        else:
            arrays = list(atom_arrays)
            self._check_structure_count(len(arrays), self._structure_identifiers)
            self._atom_arrays = arrays
            self._atom_arrays_state = CacheState.POPULATED
        self._reset_distance_matrices()

    def update_atom_arrays(self) -> None:
        """Force the atom arrays to be resolved again from the identifiers."""
        if self._structure_identifiers is None:
            raise InvalidStateError("No structure identifiers to resolve atom arrays from")

        cache = self.structure_cache
        self._atom_arrays_state = CacheState.COMPUTING
        try:
            with Timer("resolve atom arrays") as timer:
                arrays = []
                for identifier in self._structure_identifiers:
                    logger.debug(f"Resolving atoms of {identifier}")
                    arrays.append(cache.get_representative_atoms(identifier))
        except ResolutionError as e:
            self._atom_arrays_state = CacheState.UNSET
            logger.error(str(e))
            raise
        except (OSError, ValueError) as e:
            self._atom_arrays_state = CacheState.UNSET
            logger.error(f"Structure cache failed: {e}")
            raise ResolutionError(str(identifier), str(e)) from e
        except Exception:
            self._atom_arrays_state = CacheState.UNSET
            raise

        self._atom_arrays = arrays
        self._atom_arrays_state = CacheState.POPULATED
        self.io_time = timer.elapsed_millis()
        self._reset_distance_matrices()

    def get_distance_matrices(self) -> List[np.ndarray]:
        """Intra-structure distance matrix of every structure, computed on first access."""
        if self._distance_matrices is None:
            self.update_distance_matrices()
        return self._distance_matrices

    def update_distance_matrices(self) -> None:
        """Force recalculation of the distance matrices."""
        atom_arrays = self.get_atom_arrays()
        self._distance_matrices_state = CacheState.COMPUTING
        try:
            matrices = [get_distance_matrix(atom_arrays[s]) for s in range(self.size())]
        except Exception:
            self._distance_matrices_state = CacheState.UNSET
            raise
        logger.debug(f"Computed {len(matrices)} distance matrices")
        self._distance_matrices = matrices
        self._distance_matrices_state = CacheState.POPULATED

    def get_multiple_alignments(self) -> List[MultipleAlignment]:
        if self._multiple_alignments is None:
            self._multiple_alignments = []
        return self._multiple_alignments

    def get_multiple_alignment(self, index: int) -> MultipleAlignment:
        return self.get_multiple_alignments()[index]

    def set_multiple_alignments(self, alignments: Sequence[MultipleAlignment]) -> None:
        """Replace all alignments, re-parenting each to this ensemble."""
        self._multiple_alignments = []
        for alignment in alignments:
            self.add_multiple_alignment(alignment)

    def add_multiple_alignment(self, alignment: MultipleAlignment) -> None:
        """Append an alignment and make this ensemble its owner.

        An alignment owned by another ensemble is moved here.

        Raises:
            StructuralInvariantViolation: If the alignment's blocks do not
                cover exactly ``size()`` structures
        """
        if self.has_structures():
            self._check_alignment(alignment, self.size())

        previous = alignment.ensemble
        if previous is not None and previous is not self:
            previous._multiple_alignments = [
                a for a in previous.get_multiple_alignments() if a is not alignment
            ]
        if not any(a is alignment for a in self.get_multiple_alignments()):
            self._multiple_alignments.append(alignment)
        alignment.set_ensemble(self)

    def clear(self) -> None:
        """Drop derived data: scores and distance matrices.

        Structure identifiers and atom arrays are kept.
        """
        super().clear()
        self._reset_distance_matrices()
        for alignment in self.get_multiple_alignments():
            alignment.clear()

    def deep_copy(self) -> "MultipleAlignmentEnsemble":
        """Copy the ensemble and everything it owns.

        Alignments, BlockSets, Blocks and distance matrices are duplicated.
        Atom arrays and identifiers are shared, in new lists.
        """
        copy = MultipleAlignmentEnsemble(structure_cache=self._structure_cache)
        for name, value in self.scores.items():
            copy.put_score(name, value)
        copy.algorithm_name = self.algorithm_name
        copy.version = self.version
        copy.io_time = self.io_time
        copy.calculation_time = self.calculation_time
        copy.properties = dict(self.properties)

        if self._structure_identifiers is not None:
            copy._structure_identifiers = list(self._structure_identifiers)
        if self._atom_arrays is not None:
            copy._atom_arrays = list(self._atom_arrays)
            copy._atom_arrays_state = CacheState.POPULATED
        if self._distance_matrices is not None:
            copy._distance_matrices = [matrix.copy() for matrix in self._distance_matrices]
            copy._distance_matrices_state = CacheState.POPULATED
        if self._multiple_alignments is not None:
            copy._multiple_alignments = []
            for alignment in self._multiple_alignments:
                clone = alignment.clone()
                clone.set_ensemble(copy)
                copy._multiple_alignments.append(clone)
        return copy

    clone = deep_copy

    def _reset_distance_matrices(self) -> None:
        self._distance_matrices = None
        self._distance_matrices_state = CacheState.UNSET

    def _check_structure_count(self, count: int, other: Optional[list]) -> None:
        if other is not None and len(other) != count:
            raise StructuralInvariantViolation(
                f"Got {count} entries for an ensemble of {len(other)} structures"
            )
        for alignment in self._multiple_alignments or []:
            self._check_alignment(alignment, count)

    @staticmethod
    def _check_alignment(alignment: MultipleAlignment, size: int) -> None:
        # Empty placeholder blocks are checked once residues are assigned
        for block in alignment.get_blocks():
            if block.size() and block.size() != size:
                raise StructuralInvariantViolation(
                    f"Block aligns {block.size()} structures, ensemble has {size}"
                )

    def __repr__(self) -> str:
        names = self._structure_identifiers
        return (
            f"MultipleAlignmentEnsemble(algorithm={self.algorithm_name!r}, "
            f"structures={names if names is not None else '?'}, "
            f"alignments={len(self.get_multiple_alignments())})"
        )
