"""Service converting pairwise alignments into multiple alignment ensembles."""

import logging
from typing import Any, Sequence

import numpy as np

from ..domain.exceptions import MalformedTransformError, StructuralInvariantViolation
from ..domain.models import scores
from ..domain.models.block import Block
from ..domain.models.block_set import BlockSet
from ..domain.models.ensemble import MultipleAlignmentEnsemble
from ..domain.models.multiple_alignment import MultipleAlignment
from ..domain.models.pairwise_alignment import PairwiseAlignment
from ..utils.geometry import identity_transformation

logger = logging.getLogger(__name__)


class EnsembleBuilder:
    """Builds an ensemble holding one alignment equivalent to a pairwise one.

    In rigid mode the whole alignment becomes a single BlockSet, with one
    Block per segment and the transformation of segment 0. In flexible mode
    every segment becomes its own BlockSet with its own transformation.
    """

    def __init__(self, flexible: bool = False):
        """Initialize builder with the superposition mode."""
        self.flexible = flexible

    def build(
        self,
        pairwise: PairwiseAlignment,
        atoms1: Sequence[Any],
        atoms2: Sequence[Any],
    ) -> MultipleAlignmentEnsemble:
        """
        Convert a pairwise alignment.

        Args:
            pairwise: Pairwise alignment result
            atoms1: Atom array of structure 0
            atoms2: Atom array of structure 1

        Returns:
            Ensemble owning exactly one MultipleAlignment

        Raises:
            StructuralInvariantViolation: If the segment count is invalid or
                a segment lists a different number of residues for the two
                structures
        """
        segments = self._segments(pairwise)

        ensemble = MultipleAlignmentEnsemble(atom_arrays=[atoms1, atoms2])
        if pairwise.name1 and pairwise.name2:
            if pairwise.name1 == pairwise.name2:
                # Self alignment: identifiers must be unique, atoms define size
                logger.warning(
                    f"Both structures are named {pairwise.name1}, "
                    f"leaving structure identifiers unset"
                )
                ensemble.properties["structure_names"] = [pairwise.name1, pairwise.name2]
            else:
                ensemble.set_structure_identifiers([pairwise.name1, pairwise.name2])
        ensemble.algorithm_name = pairwise.algorithm_name
        ensemble.version = pairwise.version
        ensemble.calculation_time = pairwise.calculation_time

        alignment = MultipleAlignment(ensemble)

        if self.flexible:
            for segment, residues in enumerate(segments):
                block_set = BlockSet(alignment)
                block_set.set_transformations(
                    [identity_transformation(), self._transformation(pairwise, segment)]
                )
                Block(block_set, residues)
        else:
            block_set = BlockSet(alignment)
            block_set.set_transformations(
                [identity_transformation(), self._transformation(pairwise, 0)]
            )
            for residues in segments:
                Block(block_set, residues)

        alignment.put_score(scores.PROBABILITY, pairwise.probability)
        alignment.put_score(scores.AVGTM_SCORE, pairwise.tm_score)
        alignment.put_score(scores.CE_SCORE, pairwise.align_score)
        alignment.put_score(scores.RMSD, pairwise.total_rmsd_opt)

        logger.debug(
            f"Converted {pairwise.algorithm_name} alignment with {len(segments)} "
            f"segments into {len(alignment.block_sets)} block sets"
        )
        return ensemble

    def _segments(self, pairwise: PairwiseAlignment) -> list:
        """Validated residue lists of every segment."""
        block_num = pairwise.block_num
        if block_num < 1:
            raise StructuralInvariantViolation(f"Need at least one segment, got {block_num}")
        if block_num > len(pairwise.opt_aln):
            raise StructuralInvariantViolation(
                f"{block_num} segments declared but only {len(pairwise.opt_aln)} given"
            )

        segments = []
        for segment in range(block_num):
            residues = pairwise.opt_aln[segment]
            if len(residues) != 2:
                raise StructuralInvariantViolation(
                    f"Segment {segment} must list residues of exactly 2 structures"
                )
            if len(residues[0]) != len(residues[1]):
                raise StructuralInvariantViolation(
                    f"Segment {segment} aligns {len(residues[0])} residues of "
                    f"structure 0 with {len(residues[1])} of structure 1"
                )
            segments.append([list(residues[0]), list(residues[1])])
        return segments

    def _transformation(self, pairwise: PairwiseAlignment, segment: int) -> np.ndarray:
        """Transformation of a segment, the identity if it is unavailable."""
        transformation = pairwise.get_block_transformation(segment)
        if transformation is None:
            problem = MalformedTransformError(
                segment, "rotation or shift missing, using identity"
            )
            logger.warning(str(problem))
            return identity_transformation()
        return transformation


def ensemble_from_pairwise(
    pairwise: PairwiseAlignment,
    atoms1: Sequence[Any],
    atoms2: Sequence[Any],
    flexible: bool = False,
) -> MultipleAlignmentEnsemble:
    """Convert a pairwise alignment into an ensemble, see ``EnsembleBuilder``."""
    return EnsembleBuilder(flexible=flexible).build(pairwise, atoms1, atoms2)
