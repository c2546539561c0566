import logging

import numpy as np
import pytest

from strucalign.core.domain.exceptions import StructuralInvariantViolation
from strucalign.core.domain.models import scores
from strucalign.core.domain.models.pairwise_alignment import PairwiseAlignment
from strucalign.core.services.ensemble_builder import (
    EnsembleBuilder,
    ensemble_from_pairwise,
)

ROTATION_Z90 = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
ROTATION_X90 = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, -1.0], [0.0, 1.0, 0.0]])


@pytest.fixture
def atoms():
    rng = np.random.default_rng(3)
    return rng.normal(size=(12, 3)), rng.normal(size=(14, 3))


@pytest.fixture
def pairwise():
    """Three-segment alignment with a transformation per segment."""
    return PairwiseAlignment(
        name1="1abc.A",
        name2="2def.B",
        opt_aln=[
            [[0, 1, 2, 3], [2, 3, 4, 5]],
            [[5, 6], [8, 9]],
            [[8, 9, 10], [10, 11, 13]],
        ],
        block_rotation_matrix=[ROTATION_Z90, ROTATION_X90, np.eye(3)],
        block_shift_vector=[[1.0, 2.0, 3.0], [0.0, -1.0, 0.0], [4.0, 0.0, 0.0]],
        algorithm_name="jFATCAT_flexible",
        version="1.0",
        calculation_time=250,
        probability=0.87,
        tm_score=0.91,
        align_score=1234.5,
        total_rmsd_opt=1.2,
    )


def test_block_num_defaults_to_segment_count(pairwise):
    assert pairwise.block_num == 3


def test_rigid_conversion_builds_one_block_set(pairwise, atoms):
    ensemble = EnsembleBuilder(flexible=False).build(pairwise, *atoms)

    assert len(ensemble.get_multiple_alignments()) == 1
    alignment = ensemble.get_multiple_alignment(0)
    assert len(alignment.block_sets) == 1
    blocks = alignment.block_sets[0].blocks
    assert len(blocks) == 3
    assert [block.length() for block in blocks] == [4, 2, 3]
    assert blocks[2].align_res == [[8, 9, 10], [10, 11, 13]]


def test_rigid_conversion_uses_first_segment_transformation(pairwise, atoms):
    ensemble = EnsembleBuilder(flexible=False).build(pairwise, *atoms)

    transformations = ensemble.get_multiple_alignment(0).block_sets[0].get_transformations()
    np.testing.assert_array_equal(transformations[0], np.eye(4))
    np.testing.assert_array_equal(transformations[1][:3, :3], ROTATION_Z90)
    np.testing.assert_array_equal(transformations[1][:3, 3], [1.0, 2.0, 3.0])


def test_flexible_conversion_builds_one_block_set_per_segment(pairwise, atoms):
    ensemble = EnsembleBuilder(flexible=True).build(pairwise, *atoms)

    alignment = ensemble.get_multiple_alignment(0)
    assert len(alignment.block_sets) == 3
    assert all(len(block_set.blocks) == 1 for block_set in alignment.block_sets)
    assert alignment.get_block(1).align_res == [[5, 6], [8, 9]]

    second = alignment.block_sets[1].get_transformations()
    np.testing.assert_array_equal(second[0], np.eye(4))
    np.testing.assert_array_equal(second[1][:3, :3], ROTATION_X90)
    np.testing.assert_array_equal(second[1][:3, 3], [0.0, -1.0, 0.0])


def test_missing_segment_transformation_falls_back_to_identity(pairwise, atoms, caplog):
    pairwise.block_rotation_matrix[1] = None

    with caplog.at_level(logging.WARNING):
        ensemble = EnsembleBuilder(flexible=True).build(pairwise, *atoms)

    transformations = ensemble.get_multiple_alignment(0).block_sets[1].get_transformations()
    np.testing.assert_array_equal(transformations[0], np.eye(4))
    np.testing.assert_array_equal(transformations[1], np.eye(4))
    assert "Segment 1" in caplog.text


def test_ragged_segment_rotation_falls_back_to_identity(pairwise, atoms, caplog):
    pairwise.block_rotation_matrix[1] = [[1.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]

    with caplog.at_level(logging.WARNING):
        ensemble = EnsembleBuilder(flexible=True).build(pairwise, *atoms)

    block_sets = ensemble.get_multiple_alignment(0).block_sets
    np.testing.assert_array_equal(block_sets[1].get_transformations()[1], np.eye(4))
    np.testing.assert_array_equal(block_sets[2].get_transformations()[1][:3, :3], np.eye(3))
    assert "Segment 1" in caplog.text


def test_out_of_range_transformation_falls_back_to_identity(pairwise, atoms):
    pairwise.block_rotation_matrix = pairwise.block_rotation_matrix[:1]
    pairwise.block_shift_vector = pairwise.block_shift_vector[:1]

    ensemble = EnsembleBuilder(flexible=True).build(pairwise, *atoms)

    block_sets = ensemble.get_multiple_alignment(0).block_sets
    np.testing.assert_array_equal(block_sets[0].get_transformations()[1][:3, :3], ROTATION_Z90)
    np.testing.assert_array_equal(block_sets[2].get_transformations()[1], np.eye(4))


def test_rigid_conversion_without_transformations(pairwise, atoms):
    pairwise.block_rotation_matrix = None
    pairwise.block_shift_vector = None

    ensemble = EnsembleBuilder().build(pairwise, *atoms)

    transformations = ensemble.get_multiple_alignment(0).block_sets[0].get_transformations()
    np.testing.assert_array_equal(transformations[1], np.eye(4))


def test_scores_are_copied_verbatim(pairwise, atoms):
    ensemble = ensemble_from_pairwise(pairwise, *atoms)

    alignment = ensemble.get_multiple_alignment(0)
    assert alignment.get_score(scores.PROBABILITY) == 0.87
    assert alignment.get_score(scores.AVGTM_SCORE) == 0.91
    assert alignment.get_score(scores.CE_SCORE) == 1234.5
    assert alignment.get_score(scores.RMSD) == 1.2
    assert alignment.get_score_names() == set(scores.PAIRWISE_SCORES)


def test_creation_properties_and_structures_are_copied(pairwise, atoms):
    ensemble = ensemble_from_pairwise(pairwise, *atoms, flexible=True)

    assert ensemble.algorithm_name == "jFATCAT_flexible"
    assert ensemble.version == "1.0"
    assert ensemble.calculation_time == 250
    assert ensemble.get_structure_identifiers() == ["1abc.A", "2def.B"]
    assert ensemble.get_atom_arrays()[0] is atoms[0]
    assert ensemble.get_atom_arrays()[1] is atoms[1]
    assert ensemble.get_multiple_alignment(0).ensemble is ensemble


@pytest.mark.parametrize("name1, name2", [(None, "2def"), ("1abc", ""), ("1abc", "1abc")])
def test_identifiers_are_left_unset_without_two_distinct_names(
    pairwise, atoms, name1, name2
):
    pairwise.name1 = name1
    pairwise.name2 = name2

    ensemble = ensemble_from_pairwise(pairwise, *atoms)

    assert ensemble.get_structure_identifiers() is None
    assert ensemble.size() == 2


def test_self_alignment_keeps_structure_names(pairwise, atoms):
    pairwise.name1 = "1abc"
    pairwise.name2 = "1abc"

    ensemble = ensemble_from_pairwise(pairwise, *atoms)

    assert ensemble.get_structure_identifiers() is None
    assert ensemble.properties["structure_names"] == ["1abc", "1abc"]
    assert ensemble.deep_copy().properties == ensemble.properties


def test_mismatched_segment_lengths_are_rejected(pairwise, atoms):
    pairwise.opt_aln[1] = [[5, 6, 7], [8, 9]]

    with pytest.raises(StructuralInvariantViolation):
        ensemble_from_pairwise(pairwise, *atoms)


@pytest.mark.parametrize("block_num", [0, 4])
def test_invalid_segment_count_is_rejected(pairwise, atoms, block_num):
    pairwise.block_num = block_num

    with pytest.raises(StructuralInvariantViolation):
        ensemble_from_pairwise(pairwise, *atoms)


def test_block_num_limits_converted_segments(pairwise, atoms):
    pairwise.block_num = 2

    ensemble = ensemble_from_pairwise(pairwise, *atoms, flexible=True)

    assert len(ensemble.get_multiple_alignment(0).block_sets) == 2


def test_converted_ensemble_supports_geometry(pairwise, atoms):
    ensemble = ensemble_from_pairwise(pairwise, *atoms)

    matrices = ensemble.get_distance_matrices()

    assert [m.shape for m in matrices] == [(12, 12), (14, 14)]


def test_from_dict_keeps_unknown_fields(pairwise):
    record = PairwiseAlignment.from_dict(
        {"name1": "a", "name2": "b", "opt_aln": [[[0], [0]]], "gap_penalty": 5}
    )

    assert record.block_num == 1
    assert record.extra == {"gap_penalty": 5}
