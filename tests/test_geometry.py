import numpy as np
import pytest

from strucalign.core.domain.models.atom import Atom
from strucalign.core.utils.geometry import (
    get_coordinates,
    get_distance_matrix,
    get_transformation,
    identity_transformation,
    transform_coordinates,
)

ROTATION_Z90 = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])


@pytest.fixture
def ca_atoms():
    """Small random C-alpha trace."""
    rng = np.random.default_rng(7)
    return rng.normal(scale=5.0, size=(12, 3))


def test_distance_matrix_is_symmetric_with_zero_diagonal(ca_atoms):
    matrix = get_distance_matrix(ca_atoms)

    assert matrix.shape == (12, 12)
    np.testing.assert_array_equal(matrix, matrix.T)
    np.testing.assert_array_equal(np.diag(matrix), np.zeros(12))


def test_distance_matrix_values(ca_atoms):
    matrix = get_distance_matrix(ca_atoms)

    expected = np.linalg.norm(ca_atoms[3] - ca_atoms[8])
    assert matrix[3, 8] == pytest.approx(expected)


def test_distance_matrix_of_empty_array():
    matrix = get_distance_matrix([])

    assert matrix.shape == (0, 0)


def test_distance_matrix_between_two_arrays():
    atoms_a = [Atom(coordinates=(0.0, 0.0, 0.0)), Atom(coordinates=(3.0, 4.0, 0.0))]
    atoms_b = [Atom(coordinates=(0.0, 0.0, 1.0))]

    matrix = get_distance_matrix(atoms_a, atoms_b)

    assert matrix.shape == (2, 1)
    assert matrix[0, 0] == pytest.approx(1.0)
    assert matrix[1, 0] == pytest.approx(np.sqrt(26.0))


def test_get_coordinates_accepts_atom_records():
    atoms = [Atom(coordinates=(1.0, 2.0, 3.0)), Atom(coordinates=(4.0, 5.0, 6.0))]

    coords = get_coordinates(atoms)

    np.testing.assert_array_equal(coords, [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


def test_get_transformation_combines_rotation_and_shift():
    transformation = get_transformation(ROTATION_Z90, [1.0, 2.0, 3.0])

    assert transformation.shape == (4, 4)
    np.testing.assert_array_equal(transformation[:3, :3], ROTATION_Z90)
    np.testing.assert_array_equal(transformation[:3, 3], [1.0, 2.0, 3.0])
    np.testing.assert_array_equal(transformation[3], [0.0, 0.0, 0.0, 1.0])


def test_get_transformation_accepts_shift_atom():
    shift = Atom(coordinates=(1.0, 0.0, 0.0))

    transformation = get_transformation(np.eye(3), shift)

    np.testing.assert_array_equal(transformation[:3, 3], [1.0, 0.0, 0.0])


@pytest.mark.parametrize(
    "rotation, shift",
    [
        (None, [0.0, 0.0, 0.0]),
        (np.eye(3), None),
        (np.eye(2), [0.0, 0.0, 0.0]),
        (np.eye(3), [0.0, 0.0]),
        ([[1.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]], [0.0, 0.0, 0.0]),
    ],
)
def test_get_transformation_rejects_missing_or_malformed_parts(rotation, shift):
    assert get_transformation(rotation, shift) is None


def test_identity_transformation_is_a_fresh_copy():
    first = identity_transformation()
    first[0, 3] = 5.0

    np.testing.assert_array_equal(identity_transformation(), np.eye(4))


def test_transform_coordinates():
    transformation = get_transformation(ROTATION_Z90, [0.0, 0.0, 1.0])

    moved = transform_coordinates(np.array([[1.0, 0.0, 0.0]]), transformation)

    np.testing.assert_allclose(moved, [[0.0, 1.0, 1.0]])
