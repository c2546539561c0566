# src/strucalign/core/utils/geometry.py
"""
Rigid-body transformations and distance matrices.

This module provides functions for:
1. Building 4x4 transformations from a rotation and a translation
2. Applying a 4x4 transformation to coordinates
3. Computing residue-residue distance matrices of atom arrays
"""

import logging
from typing import Any, Optional, Sequence

import numpy as np
from scipy.spatial.distance import cdist

logger = logging.getLogger(__name__)


def atom_coordinates(atom: Any) -> Sequence[float]:
    """Coordinates of a single atom, whichever way it stores them."""
    if hasattr(atom, "coordinates"):
        return atom.coordinates
    if hasattr(atom, "get_coord"):
        return atom.get_coord()
    if hasattr(atom, "coord"):
        return atom.coord
    # Plain xyz triples
    return atom


def get_coordinates(atoms: Any) -> np.ndarray:
    """Get coordinates of an atom array.

    Args:
        atoms: ``(N, 3)`` array, or a sequence of atoms exposing
            ``coordinates``, ``coord`` or ``get_coord()``

    Returns:
        numpy array of shape (n_atoms, 3) containing xyz coordinates
    """
    if isinstance(atoms, np.ndarray):
        coords = np.asarray(atoms, dtype=float)
    else:
        coords = np.array([atom_coordinates(atom) for atom in atoms], dtype=float)
    return coords.reshape(-1, 3)


def identity_transformation() -> np.ndarray:
    """Return a new 4x4 identity transformation."""
    return np.eye(4)


def get_transformation(rotation: Any, translation: Any) -> Optional[np.ndarray]:
    """Build a 4x4 rigid-body transformation.

    Args:
        rotation: 3x3 rotation matrix
        translation: translation vector of length 3, or an atom carrying it

    Returns:
        4x4 transformation matrix, or None if either part is missing or
        does not have the expected shape
    """
    if rotation is None or translation is None:
        return None

    try:
        rotation = np.asarray(rotation, dtype=float)
        shift = np.asarray(atom_coordinates(translation), dtype=float).ravel()
    except (TypeError, ValueError):
        return None

    if rotation.shape != (3, 3) or shift.shape != (3,):
        logger.debug(
            f"Rejecting transformation with rotation shape {rotation.shape} "
            f"and translation shape {shift.shape}"
        )
        return None

    transformation = np.eye(4)
    transformation[:3, :3] = rotation
    transformation[:3, 3] = shift
    return transformation


def transform_coordinates(coords: Any, transformation: np.ndarray) -> np.ndarray:
    """Apply a 4x4 transformation to an atom array.

    Args:
        coords: Atom array or (N, 3) coordinates
        transformation: 4x4 rigid-body transformation

    Returns:
        Transformed (N, 3) coordinates
    """
    coords = get_coordinates(coords)
    rotation = transformation[:3, :3]
    translation = transformation[:3, 3]
    return np.dot(coords, rotation.T) + translation


def get_distance_matrix(atoms_a: Any, atoms_b: Any = None) -> np.ndarray:
    """Calculate the Euclidean distance matrix between two atom arrays.

    With a single argument the intra-structure matrix is returned, which is
    square, symmetric and has a zero diagonal.

    Args:
        atoms_a: First atom array
        atoms_b: Second atom array, defaults to ``atoms_a``

    Returns:
        numpy array of shape (len(atoms_a), len(atoms_b))
    """
    coords_a = get_coordinates(atoms_a)
    coords_b = coords_a if atoms_b is None else get_coordinates(atoms_b)

    if len(coords_a) == 0 or len(coords_b) == 0:
        return np.zeros((len(coords_a), len(coords_b)))

    matrix = cdist(coords_a, coords_b)
    if atoms_b is None:
        # Exact symmetry and zero diagonal for the intra-structure case
        matrix = (matrix + matrix.T) / 2.0
        np.fill_diagonal(matrix, 0.0)
    return matrix
