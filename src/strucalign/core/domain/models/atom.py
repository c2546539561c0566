#!/usr/bin/env python3
# src/strucalign/core/domain/models/atom.py

"""
Domain model representing the representative atom of a residue.
"""

from dataclasses import dataclass
from typing import Tuple, Optional


@dataclass(frozen=True)
class Atom:
    """Represents one aligned atom (usually C-alpha) of a structure."""

    coordinates: Tuple[float, float, float]
    atom_name: str = "CA"
    element: str = "C"
    residue_name: str = ""
    residue_id: int = 0
    chain_id: str = "A"
    insertion_code: str = ""
    serial: Optional[int] = None
