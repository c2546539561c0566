"""Interfaces to collaborators outside the alignment model."""

from .structure_cache import StructureCache

__all__ = ["StructureCache"]
