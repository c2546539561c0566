"""Interface for resolving structure identifiers to atom arrays."""

from abc import ABC, abstractmethod
from typing import Any, Sequence


class StructureCache(ABC):
    """Abstract base class for structure sources."""

    @abstractmethod
    def get_representative_atoms(self, identifier: str) -> Sequence[Any]:
        """
        Get the representative atoms (one per residue) of a structure.

        Args:
            identifier: Structure identifier

        Returns:
            Atom array of the structure

        Raises:
            ResolutionError: If the structure cannot be read or parsed
        """
        pass
