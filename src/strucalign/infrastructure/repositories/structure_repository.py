# src/strucalign/infrastructure/repositories/structure_repository.py
"""Repository resolving structure identifiers to representative atoms."""

import logging
import os
from typing import Dict, List, Optional, Tuple

from Bio.PDB.MMCIFParser import MMCIFParser
from Bio.PDB.PDBExceptions import PDBConstructionException
from Bio.PDB.PDBParser import PDBParser

from ...core.domain.exceptions import ResolutionError
from ...core.domain.interfaces.structure_cache import StructureCache
from ...core.domain.models.atom import Atom

logger = logging.getLogger(__name__)


class StructureRepository(StructureCache):
    """Reads structures from a directory of PDB or mmCIF files.

    An identifier ``name`` resolves to ``<data_dir>/<name><ext>``. The form
    ``name.X`` restricts the atoms to chain ``X`` of that file.
    """

    def __init__(
        self,
        data_dir: str,
        atom_name: str = "CA",
        file_extension: str = ".pdb",
    ):
        """
        Initialize repository with data directory.

        Args:
            data_dir: Directory containing structure files
            atom_name: Name of the representative atom of each residue
            file_extension: ``.pdb`` or ``.cif``
        """
        self._data_dir = data_dir
        self._atom_name = atom_name
        self._file_extension = file_extension
        if file_extension.lower() in (".cif", ".mmcif"):
            self._parser = MMCIFParser(QUIET=True)
        else:
            self._parser = PDBParser(QUIET=True)
        self._cache: Dict[str, List[Atom]] = {}

    def get_representative_atoms(self, identifier: str) -> List[Atom]:
        """
        Get one representative atom per residue of the first model.

        Args:
            identifier: Structure name, optionally suffixed with ``.chain``

        Returns:
            List of Atom objects in residue order

        Raises:
            ResolutionError: If the file is missing, unreadable or holds no
                representative atoms
        """
        if identifier in self._cache:
            return self._cache[identifier]

        file_path, chain_id = self._locate(identifier)
        try:
            structure = self._parser.get_structure(identifier, file_path)
        except (OSError, ValueError, PDBConstructionException) as e:
            raise ResolutionError(identifier, str(e)) from e

        atoms = self._extract_atoms(structure, chain_id)
        if not atoms:
            raise ResolutionError(
                identifier, f"no {self._atom_name} atoms found in {file_path}"
            )

        logger.debug(f"Loaded {len(atoms)} {self._atom_name} atoms for {identifier}")
        self._cache[identifier] = atoms
        return atoms

    def _locate(self, identifier: str) -> Tuple[str, Optional[str]]:
        """Path of the structure file and the optional chain filter."""
        file_path = os.path.join(self._data_dir, f"{identifier}{self._file_extension}")
        if os.path.exists(file_path):
            return file_path, None

        name, _, chain_id = identifier.rpartition(".")
        if name:
            chain_path = os.path.join(self._data_dir, f"{name}{self._file_extension}")
            if os.path.exists(chain_path):
                return chain_path, chain_id

        raise ResolutionError(identifier, f"file not found: {file_path}")

    def _extract_atoms(self, structure, chain_id: Optional[str]) -> List[Atom]:
        """Representative atoms of the first model."""
        models = list(structure)
        if not models:
            return []

        atoms = []
        for chain in models[0]:
            if chain_id and chain.id != chain_id:
                continue
            for residue in chain:
                if self._atom_name not in residue:
                    continue
                atom = residue[self._atom_name]
                hetflag, residue_id, insertion_code = residue.id
                atoms.append(
                    Atom(
                        coordinates=tuple(float(c) for c in atom.get_coord()),
                        atom_name=atom.get_name(),
                        element=atom.element,
                        residue_name=residue.get_resname(),
                        residue_id=residue_id,
                        chain_id=chain.id,
                        insertion_code=insertion_code.strip(),
                        serial=atom.get_serial_number(),
                    )
                )
        return atoms

    def clear(self) -> None:
        """Forget all cached structures."""
        self._cache.clear()
