"""Command-line interface for converting a pairwise alignment to an ensemble."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ...core.domain.exceptions import StrucAlignError
from ...core.domain.models.ensemble import MultipleAlignmentEnsemble
from ...core.domain.models.pairwise_alignment import PairwiseAlignment
from ...core.services.ensemble_builder import EnsembleBuilder
from ...infrastructure.repositories.structure_repository import StructureRepository


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def setup_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description="Convert a pairwise structure alignment into a multiple alignment"
    )
    parser.add_argument(
        "alignment", help="JSON file with the pairwise alignment (name1, name2, opt_aln, ...)"
    )
    parser.add_argument(
        "--data-dir", default=".", help="Directory containing the structure files"
    )
    parser.add_argument(
        "--atom-name", default="CA", help="Representative atom of each residue"
    )
    parser.add_argument(
        "--file-extension", default=".pdb", help="Extension of the structure files"
    )
    parser.add_argument(
        "--flexible",
        action="store_true",
        help="Keep one superposition per segment instead of a single one",
    )
    parser.add_argument("--verbose", action="store_true", help="Show detailed output")
    return parser


def format_ensemble(ensemble: MultipleAlignmentEnsemble) -> str:
    """Human-readable summary of an ensemble and its first alignment."""
    names = ensemble.get_structure_identifiers() or []
    lines = [
        f"Algorithm: {ensemble.algorithm_name} {ensemble.version or ''}".rstrip(),
        f"Structures: {', '.join(names) if names else ensemble.size()}",
    ]
    for index, alignment in enumerate(ensemble.get_multiple_alignments()):
        lines.append(f"Alignment {index}: {alignment}")
        for number, block_set in enumerate(alignment.block_sets):
            lines.append(
                f"  BlockSet {number}: {len(block_set.blocks)} blocks, "
                f"length {block_set.length()}, core {block_set.get_core_length()}"
            )
            translation = block_set.get_transformations()[-1][:3, 3]
            lines.append(
                "    shift: " + " ".join(f"{value:8.3f}" for value in translation)
            )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for alignment conversion CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    with open(args.alignment, "r") as f:
        pairwise = PairwiseAlignment.from_dict(json.load(f))

    if not pairwise.name1 or not pairwise.name2:
        parser.error("The alignment must name both structures (name1, name2)")

    repository = StructureRepository(
        args.data_dir, atom_name=args.atom_name, file_extension=args.file_extension
    )

    try:
        atoms1 = repository.get_representative_atoms(pairwise.name1)
        atoms2 = repository.get_representative_atoms(pairwise.name2)
        ensemble = EnsembleBuilder(flexible=args.flexible).build(pairwise, atoms1, atoms2)
    except StrucAlignError as e:
        logging.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_ensemble(ensemble))
    return 0


if __name__ == "__main__":
    sys.exit(main())
