"""Command-line interface modules."""

from .convert_alignment import main as convert_alignment_main

__all__ = [
    "convert_alignment_main",
]
