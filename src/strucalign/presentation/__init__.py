"""Command-line interfaces and other presentation layer components."""

from .cli.convert_alignment import main as convert_alignment_main

__all__ = [
    "convert_alignment_main",
]
