"""Exceptions raised by the alignment model."""


class StrucAlignError(Exception):
    """Base class for all alignment model errors."""


class InvalidStateError(StrucAlignError):
    """Raised when an ensemble has neither identifiers nor atom arrays."""


class ResolutionError(StrucAlignError):
    """Raised when a structure identifier cannot be resolved to atoms."""

    def __init__(self, identifier: str, message: str):
        super().__init__(f"Could not resolve structure '{identifier}': {message}")
        self.identifier = identifier


class MalformedTransformError(StrucAlignError):
    """Missing or out-of-range rotation/translation data for a segment.

    Never raised to callers of the converter; used to describe the
    identity fallback in log records.
    """

    def __init__(self, segment: int, reason: str):
        super().__init__(f"Segment {segment}: {reason}")
        self.segment = segment
        self.reason = reason


class StructuralInvariantViolation(StrucAlignError, ValueError):
    """Raised when blocks or alignments disagree on their dimensions."""
