"""Cache of named numeric scores shared by ensembles and alignments."""

from typing import Dict, Optional, Set


class ScoresCache:
    """Stores scores keyed by name.

    Scores are derived data: they are dropped by ``clear()`` whenever the
    underlying alignment changes.
    """

    def __init__(self):
        self._scores: Optional[Dict[str, float]] = None

    def put_score(self, name: str, value: Optional[float]) -> None:
        """Store a score, replacing any previous value under that name."""
        if self._scores is None:
            self._scores = {}
        self._scores[name] = value

    def get_score(self, name: str) -> Optional[float]:
        """Get a score by name, or None if it has not been computed."""
        if self._scores is None:
            return None
        return self._scores.get(name)

    def get_score_names(self) -> Set[str]:
        """Names of all cached scores."""
        if self._scores is None:
            return set()
        return set(self._scores)

    @property
    def scores(self) -> Dict[str, float]:
        """Copy of the cached scores."""
        return dict(self._scores or {})

    def clear(self) -> None:
        """Discard all cached scores."""
        self._scores = None
