"""Curated replacement suggestions for commonly replaced packages."""

import json
from functools import lru_cache
from pathlib import Path

from depscope.models.schemas import AlternativeSuggestion

ALTERNATIVES_FILE = Path(__file__).resolve().parent.parent / "data" / "alternatives.json"


@lru_cache(maxsize=1)
def _load_alternatives() -> dict[str, AlternativeSuggestion]:
    """Load the bundled alternatives database."""
    raw = json.loads(ALTERNATIVES_FILE.read_text(encoding="utf-8"))
    return {name: AlternativeSuggestion(**entry) for name, entry in raw.items()}


def get_alternative(name: str) -> AlternativeSuggestion | None:
    """Look up a curated alternative for a package.

    Args:
        name: Package name.

    Returns:
        AlternativeSuggestion, or None if the package has no suggestion.
    """
    return _load_alternatives().get(name)
