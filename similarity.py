"""Fuzzy text comparison used to suppress repeated captures."""

from __future__ import annotations

from typing import Optional

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(first: str, second: str) -> int:
    """Edit distance with unit cost for insert, delete and substitute."""
    return Levenshtein.distance(first, second)


def similarity(first: Optional[str], second: Optional[str]) -> float:
    """Return a normalized similarity in [0, 1].

    Comparison ignores case and surrounding whitespace. Identical inputs
    score 1.0, a missing or empty input scores 0.0.
    """
    if first == second:
        return 1.0
    if not first or not second:
        return 0.0

    left = first.lower().strip()
    right = second.lower().strip()
    if left == right:
        return 1.0

    longest = max(len(left), len(right))
    return 1.0 - levenshtein_distance(left, right) / longest
