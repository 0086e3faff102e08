"""Edit distance helpers for suggestions and fuzzy search."""

from typing import Iterable, List, Tuple


def levenshtein(a: str, b: str) -> int:
    """Levenshtein distance with unit insertion, deletion and substitution costs."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        previous = current
    return previous[-1]


def rank_by_distance(target: str, candidates: Iterable[str]) -> List[Tuple[str, int]]:
    """Pair each candidate with its case-insensitive distance to ``target``, closest first.

    Ties keep the candidates' original order.
    """
    target = target.lower()
    scored = [(candidate, levenshtein(target, candidate.lower())) for candidate in candidates]
    return sorted(scored, key=lambda pair: pair[1])
