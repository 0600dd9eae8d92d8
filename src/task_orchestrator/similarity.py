"""Keyword-overlap text similarity.

A cheap stand-in for semantic matching: word-set Jaccard similarity
blended with how closely the shared words line up positionally. Anything
with the ``Scorer`` signature can be injected where a scorer is consumed.

Example:
    >>> round(semantic_similarity("setup database schema", "database schema setup"), 2)
    0.87
"""

import re
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

T = TypeVar("T")

# score(query, candidate) -> float in [0, 1]
Scorer = Callable[[str, str], float]

JACCARD_WEIGHT = 0.7
ORDER_WEIGHT = 0.3

_NON_WORD = re.compile(r"[^\w\s]")


def _normalize(text: str) -> list[str]:
    """Lowercase, strip punctuation and drop words of two characters or less."""
    return [w for w in _NON_WORD.sub(" ", text.lower()).split() if len(w) > 2]


def semantic_similarity(text1: str | None, text2: str | None) -> float:
    """Score the similarity of two texts.

    Args:
        text1: First text (typically the query).
        text2: Second text (typically the candidate).

    Returns:
        Score in [0, 1]; 0 when either side is empty or has no usable words.
    """
    if not text1 or not text2:
        return 0.0

    words1 = _normalize(text1)
    words2 = _normalize(text2)
    if not words1 or not words2:
        return 0.0

    set1 = set(words1)
    set2 = set(words2)
    common = set1 & set2
    jaccard = len(common) / len(set1 | set2)

    order_score = 0.0
    if common:
        # first-occurrence positions of each shared word
        avg_diff = sum(abs(words1.index(w) - words2.index(w)) for w in common) / len(common)
        order_score = max(0.0, 1 - avg_diff / max(len(words1), len(words2)))

    return jaccard * JACCARD_WEIGHT + order_score * ORDER_WEIGHT


@dataclass
class ScoredMatch(Generic[T]):
    """An item paired with its similarity to a query."""

    item: T
    score: float


def find_best_matches(
    query: str,
    items: Iterable[T],
    get_text: Callable[[T], str],
    limit: int = 3,
    min_score: float = 0.1,
    scorer: Scorer = semantic_similarity,
) -> list[ScoredMatch[T]]:
    """Rank items by similarity of their text to a query.

    Ties keep their original order.

    Args:
        query: Natural language query.
        items: Candidates to rank.
        get_text: Extracts the text to compare from a candidate.
        limit: Maximum number of matches to return.
        min_score: Matches scoring at or below this are dropped.
        scorer: Similarity function to use.

    Returns:
        Matches sorted by descending score.
    """
    scored = [ScoredMatch(item=item, score=scorer(query, get_text(item))) for item in items]
    scored.sort(key=lambda m: m.score, reverse=True)
    return [m for m in scored[:limit] if m.score > min_score]
