"""
Selection of the most popular words from aggregated counts.
"""

from typing import Dict, List, Mapping, Tuple


def _popularity_key(item: Tuple[str, int]):
    word, count = item
    return -count, -len(word), word


def select_popular(counts: Mapping[str, int], k: int) -> List[Tuple[str, int]]:
    """
    Return at most ``k`` (word, count) pairs, most popular first.

    Ordering: count descending, then longer words first, then alphabetical.
    For example ``{"a": 3, "bb": 3, "c": 1}`` with k=2 gives
    ``[("bb", 3), ("a", 3)]``.
    """
    if k < 0:
        raise ValueError("k must be non-negative")
    if k == 0:
        return []
    return sorted(counts.items(), key=_popularity_key)[:k]


def sort_word_counts(counts: Mapping[str, int], k: int) -> Dict[str, int]:
    """Same as select_popular, as an insertion-ordered dict."""
    return dict(select_popular(counts, k))
